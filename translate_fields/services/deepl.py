"""DeepL backend, for both the paid and the free API."""

from __future__ import annotations

import logging

import httpx

from translate_fields.config import get_settings
from translate_fields.core.errors import RemoteServiceError
from translate_fields.core.models import TranslationOptions, TranslationService
from translate_fields.services.base import HttpBackend
from translate_fields.services.locales import (
    get_supported_from_locale,
    get_supported_to_locale,
)

logger = logging.getLogger(__name__)


class DeeplBackend(HttpBackend):
    """
    One POST to /v2/translate per string.

    The free variant differs only by host; glossary and formality come
    from options.deepl_options.
    """

    label = "DeepL"

    def __init__(self, client: httpx.AsyncClient | None = None, free: bool = False):
        super().__init__(client)
        self.free = free

    @property
    def service(self) -> TranslationService:
        return TranslationService.DEEPL_FREE if self.free else TranslationService.DEEPL

    @property
    def url(self) -> str:
        return get_settings().deepl_url.format(host="api-free" if self.free else "api")

    def build_payload(self, text: str, options: TranslationOptions) -> dict[str, str]:
        """Form fields of the translate request."""
        payload = {
            "text": text,
            "source_lang": get_supported_from_locale(options.from_locale, self.service),
            "target_lang": get_supported_to_locale(options.to_locale, self.service),
            "tag_handling": "html",
        }
        deepl = options.deepl_options
        if deepl.formality and deepl.formality != "default":
            payload["formality"] = deepl.formality
        if deepl.glossary_id:
            payload["glossary_id"] = deepl.glossary_id
        return payload

    async def translate(
        self,
        text: str,
        options: TranslationOptions,
        convert_currency: bool = False,
    ) -> str:
        api_key = self.require_api_key(options)

        async with self.http() as client:
            try:
                response = await client.post(
                    self.url,
                    data=self.build_payload(text, options),
                    headers={"Authorization": f"DeepL-Auth-Key {api_key}"},
                )
            except httpx.HTTPError as e:
                logger.error(f"DeepL request failed: {e}")
                raise RemoteServiceError(f"DeepL request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"DeepL returned status {response.status_code}: {response.text}")
            raise RemoteServiceError(
                f"DeepL returned status {response.status_code}",
                status_code=response.status_code,
            )

        translations = response.json().get("translations", [])
        return " ".join(t["text"] for t in translations)
