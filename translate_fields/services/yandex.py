"""Yandex Translate backend."""

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


class YandexBackend(HttpBackend):
    """One GET to the Yandex translate endpoint per string."""

    label = "Yandex"

    @property
    def service(self) -> TranslationService:
        return TranslationService.YANDEX

    async def translate(
        self,
        text: str,
        options: TranslationOptions,
        convert_currency: bool = False,
    ) -> str:
        api_key = self.require_api_key(options)
        source = get_supported_from_locale(options.from_locale, self.service)
        target = get_supported_to_locale(options.to_locale, self.service)

        params = {
            "key": api_key,
            "lang": f"{source}-{target}",
            "format": "html",
            "text": text,
        }

        async with self.http() as client:
            try:
                response = await client.get(get_settings().yandex_url, params=params)
            except httpx.HTTPError as e:
                logger.error(f"Yandex request failed: {e}")
                raise RemoteServiceError(f"Yandex request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"Yandex returned status {response.status_code}: {response.text}")
            raise RemoteServiceError(
                f"Yandex returned status {response.status_code}",
                status_code=response.status_code,
            )

        return " ".join(response.json().get("text", []))
