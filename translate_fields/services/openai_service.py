"""
OpenAI backend with currency-aware translation.

The model answers with a fenced JSON payload: the translated text, with
every currency amount replaced by a {{amount:N}} placeholder, and the
list of located amounts. The amounts are converted and formatted by
CurrencyConversion, never by the model.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import openai
from openai import AsyncOpenAI
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from translate_fields.config import get_settings
from translate_fields.core.errors import (
    ConfigurationError,
    EvaluationError,
    MalformedResponseError,
    RemoteServiceError,
)
from translate_fields.core.models import TranslationOptions, TranslationService
from translate_fields.services.base import TranslationBackend
from translate_fields.services.context import ContextSanitizer
from translate_fields.services.currency import CurrencyConversion, CurrencyConverter

logger = logging.getLogger(__name__)


FENCE = "```"

_LANGUAGE_TAG = re.compile(r"^[A-Za-z0-9_+-]*$")


class TranslatedText(BaseModel):
    """Payload the model is contracted to return."""

    text: str
    amounts: list[float] = Field(default_factory=list)


SYSTEM_PROMPT_TEMPLATE = """You are a translation assistant that accepts any text submitted by the user and returns exclusively one fenced ```json code block holding an object `{{"text": string, "amounts": [number, ...]}}`, where `text` is the user text translated from the locale '{from_locale}' to the locale '{to_locale}'.
The context of the app you are translating the text for is the following: {context}.
The text is the value of the field `{field_key}` of a record whose other fields are: {record}.
{directive}
Preserve any Markdown formatting. Never translate URLs. Always translate the text, even when it is a single word."""


def extract_snippet(code: str) -> str:
    """
    Content between the first pair of code fences, language tag removed.

    Raises:
        MalformedResponseError: Fewer than two fences in code
    """
    parts = code.split(FENCE)
    if len(parts) < 3:
        raise MalformedResponseError("Response has no fenced code block")

    snippet = parts[1]
    first_line, newline, rest = snippet.partition("\n")
    if newline and _LANGUAGE_TAG.match(first_line.strip()):
        snippet = rest
    return snippet.strip()


def evaluate_snippet(snippet: str, conversion: CurrencyConversion) -> str:
    """
    Turn an extracted payload into the final translated string.

    Raises:
        EvaluationError: Not JSON, not the contracted shape, or a
            placeholder without an amount
    """
    try:
        data = json.loads(snippet)
    except json.JSONDecodeError as e:
        raise EvaluationError(f"Payload is not valid JSON: {e}") from e

    try:
        payload = TranslatedText.model_validate(data)
    except PydanticValidationError as e:
        raise EvaluationError(f"Payload does not match the contract: {e}") from e

    return conversion.fill(payload.text, payload.amounts)


class OpenAIBackend(TranslationBackend):
    """
    Streams a chat completion per string and evaluates its payload.

    Usage:
        backend = OpenAIBackend()
        text = await backend.translate("Only €120", options, convert_currency=True)
    """

    label = "OpenAI"

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        converter: CurrencyConverter | None = None,
        sanitizer: ContextSanitizer | None = None,
    ):
        self._client = client
        self.converter = converter or CurrencyConverter()
        self.sanitizer = sanitizer or ContextSanitizer()

    @property
    def service(self) -> TranslationService:
        return TranslationService.OPENAI

    def openai_client(self, options: TranslationOptions) -> AsyncOpenAI:
        """Injected client, or a new one for the options' API key."""
        if self._client is not None:
            return self._client
        if not options.api_key:
            raise ConfigurationError(f"Set {self.label} API key in the settings")
        return AsyncOpenAI(api_key=options.api_key, timeout=get_settings().http_timeout)

    def build_messages(
        self,
        text: str,
        options: TranslationOptions,
        conversion: CurrencyConversion,
    ) -> list[dict[str, str]]:
        """System instruction plus the literal source string."""
        snapshot = self.sanitizer.sanitize(options.record, options.field_key)
        system_prompt = SYSTEM_PROMPT_TEMPLATE.format(
            from_locale=options.from_locale,
            to_locale=options.to_locale,
            context=options.openai_options.context or "general editorial content",
            field_key=options.field_key or "unknown",
            record=json.dumps(snapshot, ensure_ascii=False),
            directive=conversion.directive(),
        )
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": text},
        ]

    async def complete(self, messages: list[dict[str, str]], options: TranslationOptions) -> str:
        """Run a streamed completion and return the accumulated output."""
        client = self.openai_client(options)
        settings = options.openai_options

        try:
            stream = await client.chat.completions.create(
                model=settings.model,
                temperature=settings.temperature,
                max_tokens=settings.max_tokens,
                top_p=settings.top_p,
                messages=messages,
                stream=True,
            )
            code = ""
            async for chunk in stream:
                if chunk.choices and chunk.choices[0].delta.content:
                    code += chunk.choices[0].delta.content
        except openai.APIStatusError as e:
            logger.error(f"OpenAI returned status {e.status_code}: {e.message}")
            raise RemoteServiceError(
                f"OpenAI returned status {e.status_code}", status_code=e.status_code
            ) from e
        except openai.APIError as e:
            logger.error(f"OpenAI request failed: {e}")
            raise RemoteServiceError(f"OpenAI request failed: {e}") from e

        return code

    async def translate(
        self,
        text: str,
        options: TranslationOptions,
        convert_currency: bool = False,
    ) -> str:
        conversion = await self.converter.resolve(options, convert_currency)
        messages = self.build_messages(text, options, conversion)
        code = await self.complete(messages, options)

        snippet: Any = None
        try:
            snippet = extract_snippet(code)
            return evaluate_snippet(snippet, conversion)
        except (MalformedResponseError, EvaluationError):
            logger.error(f"Could not evaluate translation of {text!r}")
            logger.error(f"Raw response: {code!r}")
            logger.error(f"Extracted snippet: {snippet!r}")
            raise
