"""
Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic_settings import BaseSettings

from translate_fields.core.models import (
    Currency,
    DeeplOptions,
    OpenAIOptions,
    TranslationFormat,
    TranslationOptions,
    TranslationService,
    default_currencies,
)


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # ==========================================================================
    # Backend selection
    # ==========================================================================

    translation_service: TranslationService = TranslationService.OPENAI
    use_mock: bool = False

    # ==========================================================================
    # API keys
    # ==========================================================================

    yandex_api_key: str = ""
    deepl_api_key: str = ""
    deepl_free_api_key: str = ""
    openai_api_key: str = ""

    # ==========================================================================
    # OpenAI
    # ==========================================================================

    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.0
    openai_max_tokens: int = 1000
    openai_top_p: float = 1.0
    openai_context: str = ""

    # ==========================================================================
    # DeepL
    # ==========================================================================

    deepl_glossary_id: str = ""
    deepl_formality: str = "default"

    # ==========================================================================
    # Endpoints
    # ==========================================================================

    fx_rates_url: str = (
        "https://cdn.jsdelivr.net/gh/fawazahmed0/currency-api@1/{date}/currencies/eur.json"
    )
    fx_rates_fallback_url: str = (
        "https://cdn.jsdelivr.net/gh/fawazahmed0/currency-api@1/latest/currencies/eur.json"
    )
    yandex_url: str = "https://translate.yandex.net/api/v1.5/tr.json/translate"
    deepl_url: str = "https://{host}.deepl.com/v2/translate"
    http_timeout: float = 30.0

    # ==========================================================================
    # Logging
    # ==========================================================================

    log_level: str = "INFO"

    # ==========================================================================
    # Helpers
    # ==========================================================================

    def api_key_for(self, service: TranslationService | None) -> str:
        """API key configured for a service ('' when none)."""
        return {
            TranslationService.YANDEX: self.yandex_api_key,
            TranslationService.DEEPL: self.deepl_api_key,
            TranslationService.DEEPL_FREE: self.deepl_free_api_key,
            TranslationService.OPENAI: self.openai_api_key,
        }.get(service, "")

    def build_options(
        self,
        from_locale: str,
        to_locale: str,
        locales: list[str] | None = None,
        format: TranslationFormat = TranslationFormat.TEXT,
        currencies: dict[str, Currency] | None = None,
        **overrides: Any,
    ) -> TranslationOptions:
        """
        Resolve a full TranslationOptions.

        Explicit overrides win over settings, settings over defaults.
        """
        locales = list(locales or [from_locale, to_locale])
        service = overrides.pop("translation_service", None) or self.translation_service

        values: dict[str, Any] = {
            "from_locale": from_locale,
            "to_locale": to_locale,
            "format": format,
            "translation_service": service,
            "api_key": self.api_key_for(TranslationService(service)),
            "locales": locales,
            "use_mock": self.use_mock,
            "deepl_options": DeeplOptions(
                glossary_id=self.deepl_glossary_id,
                formality=self.deepl_formality,
            ),
            "openai_options": OpenAIOptions(
                model=self.openai_model,
                temperature=self.openai_temperature,
                max_tokens=self.openai_max_tokens,
                top_p=self.openai_top_p,
                context=self.openai_context,
                currencies=currencies or default_currencies(locales),
            ),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return TranslationOptions(**values)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
