"""
Translation backends and their helpers.

Each backend implements TranslationBackend for one TranslationService;
the openAI backend is supported by the currency converter and the
context sanitizer.
"""

from translate_fields.services.base import TranslationBackend, HttpBackend
from translate_fields.services.mock import MockBackend
from translate_fields.services.yandex import YandexBackend
from translate_fields.services.deepl import DeeplBackend
from translate_fields.services.openai_service import (
    OpenAIBackend,
    TranslatedText,
    extract_snippet,
    evaluate_snippet,
)
from translate_fields.services.currency import (
    CurrencyConversion,
    CurrencyConverter,
    build_conversion_directive,
    cross_rate,
    format_number,
    round_amount,
)
from translate_fields.services.context import ContextSanitizer
from translate_fields.services.locales import (
    get_supported_from_locale,
    get_supported_to_locale,
)


def register_default_backends(registry) -> None:
    """Register one instance of every built-in backend."""
    registry.register(MockBackend())
    registry.register(YandexBackend())
    registry.register(DeeplBackend())
    registry.register(DeeplBackend(free=True))
    registry.register(OpenAIBackend())


__all__ = [
    # Backends
    "TranslationBackend",
    "HttpBackend",
    "MockBackend",
    "YandexBackend",
    "DeeplBackend",
    "OpenAIBackend",
    "register_default_backends",
    # OpenAI payload
    "TranslatedText",
    "extract_snippet",
    "evaluate_snippet",
    # Currency
    "CurrencyConversion",
    "CurrencyConverter",
    "build_conversion_directive",
    "cross_rate",
    "format_number",
    "round_amount",
    # Context
    "ContextSanitizer",
    # Locales
    "get_supported_from_locale",
    "get_supported_to_locale",
]
