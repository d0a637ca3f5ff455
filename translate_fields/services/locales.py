"""
Locale codes as each provider expects them.

Editorial locales look like "en", "en-US" or "pt_BR". DeepL wants upper
case and only accepts a region for a few target languages; Yandex wants
a bare lower-case language.
"""

from __future__ import annotations

from translate_fields.core.models import TranslationService


# Targets DeepL only accepts with a region
DEEPL_TARGET_DEFAULTS: dict[str, str] = {
    "EN": "EN-US",
    "PT": "PT-PT",
}

DEEPL_TARGET_REGIONS: frozenset[str] = frozenset({
    "EN-GB",
    "EN-US",
    "PT-BR",
    "PT-PT",
    "ZH-HANS",
    "ZH-HANT",
})

_DEEPL = (TranslationService.DEEPL, TranslationService.DEEPL_FREE)


def _split(locale: str) -> tuple[str, str]:
    language, _, region = locale.replace("_", "-").partition("-")
    return language, region


def get_supported_from_locale(locale: str, service: TranslationService | None) -> str:
    """Source locale in the form the service accepts."""
    language, _ = _split(locale)
    if service in _DEEPL:
        return language.upper()
    if service == TranslationService.YANDEX:
        return language.lower()
    return locale


def get_supported_to_locale(locale: str, service: TranslationService | None) -> str:
    """Target locale in the form the service accepts."""
    language, region = _split(locale)
    if service in _DEEPL:
        full = f"{language}-{region}".upper() if region else language.upper()
        if full in DEEPL_TARGET_REGIONS:
            return full
        return DEEPL_TARGET_DEFAULTS.get(language.upper(), language.upper())
    if service == TranslationService.YANDEX:
        return language.lower()
    return locale
