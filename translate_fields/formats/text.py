"""
Plain-text, SEO and slug translation.

These formats have a fixed shape, so they call the backend directly
without walking a tree.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any

from slugify import slugify

from translate_fields.core.models import SchemaLookup, TranslationOptions
from translate_fields.core.registry import get_registry
from translate_fields.services.base import TranslationBackend

logger = logging.getLogger(__name__)


_SURROUNDING_SPACE = re.compile(r"^(\s*)(.*?)(\s*)$", re.DOTALL)

# Transliterations applied before slugging, per destination language
SLUG_REPLACEMENTS: dict[str, list[list[str]]] = {
    "de": [["ä", "ae"], ["ö", "oe"], ["ü", "ue"], ["Ä", "Ae"], ["Ö", "Oe"], ["Ü", "Ue"], ["ß", "ss"]],
    "da": [["æ", "ae"], ["ø", "oe"], ["å", "aa"], ["Æ", "Ae"], ["Ø", "Oe"], ["Å", "Aa"]],
    "nb": [["æ", "ae"], ["ø", "oe"], ["å", "aa"], ["Æ", "Ae"], ["Ø", "Oe"], ["Å", "Aa"]],
    "no": [["æ", "ae"], ["ø", "oe"], ["å", "aa"], ["Æ", "Ae"], ["Ø", "Oe"], ["Å", "Aa"]],
    "sv": [["å", "aa"], ["ä", "ae"], ["ö", "oe"], ["Å", "Aa"], ["Ä", "Ae"], ["Ö", "Oe"]],
    "fi": [["å", "a"], ["ä", "a"], ["ö", "o"]],
    "tr": [["ı", "i"], ["İ", "i"], ["ş", "s"], ["ğ", "g"]],
    "nl": [["ĳ", "ij"]],
}

SEO_TEXT_KEYS = ("title", "description")


def _is_enum(schema: SchemaLookup | None, key: str) -> bool:
    field = schema(key) if schema is not None else None
    return field is not None and field.is_enum


def resolve_backend(
    options: TranslationOptions,
    backend: TranslationBackend | None = None,
) -> TranslationBackend:
    """The injected backend, or the registered one selected by options."""
    if backend is not None:
        return backend
    return get_registry().for_options(options)


async def translate_text(
    value: str,
    options: TranslationOptions,
    convert_currency: bool = False,
    *,
    schema: SchemaLookup | None = None,
    backend: TranslationBackend | None = None,
) -> str:
    """
    Translate one string.

    Blank strings come back unchanged; surrounding whitespace is kept
    as is and only the inner text goes to the backend.
    """
    if not isinstance(value, str) or not value.strip():
        return value

    backend = resolve_backend(options, backend)
    leading, inner, trailing = _SURROUNDING_SPACE.match(value).groups()

    logger.debug(f"Translating {len(inner)} chars {options.from_locale} -> {options.to_locale}")
    translated = await backend.translate(inner, options, convert_currency)
    return f"{leading}{translated}{trailing}"


async def translate_seo(
    value: dict[str, Any],
    options: TranslationOptions,
    convert_currency: bool = False,
    *,
    schema: SchemaLookup | None = None,
    backend: TranslationBackend | None = None,
) -> dict[str, Any]:
    """
    Translate an SEO record.

    title and description are translated when non-empty and emitted as ""
    otherwise; every other key (image, twitter_card) passes through, as do
    keys the schema marks as enum fields. The record keeps its keys and
    their order.
    """
    if not value:
        return value

    backend = resolve_backend(options, backend)

    async def _field(key: str) -> str:
        text = value.get(key) or ""
        if not isinstance(text, str) or not text:
            return ""
        return await translate_text(text, options, convert_currency, backend=backend)

    keys = [key for key in SEO_TEXT_KEYS if key in value and not _is_enum(schema, key)]
    translated = dict(zip(keys, await asyncio.gather(*(_field(key) for key in keys))))
    return {key: translated.get(key, item) for key, item in value.items()}


def slug_replacements(locale: str) -> list[list[str]]:
    """Transliteration table for a destination locale."""
    language = locale.replace("_", "-").split("-")[0].lower()
    return SLUG_REPLACEMENTS.get(language, [])


async def translate_slug(
    value: str,
    options: TranslationOptions,
    convert_currency: bool = False,
    *,
    schema: SchemaLookup | None = None,
    backend: TranslationBackend | None = None,
) -> str:
    """
    Translate a URL slug.

    Hyphens become spaces, the words are translated as plain text, and
    the result is slugged again with the destination locale's rules.
    """
    if not value:
        return value

    words = value.replace("-", " ")
    translated = await translate_text(words, options, convert_currency, backend=backend)
    return slugify(
        translated,
        lowercase=True,
        replacements=slug_replacements(options.to_locale),
    )
