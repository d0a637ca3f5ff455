"""
Format translators.

One entry point per format, all sharing the signature

    await translator(value, options, convert_currency=False, schema=None, backend=None)

translate_document() picks the translator from options.format.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from translate_fields.core.models import (
    ContentTree,
    SchemaLookup,
    TranslationFormat,
    TranslationOptions,
)
from translate_fields.formats.text import (
    resolve_backend,
    translate_text,
    translate_seo,
    translate_slug,
)
from translate_fields.formats.html import parse_html, serialize_html, translate_html
from translate_fields.formats.markdown import parse_markdown, render_markdown, translate_markdown
from translate_fields.formats.structured import (
    translate_tree,
    translate_block,
    translate_structured_text,
    translate_rich_text,
)
from translate_fields.services.base import TranslationBackend

logger = logging.getLogger(__name__)


FormatTranslator = Callable[..., Awaitable[ContentTree]]

FORMAT_TRANSLATORS: dict[TranslationFormat, FormatTranslator] = {
    TranslationFormat.TEXT: translate_text,
    TranslationFormat.HTML: translate_html,
    TranslationFormat.MARKDOWN: translate_markdown,
    TranslationFormat.SEO: translate_seo,
    TranslationFormat.SLUG: translate_slug,
    TranslationFormat.STRUCTURED_TEXT: translate_structured_text,
    TranslationFormat.RICH_TEXT: translate_rich_text,
}


async def translate_document(
    value: ContentTree,
    options: TranslationOptions,
    convert_currency: bool = False,
    schema: SchemaLookup | None = None,
    backend: TranslationBackend | None = None,
) -> ContentTree:
    """
    Translate a whole field value in the format named by options.format.

    Returns a new value; the input is never modified. Any backend failure
    aborts the whole document.
    """
    translator = FORMAT_TRANSLATORS[TranslationFormat(options.format)]
    backend = resolve_backend(options, backend)

    logger.info(
        f"Translating {options.format.value} value {options.from_locale} -> "
        f"{options.to_locale} with {backend.service.value}"
    )
    result = await translator(value, options, convert_currency, schema=schema, backend=backend)
    logger.info(f"Translated {options.format.value} value into {options.to_locale}")
    return result


__all__ = [
    "translate_document",
    "FORMAT_TRANSLATORS",
    "resolve_backend",
    # Fixed-shape formats
    "translate_text",
    "translate_seo",
    "translate_slug",
    # Markup
    "translate_html",
    "parse_html",
    "serialize_html",
    "translate_markdown",
    "parse_markdown",
    "render_markdown",
    # Trees
    "translate_tree",
    "translate_block",
    "translate_structured_text",
    "translate_rich_text",
]
