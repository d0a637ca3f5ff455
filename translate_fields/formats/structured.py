"""
Structured text and rich text translation.

Both formats are trees of typed nodes and records. Identifiers are
stripped first, every classified path is dispatched to its
sub-translator concurrently, the results are merged by path into a copy
of the stripped tree, and the identifiers are put back.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Awaitable, Callable

from translate_fields.core.models import (
    ContentTree,
    Path,
    PathType,
    SchemaLookup,
    TranslationOptions,
)
from translate_fields.core.paths import walk
from translate_fields.core.tree import StructureSanitizer, deep_get, deep_set
from translate_fields.formats.html import translate_html
from translate_fields.formats.markdown import translate_markdown
from translate_fields.formats.text import resolve_backend, translate_seo, translate_text
from translate_fields.services.base import TranslationBackend

logger = logging.getLogger(__name__)


STRUCTURED_TEXT_IDENTIFIERS = ("id",)
RICH_TEXT_IDENTIFIERS = ("itemId",)
PRESERVED_KEYS = ("meta",)
BLOCK_STRUCTURE_KEYS = ("type", "children")


async def translate_tree(
    tree: ContentTree,
    options: TranslationOptions,
    convert_currency: bool = False,
    *,
    schema: SchemaLookup | None = None,
    backend: TranslationBackend | None = None,
) -> ContentTree:
    """
    Translate every classified path of a tree.

    All paths run concurrently and are merged only once every one of them
    has finished. The first failure propagates and nothing is merged.
    """
    backend = resolve_backend(options, backend)
    paths = [
        path for path in walk(tree, schema)
        if not any(segment in PRESERVED_KEYS for segment in path.segments)
    ]
    if not paths:
        return copy.deepcopy(tree)

    logger.debug(f"Dispatching {len(paths)} paths")
    translated = await asyncio.gather(*(
        _translate_path(path, deep_get(tree, path.segments), options, convert_currency, schema, backend)
        for path in paths
    ))

    result = copy.deepcopy(tree)
    for path, value in zip(paths, translated):
        deep_set(result, path.segments, value)
    return result


async def _translate_path(
    path: Path,
    value: ContentTree,
    options: TranslationOptions,
    convert_currency: bool,
    schema: SchemaLookup | None,
    backend: TranslationBackend,
) -> ContentTree:
    translator = PATH_TRANSLATORS[path.type]
    logger.debug(f"{path} -> {path.type.value}")
    return await translator(value, options, convert_currency, schema=schema, backend=backend)


async def translate_block(
    value: dict[str, Any],
    options: TranslationOptions,
    convert_currency: bool = False,
    *,
    schema: SchemaLookup | None = None,
    backend: TranslationBackend | None = None,
) -> dict[str, Any]:
    """
    Translate a block node as a generic record.

    type and children are held back and reattached unchanged.
    """
    record = StructureSanitizer.strip(value, BLOCK_STRUCTURE_KEYS, shallow=True)
    translated = await translate_rich_text(
        record, options, convert_currency, schema=schema, backend=backend
    )
    return StructureSanitizer.restore(value, translated)


async def translate_structured_text(
    value: ContentTree,
    options: TranslationOptions,
    convert_currency: bool = False,
    *,
    schema: SchemaLookup | None = None,
    backend: TranslationBackend | None = None,
) -> ContentTree:
    """Translate a structured text document (a sequence of typed nodes)."""
    if not value:
        return value

    sanitized = StructureSanitizer.strip(
        value, STRUCTURED_TEXT_IDENTIFIERS, keys_to_skip=PRESERVED_KEYS
    )
    translated = await translate_tree(
        sanitized, options, convert_currency, schema=schema, backend=backend
    )
    return StructureSanitizer.restore(value, translated)


async def translate_rich_text(
    value: ContentTree,
    options: TranslationOptions,
    convert_currency: bool = False,
    *,
    schema: SchemaLookup | None = None,
    backend: TranslationBackend | None = None,
) -> ContentTree:
    """Translate a rich text value (a sequence of block records, or one record)."""
    if not value:
        return value

    sanitized = StructureSanitizer.strip(
        value, RICH_TEXT_IDENTIFIERS, keys_to_skip=PRESERVED_KEYS
    )
    translated = await translate_tree(
        sanitized, options, convert_currency, schema=schema, backend=backend
    )
    return StructureSanitizer.restore(value, translated)


PathTranslator = Callable[..., Awaitable[ContentTree]]

PATH_TRANSLATORS: dict[PathType, PathTranslator] = {
    PathType.TEXT: translate_text,
    PathType.HTML: translate_html,
    PathType.MARKDOWN: translate_markdown,
    PathType.SEO: translate_seo,
    PathType.STRUCTURED_TEXT: translate_structured_text,
    PathType.STRUCTURED_TEXT_BLOCK: translate_block,
}
