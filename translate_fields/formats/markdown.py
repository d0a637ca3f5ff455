"""
Markdown translation over the markdown-it token stream.

Tokens are turned into plain dicts, the literal text leaves are
translated, and the stream is rendered back to Markdown by mdformat's
renderer. Code spans, code blocks, link targets and HTML are left alone.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdformat.renderer import MDRenderer

from translate_fields.core.models import SchemaLookup, TranslationOptions
from translate_fields.core.paths import text_slot_classifier, walk
from translate_fields.core.tree import deep_get, deep_set
from translate_fields.formats.text import resolve_backend, translate_text
from translate_fields.services.base import TranslationBackend

logger = logging.getLogger(__name__)


# Renderer options: keep line wrapping and list numbering as written
RENDER_OPTIONS = {"wrap": "keep", "number": False, "end_of_line": "lf"}

# Token types whose content is literal prose
TEXT_TOKENS = frozenset({"text"})


def build_parser() -> MarkdownIt:
    """CommonMark parser wired to the Markdown renderer."""
    mdit = MarkdownIt(renderer_cls=MDRenderer)
    mdit.options["mdformat"] = dict(RENDER_OPTIONS)
    mdit.options["store_labels"] = True
    mdit.options["parser_extension"] = []
    mdit.options["codeformatters"] = {}
    return mdit


def parse_markdown(text: str, env: dict[str, Any] | None = None) -> list[dict[str, Any]]:
    """Token stream of a Markdown document, as plain dicts."""
    env = {} if env is None else env
    tokens = build_parser().parse(text, env)
    return [token.as_dict(as_upstream=False) for token in tokens]


def render_markdown(tokens: list[dict[str, Any]], env: dict[str, Any] | None = None) -> str:
    """Render a dict token stream back to Markdown."""
    env = {} if env is None else env
    env.setdefault("used_refs", set())
    mdit = build_parser()
    return mdit.renderer.render([Token.from_dict(token) for token in tokens], mdit.options, env)


def text_leaves(tokens: list[dict[str, Any]]) -> list[tuple]:
    """Segments of the content of every non-blank prose token."""
    leaves = []
    for path in walk(tokens, classifier=text_slot_classifier({"content"})):
        parent = deep_get(tokens, path.parent)
        if isinstance(parent, dict) and parent.get("type") in TEXT_TOKENS:
            if deep_get(tokens, path.segments).strip():
                leaves.append(path.segments)
    return leaves


async def translate_markdown(
    value: str,
    options: TranslationOptions,
    convert_currency: bool = False,
    *,
    schema: SchemaLookup | None = None,
    backend: TranslationBackend | None = None,
) -> str:
    """Translate the prose of a Markdown document."""
    if not value or not value.strip():
        return value

    backend = resolve_backend(options, backend)
    env: dict[str, Any] = {}
    tokens = parse_markdown(value, env)
    leaves = text_leaves(tokens)
    logger.debug(f"Markdown document has {len(leaves)} text leaves")

    translated = await asyncio.gather(*(
        translate_text(deep_get(tokens, segments), options, convert_currency, backend=backend)
        for segments in leaves
    ))

    result = copy.deepcopy(tokens)
    for segments, text in zip(leaves, translated):
        deep_set(result, segments, text)
    return render_markdown(result, env)
