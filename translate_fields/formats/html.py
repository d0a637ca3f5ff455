"""
HTML translation through an intermediate tagged tree.

Markup is parsed with lxml into plain nested dicts:

    {"node": "root", "child": [...]}
    {"node": "element", "tag": "p", "attr": {...}, "child": [...]}
    {"node": "text", "text": "Hello"}
    {"node": "comment", "comment": " note "}

Only text nodes are translated; tags, attributes, comments and
whitespace-only text are rebuilt exactly as parsed.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any

from lxml import etree
from lxml import html as lxml_html

from translate_fields.core.models import SchemaLookup, TranslationOptions
from translate_fields.core.paths import text_slot_classifier, walk
from translate_fields.core.tree import deep_get, deep_set
from translate_fields.formats.text import resolve_backend, translate_text
from translate_fields.services.base import TranslationBackend

logger = logging.getLogger(__name__)


_WRAPPER = "div"


# =============================================================================
# Parsing
# =============================================================================


def _text_node(text: str) -> dict[str, Any]:
    return {"node": "text", "text": text}


def _element_to_node(element: Any) -> dict[str, Any]:
    if isinstance(element, etree._Comment):
        return {"node": "comment", "comment": element.text or ""}

    children: list[dict[str, Any]] = []
    if element.text:
        children.append(_text_node(element.text))
    for child in element:
        children.append(_element_to_node(child))
        if child.tail:
            children.append(_text_node(child.tail))

    return {
        "node": "element",
        "tag": element.tag,
        "attr": dict(element.attrib),
        "child": children,
    }


def parse_html(markup: str) -> dict[str, Any]:
    """Parse an HTML fragment into the tagged tree."""
    if not markup.strip():
        return {"node": "root", "child": [_text_node(markup)] if markup else []}

    wrapper = lxml_html.fragment_fromstring(markup, create_parent=_WRAPPER)
    return {"node": "root", "child": _element_to_node(wrapper)["child"]}


# =============================================================================
# Serialization
# =============================================================================


def _append_children(parent: Any, children: list[dict[str, Any]]) -> None:
    last = None
    for node in children:
        kind = node["node"]
        if kind == "text":
            if last is None:
                parent.text = (parent.text or "") + node["text"]
            else:
                last.tail = (last.tail or "") + node["text"]
        elif kind == "comment":
            last = etree.Comment(node["comment"])
            parent.append(last)
        else:
            last = etree.SubElement(parent, node["tag"], attrib=node.get("attr", {}))
            _append_children(last, node.get("child", []))


def serialize_html(tree: dict[str, Any]) -> str:
    """Serialize a tagged tree back to an HTML fragment."""
    wrapper = lxml_html.Element(_WRAPPER)
    _append_children(wrapper, tree.get("child", []))
    markup = lxml_html.tostring(wrapper, encoding="unicode")
    return markup[len(f"<{_WRAPPER}>"):-len(f"</{_WRAPPER}>")]


# =============================================================================
# Translation
# =============================================================================


def text_leaves(tree: dict[str, Any]) -> list[tuple]:
    """Segments of every non-blank text node of a tagged tree."""
    leaves = []
    for path in walk(tree, classifier=text_slot_classifier({"text"})):
        parent = deep_get(tree, path.parent)
        if isinstance(parent, dict) and parent.get("node") == "text":
            if deep_get(tree, path.segments).strip():
                leaves.append(path.segments)
    return leaves


async def translate_html(
    value: str,
    options: TranslationOptions,
    convert_currency: bool = False,
    *,
    schema: SchemaLookup | None = None,
    backend: TranslationBackend | None = None,
) -> str:
    """Translate the text nodes of an HTML fragment."""
    if not value or not value.strip():
        return value

    backend = resolve_backend(options, backend)
    tree = parse_html(value)
    leaves = text_leaves(tree)
    logger.debug(f"HTML fragment has {len(leaves)} text nodes")

    translated = await asyncio.gather(*(
        translate_text(deep_get(tree, segments), options, convert_currency, backend=backend)
        for segments in leaves
    ))

    result = copy.deepcopy(tree)
    for segments, text in zip(leaves, translated):
        deep_set(result, segments, text)
    return serialize_html(result)
