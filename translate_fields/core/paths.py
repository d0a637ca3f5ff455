"""
Classification and enumeration of translatable nodes.

classify() is the single place deciding what a node is; walk() applies it
to every node of a tree and returns the paths worth translating.
"""

from __future__ import annotations

from typing import Callable, Collection

from translate_fields.core.models import (
    ContentTree,
    Editor,
    Path,
    PathSegment,
    PathType,
    SchemaLookup,
)


# Keys that hold a text slot in structured text and HTML nodes
TEXT_KEYS: frozenset[str] = frozenset({"text", "value"})

SEO_KEYS: frozenset[str] = frozenset({"title", "description", "image", "twitter_card"})

# Sub-translators handle these nodes whole, so the walk stops there
CONTAINER_TYPES: frozenset[PathType] = frozenset({
    PathType.SEO,
    PathType.STRUCTURED_TEXT,
    PathType.STRUCTURED_TEXT_BLOCK,
})

_EDITOR_TYPES: dict[str, PathType] = {
    Editor.WYSIWYG.value: PathType.HTML,
    Editor.MARKDOWN.value: PathType.MARKDOWN,
    Editor.SINGLE_LINE.value: PathType.TEXT,
    Editor.TEXTAREA.value: PathType.TEXT,
}

Classifier = Callable[..., PathType]


def is_seo(value: ContentTree) -> bool:
    """An SEO record: only SEO keys, with a title or a description."""
    return (
        isinstance(value, dict)
        and bool(value)
        and set(value) <= SEO_KEYS
        and ("title" in value or "description" in value)
    )


def is_structured_text(value: ContentTree) -> bool:
    """A non-empty sequence made only of typed nodes."""
    return (
        isinstance(value, list)
        and bool(value)
        and all(isinstance(node, dict) and isinstance(node.get("type"), str) for node in value)
    )


def is_block(value: ContentTree) -> bool:
    """A block record embedded in structured text."""
    return isinstance(value, dict) and value.get("type") == "block"


def classify(
    key: PathSegment,
    value: ContentTree,
    schema: SchemaLookup | None = None,
) -> PathType:
    """
    Decide the PathType of a node from its key, shape and schema.

    Priority: enum/select fields are ignored; text slots and text editors
    are text (wysiwyg and markdown editors map to html and markdown); then
    SEO records, structured text containers and block nodes. Anything else
    is ignored.
    """
    field = schema(key) if schema is not None and isinstance(key, str) else None

    if field is not None and field.is_enum:
        return PathType.IGNORED

    if isinstance(value, str):
        if field is not None and field.editor in _EDITOR_TYPES:
            return _EDITOR_TYPES[field.editor]
        if key in TEXT_KEYS:
            return PathType.TEXT
        return PathType.IGNORED

    if is_seo(value):
        return PathType.SEO
    if is_structured_text(value):
        return PathType.STRUCTURED_TEXT
    if is_block(value):
        return PathType.STRUCTURED_TEXT_BLOCK

    return PathType.IGNORED


def text_slot_classifier(text_keys: Collection[str]) -> Classifier:
    """
    Classifier for parsed HTML/Markdown trees.

    Only string leaves under one of text_keys count; every container is
    walked through.
    """
    def _classify(key: PathSegment, value: ContentTree, schema: SchemaLookup | None = None) -> PathType:
        if isinstance(value, str) and key in text_keys:
            return PathType.TEXT
        return PathType.IGNORED

    return _classify


def walk(
    tree: ContentTree,
    schema: SchemaLookup | None = None,
    classifier: Classifier = classify,
) -> list[Path]:
    """
    Every classified node below tree, as Paths.

    Null and empty-string values are skipped. Nodes classified as
    containers (SEO, structured text, blocks) are reported once and not
    descended into. Order is not significant; merge by path.
    """
    found: list[Path] = []
    _walk(tree, (), schema, classifier, found)
    return found


def _walk(
    node: ContentTree,
    prefix: tuple[PathSegment, ...],
    schema: SchemaLookup | None,
    classifier: Classifier,
    found: list[Path],
) -> None:
    if isinstance(node, dict):
        items = node.items()
    elif isinstance(node, list):
        items = enumerate(node)
    else:
        return

    for key, value in items:
        if value is None or value == "":
            continue

        location = prefix + (key,)
        path_type = classifier(key, value, schema)

        if path_type is not PathType.IGNORED:
            found.append(Path(segments=location, key=key, type=path_type))
            if path_type in CONTAINER_TYPES:
                continue

        if isinstance(value, (dict, list)):
            _walk(value, location, schema, classifier, found)
