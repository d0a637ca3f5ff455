"""
Generic access to ContentTree values.

Reads and writes go through path segments (str keys for mappings, int
indexes for sequences). The sanitizer strips identifier fields before a
tree is translated and puts them back afterwards.
"""

from __future__ import annotations

import copy
import re
from typing import Any, Iterable, Sequence

from translate_fields.core.models import ContentTree, PathSegment


_INDEX = re.compile(r"^\d+$")


def parse_path(path: str | Sequence[PathSegment]) -> list[PathSegment]:
    """
    Split a dotted path into segments.

    Numeric parts become list indexes: "blocks.0.title.en" ->
    ["blocks", 0, "title", "en"]. Sequences are returned as a list.
    """
    if isinstance(path, str):
        if not path:
            return []
        return [int(part) if _INDEX.match(part) else part for part in path.split(".")]
    return list(path)


def deep_get(tree: ContentTree, path: str | Sequence[PathSegment], default: Any = None) -> Any:
    """Value at path, or default when any segment is missing."""
    node = tree
    for segment in parse_path(path):
        if isinstance(node, dict) and segment in node:
            node = node[segment]
        elif isinstance(node, list) and isinstance(segment, int) and -len(node) <= segment < len(node):
            node = node[segment]
        else:
            return default
    return node


def deep_set(tree: ContentTree, path: str | Sequence[PathSegment], value: Any) -> ContentTree:
    """
    Write value at path, creating intermediate mappings as needed.

    Mutates and returns tree; callers pass a tree they own.
    """
    segments = parse_path(path)
    if not segments:
        return value

    node = tree
    for segment, following in zip(segments, segments[1:]):
        if isinstance(node, list):
            child = node[segment]
        else:
            child = node.get(segment)
            if not isinstance(child, (dict, list)):
                child = [] if isinstance(following, int) else {}
                node[segment] = child
        node = child

    node[segments[-1]] = value
    return tree


# =============================================================================
# Structure sanitizer
# =============================================================================


class StructureSanitizer:
    """
    Removes fields that must not reach a backend, and restores them.

    Usage:
        stripped = StructureSanitizer.strip(value, ["id"], keys_to_skip=["meta"])
        ...translate stripped...
        result = StructureSanitizer.restore(value, translated)
    """

    @classmethod
    def strip(
        cls,
        tree: ContentTree,
        keys_to_remove: Iterable[str],
        keys_to_skip: Iterable[str] = (),
        shallow: bool = False,
    ) -> ContentTree:
        """
        Deep copy of tree without the keys in keys_to_remove.

        Containers stored under a key in keys_to_skip are copied verbatim.
        With shallow=True only the top-level mapping loses keys and
        everything below it is copied unchanged.
        """
        remove = frozenset(keys_to_remove)
        skip = frozenset(keys_to_skip)
        if shallow:
            if not isinstance(tree, dict):
                return copy.deepcopy(tree)
            return {
                key: copy.deepcopy(value)
                for key, value in tree.items()
                if key not in remove
            }
        return cls._strip(tree, remove, skip)

    @classmethod
    def _strip(cls, node: ContentTree, remove: frozenset, skip: frozenset) -> ContentTree:
        if isinstance(node, list):
            return [cls._strip(item, remove, skip) for item in node]
        if isinstance(node, dict):
            result = {}
            for key, value in node.items():
                if key in remove:
                    continue
                if key in skip:
                    result[key] = copy.deepcopy(value)
                else:
                    result[key] = cls._strip(value, remove, skip)
            return result
        return node

    @classmethod
    def restore(cls, original: ContentTree, translated: ContentTree) -> ContentTree:
        """
        Merge stripped keys from original back into translated.

        Walks both trees in parallel. Keys missing from translated are taken
        from original byte-for-byte, and key order follows original.
        """
        if isinstance(original, dict) and isinstance(translated, dict):
            return {
                key: cls.restore(value, translated[key]) if key in translated else copy.deepcopy(value)
                for key, value in original.items()
            }
        if (
            isinstance(original, list)
            and isinstance(translated, list)
            and len(original) == len(translated)
        ):
            return [cls.restore(o, t) for o, t in zip(original, translated)]
        return translated
