"""
Privacy-trimmed snapshot of the record being edited.

The openAI backend shows the model the surrounding record so it can pick
consistent wording. Only short, non-empty values go out, and localized
values only in English.
"""

from __future__ import annotations

from typing import Any

from translate_fields.core.utils import truncate


MAX_VALUE_LENGTH = 50
CONTEXT_LOCALE = "en"

_EMPTY = object()


class ContextSanitizer:
    """
    Builds the JSON-safe record snapshot embedded in the prompt.

    Usage:
        snapshot = ContextSanitizer().sanitize(record, field_key="title")
    """

    def __init__(self, max_length: int = MAX_VALUE_LENGTH, locale: str = CONTEXT_LOCALE):
        self.max_length = max_length
        self.locale = locale

    def sanitize(self, record: dict[str, Any], field_key: str = "") -> dict[str, Any]:
        """
        Trim a record for prompt context.

        Drops the field being translated and every null or empty value,
        truncates long strings, and collapses nested objects to their
        English entry (dropping them when they have none).
        """
        snapshot: dict[str, Any] = {}
        for key, value in record.items():
            if key == field_key:
                continue
            cleaned = self._clean(value)
            if cleaned is not _EMPTY:
                snapshot[key] = cleaned
        return snapshot

    def _clean(self, value: Any) -> Any:
        if value is None or value == "":
            return _EMPTY
        if isinstance(value, str):
            return truncate(value, self.max_length)
        if isinstance(value, (bool, int, float)):
            return value
        if isinstance(value, dict):
            if self.locale not in value:
                return _EMPTY
            entry = self._clean(value[self.locale])
            if entry is _EMPTY:
                return _EMPTY
            return {self.locale: entry}
        if isinstance(value, (list, tuple)):
            items = [item for item in (self._clean(v) for v in value) if item is not _EMPTY]
            return items or _EMPTY
        # Anything else is not JSON-safe
        return _EMPTY
