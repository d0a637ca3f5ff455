"""Deterministic backend for exercising the engine without a network."""

from __future__ import annotations

from translate_fields.core.models import TranslationOptions, TranslationService
from translate_fields.services.base import TranslationBackend


class MockBackend(TranslationBackend):
    """Prefixes every string with "Translated "."""

    @property
    def service(self) -> TranslationService:
        return TranslationService.MOCK

    async def translate(
        self,
        text: str,
        options: TranslationOptions,
        convert_currency: bool = False,
    ) -> str:
        return f"Translated {text}"
