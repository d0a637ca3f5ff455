"""Shared fixtures."""

import pytest

from translate_fields.core.models import TranslationOptions, TranslationService
from translate_fields.core.registry import reset_registry


@pytest.fixture(autouse=True)
def fresh_registry():
    """Every test starts from the built-in backends."""
    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def mock_options():
    """en -> fr options running the mock backend."""
    return TranslationOptions(
        from_locale="en",
        to_locale="fr",
        translation_service=TranslationService.OPENAI,
        use_mock=True,
        locales=["en", "fr"],
    )
