"""
Tests for the field session, settings, config files and the CLI.
"""

import argparse
import asyncio

import pytest

from translate_fields.config import Settings
from translate_fields.config_loader import ConfigLoader, load_currencies, load_schema
from translate_fields.core.errors import ConfigurationError, RemoteServiceError
from translate_fields.core.models import (
    Currency,
    PathType,
    TranslationFormat,
    TranslationService,
    format_for_editor,
)
from translate_fields.core.paths import classify
from translate_fields.main import run
from translate_fields.services.base import TranslationBackend
from translate_fields.session import FieldTranslator, has_field_value


# =============================================================================
# Test backends
# =============================================================================


class LocaleFailingBackend(TranslationBackend):
    """Fails for one destination locale."""

    service = TranslationService.MOCK

    def __init__(self, failing):
        self.failing = failing

    async def translate(self, text, options, convert_currency=False):
        if options.to_locale == self.failing:
            raise RemoteServiceError("DeepL returned status 456", status_code=456)
        return f"[{options.to_locale}] {text}"


class BlockingBackend(TranslationBackend):
    """Waits for a release before answering."""

    service = TranslationService.MOCK

    def __init__(self):
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def translate(self, text, options, convert_currency=False):
        self.started.set()
        await self.release.wait()
        return text.upper()


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def record():
    return {"title": {"en": "Hello", "fr": "", "de": None}}


@pytest.fixture
def writes():
    """Values written back through the host callback, by path."""
    return {}


@pytest.fixture
def settings():
    return Settings(translation_service=TranslationService.OPENAI, openai_api_key="", use_mock=False)


def make_translator(record, writes, settings, **kwargs):
    return FieldTranslator(
        record=record,
        field_path="title.en",
        locales=["en", "fr", "de"],
        set_field_value=writes.__setitem__,
        settings=settings,
        **kwargs,
    )


# =============================================================================
# has_field_value
# =============================================================================


class TestHasFieldValue:
    def test_strings(self):
        assert has_field_value("Hello")
        assert not has_field_value("   ")
        assert not has_field_value(None)

    def test_seo(self):
        assert has_field_value({"title": "Hi", "description": ""}, TranslationFormat.SEO)
        assert not has_field_value({"title": "", "description": "", "image": "1"}, TranslationFormat.SEO)

    def test_structured_text(self):
        empty = [{"type": "paragraph", "children": [{"type": "span", "text": " "}]}]
        filled = [{"type": "paragraph", "children": [{"type": "span", "text": "Hi"}]}]

        assert not has_field_value(empty, TranslationFormat.STRUCTURED_TEXT)
        assert has_field_value(filled, TranslationFormat.STRUCTURED_TEXT)

    def test_structured_text_value_spans(self):
        spans = [{"type": "paragraph", "children": [{"type": "span", "value": "Hello"}]}]
        blank = [{"type": "paragraph", "children": [{"type": "span", "value": "  "}]}]

        assert has_field_value(spans, TranslationFormat.STRUCTURED_TEXT)
        assert not has_field_value(blank, TranslationFormat.STRUCTURED_TEXT)

    def test_collections(self):
        assert not has_field_value([], TranslationFormat.RICH_TEXT)
        assert has_field_value([{"itemId": "1"}], TranslationFormat.RICH_TEXT)


# =============================================================================
# FieldTranslator
# =============================================================================


class TestFieldTranslator:
    @pytest.mark.asyncio
    async def test_translate_all_with_mock(self, record, writes, settings):
        translator = make_translator(record, writes, settings, use_mock=True)
        result = await translator.translate_all()

        assert writes == {"title.fr": "Translated Hello", "title.de": "Translated Hello"}
        assert result == {"fr": "Translated Hello", "de": "Translated Hello"}
        assert translator.error is None
        assert not translator.is_translating

    @pytest.mark.asyncio
    async def test_translate_from_default(self, record, writes, settings):
        translator = make_translator(record, writes, settings, use_mock=True)
        await translator.translate_from_default("de")

        assert writes == {"title.de": "Translated Hello"}

    @pytest.mark.asyncio
    async def test_empty_source(self, writes, settings):
        record = {"title": {"en": " ", "fr": "Bonjour"}}
        translator = make_translator(record, writes, settings, use_mock=True)
        await translator.translate_all()

        assert translator.error == "Please add content to the default field (en)"
        assert writes == {}

    @pytest.mark.asyncio
    async def test_missing_api_key(self, record, writes, settings):
        translator = make_translator(record, writes, settings)
        await translator.translate_all()

        assert translator.error == "Set OpenAI API key in the settings"
        assert writes == {}
        assert not translator.is_translating

    @pytest.mark.asyncio
    async def test_missing_api_key_names_backend(self, record, writes):
        settings = Settings(translation_service=TranslationService.DEEPL_FREE, deepl_free_api_key="", use_mock=False)
        translator = make_translator(record, writes, settings)
        await translator.translate_all()

        assert translator.error == "Set DeepL API key in the settings"
        assert writes == {}

    @pytest.mark.asyncio
    async def test_failed_locale_left_untouched(self, record, writes, settings):
        translator = make_translator(record, writes, settings, backend=LocaleFailingBackend("de"))
        await translator.translate_all()

        assert writes == {"title.fr": "[fr] Hello"}
        assert translator.error == "DeepL returned status 456"
        assert not translator.is_translating

    @pytest.mark.asyncio
    async def test_concurrent_request_ignored(self, record, writes, settings):
        backend = BlockingBackend()
        translator = make_translator(record, writes, settings, backend=backend)

        first = asyncio.create_task(translator.translate(["fr"]))
        await backend.started.wait()
        assert translator.is_translating

        assert await translator.translate(["de"]) == {}

        backend.release.set()
        assert await first == {"fr": "HELLO"}
        assert writes == {"title.fr": "HELLO"}
        assert not translator.is_translating

    @pytest.mark.asyncio
    async def test_async_setter(self, record, settings):
        written = {}

        async def set_field_value(path, value):
            written[path] = value

        translator = FieldTranslator(
            record=record,
            field_path="title",
            locales=["en", "fr"],
            set_field_value=set_field_value,
            settings=settings,
            use_mock=True,
        )
        await translator.translate_all()

        assert written == {"title.fr": "Translated Hello"}

    @pytest.mark.asyncio
    async def test_field_context_passed_to_options(self, record, writes, settings):
        options = make_translator(record, writes, settings).build_options("en", "fr")

        assert options.field_key == "title"
        assert options.record == record
        assert options.locales == ["en", "fr", "de"]

    def test_requires_locales(self, record, writes, settings):
        with pytest.raises(ConfigurationError):
            FieldTranslator(record, "title", [], writes.__setitem__, settings=settings)


# =============================================================================
# Settings
# =============================================================================


class TestSettings:
    def test_api_key_per_service(self):
        settings = Settings(deepl_api_key="d", deepl_free_api_key="f", openai_api_key="o")
        options = settings.build_options("en", "de", translation_service=TranslationService.DEEPL_FREE)

        assert options.translation_service == TranslationService.DEEPL_FREE
        assert options.api_key == "f"

    def test_overrides_win(self):
        settings = Settings(openai_model="gpt-4o", openai_api_key="o")
        options = settings.build_options("en", "de", api_key="explicit", use_mock=True)

        assert options.api_key == "explicit"
        assert options.use_mock
        assert options.service == TranslationService.MOCK
        assert options.openai_options.model == "gpt-4o"

    def test_default_currencies(self):
        options = Settings().build_options("en", "de", locales=["en", "de", "fr"])

        assert set(options.openai_options.currencies) == {"en", "de", "fr"}
        assert options.openai_options.currencies["fr"] == Currency(code="EUR", format="€{{amount}}")

    def test_editor_formats(self):
        assert format_for_editor("wysiwyg") == TranslationFormat.HTML
        assert format_for_editor("textarea") == TranslationFormat.TEXT
        assert format_for_editor("rich_text") == TranslationFormat.RICH_TEXT
        assert format_for_editor("color_picker") == TranslationFormat.TEXT
        assert format_for_editor(None) == TranslationFormat.TEXT


# =============================================================================
# Config files
# =============================================================================


class TestConfigLoader:
    def test_currencies(self, tmp_path):
        path = tmp_path / "currencies.yaml"
        path.write_text('en: {code: eur, format: "€{{amount}}"}\nen-GB: GBP\n', encoding="utf-8")

        currencies = load_currencies(path)

        assert currencies["en"] == Currency(code="EUR", format="€{{amount}}")
        assert currencies["en-GB"].code == "GBP"

    def test_invalid_currency(self, tmp_path):
        path = tmp_path / "currencies.yaml"
        path.write_text("en: {code: EURO}\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_currencies(path)

    def test_schema(self, tmp_path):
        path = tmp_path / "fields.yml"
        path.write_text(
            "- api_key: title\n"
            "  editor: single_line\n"
            "- api_key: category\n"
            "  editor: single_line\n"
            "  validators: {enum: {values: [news, blog]}}\n",
            encoding="utf-8",
        )

        schema = load_schema(path)

        assert classify("title", "Hi", schema) == PathType.TEXT
        assert classify("category", "news", schema) == PathType.IGNORED

    def test_load_all(self, tmp_path):
        (tmp_path / "currencies.yaml").write_text("fr: EUR\n", encoding="utf-8")

        loaded = ConfigLoader(tmp_path).load_all()

        assert list(loaded["currencies"]) == ["fr"]
        assert loaded["fields"] == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_currencies(tmp_path / "nope.yaml")


# =============================================================================
# Command line
# =============================================================================


class TestCommandLine:
    @pytest.mark.asyncio
    async def test_mock_run(self, tmp_path, capsys):
        path = tmp_path / "value.json"
        path.write_text('{"title": "Hi", "description": ""}', encoding="utf-8")
        args = argparse.Namespace(
            file=str(path),
            format="seo",
            from_locale="en",
            to=["fr", "de"],
            service=None,
            convert_currency=False,
            currencies=None,
            schema=None,
            mock=True,
        )

        assert await run(args) == 0

        out = capsys.readouterr().out
        assert "# fr" in out and "# de" in out
        assert '"title": "Translated Hi"' in out
