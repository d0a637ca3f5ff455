"""
Translate Fields - locale translation for structured editorial content.

Translates plain text, HTML, Markdown, SEO records, slugs and
structured/rich text trees between locales through pluggable backends
(mock, Yandex, DeepL, DeepL Free, OpenAI), optionally converting the
currency amounts embedded in the text.

Usage:
    from translate_fields import get_settings, translate_document, TranslationFormat

    options = get_settings().build_options("en", "fr", format=TranslationFormat.HTML)
    html = await translate_document("<p>Hello</p>", options)

    # Whole field, every locale
    translator = FieldTranslator(record, "title.en", ["en", "fr", "de"], set_field_value)
    await translator.translate_all()
"""

from translate_fields.config import Settings, get_settings
from translate_fields.core import (
    TranslationError,
    ConfigurationError,
    RemoteServiceError,
    MalformedResponseError,
    EvaluationError,
    ValidationError,
    ContentTree,
    Path,
    PathType,
    TranslationService,
    TranslationFormat,
    Currency,
    DeeplOptions,
    OpenAIOptions,
    TranslationOptions,
    FieldSchema,
    format_for_editor,
    schema_lookup,
    StructureSanitizer,
    deep_get,
    deep_set,
    classify,
    walk,
    get_registry,
    reset_registry,
)
from translate_fields.formats import translate_document
from translate_fields.session import FieldTranslator, has_field_value

__version__ = "0.1.0"

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "TranslationError",
    "ConfigurationError",
    "RemoteServiceError",
    "MalformedResponseError",
    "EvaluationError",
    "ValidationError",
    # Models
    "ContentTree",
    "Path",
    "PathType",
    "TranslationService",
    "TranslationFormat",
    "Currency",
    "DeeplOptions",
    "OpenAIOptions",
    "TranslationOptions",
    "FieldSchema",
    "format_for_editor",
    "schema_lookup",
    # Engine
    "StructureSanitizer",
    "deep_get",
    "deep_set",
    "classify",
    "walk",
    "get_registry",
    "reset_registry",
    "translate_document",
    # Session
    "FieldTranslator",
    "has_field_value",
]
