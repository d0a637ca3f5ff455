"""
Core of the translation engine: data model, errors, tree access,
classification and the backend registry.
"""

from translate_fields.core.errors import (
    TranslationError,
    ConfigurationError,
    RemoteServiceError,
    MalformedResponseError,
    EvaluationError,
    ValidationError,
)
from translate_fields.core.models import (
    ContentTree,
    PathSegment,
    Path,
    PathType,
    TranslationService,
    TranslationFormat,
    Editor,
    Currency,
    DeeplOptions,
    OpenAIOptions,
    TranslationOptions,
    FieldSchema,
    SchemaLookup,
    default_currencies,
    format_for_editor,
    schema_lookup,
)
from translate_fields.core.tree import (
    StructureSanitizer,
    deep_get,
    deep_set,
    parse_path,
)
from translate_fields.core.paths import (
    classify,
    text_slot_classifier,
    walk,
)
from translate_fields.core.registry import (
    BackendRegistry,
    RegistryError,
    get_registry,
    reset_registry,
)

__all__ = [
    # Errors
    "TranslationError",
    "ConfigurationError",
    "RemoteServiceError",
    "MalformedResponseError",
    "EvaluationError",
    "ValidationError",
    # Models
    "ContentTree",
    "PathSegment",
    "Path",
    "PathType",
    "TranslationService",
    "TranslationFormat",
    "Editor",
    "Currency",
    "DeeplOptions",
    "OpenAIOptions",
    "TranslationOptions",
    "FieldSchema",
    "SchemaLookup",
    "default_currencies",
    "format_for_editor",
    "schema_lookup",
    # Tree access
    "StructureSanitizer",
    "deep_get",
    "deep_set",
    "parse_path",
    # Classification
    "classify",
    "text_slot_classifier",
    "walk",
    # Registry
    "BackendRegistry",
    "RegistryError",
    "get_registry",
    "reset_registry",
]
