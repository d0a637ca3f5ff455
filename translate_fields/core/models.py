"""
Core data model for field translation.

A document is a plain JSON-like value (the ContentTree). Paths locate
leaves inside it; TranslationOptions carries everything a backend needs
for one source → destination locale pair.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Union

from pydantic import BaseModel, Field, field_validator


# None | bool | int | float | str | list[ContentTree] | dict[str, ContentTree]
ContentTree = Any
PathSegment = Union[str, int]

AMOUNT_PLACEHOLDER = "{{amount}}"


# =============================================================================
# Enums
# =============================================================================


class PathType(str, Enum):
    """Classification deciding which translator handles a node."""
    
    TEXT = "text"
    HTML = "html"
    MARKDOWN = "markdown"
    STRUCTURED_TEXT = "structured_text"
    STRUCTURED_TEXT_BLOCK = "structured_text_block"
    SEO = "seo"
    IGNORED = "ignored"


class TranslationService(str, Enum):
    """Available translation backends."""
    
    MOCK = "mock"
    YANDEX = "yandex"
    DEEPL = "deepl"
    DEEPL_FREE = "deeplFree"
    OPENAI = "openAI"


class TranslationFormat(str, Enum):
    """Shape of a field value, one translator per format."""
    
    TEXT = "text"
    HTML = "html"
    MARKDOWN = "markdown"
    SEO = "seo"
    SLUG = "slug"
    STRUCTURED_TEXT = "structured_text"
    RICH_TEXT = "rich_text"


class Editor(str, Enum):
    """Editor kinds reported by the host field schema."""
    
    SINGLE_LINE = "single_line"
    TEXTAREA = "textarea"
    WYSIWYG = "wysiwyg"
    MARKDOWN = "markdown"
    SEO = "seo"
    SLUG = "slug"
    STRUCTURED_TEXT = "structured_text"
    RICH_TEXT = "rich_text"


TRANSLATION_FORMATS: dict[str, TranslationFormat] = {
    Editor.SINGLE_LINE.value: TranslationFormat.TEXT,
    Editor.TEXTAREA.value: TranslationFormat.TEXT,
    Editor.WYSIWYG.value: TranslationFormat.HTML,
    Editor.MARKDOWN.value: TranslationFormat.MARKDOWN,
    Editor.SEO.value: TranslationFormat.SEO,
    Editor.SLUG.value: TranslationFormat.SLUG,
    Editor.STRUCTURED_TEXT.value: TranslationFormat.STRUCTURED_TEXT,
    Editor.RICH_TEXT.value: TranslationFormat.RICH_TEXT,
}


def format_for_editor(editor: str | None) -> TranslationFormat:
    """Translation format for an editor kind; plain text when unknown."""
    if editor is None:
        return TranslationFormat.TEXT
    return TRANSLATION_FORMATS.get(editor, TranslationFormat.TEXT)


# =============================================================================
# Options
# =============================================================================


class Currency(BaseModel):
    """A currency code and the template used to render amounts in it."""
    
    code: str
    format: str = AMOUNT_PLACEHOLDER
    
    @field_validator("code")
    @classmethod
    def _normalize_code(cls, value: str) -> str:
        value = value.strip().upper()
        if len(value) != 3 or not value.isalpha():
            raise ValueError(f"Currency code must be 3 letters, got {value!r}")
        return value
    
    def render(self, amount: str) -> str:
        """Put a formatted amount into the currency template."""
        if AMOUNT_PLACEHOLDER not in self.format:
            return f"{self.format}{amount}"
        return self.format.replace(AMOUNT_PLACEHOLDER, amount)


def default_currencies(locales: Iterable[str]) -> dict[str, Currency]:
    """Every locale priced in euro, the table used when none is configured."""
    return {locale: Currency(code="EUR", format="€" + AMOUNT_PLACEHOLDER) for locale in locales}


class DeeplOptions(BaseModel):
    """DeepL-specific request options."""
    
    glossary_id: str = ""
    formality: str = "default"


class OpenAIOptions(BaseModel):
    """Generation parameters and currency table for the openAI backend."""
    
    model: str = "gpt-4o-mini"
    temperature: float = 0.0
    max_tokens: int = 1000
    top_p: float = 1.0
    context: str = ""
    currencies: dict[str, Currency] = Field(default_factory=dict)


class TranslationOptions(BaseModel):
    """
    Everything needed to translate one value between two locales.
    
    Shared by every format translator and every backend.
    """
    
    from_locale: str
    to_locale: str
    format: TranslationFormat = TranslationFormat.TEXT
    translation_service: TranslationService | None = None
    api_key: str = ""
    locales: list[str] = Field(default_factory=list)
    deepl_options: DeeplOptions = Field(default_factory=DeeplOptions)
    openai_options: OpenAIOptions = Field(default_factory=OpenAIOptions)
    
    # Explicit switch to the deterministic backend
    use_mock: bool = False
    
    # Record being edited and the machine name of the translated field,
    # used as prompt context by the openAI backend
    field_key: str = ""
    record: dict[str, Any] = Field(default_factory=dict)
    
    @property
    def service(self) -> TranslationService | None:
        """The backend that will actually run."""
        if self.use_mock:
            return TranslationService.MOCK
        return self.translation_service
    
    def for_locale(self, to_locale: str) -> TranslationOptions:
        """Copy of these options targeting another locale."""
        return self.model_copy(update={"to_locale": to_locale})


# =============================================================================
# Host schema
# =============================================================================


class FieldSchema(BaseModel):
    """Editor kind and validators of one field, as the host reports them."""
    
    api_key: str
    editor: str | None = None
    validators: dict[str, Any] = Field(default_factory=dict)
    
    @property
    def is_enum(self) -> bool:
        """Select fields carry an enum validator and are never translated."""
        return "enum" in self.validators


SchemaLookup = Callable[[str], Union[FieldSchema, None]]


def schema_lookup(fields: Iterable[FieldSchema]) -> SchemaLookup:
    """Build a key → FieldSchema lookup from a list of fields."""
    by_key = {field.api_key: field for field in fields}
    return by_key.get


# =============================================================================
# Paths
# =============================================================================


@dataclass(frozen=True)
class Path:
    """Location of a candidate node inside a ContentTree."""
    
    segments: tuple[PathSegment, ...]
    key: PathSegment
    type: PathType
    
    @property
    def parent(self) -> tuple[PathSegment, ...]:
        return self.segments[:-1]
    
    def __str__(self) -> str:
        return ".".join(str(segment) for segment in self.segments)
