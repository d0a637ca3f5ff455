"""
Field-level translation session.

A FieldTranslator translates one localized field of a record into
several locales at once and writes each result back through the host.
It holds the only shared mutable state of the engine: the in-flight flag
and the last error message.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable

from translate_fields.config import Settings, get_settings
from translate_fields.core.errors import (
    ConfigurationError,
    TranslationError,
    ValidationError,
)
from translate_fields.core.models import (
    ContentTree,
    Currency,
    SchemaLookup,
    TranslationFormat,
    TranslationOptions,
    TranslationService,
)
from translate_fields.core.paths import TEXT_KEYS, is_seo
from translate_fields.core.registry import get_registry
from translate_fields.core.tree import deep_get, parse_path
from translate_fields.formats import translate_document
from translate_fields.services.base import TranslationBackend

logger = logging.getLogger(__name__)


# Called with (dotted path, value); may be a coroutine function
SetFieldValue = Callable[[str, Any], Any]


def has_field_value(value: ContentTree, format: TranslationFormat | None = None) -> bool:
    """
    Whether a field value has anything worth translating.

    Strings need a non-whitespace character, SEO records a title or a
    description, structured text a non-empty text leaf. Other sequences
    and mappings only need to be non-empty.
    """
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if format == TranslationFormat.SEO or is_seo(value):
        return bool(value.get("title") or value.get("description"))
    if format == TranslationFormat.STRUCTURED_TEXT:
        return _has_text_leaf(value)
    if isinstance(value, (list, dict)):
        return bool(value)
    return True


def _has_text_leaf(node: ContentTree) -> bool:
    if isinstance(node, dict):
        for key in TEXT_KEYS:
            text = node.get(key)
            if isinstance(text, str) and text.strip():
                return True
        return any(_has_text_leaf(child) for child in node.values())
    if isinstance(node, list):
        return any(_has_text_leaf(child) for child in node)
    return False


class FieldTranslator:
    """
    Translates one localized field into other locales.

    Usage:
        translator = FieldTranslator(
            record=record,
            field_path="title.en",
            locales=["en", "fr", "de"],
            set_field_value=host.set_field_value,
            format=TranslationFormat.TEXT,
        )
        await translator.translate_all(current_locale="en")
        if translator.error:
            show(translator.error)
    """

    def __init__(
        self,
        record: dict[str, Any],
        field_path: str,
        locales: list[str],
        set_field_value: SetFieldValue,
        format: TranslationFormat = TranslationFormat.TEXT,
        settings: Settings | None = None,
        currencies: dict[str, Currency] | None = None,
        schema: SchemaLookup | None = None,
        backend: TranslationBackend | None = None,
        **overrides: Any,
    ):
        if not locales:
            raise ConfigurationError("At least one locale is required")

        self.record = record
        self.locales = list(locales)
        self.set_field_value = set_field_value
        self.format = TranslationFormat(format)
        self.settings = settings or get_settings()
        self.currencies = currencies
        self.schema = schema
        self.backend = backend
        self.overrides = overrides

        # "title.en" and "title" both address the title field
        segments = parse_path(field_path)
        if segments and segments[-1] in self.locales:
            segments = segments[:-1]
        self.base_path = ".".join(str(segment) for segment in segments)
        self.field_key = str(segments[-1]) if segments else ""

        self.is_translating = False
        self.error: str | None = None

    @property
    def default_locale(self) -> str:
        return self.locales[0]

    def locale_path(self, locale: str) -> str:
        """Dotted path of the field value in one locale."""
        return f"{self.base_path}.{locale}" if self.base_path else locale

    def build_options(self, from_locale: str, to_locale: str) -> TranslationOptions:
        """Options for one source -> destination pair."""
        return self.settings.build_options(
            from_locale,
            to_locale,
            locales=self.locales,
            format=self.format,
            currencies=self.currencies,
            field_key=self.field_key,
            record=self.record,
            **self.overrides,
        )

    def check_api_key(self, options: TranslationOptions) -> None:
        """ConfigurationError when a real service has no API key."""
        service = options.service
        if service is None:
            raise ConfigurationError("No translation service added in the settings")
        if self.backend is not None or service == TranslationService.MOCK:
            return
        if not options.api_key:
            label = get_registry().get(service).label
            raise ConfigurationError(f"Set {label} API key in the settings")

    # =========================================================================
    # Entry points
    # =========================================================================

    async def translate_all(
        self,
        current_locale: str | None = None,
        convert_currency: bool = False,
    ) -> dict[str, ContentTree]:
        """Translate the default locale's value into every other locale."""
        current = current_locale or self.default_locale
        targets = [locale for locale in self.locales if locale != current]
        return await self.translate(targets, self.default_locale, convert_currency)

    async def translate_from_default(
        self,
        current_locale: str,
        convert_currency: bool = False,
    ) -> dict[str, ContentTree]:
        """Copy and translate the default locale's value into current_locale."""
        return await self.translate([current_locale], self.default_locale, convert_currency)

    async def translate(
        self,
        to_locales: list[str],
        from_locale: str | None = None,
        convert_currency: bool = False,
    ) -> dict[str, ContentTree]:
        """
        Translate the field into every locale of to_locales concurrently.

        Each successful locale is written back through set_field_value;
        a failed locale is left untouched. The first failure is kept in
        self.error. Returns the translated values by locale.
        """
        if self.is_translating:
            logger.warning(f"Translation of {self.base_path} already running, request ignored")
            return {}

        self.is_translating = True
        self.error = None
        source_locale = from_locale or self.default_locale
        translated: dict[str, ContentTree] = {}

        try:
            source = deep_get(self.record, self.locale_path(source_locale))
            if not has_field_value(source, self.format):
                raise ValidationError(
                    f"Please add content to the default field ({source_locale})"
                )

            options = [self.build_options(source_locale, locale) for locale in to_locales]
            for item in options:
                self.check_api_key(item)

            logger.info(
                f"Translating {self.base_path} from {source_locale} into {', '.join(to_locales)}"
            )
            results = await asyncio.gather(
                *(
                    translate_document(
                        source,
                        item,
                        convert_currency,
                        schema=self.schema,
                        backend=self.backend,
                    )
                    for item in options
                ),
                return_exceptions=True,
            )

            for locale, result in zip(to_locales, results):
                if isinstance(result, Exception):
                    logger.error(f"Translation of {self.base_path} into {locale} failed: {result}")
                    if self.error is None:
                        self.error = str(result)
                    continue
                await self._write(locale, result)
                translated[locale] = result

        except ValidationError as e:
            logger.info(str(e))
            self.error = str(e)
        except TranslationError as e:
            logger.error(f"Translation of {self.base_path} failed: {e}")
            self.error = str(e)
        finally:
            self.is_translating = False

        return translated

    async def _write(self, locale: str, value: ContentTree) -> None:
        outcome = self.set_field_value(self.locale_path(locale), value)
        if inspect.isawaitable(outcome):
            await outcome
