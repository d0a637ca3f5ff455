"""
Configuration file loader.

Reads the host-side tables the engine consumes from YAML: the currency
table keyed by locale and the field schema list.

Currency file:

    en: {code: EUR, format: "€{{amount}}"}
    en-GB: {code: GBP, format: "£{{amount}}"}

Field schema file:

    - api_key: title
      editor: single_line
    - api_key: category
      editor: single_line
      validators: {enum: {values: [news, blog]}}
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from translate_fields.core.errors import ConfigurationError
from translate_fields.core.models import Currency, FieldSchema, SchemaLookup, schema_lookup

logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    Loads currency tables and field schemas from a config directory.

    Files are looked up as currencies.yaml and fields.yaml (or .yml).
    """

    def __init__(self, config_dir: Path | str | None = None):
        if config_dir is None:
            config_dir = Path.cwd() / "config"
        self.config_dir = Path(config_dir)

    def _find(self, stem: str) -> Path | None:
        for suffix in (".yaml", ".yml"):
            path = self.config_dir / f"{stem}{suffix}"
            if path.exists():
                return path
        return None

    def load_all(self) -> dict[str, Any]:
        """
        Load every config file present.

        Returns:
            Dict with "currencies" (locale -> Currency) and "fields"
            (list of FieldSchema); missing files give empty values
        """
        currencies_path = self._find("currencies")
        fields_path = self._find("fields")
        return {
            "currencies": self.load_currencies(currencies_path) if currencies_path else {},
            "fields": self.load_fields(fields_path) if fields_path else [],
        }

    def load_currencies(self, path: Path | str) -> dict[str, Currency]:
        """Load a locale -> Currency table from YAML."""
        data = _read_yaml(path)
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path}: expected a mapping of locale to currency")

        currencies = {}
        for locale, entry in data.items():
            if isinstance(entry, str):
                entry = {"code": entry}
            try:
                currencies[str(locale)] = Currency.model_validate(entry)
            except ValueError as e:
                raise ConfigurationError(f"{path}: invalid currency for '{locale}': {e}") from e

        logger.debug(f"Loaded {len(currencies)} currencies from {path}")
        return currencies

    def load_fields(self, path: Path | str) -> list[FieldSchema]:
        """Load a list of FieldSchema from YAML."""
        data = _read_yaml(path)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ConfigurationError(f"{path}: expected a list of fields")

        try:
            fields = [FieldSchema.model_validate(entry) for entry in data]
        except ValueError as e:
            raise ConfigurationError(f"{path}: invalid field schema: {e}") from e

        logger.debug(f"Loaded {len(fields)} field schemas from {path}")
        return fields


def _read_yaml(path: Path | str) -> Any:
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e


def load_currencies(path: Path | str) -> dict[str, Currency]:
    """Convenience function to load a currency table."""
    return ConfigLoader().load_currencies(path)


def load_schema(path: Path | str) -> SchemaLookup:
    """Convenience function to load a field schema as a lookup."""
    return schema_lookup(ConfigLoader().load_fields(path))
