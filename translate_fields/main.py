"""
Command-line entry point.

Translates one field value read from a file and prints the result for
every target locale.

Usage:
    python -m translate_fields.main post.md --format markdown --from en --to fr de
    python -m translate_fields.main seo.json --format seo --from en --to es --mock
    python -m translate_fields.main price.txt --from en --to en-GB --service openAI \\
        --convert-currency --currencies config/currencies.yaml
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from translate_fields.config import get_settings
from translate_fields.config_loader import load_currencies, load_schema
from translate_fields.core.errors import TranslationError
from translate_fields.core.models import ContentTree, TranslationFormat, TranslationService
from translate_fields.formats import translate_document

logger = logging.getLogger(__name__)


# Formats whose values are JSON documents rather than plain text
JSON_FORMATS = frozenset({
    TranslationFormat.SEO,
    TranslationFormat.STRUCTURED_TEXT,
    TranslationFormat.RICH_TEXT,
})


def read_value(path: Path, format: TranslationFormat) -> ContentTree:
    """Field value stored in a file."""
    text = path.read_text(encoding="utf-8")
    if format in JSON_FORMATS:
        return json.loads(text)
    return text


def render_value(value: ContentTree, format: TranslationFormat) -> str:
    if format in JSON_FORMATS:
        return json.dumps(value, ensure_ascii=False, indent=2)
    return value


async def run(args: Any) -> int:
    """Translate the file into every requested locale."""
    settings = get_settings()
    format = TranslationFormat(args.format)
    value = read_value(Path(args.file), format)

    currencies = load_currencies(args.currencies) if args.currencies else None
    schema = load_schema(args.schema) if args.schema else None
    locales = [args.from_locale] + [locale for locale in args.to if locale != args.from_locale]

    overrides: dict[str, Any] = {}
    if args.service:
        overrides["translation_service"] = TranslationService(args.service)
    if args.mock:
        overrides["use_mock"] = True

    status = 0
    for to_locale in args.to:
        options = settings.build_options(
            args.from_locale,
            to_locale,
            locales=locales,
            format=format,
            currencies=currencies,
            **overrides,
        )
        try:
            result = await translate_document(value, options, args.convert_currency, schema=schema)
        except TranslationError as e:
            logger.error(f"{to_locale}: {e}")
            status = 1
            continue

        print(f"# {to_locale}")
        print(render_value(result, format))

    return status


def main():
    """Run a translation from the command line."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Translate a field value between locales"
    )
    parser.add_argument(
        "file",
        help="File holding the value (JSON for seo, structured_text and rich_text)"
    )
    parser.add_argument(
        "--format", "-f",
        default=TranslationFormat.TEXT.value,
        choices=[f.value for f in TranslationFormat],
        help="Format of the value (default: text)"
    )
    parser.add_argument(
        "--from",
        dest="from_locale",
        required=True,
        help="Source locale"
    )
    parser.add_argument(
        "--to", "-t",
        nargs="+",
        required=True,
        help="Target locales"
    )
    parser.add_argument(
        "--service", "-s",
        choices=[s.value for s in TranslationService],
        help="Translation service (default: from settings)"
    )
    parser.add_argument(
        "--convert-currency",
        action="store_true",
        help="Convert currency amounts (openAI only)"
    )
    parser.add_argument(
        "--currencies",
        help="YAML currency table keyed by locale"
    )
    parser.add_argument(
        "--schema",
        help="YAML field schema list"
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use the deterministic mock backend"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        sys.exit(asyncio.run(run(args)))
    except TranslationError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
