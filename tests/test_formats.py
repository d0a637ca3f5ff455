"""
Tests for the format translators.

Most run the mock backend; IdentityBackend checks round-trip fidelity.
"""

import copy

import pytest

from translate_fields.core.errors import ConfigurationError, RemoteServiceError
from translate_fields.core.models import (
    FieldSchema,
    TranslationFormat,
    TranslationOptions,
    TranslationService,
    schema_lookup,
)
from translate_fields.core.paths import walk
from translate_fields.formats import (
    parse_html,
    parse_markdown,
    translate_document,
    translate_html,
    translate_markdown,
    translate_rich_text,
    translate_seo,
    translate_slug,
    translate_structured_text,
    translate_text,
)
from translate_fields.services.base import TranslationBackend
from translate_fields.services.mock import MockBackend


# =============================================================================
# Test backends
# =============================================================================


class IdentityBackend(TranslationBackend):
    """Returns every string unchanged."""

    service = TranslationService.MOCK

    def __init__(self):
        self.calls = []

    async def translate(self, text, options, convert_currency=False):
        self.calls.append(text)
        return text


class TableBackend(TranslationBackend):
    """Looks translations up in a fixed table."""

    service = TranslationService.MOCK

    def __init__(self, table):
        self.table = table

    async def translate(self, text, options, convert_currency=False):
        return self.table[text]


class FailingBackend(TranslationBackend):
    """Fails on one string, mock-translates the others."""

    service = TranslationService.MOCK

    def __init__(self, failing):
        self.failing = failing

    async def translate(self, text, options, convert_currency=False):
        if text == self.failing:
            raise RemoteServiceError("Provider returned status 500", status_code=500)
        return f"Translated {text}"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def schema():
    return schema_lookup([
        FieldSchema(api_key="title", editor="single_line"),
        FieldSchema(api_key="body", editor="wysiwyg"),
        FieldSchema(api_key="intro", editor="markdown"),
        FieldSchema(api_key="category", editor="single_line", validators={"enum": {"values": ["news"]}}),
    ])


@pytest.fixture
def document():
    """Structured text with a link, an enum-bearing block and nested text."""
    return [
        {
            "id": "p1",
            "type": "paragraph",
            "children": [
                {"type": "span", "text": "Hello", "marks": ["strong"]},
                {
                    "type": "link",
                    "url": "https://example.com",
                    "meta": [{"id": "rel", "value": "nofollow"}],
                    "children": [{"type": "span", "text": "there"}],
                },
            ],
        },
        {
            "id": "b1",
            "type": "block",
            "item": {
                "id": "rec1",
                "title": "Block title",
                "category": "news",
                "content": [
                    {"type": "paragraph", "children": [{"type": "span", "text": "Inside"}]},
                ],
            },
        },
    ]


@pytest.fixture
def enum_description():
    """A model whose description field is a select."""
    return schema_lookup([
        FieldSchema(api_key="title", editor="single_line"),
        FieldSchema(api_key="description", editor="single_line", validators={"enum": {"values": ["a", "b"]}}),
    ])


def shape(tree):
    """Tree with every string replaced by a marker."""
    if isinstance(tree, dict):
        return {key: shape(value) for key, value in tree.items()}
    if isinstance(tree, list):
        return [shape(item) for item in tree]
    if isinstance(tree, str):
        return "<str>"
    return tree


# =============================================================================
# Plain text, SEO and slugs
# =============================================================================


class TestPlainText:
    @pytest.mark.asyncio
    async def test_mock_scenario(self, mock_options):
        assert await translate_text("Hello", mock_options) == "Translated Hello"

    @pytest.mark.asyncio
    async def test_through_dispatch(self, mock_options):
        assert await translate_document("Hello", mock_options) == "Translated Hello"

    @pytest.mark.asyncio
    async def test_blank_is_unchanged(self, mock_options):
        assert await translate_text("", mock_options) == ""
        assert await translate_text("   ", mock_options) == "   "

    @pytest.mark.asyncio
    async def test_surrounding_whitespace_kept(self, mock_options):
        assert await translate_text(" Hello\n", mock_options) == " Translated Hello\n"

    @pytest.mark.asyncio
    async def test_no_service_is_a_configuration_error(self):
        options = TranslationOptions(from_locale="en", to_locale="fr")

        with pytest.raises(ConfigurationError, match="No translation service"):
            await translate_text("Hello", options)


class TestSeo:
    @pytest.mark.asyncio
    async def test_mock_scenario(self, mock_options):
        value = {"title": "Hi", "description": "", "image": "asset-42"}
        result = await translate_seo(value, mock_options)

        assert result == {"title": "Translated Hi", "description": "", "image": "asset-42"}

    @pytest.mark.asyncio
    async def test_passthrough_fields(self, mock_options):
        value = {"title": "Hi", "description": "About", "image": None, "twitter_card": "summary"}
        result = await translate_seo(value, mock_options)

        assert result["description"] == "Translated About"
        assert result["image"] is None
        assert result["twitter_card"] == "summary"
        assert list(result) == list(value)

    @pytest.mark.asyncio
    async def test_null_text_becomes_empty(self, mock_options):
        result = await translate_seo({"title": None, "description": "About"}, mock_options)

        assert result == {"title": "", "description": "Translated About"}

    @pytest.mark.asyncio
    async def test_enum_keys_pass_through(self, mock_options, enum_description):
        value = {"title": "Hi", "description": "a"}
        result = await translate_seo(value, mock_options, schema=enum_description)

        assert result == {"title": "Translated Hi", "description": "a"}


class TestSlug:
    @pytest.mark.asyncio
    async def test_mock_scenario(self):
        options = TranslationOptions(from_locale="en", to_locale="es", use_mock=True)
        result = await translate_slug("my-great-post", options)

        assert result == "translated-my-great-post"

    @pytest.mark.asyncio
    async def test_destination_rules(self):
        options = TranslationOptions(from_locale="en", to_locale="de", use_mock=True)
        backend = TableBackend({"size over": "Größe über Äpfel"})

        assert await translate_slug("size-over", options, backend=backend) == "groesse-ueber-aepfel"

    @pytest.mark.asyncio
    async def test_ascii_only(self):
        options = TranslationOptions(from_locale="en", to_locale="fr", use_mock=True)
        backend = TableBackend({"summer sale": "Soldes d'été !"})

        assert await translate_slug("summer-sale", options, backend=backend) == "soldes-d-ete"


# =============================================================================
# HTML
# =============================================================================


class TestHtml:
    @pytest.mark.asyncio
    async def test_translates_text_nodes_only(self, mock_options):
        markup = '<p class="lead">Hello <strong>world</strong></p><!-- keep --><a href="/about">About</a>'
        result = await translate_html(markup, mock_options)

        assert result == (
            '<p class="lead">Translated Hello <strong>Translated world</strong></p>'
            '<!-- keep --><a href="/about">Translated About</a>'
        )

    @pytest.mark.asyncio
    async def test_round_trip_with_identity(self, mock_options):
        markup = '<h2 id="intro">Title</h2>\n<p>Some <em>text</em><br>more</p>\n<ul><li>One</li><li>Two</li></ul>'
        result = await translate_html(markup, mock_options, backend=IdentityBackend())

        assert parse_html(result) == parse_html(markup)

    @pytest.mark.asyncio
    async def test_structure_unchanged(self, mock_options):
        markup = '<div data-x="1"><p>One</p> <p>Two <img src="a.png" alt="A"></p></div>'
        result = await translate_html(markup, mock_options)

        assert shape(parse_html(result)) == shape(parse_html(markup))

    @pytest.mark.asyncio
    async def test_whitespace_nodes_not_sent(self, mock_options):
        backend = IdentityBackend()
        await translate_html("<p>One</p>\n  <p>Two</p>", mock_options, backend=backend)

        assert sorted(backend.calls) == ["One", "Two"]

    @pytest.mark.asyncio
    async def test_leading_text(self, mock_options):
        assert await translate_html("Hi <b>you</b>", mock_options) == "Translated Hi <b>Translated you</b>"


# =============================================================================
# Markdown
# =============================================================================


class TestMarkdown:
    @pytest.mark.asyncio
    async def test_translates_prose_only(self, mock_options):
        text = "# Welcome\n\nRead the `config` file at [the docs](https://example.com/docs).\n"
        result = await translate_markdown(text, mock_options)

        assert "Translated Welcome" in result
        assert "`config`" in result
        assert "(https://example.com/docs)" in result
        assert "Translated the docs" in result

    @pytest.mark.asyncio
    async def test_code_blocks_untouched(self, mock_options):
        text = "Intro\n\n```python\nprint('hello')\n```\n"
        result = await translate_markdown(text, mock_options)

        assert "print('hello')" in result
        assert "Translated Intro" in result

    @pytest.mark.asyncio
    async def test_round_trip_with_identity(self, mock_options):
        text = "## Title\n\n- one\n- *two*\n\n> quoted **text**\n"
        result = await translate_markdown(text, mock_options, backend=IdentityBackend())

        def token_types(tokens):
            return [
                (token["type"], [child["type"] for child in token.get("children") or []])
                for token in tokens
            ]

        assert token_types(parse_markdown(result)) == token_types(parse_markdown(text))


# =============================================================================
# Structured and rich text
# =============================================================================


class TestStructuredText:
    @pytest.mark.asyncio
    async def test_translates_and_keeps_shape(self, mock_options, document, schema):
        original = copy.deepcopy(document)
        result = await translate_structured_text(document, mock_options, schema=schema)

        assert shape(result) == shape(original)
        assert document == original

        children = result[0]["children"]
        assert children[0]["text"] == "Translated Hello"
        assert children[1]["children"][0]["text"] == "Translated there"
        assert children[1]["url"] == "https://example.com"

    @pytest.mark.asyncio
    async def test_identifiers_and_meta_restored(self, mock_options, document, schema):
        result = await translate_structured_text(document, mock_options, schema=schema)

        assert result[0]["id"] == "p1"
        assert result[1]["id"] == "b1"
        assert result[1]["item"]["id"] == "rec1"
        assert result[0]["children"][1]["meta"] == [{"id": "rel", "value": "nofollow"}]

    @pytest.mark.asyncio
    async def test_block_is_a_record(self, mock_options, document, schema):
        result = await translate_structured_text(document, mock_options, schema=schema)
        item = result[1]["item"]

        assert result[1]["type"] == "block"
        assert item["title"] == "Translated Block title"
        assert item["category"] == "news"
        assert item["content"][0]["children"][0]["text"] == "Translated Inside"

    @pytest.mark.asyncio
    async def test_classification_idempotent(self, mock_options, document, schema):
        result = await translate_structured_text(
            document, mock_options, schema=schema, backend=IdentityBackend()
        )

        def path_set(tree):
            return {(path.segments, path.type) for path in walk(tree, schema)}

        assert result == document
        assert path_set(result) == path_set(document)

    @pytest.mark.asyncio
    async def test_one_failure_aborts_document(self, mock_options, document, schema):
        original = copy.deepcopy(document)

        with pytest.raises(RemoteServiceError):
            await translate_structured_text(
                document, mock_options, schema=schema, backend=FailingBackend("there")
            )
        assert document == original

    @pytest.mark.asyncio
    async def test_enum_in_title_description_item(self, mock_options, enum_description):
        document = [{
            "id": "b2",
            "type": "block",
            "item": {"id": "rec2", "title": "Offer", "description": "a"},
        }]
        result = await translate_structured_text(document, mock_options, schema=enum_description)

        assert result[0]["item"] == {"id": "rec2", "title": "Translated Offer", "description": "a"}


class TestRichText:
    @pytest.fixture
    def blocks(self):
        return [
            {
                "itemId": "101",
                "itemTypeId": "7",
                "title": "Hi",
                "body": "<p>Hello</p>",
                "intro": "Some *text*",
                "category": "news",
                "seo": {"title": "Page", "description": "About", "image": "9"},
            },
            {"itemId": "102", "itemTypeId": "7", "title": "Second", "category": "news"},
        ]

    @pytest.mark.asyncio
    async def test_dispatches_by_field(self, mock_options, blocks, schema):
        result = await translate_rich_text(blocks, mock_options, schema=schema)

        first = result[0]
        assert first["title"] == "Translated Hi"
        assert first["body"] == "<p>Translated Hello</p>"
        assert "Translated Some" in first["intro"]
        assert first["seo"] == {"title": "Translated Page", "description": "Translated About", "image": "9"}
        assert result[1]["title"] == "Translated Second"

    @pytest.mark.asyncio
    async def test_ids_and_enums_untouched(self, mock_options, blocks, schema):
        result = await translate_rich_text(blocks, mock_options, schema=schema)

        for before, after in zip(blocks, result):
            assert list(after) == list(before)
            assert after["itemId"] == before["itemId"]
            assert after["itemTypeId"] == before["itemTypeId"]
            assert after["category"] == "news"

    @pytest.mark.asyncio
    async def test_through_dispatch(self, blocks, schema):
        options = TranslationOptions(
            from_locale="en",
            to_locale="de",
            format=TranslationFormat.RICH_TEXT,
            use_mock=True,
        )
        result = await translate_document(blocks, options, schema=schema)

        assert result[1]["title"] == "Translated Second"

    @pytest.mark.asyncio
    async def test_enum_in_title_description_record(self, mock_options, enum_description):
        records = [{"itemId": "1", "title": "Hi", "description": "a"}]
        result = await translate_rich_text(records, mock_options, schema=enum_description)

        assert result == [{"itemId": "1", "title": "Translated Hi", "description": "a"}]

    @pytest.mark.asyncio
    async def test_empty_value(self, mock_options):
        assert await translate_rich_text([], mock_options, backend=MockBackend()) == []
