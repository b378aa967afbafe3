import json

import pytest
from graphql import build_client_schema
from graphql import build_schema as build_sdl_schema

from adapters.schema_renderer import render_schema
from core.domain.errors import FormatError
from core.domain.models import OutputFormat


def _shape(schema):
    types = {}
    for name, named in schema.type_map.items():
        fields = getattr(named, "fields", None) or {}
        values = getattr(named, "values", None) or {}
        types[name] = (
            type(named).__name__,
            {field_name: str(field.type) for field_name, field in fields.items()},
            sorted(values),
        )
    return types, sorted(d.name for d in schema.directives)


def test_sdl_for_hello_schema(hello_introspection):
    sdl = render_schema(hello_introspection, OutputFormat.SDL)

    assert "type Query {" in sdl
    assert "hello: String" in sdl


def test_sdl_round_trips(library_introspection):
    sdl = render_schema(library_introspection, OutputFormat.SDL)

    assert _shape(build_sdl_schema(sdl)) == _shape(build_client_schema(library_introspection))


def test_json_is_two_space_pretty_print(hello_introspection):
    text = render_schema(hello_introspection, OutputFormat.JSON)

    assert json.loads(text) == hello_introspection
    assert text.splitlines()[1] == '  "__schema": {'


def test_markdown_document_layout(hello_introspection):
    text = render_schema(hello_introspection, OutputFormat.MARKDOWN)

    assert text.startswith("# GraphQL Schema Documentation\n\n## Types\n\n")
    assert (
        "### Query\n\n"
        "#### Fields\n\n"
        "| Name | Type | Description |\n"
        "|------|------|-------------|\n"
        "| hello | `String` |  |\n\n"
    ) in text
    assert "### __" not in text


def test_markdown_fields_and_descriptions(library_introspection):
    text = render_schema(library_introspection, OutputFormat.MARKDOWN)

    assert (
        "### Book\n\n"
        "A book in the catalogue.\n\n"
        "#### Fields\n\n"
        "| Name | Type | Description |\n"
        "|------|------|-------------|\n"
        "| title | `String!` |  |\n"
        "| author | `Author` | Who wrote it \\| and when.<br>Second line. |\n"
        "| tags | `[String!]!` |  |\n"
        "| genre | `Genre` |  |\n\n"
    ) in text
    assert "### BookFilter\n\n#### Fields\n\n" in text
    assert "| titleContains | `String` |  |\n" in text


def test_markdown_enum_values(library_introspection):
    text = render_schema(library_introspection, OutputFormat.MARKDOWN)

    assert (
        "### Genre\n\n"
        "Literary genre.\n\n"
        "#### Enum Values\n\n"
        "| Name | Description |\n"
        "|------|-------------|\n"
        "| FICTION | Made-up stories. |\n"
        "| HISTORY |  |\n"
        "| POETRY |  |\n\n"
    ) in text


def test_enum_values_section_only_for_enum_types(hello_introspection, library_introspection):
    assert "#### Enum Values" not in render_schema(hello_introspection, OutputFormat.MARKDOWN)

    library = render_schema(library_introspection, OutputFormat.MARKDOWN)
    assert library.count("#### Enum Values") == 1
    assert "### Query\n\n#### Fields\n\n" in library


@pytest.mark.parametrize("output_format", list(OutputFormat))
def test_rendering_is_idempotent(library_introspection, output_format):
    first = render_schema(library_introspection, output_format)
    second = render_schema(library_introspection, output_format)

    assert first == second


@pytest.mark.parametrize("output_format", list(OutputFormat))
def test_malformed_introspection_is_rejected_for_every_format(output_format):
    data = {"__schema": {"queryType": {"name": "Query"}, "types": [], "directives": []}}

    with pytest.raises(FormatError):
        render_schema(data, output_format)
