"""Schema rendering.

Why it lives in adapters:
- SDL printing (graphql-core) and Markdown templating (Jinja2) are
  infrastructure details; the core only hands over introspection `data`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from graphql import (
    GraphQLEnumType,
    GraphQLError,
    GraphQLInputObjectType,
    GraphQLInterfaceType,
    GraphQLObjectType,
    GraphQLSchema,
    build_client_schema,
    print_schema,
)
from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.domain.errors import FormatError, Remedy
from core.domain.models import OutputFormat


_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

_FIELD_TYPES = (GraphQLObjectType, GraphQLInterfaceType, GraphQLInputObjectType)


def _markdown_cell(value: str | None) -> str:
    if not value:
        return ""
    return value.replace("|", "\\|").replace("\r\n", "<br>").replace("\n", "<br>")


def _get_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["cell"] = _markdown_cell
    return env


def build_schema(data: dict[str, Any]) -> GraphQLSchema:
    """Build a client schema, turning graphql-core failures into `FormatError`."""

    try:
        return build_client_schema(data)
    except (TypeError, KeyError, ValueError, GraphQLError) as exc:
        raise FormatError(
            f"Introspection result could not be converted into a schema: {exc}",
            (
                Remedy(
                    "Diagnostic steps",
                    (
                        "Re-run with --format json to inspect the raw introspection result",
                        "Verify the server implements the standard introspection types",
                    ),
                ),
            ),
        ) from exc


def _type_view(named: Any) -> dict[str, Any]:
    fields: list[dict[str, str]] = []
    if isinstance(named, _FIELD_TYPES):
        fields = [
            {"name": name, "type": str(field.type), "description": field.description or ""}
            for name, field in named.fields.items()
        ]

    values: list[dict[str, str]] = []
    if isinstance(named, GraphQLEnumType):
        values = [
            {"name": name, "description": value.description or ""}
            for name, value in named.values.items()
        ]

    return {
        "name": named.name,
        "description": named.description,
        "fields": fields,
        "enum_values": values,
    }


def render_sdl(schema: GraphQLSchema) -> str:
    return print_schema(schema)


def render_json(data: dict[str, Any]) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)


def render_markdown(schema: GraphQLSchema) -> str:
    """Types section with field and enum-value tables; `__*` types are skipped."""

    types = [
        _type_view(named)
        for name, named in schema.type_map.items()
        if not name.startswith("__")
    ]
    return _get_env().get_template("schema.md.j2").render(types=types)


def render_schema(data: dict[str, Any], output_format: OutputFormat) -> str:
    """Render introspection `data` in `output_format`.

    The schema is built for every format so malformed introspection JSON is
    rejected before anything is written, even for `json`.
    """

    schema = build_schema(data)
    if output_format is OutputFormat.JSON:
        return render_json(data)
    if output_format is OutputFormat.MARKDOWN:
        return render_markdown(schema)
    return render_sdl(schema)
