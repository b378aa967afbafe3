"""Domain models (Pydantic v2).

These models describe *what* travels through the pipeline (headers, request
attempts, the introspection response), not *how* it is fetched or rendered.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, GetCoreSchemaHandler, RootModel, field_validator
from pydantic.config import ConfigDict
from pydantic_core import core_schema


class OutputFormat(str, Enum):
    """Supported renderings of the downloaded schema."""

    SDL = "graphql"
    JSON = "json"
    MARKDOWN = "markdown"

    @classmethod
    def default(cls) -> "OutputFormat":
        return cls.SDL


class HeaderSet(Mapping[str, str]):
    """Immutable header mapping.

    Lookups ignore case, but every name keeps the spelling it was given so the
    request goes out exactly as the user wrote it.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Mapping[str, str] | None = None) -> None:
        merged: dict[str, tuple[str, str]] = {}
        for name, value in (items or {}).items():
            merged[name.lower()] = (name, value)
        self._items = merged

    def __getitem__(self, name: str) -> str:
        return self._items[name.lower()][1]

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._items

    def __repr__(self) -> str:
        return f"HeaderSet({dict(self.items())!r})"

    def overlay(self, other: Mapping[str, str]) -> "HeaderSet":
        """Return a new set where every name in `other` replaces its match here."""

        merged = dict(self._items)
        for name, value in other.items():
            merged[name.lower()] = (name, value)
        result = HeaderSet()
        result._items = merged
        return result

    def as_dict(self) -> dict[str, str]:
        return dict(self.items())

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.is_instance_schema(cls)


class RequestAttempt(BaseModel):
    """One network attempt (never persisted)."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., min_length=1, description="GraphQL endpoint URL.")
    headers: HeaderSet = Field(
        default_factory=HeaderSet,
        description="Resolved headers sent with the request.",
    )
    tls_validate: bool = Field(
        default=True,
        description="Whether the server certificate chain/hostname is verified.",
    )
    number: int = Field(
        default=1,
        ge=1,
        le=2,
        description="1 for the validating attempt, 2 for the insecure retry.",
    )


class GraphQLErrorItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    message: str = Field(default="", description="Error message reported by the server.")


class IntrospectionResult(BaseModel):
    """Parsed body of the introspection response."""

    model_config = ConfigDict(extra="allow")

    data: dict[str, Any] | None = Field(
        default=None,
        description="Introspection payload (`{'__schema': {...}}`).",
    )
    errors: list[GraphQLErrorItem] = Field(
        default_factory=list,
        description="GraphQL-level errors; non-empty means the download failed.",
    )

    @field_validator("errors", mode="before")
    @classmethod
    def _null_errors_are_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class AuthFileHeaders(RootModel[dict[str, str]]):
    """Auth file content: a flat JSON object of header name to header value."""
