from __future__ import annotations

import httpx
import pytest
from graphql import build_schema, introspection_from_schema

from adapters.http_client import HttpxIntrospectionTransport
from core.config import AppSettings


HELLO_SDL = "type Query { hello: String }"

LIBRARY_SDL = '''
"""A book in the catalogue."""
type Book {
  title: String!
  "Who wrote it | and when.\\nSecond line."
  author: Author
  tags: [String!]!
  genre: Genre
}

type Author {
  name: String!
  books(first: Int = 10): [Book!]!
}

"""Literary genre."""
enum Genre {
  "Made-up stories."
  FICTION
  HISTORY
  POETRY @deprecated(reason: "Merged into FICTION")
}

input BookFilter {
  genre: Genre
  titleContains: String
}

interface Node {
  id: ID!
}

type Query {
  books(filter: BookFilter): [Book!]!
  node(id: ID!): Node
}

type Mutation {
  addBook(title: String!): Book
}
'''


def introspect(sdl: str) -> dict:
    return dict(introspection_from_schema(build_schema(sdl)))


@pytest.fixture
def hello_introspection() -> dict:
    return introspect(HELLO_SDL)


@pytest.fixture
def library_introspection() -> dict:
    return introspect(LIBRARY_SDL)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None)


@pytest.fixture
def mock_transport(settings):
    """Build an `HttpxIntrospectionTransport` whose requests go to `handler`."""

    def factory(handler) -> HttpxIntrospectionTransport:
        return HttpxIntrospectionTransport(settings, transport=httpx.MockTransport(handler))

    return factory


class ScriptedTransport:
    """Returns (or raises) the given outcomes in order and records every attempt."""

    def __init__(self, *outcomes) -> None:
        self.outcomes = list(outcomes)
        self.attempts = []

    def send(self, attempt):
        self.attempts.append(attempt)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def scripted_transport():
    return ScriptedTransport


def ok_response(data: dict, url: str = "https://api.example.test/graphql") -> httpx.Response:
    return httpx.Response(200, json={"data": data}, request=httpx.Request("POST", url))


@pytest.fixture
def make_ok_response():
    return ok_response
