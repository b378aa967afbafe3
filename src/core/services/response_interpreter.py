"""Response interpretation.

Responsibilities:
- Turn an `HttpStatusError` into a diagnostic keyed by status code.
- Parse a 2xx body, surface GraphQL-level errors with contextual hints.
- Return the introspection `data` object that the renderer consumes.

Diagnostics are lookup tables so each one can be tested on its own.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import ValidationError

from core.config import TIMEOUT_ENV_VAR
from core.domain.errors import (
    FormatError,
    GraphQLErrorEntry,
    GraphQLResponseError,
    HttpStatusError,
    Remedy,
)
from core.domain.models import IntrospectionResult


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusDiagnostic:
    summary: str
    heading: str
    steps: tuple[str, ...]


_STATUS_DIAGNOSTICS: dict[int, StatusDiagnostic] = {
    401: StatusDiagnostic(
        "Unauthorized: Authentication failed",
        "Possible fixes",
        (
            "Check if authorization headers are correct",
            "Ensure your token has not expired",
            'Verify headers using: curl -v -X POST {url} -H "Authorization: <your-token>"',
        ),
    ),
    403: StatusDiagnostic(
        "Forbidden: Insufficient permissions",
        "Possible fixes",
        (
            "Verify your token has the required scopes",
            "Check if your IP is allowlisted",
            "Contact the API administrator for access",
        ),
    ),
    404: StatusDiagnostic(
        "Not Found: GraphQL endpoint not found",
        "Possible fixes",
        (
            "Verify the URL is correct",
            "Check if /graphql needs to be appended to the URL",
            "Ensure the API server is running",
        ),
    ),
    500: StatusDiagnostic(
        "Server Error: API server error",
        "Diagnostic steps",
        (
            "Check server status/health endpoint",
            "View server logs if accessible",
            "Try again in a few minutes",
        ),
    ),
}

_UNEXPECTED_STATUS = StatusDiagnostic(
    "Unexpected response",
    "Diagnostic steps",
    (
        "Check network connectivity",
        "Verify the API is accepting POST requests",
        "Test endpoint: curl -X POST {url}",
    ),
)


@dataclass(frozen=True)
class MessageHint:
    keywords: tuple[str, ...]
    remedies: tuple[Remedy, ...]

    def matches(self, message: str) -> bool:
        lowered = message.lower()
        return any(keyword in lowered for keyword in self.keywords)


# First match wins.
_GRAPHQL_HINTS: tuple[MessageHint, ...] = (
    MessageHint(
        ("introspection",),
        (
            Remedy(
                "Possible causes",
                (
                    "Introspection may be disabled on this server",
                    "The server may require specific permissions for introspection",
                ),
            ),
            Remedy(
                "Suggested fixes",
                (
                    "Contact API administrator to enable introspection",
                    "Add required authorization headers",
                    'Use --header "X-Introspection-Auth=<token>" if required',
                ),
            ),
        ),
    ),
    MessageHint(
        ("permission", "authorized"),
        (
            Remedy(
                "Possible fixes",
                (
                    "Check if your token has introspection permissions",
                    "Verify you are using the correct authentication method",
                    "Request elevated permissions from API administrator",
                ),
            ),
        ),
    ),
    MessageHint(
        ("timeout",),
        (
            Remedy(
                "Diagnostic steps",
                (
                    "Check network connectivity",
                    f"Try increasing timeout using the {TIMEOUT_ENV_VAR} environment variable",
                    "Contact API administrator if issues persist",
                ),
            ),
        ),
    ),
)


def explain_http_status(error: HttpStatusError) -> HttpStatusError:
    """Return a copy of `error` carrying the status-specific diagnostic."""

    diagnostic = _STATUS_DIAGNOSTICS.get(error.status_code, _UNEXPECTED_STATUS)
    steps = tuple(step.format(url=error.url) for step in diagnostic.steps)
    return HttpStatusError(
        error.status_code,
        error.url,
        f"HTTP {error.status_code}\n{diagnostic.summary}",
        (Remedy(diagnostic.heading, steps),),
    )


def hints_for_message(message: str) -> tuple[Remedy, ...]:
    for hint in _GRAPHQL_HINTS:
        if hint.matches(message):
            return hint.remedies
    return ()


def parse_result(response: httpx.Response) -> IntrospectionResult:
    try:
        payload = json.loads(response.text)
    except json.JSONDecodeError as exc:
        raise FormatError(
            f"Response from {response.url} is not valid JSON: {exc}",
            (
                Remedy(
                    "Possible fixes",
                    (
                        "Verify the URL points to a GraphQL endpoint, not a web page",
                        "Check if /graphql needs to be appended to the URL",
                    ),
                ),
            ),
        ) from exc

    if not isinstance(payload, dict):
        raise FormatError(f"Expected a JSON object from {response.url}, got {type(payload).__name__}")

    try:
        return IntrospectionResult.model_validate(payload)
    except ValidationError as exc:
        raise FormatError(f"Unexpected GraphQL response shape from {response.url}:\n{exc}") from exc


def interpret(response: httpx.Response) -> dict[str, Any]:
    """Return the introspection `data` object or raise a fatal error."""

    result = parse_result(response)

    if result.errors:
        logger.debug("Server returned %d GraphQL error(s)", len(result.errors))
        raise GraphQLResponseError(
            [GraphQLErrorEntry(item.message, hints_for_message(item.message)) for item in result.errors]
        )

    if not result.data or "__schema" not in result.data:
        raise FormatError(
            "Introspection response missing expected field data.__schema",
            (
                Remedy(
                    "Diagnostic steps",
                    (
                        "Verify the endpoint is a GraphQL server",
                        f"Test endpoint: curl -X POST {response.url}",
                    ),
                ),
            ),
        )

    return result.data
