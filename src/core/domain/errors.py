"""Fatal error taxonomy.

Every failure that ends the run is a `SchemaDownloadError`. Each one carries a
short base message plus zero or more `Remedy` blocks, and `describe()` renders
the single consolidated diagnostic printed by the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence


@dataclass(frozen=True)
class Remedy:
    """A titled list of remediation steps (e.g. "Possible fixes")."""

    heading: str
    steps: tuple[str, ...]

    def render(self) -> list[str]:
        return [f"{self.heading}:", *(f"- {step}" for step in self.steps)]


class SchemaDownloadError(Exception):
    """Base class for fatal errors."""

    def __init__(self, message: str, remedies: Iterable[Remedy] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.remedies: tuple[Remedy, ...] = tuple(remedies)

    def describe(self) -> str:
        lines = [self.message]
        for remedy in self.remedies:
            lines.append("")
            lines.extend(remedy.render())
        return "\n".join(lines)


class TlsUntrustedError(SchemaDownloadError):
    """The server certificate is self-signed or otherwise untrusted."""


class NetworkError(SchemaDownloadError):
    """Connection, DNS, handshake, timeout or redirect failure."""


class HttpStatusError(SchemaDownloadError):
    """Non-2xx HTTP status."""

    def __init__(
        self,
        status_code: int,
        url: str,
        message: str | None = None,
        remedies: Iterable[Remedy] = (),
    ) -> None:
        super().__init__(message or f"HTTP {status_code}", remedies)
        self.status_code = status_code
        self.url = url


@dataclass(frozen=True)
class GraphQLErrorEntry:
    message: str
    remedies: tuple[Remedy, ...] = ()


class GraphQLResponseError(SchemaDownloadError):
    """The server answered with a non-empty `errors` array."""

    def __init__(self, entries: Sequence[GraphQLErrorEntry]) -> None:
        super().__init__("GraphQL Error:")
        self.entries = tuple(entries)

    @property
    def messages(self) -> list[str]:
        return [entry.message for entry in self.entries]

    def describe(self) -> str:
        lines = [self.message]
        for entry in self.entries:
            lines.append("")
            lines.append(entry.message)
            for remedy in entry.remedies:
                lines.append("")
                lines.extend(remedy.render())
        return "\n".join(lines)


class FormatError(SchemaDownloadError):
    """The response body is not usable introspection JSON."""


class OutputWriteError(SchemaDownloadError):
    """The rendered schema could not be written to the requested file."""

    def __init__(self, path: Path, reason: str, remedies: Iterable[Remedy] = ()) -> None:
        super().__init__(f"Failed to write schema to {path}\n\n{reason}", remedies)
        self.path = path
        self.reason = reason
