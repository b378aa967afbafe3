"""Header resolution.

Three independent sources are parsed into partial mappings and then overlaid
in a fixed order (later wins):

    default < command line < environment < auth file

The auth file is the most authoritative source and the command line the
least. Problems with any source are reported through `warn` and never stop
the run; the offending input simply contributes nothing.
"""

from __future__ import annotations

import json
import logging
import os
from functools import reduce
from pathlib import Path
from typing import Callable, Iterable, Mapping

from pydantic import ValidationError

from core.domain.errors import Remedy
from core.domain.models import AuthFileHeaders, HeaderSet


logger = logging.getLogger(__name__)

WarningSink = Callable[[str], None]

DEFAULT_HEADERS: dict[str, str] = {"Content-Type": "application/json"}


def _noop(_: str) -> None:
    return None


def _format_warning(message: str, remedy: Remedy | None = None) -> str:
    lines = [message]
    if remedy is not None:
        lines.extend(remedy.render())
    return "\n".join(lines)


def parse_cli_headers(values: Iterable[str], *, warn: WarningSink = _noop) -> dict[str, str]:
    """Parse `key=value` strings, splitting on the first `=`."""

    headers: dict[str, str] = {}
    for raw in values:
        key, sep, value = raw.partition("=")
        key = key.strip()
        value = value.strip()
        if not sep or not key or not value:
            warn(f"Warning: Skipping invalid header format: {raw}")
            continue
        headers[key] = value
    return headers


def env_var_to_header_name(var_name: str, prefix: str) -> str:
    """`GRAPHQL_HEADER_X_API_KEY` -> `x-Api-Key` (for prefix `GRAPHQL_HEADER_`)."""

    parts = var_name[len(prefix):].split("_")
    head, tail = parts[0], parts[1:]
    return "-".join([head.lower(), *(part[:1].upper() + part[1:].lower() for part in tail)])


def env_headers(
    prefix: str,
    environ: Mapping[str, str] | None = None,
    *,
    warn: WarningSink = _noop,
) -> dict[str, str]:
    environ = os.environ if environ is None else environ
    headers: dict[str, str] = {}
    if not prefix:
        return headers

    for var_name, value in environ.items():
        if not var_name.startswith(prefix):
            continue
        name = env_var_to_header_name(var_name, prefix)
        if not name:
            warn(f"Warning: Skipping environment variable without a header name: {var_name}")
            continue
        headers[name] = value
    return headers


def file_headers(path: Path, *, warn: WarningSink = _noop) -> dict[str, str]:
    """Read a flat JSON object of headers. Any failure yields `{}` plus a warning."""

    full_path = path if path.is_absolute() else Path.cwd() / path
    header = "Warning: Failed to read auth file"

    try:
        raw = full_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        warn(
            _format_warning(
                f"{header}\nFile not found: {path}",
                Remedy(
                    "Possible fixes",
                    (
                        "Check if the file path is correct",
                        "Ensure the file exists in the specified location",
                        f"Use absolute path: {full_path.resolve()}",
                    ),
                ),
            )
        )
        return {}
    except PermissionError:
        warn(
            _format_warning(
                f"{header}\nPermission denied",
                Remedy(
                    "Possible fixes",
                    ("Check file permissions", f"Run: chmod 644 {path}"),
                ),
            )
        )
        return {}
    except IsADirectoryError:
        warn(
            _format_warning(
                f"{header}\nPath is a directory: {path}",
                Remedy("Possible fixes", ("Point --auth-file at a JSON file, not a directory",)),
            )
        )
        return {}
    except (OSError, UnicodeDecodeError) as exc:
        warn(_format_warning(f"{header}\n{exc}"))
        return {}

    try:
        return AuthFileHeaders.model_validate(json.loads(raw)).root
    except (json.JSONDecodeError, ValidationError):
        warn(
            _format_warning(
                f"{header}\nInvalid JSON format",
                Remedy(
                    "Possible fixes",
                    (
                        "Verify the JSON syntax is correct",
                        "Use a JSON validator to check the file",
                        "Ensure the file contains a valid headers object",
                    ),
                ),
            )
        )
        return {}


def _is_ascii(text: str) -> bool:
    return all(ord(char) < 128 for char in text)


def drop_non_ascii(
    headers: Mapping[str, str], source: str, *, warn: WarningSink = _noop
) -> dict[str, str]:
    """Remove entries whose name or value cannot go on the wire as ASCII."""

    kept: dict[str, str] = {}
    for name, value in headers.items():
        if not (_is_ascii(name) and _is_ascii(value)):
            warn(f"Warning: Skipping header with non-ASCII characters from {source}: {name}")
            continue
        kept[name] = value
    return kept


def merge_headers(*layers: Mapping[str, str]) -> HeaderSet:
    """Overlay `layers` left to right on top of the default headers."""

    return reduce(HeaderSet.overlay, layers, HeaderSet(DEFAULT_HEADERS))


def resolve_headers(
    cli_headers: Iterable[str],
    env_prefix: str,
    auth_file: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    warn: WarningSink = _noop,
) -> HeaderSet:
    from_cli = parse_cli_headers(cli_headers, warn=warn)
    from_env = env_headers(env_prefix, environ, warn=warn)
    from_file = file_headers(auth_file, warn=warn) if auth_file is not None else {}

    from_cli = drop_non_ascii(from_cli, "command line", warn=warn)
    from_env = drop_non_ascii(from_env, "environment", warn=warn)
    from_file = drop_non_ascii(from_file, "auth file", warn=warn)

    headers = merge_headers(from_cli, from_env, from_file)
    logger.debug(
        "Resolved %d header(s): %s (cli=%d, env=%d, file=%d)",
        len(headers),
        ", ".join(headers),
        len(from_cli),
        len(from_env),
        len(from_file),
    )
    return headers
