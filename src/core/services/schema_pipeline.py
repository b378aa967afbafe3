"""Schema download orchestration.

The CLI delegates the whole request/response flow to `download_schema`:

    resolve headers -> fetch (with TLS fallback) -> interpret -> render

Side effects visible to the user (warnings) go through `PipelineHooks`, so
the pipeline itself never prints. Writing the result is left to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Sequence

from adapters.http_client import HttpxIntrospectionTransport
from adapters.schema_renderer import render_schema
from core.config import AppSettings
from core.domain.errors import HttpStatusError
from core.domain.models import HeaderSet, OutputFormat, RequestAttempt
from core.interfaces.transport import IntrospectionTransport
from core.services.header_resolver import resolve_headers
from core.services.response_interpreter import explain_http_status, interpret
from core.services.retry_policy import fetch_with_tls_fallback


logger = logging.getLogger(__name__)


@dataclass
class DownloadRequest:
    """Parameters of one invocation."""

    url: str
    cli_headers: Sequence[str] = ()
    auth_file: Path | None = None
    auth_env_prefix: str | None = None
    force_tls_validation: bool = False
    output_format: OutputFormat = OutputFormat.SDL


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers."""

    warning: Callable[[str], None] | None = None


@dataclass
class PipelineResult:
    content: str
    headers: HeaderSet
    attempts: list[RequestAttempt] = field(default_factory=list)

    @property
    def insecure(self) -> bool:
        return any(not attempt.tls_validate for attempt in self.attempts)


def download_schema(
    *,
    settings: AppSettings,
    request: DownloadRequest,
    transport: IntrospectionTransport | None = None,
    hooks: PipelineHooks | None = None,
    environ: Mapping[str, str] | None = None,
) -> PipelineResult:
    """Fetch and render the schema; raises `SchemaDownloadError` on fatal paths."""

    hooks = hooks or PipelineHooks()
    warn = hooks.warning or (lambda _message: None)
    transport = transport or HttpxIntrospectionTransport(settings)

    headers = resolve_headers(
        request.cli_headers,
        request.auth_env_prefix or settings.auth_env_prefix,
        request.auth_file,
        environ=environ,
        warn=warn,
    )

    attempts: list[RequestAttempt] = []
    try:
        response = fetch_with_tls_fallback(
            transport,
            request.url,
            headers,
            force_tls_validation=request.force_tls_validation,
            warn=warn,
            on_attempt=attempts.append,
        )
    except HttpStatusError as exc:
        raise explain_http_status(exc) from exc

    data = interpret(response)
    content = render_schema(data, request.output_format)
    logger.debug(
        "Rendered %s output (%d chars) after %d attempt(s)",
        request.output_format.value,
        len(content),
        len(attempts),
    )
    return PipelineResult(content=content, headers=headers, attempts=attempts)
