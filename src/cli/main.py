"""graphql-schema-dl command line."""

from __future__ import annotations

from pathlib import Path

import typer

from adapters.http_client import HttpxIntrospectionTransport
from adapters.output_sink import write_output
from cli.ui_components import (
    build_stderr_console,
    configure_logging,
    print_failure,
    print_notice,
    print_warning,
)
from core.config import APP_NAME, APP_VERSION, AppSettings
from core.domain.errors import SchemaDownloadError
from core.domain.models import OutputFormat
from core.services.schema_pipeline import DownloadRequest, PipelineHooks, download_schema

app = typer.Typer(
    name=APP_NAME,
    add_completion=False,
    help="Downloads a GraphQL schema from a given URL.",
)

_console = build_stderr_console()


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(APP_VERSION)
        raise typer.Exit()


@app.command()
def download(
    url: str = typer.Argument(..., help="URL of the GraphQL endpoint."),
    header: list[str] | None = typer.Option(
        None,
        "--header",
        "-H",
        help='HTTP header to include (format: "key=value"). Repeatable.',
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file (if not specified, prints to stdout).",
    ),
    auth_file: Path | None = typer.Option(
        None,
        "--auth-file",
        "-a",
        help="JSON file containing authorization headers.",
    ),
    auth_env_prefix: str | None = typer.Option(
        None,
        "--auth-env-prefix",
        help='Environment variable prefix for auth headers (default: "GRAPHQL_HEADER_").',
    ),
    force_tls_validation: bool = typer.Option(
        False,
        "--force-tls-validation",
        help="Force TLS certificate validation (never retry insecurely).",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.SDL,
        "--format",
        "-f",
        case_sensitive=False,
        help="Output format.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Download the schema of URL via introspection and print or save it."""

    configure_logging(_console, verbose=verbose)
    settings = AppSettings()

    request = DownloadRequest(
        url=url,
        cli_headers=header or [],
        auth_file=auth_file,
        auth_env_prefix=auth_env_prefix,
        force_tls_validation=force_tls_validation,
        output_format=output_format,
    )
    hooks = PipelineHooks(warning=lambda message: print_warning(_console, message))

    try:
        result = download_schema(
            settings=settings,
            request=request,
            transport=HttpxIntrospectionTransport(settings),
            hooks=hooks,
        )
        write_output(
            result.content,
            output,
            notify=lambda message: print_notice(_console, message),
        )
    except SchemaDownloadError as exc:
        print_failure(_console, exc)
        raise typer.Exit(code=1) from exc


def run() -> None:
    app()


if __name__ == "__main__":
    run()
