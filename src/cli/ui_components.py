"""CLI UI components (Rich).

Everything here prints to the stderr console: stdout is reserved for the
rendered schema so it can be piped.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from core.domain.errors import SchemaDownloadError


def build_stderr_console() -> Console:
    return Console(stderr=True, highlight=False, soft_wrap=True)


def configure_logging(console: Console, *, verbose: bool) -> None:
    """Route library logging through Rich on stderr (DEBUG with `--verbose`)."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )
    # httpx/httpcore are chatty at DEBUG; keep them at INFO.
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.INFO if verbose else logging.WARNING)


def print_warning(console: Console, message: str) -> None:
    console.print(Text(message, style="yellow"))


def print_notice(console: Console, message: str) -> None:
    console.print(Text(message, style="green"))


def print_failure(console: Console, error: SchemaDownloadError) -> None:
    """Print the consolidated diagnostic: base message plus remediation bullets."""

    body = Text()
    body.append("Error: ", style="bold red")
    body.append(error.describe())
    console.print(body)
