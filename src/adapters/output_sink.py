"""Output sink: stdout or a file, nothing else writes the rendered schema."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Callable

import typer

from core.domain.errors import OutputWriteError, Remedy


logger = logging.getLogger(__name__)


def _write_error(path: Path, exc: OSError) -> OutputWriteError:
    if isinstance(exc, FileNotFoundError):
        return OutputWriteError(
            path,
            "Directory does not exist",
            (
                Remedy(
                    "Possible fixes",
                    (
                        f"Create directory: mkdir -p {path.parent}",
                        "Specify a different output location",
                        f"Use current directory: ./{path.name}",
                    ),
                ),
            ),
        )
    if isinstance(exc, IsADirectoryError) or path.is_dir():
        return OutputWriteError(
            path,
            "Output path is a directory",
            (
                Remedy(
                    "Possible fixes",
                    (
                        "Specify a file path instead of directory",
                        f"Use: {path / 'schema.graphql'}",
                    ),
                ),
            ),
        )
    if isinstance(exc, PermissionError):
        return OutputWriteError(
            path,
            "Permission denied",
            (
                Remedy(
                    "Possible fixes",
                    (
                        f"Check file permissions: ls -l {path}",
                        f"Change permissions: chmod 644 {path}",
                        "Try a different directory with write permissions",
                    ),
                ),
            ),
        )
    return OutputWriteError(
        path,
        f"Unexpected error: {exc}",
        (
            Remedy(
                "Diagnostic steps",
                (
                    "Check disk space: df -h",
                    "Verify write permissions in parent directory",
                    "Try using an absolute path",
                ),
            ),
        ),
    )


def _target_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return 0o644


def write_output(
    content: str,
    destination: Path | None = None,
    *,
    notify: Callable[[str], None] | None = None,
) -> Path | None:
    """Write `content` to stdout (newline-terminated) or overwrite `destination`.

    The confirmation notice goes through `notify` (stderr in the CLI) so stdout
    stays pipe-clean.
    """

    if destination is None:
        typer.echo(content)
        return None

    if destination.is_dir():
        raise _write_error(destination, IsADirectoryError(str(destination)))

    # Staged beside the target: os.replace is only atomic within one filesystem.
    staged: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=destination.parent,
            prefix=f".{destination.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            staged = Path(handle.name)
            handle.write(content)
        staged.chmod(_target_mode(destination))
        os.replace(staged, destination)
        staged = None
    except OSError as exc:
        logger.debug("Write to %s failed: %r", destination, exc)
        raise _write_error(destination, exc) from exc
    finally:
        if staged is not None:
            staged.unlink(missing_ok=True)

    if notify:
        notify(f"Schema written to {destination}")
    return destination
