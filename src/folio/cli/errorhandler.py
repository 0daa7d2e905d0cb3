"""Turn folio errors into short console messages and a non-zero exit code."""

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.markup import escape

from folio.core.exceptions import (
    AssemblyError,
    ConfigError,
    FolioError,
    RefreshError,
    ScanAggregateError,
    ScanCanceledError,
    SinkError,
    SourceTreeError,
)
from folio.logging_setup import console


class InputDirectoryError(FolioError):
    """Raised when the input path given on the command line is unusable."""

    def __init__(self, message: str, *, hint: bool = False) -> None:
        self.hint = hint
        super().__init__(message)


# first match wins; FolioError must stay last
_LABELS: tuple[tuple[type[FolioError] | tuple[type[FolioError], ...], str], ...] = (
    (ConfigError, "Invalid Configuration"),
    ((SourceTreeError, ScanCanceledError), "Scan Error"),
    ((AssemblyError, RefreshError), "Render Error"),
    (SinkError, "Output Error"),
    (FolioError, "Error"),
)


def _report_scan_failures(exc: ScanAggregateError) -> None:
    console.print(f"[bold red]Failed to parse {len(exc.failures)} file(s):[/bold red]")
    for failure in exc.failures:
        console.print(f"  - [cyan]{escape(failure.path)}[/cyan]: {escape(str(failure.error))}", highlight=False)
    console.print("Fix the files above or pass [bold]--proceed-on-errors[/bold] to skip them.")


def _report(exc: FolioError) -> None:
    if isinstance(exc, InputDirectoryError):
        if exc.hint:
            console.print(f"[yellow]hint: {escape(str(exc))}[/yellow]")
        else:
            console.print(f"[bold red]error:[/bold red] {escape(str(exc))}", highlight=False)
        return
    if isinstance(exc, ScanAggregateError):
        _report_scan_failures(exc)
        return
    label = next(text for kinds, text in _LABELS if isinstance(exc, kinds))
    console.print(f"[bold red]{label}:[/bold red] {escape(str(exc))}", highlight=False)


@contextmanager
def handle_cli_errors(*, debug: bool = False) -> Iterator[None]:
    """Print a one-line report for any FolioError and exit with status 1.

    Args:
        debug: Re-raise the original exception so the full traceback is shown.

    """
    try:
        yield
    except FolioError as exc:
        if debug:
            raise
        _report(exc)
        raise typer.Exit(1) from exc
