import stat
from pathlib import Path
from typing import Any

import typer

from folio import __version__
from folio.cli.errorhandler import InputDirectoryError, handle_cli_errors
from folio.core.config import FolioConfig, ScanFailurePolicy
from folio.engine.generator import SiteGenerator
from folio.infra.sinks.directory import DirectoryWriter
from folio.logging_setup import configure_logging, console
from folio.server.live import LiveServer

app = typer.Typer(name="folio", help="Create a blog from posts written in Markdown!", no_args_is_help=True)


def _input_directory(path: Path | None) -> Path:
    if path is None:
        raise InputDirectoryError("please specify a path", hint=True)
    try:
        info = path.stat()
    except OSError as exc:
        raise InputDirectoryError(f"cannot access directory: {exc}") from exc
    if not stat.S_ISDIR(info.st_mode):
        raise InputDirectoryError(f"path is not a directory: {path}")
    return path


def _overrides(**sections: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Drop unset CLI flags so they do not shadow file/env configuration."""
    result: dict[str, dict[str, Any]] = {}
    for section, values in sections.items():
        kept = {key: value for key, value in values.items() if value is not None}
        if kept:
            result[section] = kept
    return result


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"folio {__version__}")
        raise typer.Exit


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    configure_logging(verbose=verbose)


@app.command()
def generate(
    input_dir: Path | None = typer.Argument(None, help="Directory containing the markdown posts."),
    output_dir: Path = typer.Argument(Path("public"), help="Directory to write the generated site to."),
    raw: bool | None = typer.Option(None, "--raw/--templated", help="Output raw HTML without template wrapper."),
    site_title: str | None = typer.Option(None, "--site-title", help="Title shown on every page."),
    root: str | None = typer.Option(None, "--root", help="URL prefix the site is served under."),
    link_extension: str | None = typer.Option(
        None, "--link-extension", help="Suffix for post and tag links, e.g. .html for plain static hosts."
    ),
    templates: Path | None = typer.Option(None, "--templates", help="Custom template directory."),
    highlight: bool | None = typer.Option(None, "--highlight/--no-highlight", help="Highlight fenced code blocks."),
    highlight_style: str | None = typer.Option(None, "--highlight-style", help="Pygments style name."),
    footnotes: bool | None = typer.Option(None, "--footnotes/--no-footnotes", help="Enable footnote syntax."),
    proceed_on_errors: bool = typer.Option(False, "--proceed-on-errors", help="Skip files that fail to parse."),
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks on errors."),
) -> None:
    """Generate a static blog from markdown posts."""
    with handle_cli_errors(debug=debug):
        source = _input_directory(input_dir)
        config = FolioConfig.load(
            source,
            **_overrides(
                site={"title": site_title, "root": root, "link_extension": link_extension},
                markdown={"code_highlighting": highlight, "highlight_style": highlight_style, "footnotes": footnotes},
                generation={
                    "raw_output": raw,
                    "templates_dir": templates,
                    "on_scan_failure": ScanFailurePolicy.PROCEED if proceed_on_errors else None,
                },
            ),
        )
        generator = SiteGenerator.from_config(config)
        bundle = generator.generate(source)
        DirectoryWriter(output_dir).write(bundle)

    console.print(f"[bold green]Generated {len(bundle.posts)} post(s) into {output_dir}[/bold green]")


@app.command()
def serve(
    input_dir: Path | None = typer.Argument(None, help="Directory containing the markdown posts."),
    host: str | None = typer.Option(None, "--host", help="Interface to bind."),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on."),
    raw: bool | None = typer.Option(None, "--raw/--templated", help="Serve raw HTML without template wrapper."),
    site_title: str | None = typer.Option(None, "--site-title", help="Title shown on every page."),
    root: str | None = typer.Option(None, "--root", help="URL prefix the site is served under."),
    templates: Path | None = typer.Option(None, "--templates", help="Custom template directory."),
    watch: float | None = typer.Option(None, "--watch", help="Poll for content changes every N seconds."),
    proceed_on_errors: bool = typer.Option(False, "--proceed-on-errors", help="Skip files that fail to parse."),
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks on errors."),
) -> None:
    """Serve the blog over HTTP, regenerating it when content changes."""
    with handle_cli_errors(debug=debug):
        source = _input_directory(input_dir)
        config = FolioConfig.load(
            source,
            **_overrides(
                site={"title": site_title, "root": root},
                server={"host": host, "port": port, "watch_interval": watch},
                generation={
                    "raw_output": raw,
                    "templates_dir": templates,
                    "on_scan_failure": ScanFailurePolicy.PROCEED if proceed_on_errors else None,
                },
            ),
        )
        server = LiveServer.from_config(config, source)

    server.run()


if __name__ == "__main__":
    app()
