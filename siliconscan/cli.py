"""Command line: run one scan, save the Markdown report, set the exit code."""

import json
import logging
import sys
from pathlib import Path

import click
import typer

from . import __version__
from .config import ScanConfig, load_tables
from .engine import run_scan
from .errors import ConfigError
from .format import format_human, format_welcome
from .report import to_dict, write_report
from .scanner.static import StaticProbe


def _err(msg: str) -> None:
    """Abort with a usage error (exit code 2)."""
    raise click.BadParameter(msg)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"siliconscan {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


app = typer.Typer(
    help="Scan this Mac for Apple Silicon compatibility issues. Read-only: nothing is installed or changed.",
    add_completion=False,
)


@app.command()
def main(
    test: bool = typer.Option(False, "--test", help="Skip package, process and Docker enumeration; placeholders go in the report"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Include extra facts in the report and debug logs on stderr"),
    output_dir: Path = typer.Option(Path("."), "--output-dir", "-o", file_okay=False, dir_okay=True, help="Directory for the report file (default: .)"),
    config_file: Path | None = typer.Option(None, "--config", exists=True, dir_okay=False, help="YAML file overriding rule tables"),
    facts: Path | None = typer.Option(None, "--facts", exists=True, dir_okay=False, help="Simulate a host from a YAML/JSON facts file"),
    json_out: bool = typer.Option(False, "--json", "-j", help="Print the report as JSON"),
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"),
) -> None:
    """Scan the host and report Apple Silicon migration issues."""
    _configure_logging(verbose)
    try:
        tables = load_tables(config_file)
        probe = StaticProbe.from_file(facts) if facts else None
    except ConfigError as e:
        _err(str(e))

    config = ScanConfig(test_mode=test, verbose=verbose, output_dir=output_dir, tables=tables)
    if not json_out:
        typer.echo(format_welcome(test_mode=test))

    result = run_scan(config, probe)

    report_path = None
    try:
        report_path = write_report(result.report, config.output_dir)
    except OSError as e:
        typer.echo(f"Could not write report: {e}", err=True)

    if json_out:
        payload = to_dict(result.report)
        payload["report_path"] = str(report_path) if report_path else None
        typer.echo(json.dumps(payload, indent=2))
    else:
        typer.echo(format_human(result.report, report_path))

    raise typer.Exit(result.exit_code)


def _main() -> None:
    app()


if __name__ == "__main__":
    _main()
