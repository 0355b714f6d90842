"""Command-line interface for unsafe-census"""

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from . import __version__
from .api import ScanResult, scan_file
from .config import load_config
from .exceptions import UnsafeCensusError
from .formatters import get_formatter
from .logging_config import setup_logging
from .scanning.treesitter_parser import RustParser

app = typer.Typer(
    name="unsafe-census",
    help="unsafe-census - count Rust code inside and outside unsafe regions",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"unsafe-census {__version__}")
        raise typer.Exit()


@app.command()
def main(
    files: List[Path] = typer.Argument(
        ...,
        help="Rust source files to scan; each file gets its own ledger",
        dir_okay=False,
    ),
    include_tests: Optional[bool] = typer.Option(
        None,
        "--include-tests/--exclude-tests",
        help="Count code inside #[test] functions and #[cfg(test)] modules",
    ),
    region_stats: Optional[str] = typer.Option(
        None,
        "--region-stats",
        help="Region statistics: slot (classic output) or stack (exact per region)",
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Summary format: rich (default), json, quiet",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the JSON summary to this file",
        dir_okay=False,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML format)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    lenient: bool = typer.Option(
        False,
        "--lenient",
        help="Scan files with syntax errors instead of rejecting them",
    ),
    fail_on_unsafe: bool = typer.Option(
        False,
        "--fail-on-unsafe",
        help="Exit 1 if any file has unsafe code (for CI gating)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all but ERROR logging",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append log records to this file",
        dir_okay=False,
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Scan Rust files and report trust region usage.

    One diagnostic line per closed unsafe region is written to standard
    output while scanning:

        <source> ~ <Inner|Function|Method> ~ <expressions> ~ <statements>[ ~ Dereference Operation]
    """
    try:
        settings = load_config(
            config_file=config,
            include_tests=include_tests,
            region_stats=region_stats,
            strict_parse=False if lenient else None,
            verbose=verbose,
            quiet=quiet,
        )
        formatter = get_formatter(fmt)
        setup_logging(settings.verbosity, log_file=str(log_file) if log_file else None)
    except (UnsafeCensusError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    results: List[ScanResult] = []
    try:
        parser = RustParser()
        for path in files:
            results.append(scan_file(path, config=settings, parser=parser))
    except UnsafeCensusError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if output is not None:
        output.write_text(json.dumps([r.to_dict() for r in results], indent=2))
        console.print(f"[green]Summary written to {output}[/green]")
    else:
        formatter.render(results)

    if fail_on_unsafe and any(r.ledger.has_unsafe for r in results):
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
