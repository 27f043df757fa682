"""
albumnote CLI - Main entry point using Typer.

This module configures the main Typer application, registers the command
groups, and defines global options like --version and --verbose.
"""

import typer
from rich.console import Console
from rich.traceback import install

from .commands import config, search
from .core.errors import AlbumNoteError
from .core.logging_util import setup_logging

# Install a rich traceback handler for readable exceptions
install(show_locals=False)

console = Console()

app = typer.Typer(
    name="albumnote",
    help="💿 albumnote - Search Spotify for albums and turn them into Markdown notes.",
    epilog="Use `albumnote [COMMAND] --help` for more info on a specific command.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)

app.add_typer(
    search.app,
    name="search",
    help="🔎 Search Spotify for albums and create notes.",
)
app.add_typer(
    config.app,
    name="config",
    help="🔐 Manage Spotify credentials, note location and templates.",
)


def _version_callback(value: bool):
    if value:
        from . import __version__

        console.print(f"albumnote v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show the application version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(None, "--verbose", help="Enable DEBUG-level logging."),
    quiet: bool = typer.Option(None, "--quiet", help="Reduce logging to warnings and errors."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON lines to stdout."),
):
    """
    albumnote - album notes from the Spotify catalog.
    """
    setup_logging(json_logs=json_logs, verbose=bool(verbose), quiet=bool(quiet))
    if verbose:
        console.print("[yellow]Verbose logging enabled.[/yellow]")


def cli():
    """Main entry point for the console script defined in pyproject.toml."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 Operation cancelled by user.[/yellow]")
        raise SystemExit(130)
    except AlbumNoteError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
