"""Curator CLI - Main application entry point and app structure."""

import asyncio
from importlib.metadata import PackageNotFoundError, version
from typing import Annotated

from dotenv import load_dotenv
from rich.console import Console
import typer

from curator.config import get_logger, settings, setup_loguru_logger
from curator.infrastructure.cli import cache_commands, library_commands, sync_commands
from curator.infrastructure.persistence.database import init_db, reset_engine

# CURATOR_ACCESS_TOKEN may live in a local .env file
load_dotenv()

try:
    VERSION = version("curator")
except PackageNotFoundError:
    VERSION = "0.0.0"

console = Console(width=80)
logger = get_logger(__name__)

app = typer.Typer(
    help=f"Curator v{VERSION} - managed playlists for Spotify",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
    pretty_exceptions_show_locals=False,
)

db_app = typer.Typer(help="Manage the local cache store", no_args_is_help=True)

app.add_typer(
    sync_commands.app,
    name="sync",
    help="Create or update managed playlists",
    rich_help_panel="Playlists",
)
app.add_typer(
    cache_commands.app,
    name="cache",
    help="Snapshot remote playlists locally",
    rich_help_panel="Playlists",
)
app.add_typer(
    library_commands.app,
    name="library",
    help="Browse your Spotify library",
    rich_help_panel="Playlists",
)
app.add_typer(db_app, name="db", rich_help_panel="System")


@db_app.command("init")
def initialize_database() -> None:
    """Create the database schema."""

    async def run() -> None:
        try:
            await init_db()
        finally:
            await reset_engine()

    asyncio.run(run())
    console.print(f"[bold green]Database ready[/bold green] [dim]{settings.database.url}[/dim]")


@app.command(name="version", rich_help_panel="System")
def version_command() -> None:
    """Show version information."""
    console.print(f"[bold bright_blue]Curator[/bold bright_blue] [dim]v{VERSION}[/dim]")


@app.callback()
def init_cli(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output"),
    ] = False,
) -> None:
    """Initialize Curator CLI."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_loguru_logger(verbose)


def main() -> int:
    """Application entry point."""
    try:
        return app() or 0
    except Exception:
        logger.exception("Unhandled exception")
        return 1
