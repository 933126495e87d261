"""Shared CLI helpers: credential option, async runner and result display."""

from collections.abc import Awaitable, Callable
from typing import Annotated, Any

from rich.console import Console
from rich.table import Table
import typer

from curator.config import get_logger
from curator.domain.entities import PlaylistSummary, SyncOutcome
from curator.infrastructure.connectors import SpotifyTransport
from curator.infrastructure.persistence import make_unit_of_work_factory
from curator.infrastructure.persistence.database import init_db, reset_engine

console = Console()
logger = get_logger(__name__)

TokenOption = Annotated[
    str,
    typer.Option(
        "--token",
        "-t",
        envvar="CURATOR_ACCESS_TOKEN",
        help="Spotify bearer access token",
        show_default=False,
    ),
]


async def with_database[T](
    operation: Callable[[SpotifyTransport, Callable[[], Any]], Awaitable[T]],
) -> T:
    """Run ``operation`` with a transport and a unit-of-work factory on an initialized store."""
    try:
        await init_db()
        return await operation(SpotifyTransport(), make_unit_of_work_factory())
    finally:
        await reset_engine()


def show_outcome(outcome: SyncOutcome) -> None:
    """Print a synchronization outcome; exit with status 1 when it failed."""
    if not outcome.successful:
        console.print(f"[bold red]Sync failed:[/bold red] {outcome.error}")
        raise typer.Exit(1)

    verb = "Created" if outcome.created else "Updated"
    console.print(
        f"[bold green]{verb}[/bold green] playlist "
        f"[cyan]{outcome.remote_playlist_id}[/cyan]"
    )


def show_playlists(
    playlists: list[PlaylistSummary],
    title: str,
    empty: str = "No playlists cached yet.",
) -> None:
    if not playlists:
        console.print(f"[yellow]{empty}[/yellow]")
        return

    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Owner")
    for playlist in playlists:
        table.add_row(playlist.playlist_id, playlist.name, playlist.owner_name or "")
    console.print(table)


def show_tracks(track_uris: list[str], title: str) -> None:
    if not track_uris:
        console.print("[yellow]No tracks.[/yellow]")
        return

    table = Table(title=f"{title} ({len(track_uris)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("URI", style="cyan")
    for position, uri in enumerate(track_uris, start=1):
        table.add_row(str(position), uri)
    console.print(table)
