"""Playlist cache commands."""

import asyncio
from typing import Annotated

import typer

from curator.application.use_cases import CachePlaylistUseCase
from curator.domain.errors import CuratorError
from curator.infrastructure.cli.ui import (
    TokenOption,
    console,
    show_playlists,
    show_tracks,
    with_database,
)

app = typer.Typer(help="Snapshot remote playlists locally", no_args_is_help=True)


@app.command("playlist")
def cache_playlist(
    playlist_id: Annotated[str, typer.Argument(help="Remote playlist id")],
    token: TokenOption,
) -> None:
    """Fetch a playlist in full and store it in the cache."""

    async def run(transport, uow_factory):
        return await CachePlaylistUseCase.create(transport, uow_factory).execute(
            token, playlist_id
        )

    try:
        cached = asyncio.run(with_database(run))
    except CuratorError as e:
        console.print(f"[bold red]Caching failed:[/bold red] {e}")
        raise typer.Exit(1) from e

    console.print(
        f"[bold green]Cached[/bold green] {cached.name} "
        f"[dim]({len(cached.tracks)} tracks)[/dim]"
    )


@app.command("list")
def list_cached() -> None:
    """List cached playlists."""

    async def run(transport, uow_factory):
        return await CachePlaylistUseCase.create(transport, uow_factory).list_cached()

    show_playlists(asyncio.run(with_database(run)), title="Cached playlists")


@app.command("show")
def show_cached(
    playlist_id: Annotated[str, typer.Argument(help="Cached playlist id")],
) -> None:
    """Show the tracks of a cached playlist."""

    async def run(transport, uow_factory):
        return await CachePlaylistUseCase.create(transport, uow_factory).cached_playlist(
            playlist_id
        )

    cached = asyncio.run(with_database(run))
    if cached is None:
        console.print(f"[bold red]Playlist {playlist_id} is not cached[/bold red]")
        raise typer.Exit(1)

    show_tracks(cached.track_uris, title=cached.name)
