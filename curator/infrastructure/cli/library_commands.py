"""Read-only views of the user's Spotify library."""

import asyncio

import typer

from curator.application.services import PaginatedCollectionFetcher, RemoteLibrary
from curator.domain.errors import RemoteCallFailure
from curator.infrastructure.cli.ui import TokenOption, console, show_playlists, show_tracks
from curator.infrastructure.connectors import SpotifyTransport

app = typer.Typer(help="Browse your Spotify library", no_args_is_help=True)


def _library() -> RemoteLibrary:
    transport = SpotifyTransport()
    return RemoteLibrary(transport, PaginatedCollectionFetcher(transport))


def _fetch(operation):
    try:
        return asyncio.run(operation)
    except RemoteCallFailure as e:
        console.print(f"[bold red]Spotify request failed:[/bold red] {e}")
        raise typer.Exit(1) from e


@app.command("playlists")
def list_playlists(token: TokenOption) -> None:
    """List your playlists."""
    playlists = _fetch(_library().user_playlists(token))
    show_playlists(playlists, title="Your playlists", empty="No playlists found.")


@app.command("liked")
def list_liked(token: TokenOption) -> None:
    """List your saved tracks, most recently saved first."""
    show_tracks(_fetch(_library().saved_track_uris(token)), title="Liked tracks")
