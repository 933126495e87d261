"""Managed playlist synchronization commands."""

import asyncio
from typing import Annotated

import typer

from curator.application.services import PaginatedCollectionFetcher, RemoteLibrary
from curator.application.use_cases import SynchronizePlaylistUseCase
from curator.config import get_logger, settings
from curator.domain.entities import TIME_RANGES, MostPlayedManagement, SyncOutcome
from curator.domain.errors import RemoteCallFailure
from curator.infrastructure.cli.ui import TokenOption, show_outcome, with_database

logger = get_logger(__name__)

app = typer.Typer(help="Create or update managed playlists", no_args_is_help=True)


@app.command("most-played")
def most_played(
    name: Annotated[str, typer.Argument(help="Playlist name")],
    token: TokenOption,
    description: Annotated[
        str, typer.Option("--description", "-d", help="Playlist description")
    ] = "Your most played tracks",
    time_range: Annotated[
        str,
        typer.Option(
            "--time-range", "-r", help=f"One of: {', '.join(TIME_RANGES)}"
        ),
    ] = "short_term",
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, help="Number of top tracks"),
    ] = None,
) -> None:
    """Sync a playlist of your most played tracks."""
    if time_range not in TIME_RANGES:
        raise typer.BadParameter(
            f"must be one of {', '.join(TIME_RANGES)}", param_hint="--time-range"
        )

    async def run(transport, uow_factory) -> SyncOutcome:
        library = RemoteLibrary(transport, PaginatedCollectionFetcher(transport))
        try:
            desired = await library.top_track_uris(
                token, time_range, limit or settings.api.spotify_top_tracks_limit
            )
        except RemoteCallFailure as e:
            return SyncOutcome.failure(f"Failed to fetch most played tracks: {e}")

        use_case = SynchronizePlaylistUseCase.create(transport, uow_factory)
        return await use_case.synchronize(
            name, description, token, desired, MostPlayedManagement(subtype=time_range)
        )

    show_outcome(asyncio.run(with_database(run)))


@app.command("joint")
def joint(
    name: Annotated[str, typer.Argument(help="Playlist name")],
    playlist_ids: Annotated[
        list[str], typer.Argument(help="Cached source playlist ids, in merge order")
    ],
    token: TokenOption,
    description: Annotated[
        str, typer.Option("--description", "-d", help="Playlist description")
    ] = "Joint playlist",
) -> None:
    """Sync the deduplicated union of cached source playlists."""

    async def run(transport, uow_factory) -> SyncOutcome:
        use_case = SynchronizePlaylistUseCase.create(transport, uow_factory)
        return await use_case.synchronize_joint(name, description, token, playlist_ids)

    show_outcome(asyncio.run(with_database(run)))
