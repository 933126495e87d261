"""SynchronizePlaylist use case: realize a managed playlist on the remote service.

The orchestrator walks a small state machine per call:

    RESOLVING_IDENTITY -> CREATING | OVERWRITING | MODIFYING -> DONE | FAILED

Inputs are validated before any remote call. Every failure, whatever layer raised
it, comes back as a failed ``SyncOutcome`` instead of escaping to the caller.
"""

import asyncio
from collections.abc import Callable, Sequence
from enum import Enum

from attrs import define, field

from curator.application.services import (
    BatchMutationExecutor,
    EventRecorder,
    ManagementRegistry,
    PaginatedCollectionFetcher,
    PlaylistStrategyRunner,
    PlaylistTransport,
    TrackSetAggregator,
)
from curator.config import get_logger
from curator.domain.entities import (
    JointManagement,
    ManagementDefinition,
    SyncOutcome,
    SyncStrategy,
)
from curator.domain.errors import (
    CuratorError,
    InvalidInputError,
    PartialBatchFailure,
    RemoteCallFailure,
    UnmappedManagementTypeError,
)
from curator.domain.repositories import UnitOfWorkProtocol
from curator.domain.sync import select_strategy

logger = get_logger(__name__)


class SyncState(Enum):
    RESOLVING_IDENTITY = "resolving_identity"
    CREATING = "creating"
    OVERWRITING = "overwriting"
    MODIFYING = "modifying"
    DONE = "done"
    FAILED = "failed"


_STRATEGY_STATES = {
    SyncStrategy.OVERWRITE: SyncState.OVERWRITING,
    SyncStrategy.MODIFY: SyncState.MODIFYING,
}


def validate_inputs(
    name: str,
    description: str,
    credentials: str,
    desired_tracks: Sequence[str],
) -> None:
    """Raise InvalidInputError naming every missing or empty field."""
    missing = [
        label
        for label, value in (
            ("playlistName", name),
            ("playlistDescription", description),
            ("access_token", credentials),
            ("songList", desired_tracks),
        )
        if not value
    ]
    if missing:
        raise InvalidInputError(missing)


@define(slots=True)
class SynchronizePlaylistUseCase:
    """Creates or updates the remote playlist realizing a management definition.

    Collaborators are injected; ``create`` wires the default graph around one
    transport and one unit-of-work factory. Mutations issued through one instance
    are serialized per remote playlist.
    """

    transport: PlaylistTransport
    registry: ManagementRegistry
    aggregator: TrackSetAggregator
    events: EventRecorder
    executor: BatchMutationExecutor
    runner: PlaylistStrategyRunner
    # One lock per remote playlist: mutation sequences on a playlist never interleave
    _playlist_locks: dict[str, asyncio.Lock] = field(factory=dict, init=False)

    @classmethod
    def create(
        cls,
        transport: PlaylistTransport,
        uow_factory: Callable[[], UnitOfWorkProtocol],
    ) -> "SynchronizePlaylistUseCase":
        fetcher = PaginatedCollectionFetcher(transport)
        executor = BatchMutationExecutor(transport)
        return cls(
            transport=transport,
            registry=ManagementRegistry(uow_factory),
            aggregator=TrackSetAggregator(uow_factory),
            events=EventRecorder(uow_factory),
            executor=executor,
            runner=PlaylistStrategyRunner(transport, fetcher, executor),
        )

    async def synchronize(
        self,
        name: str,
        description: str,
        credentials: str,
        desired_tracks: Sequence[str],
        definition: ManagementDefinition,
    ) -> SyncOutcome:
        """Bring the managed playlist for ``definition`` in line with ``desired_tracks``.

        Args:
            name: Playlist name, used only when the playlist is created
            description: Playlist description, used only on creation
            credentials: Caller's bearer credential for the remote service
            desired_tracks: Ordered track URIs the playlist should contain
            definition: Management definition identifying the logical playlist

        Returns:
            SyncOutcome, successful with the remote playlist id or failed with a reason
        """
        state = SyncState.RESOLVING_IDENTITY
        try:
            validate_inputs(name, description, credentials, desired_tracks)
            strategy = select_strategy(definition)

            user_id = await self.transport.get_current_user_id(credentials)
            record = await self.registry.resolve(user_id, definition)

            if record is None:
                state = self._transition(state, SyncState.CREATING, definition)
                playlist_id = await self._create(
                    name, description, credentials, user_id, desired_tracks, definition
                )
                outcome = SyncOutcome.success(playlist_id, created=True)
            else:
                state = self._transition(state, _STRATEGY_STATES[strategy], definition)
                async with self._playlist_lock(record.remote_playlist_id):
                    await self.runner.run(
                        strategy, record.remote_playlist_id, credentials, desired_tracks
                    )
                outcome = SyncOutcome.success(record.remote_playlist_id, created=False)

        except (InvalidInputError, UnmappedManagementTypeError) as e:
            self._transition(state, SyncState.FAILED, definition, error=str(e))
            return SyncOutcome.failure(str(e))
        except RemoteCallFailure as e:
            self._transition(state, SyncState.FAILED, definition, error=str(e))
            return SyncOutcome.failure(f"Failed to create or update playlist: {e}")
        except CuratorError as e:
            self._transition(state, SyncState.FAILED, definition, error=str(e))
            return SyncOutcome.failure(str(e))
        except Exception as e:
            logger.exception(f"Unexpected error while synchronizing: {e}")
            self._transition(state, SyncState.FAILED, definition, error=str(e))
            return SyncOutcome.failure(f"Failed to create or update playlist: {e}")

        self._transition(state, SyncState.DONE, definition)
        return outcome

    async def synchronize_joint(
        self,
        name: str,
        description: str,
        credentials: str,
        source_playlist_ids: Sequence[str],
    ) -> SyncOutcome:
        """Aggregate cached source playlists, then synchronize the joint playlist."""
        if not source_playlist_ids:
            return SyncOutcome.failure(str(InvalidInputError(["playlistIds"])))

        try:
            aggregated = await self.aggregator.aggregate(source_playlist_ids)
        except Exception as e:
            logger.exception(f"Failed to aggregate source playlists: {e}")
            return SyncOutcome.failure(f"Failed to aggregate source playlists: {e}")

        if not aggregated.is_complete:
            logger.warning(
                "Joint playlist built from incomplete sources",
                missing=list(aggregated.missing_sources),
            )

        return await self.synchronize(
            name,
            description,
            credentials,
            aggregated.track_uris,
            JointManagement(playlist_ids=source_playlist_ids),
        )

    async def _create(
        self,
        name: str,
        description: str,
        credentials: str,
        user_id: str,
        desired_tracks: Sequence[str],
        definition: ManagementDefinition,
    ) -> str:
        playlist_id = await self.transport.create_playlist(
            credentials, user_id, name, description
        )
        logger.info("Created remote playlist", playlist_id=playlist_id, owner=user_id)

        try:
            async with self._playlist_lock(playlist_id):
                await self.executor.add(playlist_id, credentials, desired_tracks)
        except PartialBatchFailure:
            logger.warning(
                "Playlist created but not populated; left unregistered",
                playlist_id=playlist_id,
            )
            raise

        await self.registry.register(playlist_id, user_id, definition)
        await self.events.record(f"Created playlist {name} ({playlist_id})")
        return playlist_id

    def _playlist_lock(self, playlist_id: str) -> asyncio.Lock:
        return self._playlist_locks.setdefault(playlist_id, asyncio.Lock())

    @staticmethod
    def _transition(
        current: SyncState,
        target: SyncState,
        definition: ManagementDefinition,
        **context,
    ) -> SyncState:
        logger.debug(
            f"Sync state {current.value} -> {target.value}",
            management_type=str(
                getattr(definition, "management_type", type(definition).__name__)
            ),
            **context,
        )
        return target
