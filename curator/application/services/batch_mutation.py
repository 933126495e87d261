"""Chunked playlist mutations.

The remote service caps how many URIs one playlist mutation may carry. The
executor splits arbitrary-length track lists into consecutive chunks within that
cap and sends them one at a time, in order.
"""

from collections.abc import Sequence

from attrs import define, field, validators
from toolz import partition_all

from curator.application.services.transport import PlaylistTransport
from curator.config import get_logger, settings
from curator.domain.entities import BatchMutationResult, MutationOperation
from curator.domain.errors import PartialBatchFailure, RemoteCallFailure

logger = get_logger(__name__)

# Upper bound imposed by the remote API on URIs per mutation request
MAX_TRACKS_PER_REQUEST = 100


@define(slots=True)
class BatchMutationExecutor:
    """Applies add/remove mutations in sequential, size-capped chunks.

    Stops at the first failed chunk. Chunks already sent stay applied because the
    remote service has no multi-request transaction to roll back to.
    """

    transport: PlaylistTransport
    max_tracks_per_request: int = field(
        factory=lambda: settings.api.spotify_max_tracks_per_request,
        validator=[validators.gt(0), validators.le(MAX_TRACKS_PER_REQUEST)],
    )

    def chunk(self, track_uris: Sequence[str]) -> list[list[str]]:
        """Split URIs into consecutive, order-preserving chunks."""
        return [list(c) for c in partition_all(self.max_tracks_per_request, track_uris)]

    async def apply(
        self,
        remote_playlist_id: str,
        credentials: str,
        track_uris: Sequence[str],
        operation: MutationOperation,
    ) -> BatchMutationResult:
        """Apply one operation for every URI, chunk by chunk.

        Raises:
            PartialBatchFailure: When a chunk fails; carries how many chunks landed
        """
        chunks = self.chunk(track_uris)
        if not chunks:
            return BatchMutationResult(operation=operation)

        match operation:
            case MutationOperation.ADD:
                send = self.transport.add_tracks
            case MutationOperation.REMOVE:
                send = self.transport.remove_tracks
            case _:
                raise ValueError(f"Unsupported mutation: {operation}")

        logger.info(
            f"Applying {operation.value} of {len(track_uris)} tracks "
            f"in {len(chunks)} chunks",
            playlist_id=remote_playlist_id,
        )

        for index, chunk in enumerate(chunks):
            try:
                await send(credentials, remote_playlist_id, chunk)
            except RemoteCallFailure as e:
                logger.error(
                    f"Chunk {index + 1}/{len(chunks)} of {operation.value} failed",
                    playlist_id=remote_playlist_id,
                    chunks_applied=index,
                    error=str(e),
                )
                raise PartialBatchFailure(
                    operation=operation.value,
                    chunks_applied=index,
                    total_chunks=len(chunks),
                    cause=e,
                ) from e
            logger.debug(
                f"Chunk {index + 1}/{len(chunks)} applied",
                playlist_id=remote_playlist_id,
                size=len(chunk),
            )

        return BatchMutationResult(
            operation=operation,
            chunks_applied=len(chunks),
            total_chunks=len(chunks),
            tracks_applied=len(track_uris),
        )

    async def add(
        self, remote_playlist_id: str, credentials: str, track_uris: Sequence[str]
    ) -> BatchMutationResult:
        return await self.apply(
            remote_playlist_id, credentials, track_uris, MutationOperation.ADD
        )

    async def remove(
        self, remote_playlist_id: str, credentials: str, track_uris: Sequence[str]
    ) -> BatchMutationResult:
        return await self.apply(
            remote_playlist_id, credentials, track_uris, MutationOperation.REMOVE
        )
