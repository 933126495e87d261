"""Synchronization value objects: strategies, deltas, batch results and outcomes."""

from enum import Enum
from typing import Any

from attrs import define, field


class SyncStrategy(Enum):
    """Every way that an existing managed playlist can be updated."""

    OVERWRITE = "overwrite"
    MODIFY = "modify"


class MutationOperation(Enum):
    """Track mutations supported by the batch executor."""

    ADD = "add"
    REMOVE = "remove"


@define(frozen=True, slots=True)
class PlaylistDelta:
    """Set difference between current remote membership and the desired list."""

    to_add: tuple[str, ...] = field(factory=tuple, converter=tuple)
    to_remove: tuple[str, ...] = field(factory=tuple, converter=tuple)

    @property
    def has_changes(self) -> bool:
        return bool(self.to_add or self.to_remove)


@define(frozen=True, slots=True)
class BatchMutationResult:
    """Result of a fully applied chunked mutation."""

    operation: MutationOperation
    chunks_applied: int = 0
    total_chunks: int = 0
    tracks_applied: int = 0


@define(frozen=True, slots=True)
class SyncOutcome:
    """Result of one synchronization call.

    Either successful with the remote playlist identity, or failed with a reason.
    """

    successful: bool
    created: bool = False
    remote_playlist_id: str | None = None
    error: str | None = None

    @classmethod
    def success(cls, remote_playlist_id: str, created: bool) -> "SyncOutcome":
        return cls(successful=True, created=created, remote_playlist_id=remote_playlist_id)

    @classmethod
    def failure(cls, error: str) -> "SyncOutcome":
        return cls(successful=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        """Response shape exposed to callers (``playlistID`` as the service names it)."""
        if not self.successful:
            return {"successful": False, "error": self.error}
        return {
            "successful": True,
            "created": self.created,
            "playlistID": self.remote_playlist_id,
        }
