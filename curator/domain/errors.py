"""Error taxonomy for managed playlist synchronization.

Pure exception types with zero external dependencies. Lower layers raise these;
the synchronization use case converts them into a failed ``SyncOutcome``.
"""

from collections.abc import Sequence
from typing import Any


class CuratorError(Exception):
    """Base class for all synchronization errors."""


class InvalidInputError(CuratorError):
    """A required synchronization input was missing or empty."""

    def __init__(self, missing_fields: Sequence[str]) -> None:
        self.missing_fields = tuple(missing_fields)
        super().__init__("Insufficient Input: " + " ".join(self.missing_fields))


class RemoteCallFailure(CuratorError):
    """Non-2xx response or transport error from the remote music service."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        payload: Any = None,
    ) -> None:
        self.status = status
        self.payload = payload
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.status is not None:
            return f"{message} (HTTP {self.status})"
        return message


class PartialBatchFailure(RemoteCallFailure):
    """A multi-chunk mutation stopped part-way through.

    Chunks before ``chunks_applied`` remain applied remotely; nothing is rolled back.
    """

    def __init__(
        self,
        operation: str,
        chunks_applied: int,
        total_chunks: int,
        cause: RemoteCallFailure,
    ) -> None:
        self.operation = operation
        self.chunks_applied = chunks_applied
        self.total_chunks = total_chunks
        self.cause = cause
        super().__init__(
            f"Failed to {operation} tracks after {chunks_applied} of "
            f"{total_chunks} chunks: {cause}",
            status=cause.status,
            payload=cause.payload,
        )

    def __str__(self) -> str:
        return self.args[0]


class UnmappedManagementTypeError(CuratorError):
    """A management type has no synchronization strategy (configuration defect)."""

    def __init__(self, management_type: object) -> None:
        self.management_type = management_type
        super().__init__(f"Management type not recognized: {management_type!r}")


class ManagementConflictError(CuratorError):
    """A remote playlist is already registered under a different definition."""

    def __init__(self, remote_playlist_id: str) -> None:
        self.remote_playlist_id = remote_playlist_id
        super().__init__(
            f"Remote playlist {remote_playlist_id} is already managed under "
            "another definition"
        )
