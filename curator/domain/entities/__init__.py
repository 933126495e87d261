"""Domain entities for managed playlist synchronization."""

from .management import (
    TIME_RANGES,
    JointManagement,
    ManagementDefinition,
    ManagementRecord,
    ManagementType,
    MostPlayedManagement,
    management_from_dict,
)
from .playlist import CachedPlaylist, CachedTrack, PlaylistSummary
from .sync import (
    BatchMutationResult,
    MutationOperation,
    PlaylistDelta,
    SyncOutcome,
    SyncStrategy,
)

__all__ = [
    "TIME_RANGES",
    "BatchMutationResult",
    "CachedPlaylist",
    "CachedTrack",
    "JointManagement",
    "ManagementDefinition",
    "ManagementRecord",
    "ManagementType",
    "MostPlayedManagement",
    "MutationOperation",
    "PlaylistDelta",
    "PlaylistSummary",
    "SyncOutcome",
    "SyncStrategy",
    "management_from_dict",
]
