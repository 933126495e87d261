"""Application services composing the synchronization engine."""

from .batch_mutation import MAX_TRACKS_PER_REQUEST, BatchMutationExecutor
from .event_recorder import EventRecorder
from .management_registry import ManagementRegistry
from .pagination import PageQuery, PagedCollection, PaginatedCollectionFetcher
from .playlist_strategies import PlaylistStrategyRunner
from .remote_library import RemoteLibrary
from .track_aggregator import AggregatedTracks, TrackSetAggregator
from .transport import PlaylistTransport

__all__ = [
    "MAX_TRACKS_PER_REQUEST",
    "AggregatedTracks",
    "BatchMutationExecutor",
    "EventRecorder",
    "ManagementRegistry",
    "PageQuery",
    "PagedCollection",
    "PaginatedCollectionFetcher",
    "PlaylistStrategyRunner",
    "PlaylistTransport",
    "RemoteLibrary",
    "TrackSetAggregator",
]
