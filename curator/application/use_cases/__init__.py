from .cache_playlist import CachePlaylistUseCase
from .synchronize_playlist import SyncState, SynchronizePlaylistUseCase, validate_inputs

__all__ = [
    "CachePlaylistUseCase",
    "SyncState",
    "SynchronizePlaylistUseCase",
    "validate_inputs",
]
