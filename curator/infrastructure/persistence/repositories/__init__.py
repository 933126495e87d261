"""SQLAlchemy implementations of the domain repository interfaces."""

from .events import EventRepository
from .management import ManagementMapper, ManagementRepository
from .playlist_cache import CachedPlaylistMapper, PlaylistCacheRepository

__all__ = [
    "CachedPlaylistMapper",
    "EventRepository",
    "ManagementMapper",
    "ManagementRepository",
    "PlaylistCacheRepository",
]
