from .interfaces import (
    EventRepositoryProtocol,
    ManagementRepositoryProtocol,
    PlaylistCacheRepositoryProtocol,
    UnitOfWorkProtocol,
)

__all__ = [
    "EventRepositoryProtocol",
    "ManagementRepositoryProtocol",
    "PlaylistCacheRepositoryProtocol",
    "UnitOfWorkProtocol",
]
