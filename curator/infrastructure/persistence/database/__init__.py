from .db_connection import (
    create_db_engine,
    create_session_factory,
    get_engine,
    get_session_factory,
    reset_engine,
)
from .db_models import (
    CuratorDBBase,
    DBCachedPlaylist,
    DBCachedPlaylistTrack,
    DBEvent,
    DBManagement,
    init_db,
)

__all__ = [
    "CuratorDBBase",
    "DBCachedPlaylist",
    "DBCachedPlaylistTrack",
    "DBEvent",
    "DBManagement",
    "create_db_engine",
    "create_session_factory",
    "get_engine",
    "get_session_factory",
    "init_db",
    "reset_engine",
]
