"""Cached playlist snapshots.

Pure playlist representations with zero external dependencies.
"""

from attrs import define, field, validators


@define(frozen=True, slots=True)
class CachedTrack:
    """A single playlist entry as stored in the cache."""

    uri: str = field(validator=validators.instance_of(str))
    name: str = ""
    artists: tuple[str, ...] = field(factory=tuple, converter=tuple)
    added_at: str | None = None
    added_by: str | None = None
    is_local: bool = False


@define(frozen=True, slots=True)
class PlaylistSummary:
    """Playlist metadata without its tracks."""

    playlist_id: str
    name: str
    uri: str = ""
    owner_name: str | None = None


@define(frozen=True, slots=True)
class CachedPlaylist:
    """Snapshot of a remote playlist and its ordered tracks."""

    playlist_id: str = field(validator=validators.instance_of(str))
    name: str
    uri: str = ""
    owner_name: str | None = None
    tracks: list[CachedTrack] = field(factory=list)
    id: int | None = field(default=None, eq=False)

    @property
    def track_uris(self) -> list[str]:
        return [track.uri for track in self.tracks]

    @property
    def summary(self) -> PlaylistSummary:
        return PlaylistSummary(
            playlist_id=self.playlist_id,
            name=self.name,
            uri=self.uri,
            owner_name=self.owner_name,
        )
