"""Managed playlist definitions and registry records.

A management definition describes *how* a playlist's membership is derived. It is
immutable and compared structurally, so it can be used directly as a lookup key.
"""

from enum import StrEnum
import json
from typing import Any, ClassVar

from attrs import define, field, validators

from curator.domain.errors import UnmappedManagementTypeError

# Time ranges accepted by the remote "top tracks" endpoint
TIME_RANGES = ("short_term", "medium_term", "long_term")


class ManagementType(StrEnum):
    """Every type of managed playlist, by its stored name."""

    MOST_PLAYED = "mostPlayed"
    JOINT = "joint"


def _canonical_key(payload: dict[str, Any]) -> str:
    return json.dumps(payload, sort_keys=True, separators=(",", ":"))


@define(frozen=True, slots=True)
class MostPlayedManagement:
    """A user's most played tracks over one time range."""

    management_type: ClassVar[ManagementType] = ManagementType.MOST_PLAYED

    subtype: str = field(validator=validators.in_(TIME_RANGES))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.management_type.value, "subtype": self.subtype}

    @property
    def key(self) -> str:
        """Canonical string form used as the persistence lookup key."""
        return _canonical_key(self.to_dict())


@define(frozen=True, slots=True)
class JointManagement:
    """Deduplicated union of several source playlists, in the given order."""

    management_type: ClassVar[ManagementType] = ManagementType.JOINT

    playlist_ids: tuple[str, ...] = field(
        converter=tuple,
        validator=validators.deep_iterable(
            member_validator=validators.instance_of(str),
        ),
    )

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.management_type.value, "playlistIds": list(self.playlist_ids)}

    @property
    def key(self) -> str:
        """Canonical string form used as the persistence lookup key."""
        return _canonical_key(self.to_dict())


type ManagementDefinition = MostPlayedManagement | JointManagement


def management_from_dict(data: dict[str, Any]) -> ManagementDefinition:
    """Rebuild a management definition from its stored dictionary form.

    Raises:
        UnmappedManagementTypeError: If the stored type is unknown
    """
    match data.get("type"):
        case ManagementType.MOST_PLAYED:
            return MostPlayedManagement(subtype=data["subtype"])
        case ManagementType.JOINT:
            return JointManagement(playlist_ids=data.get("playlistIds", ()))
        case other:
            raise UnmappedManagementTypeError(other)


@define(frozen=True, slots=True)
class ManagementRecord:
    """Pointer from an (owner, definition) pair to the remote playlist realizing it."""

    remote_playlist_id: str = field(validator=validators.instance_of(str))
    owner: str = field(validator=validators.instance_of(str))
    definition: ManagementDefinition
    id: int | None = field(default=None, eq=False)
