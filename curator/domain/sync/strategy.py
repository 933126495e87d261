"""Strategy selection and delta computation for managed playlists.

Pure functions with no I/O: which update method a management type uses, and the
minimal add/remove sets that turn current remote membership into the desired list.
"""

from collections.abc import Iterable, Sequence

from toolz import unique

from curator.domain.entities import (
    JointManagement,
    ManagementDefinition,
    MostPlayedManagement,
    PlaylistDelta,
    SyncStrategy,
)
from curator.domain.errors import UnmappedManagementTypeError


def select_strategy(definition: ManagementDefinition) -> SyncStrategy:
    """Map a management definition to the way its playlist is updated.

    Most-played lists are authoritative and replace remote membership; joint
    lists only apply the difference so manual curation of untouched tracks survives.

    Raises:
        UnmappedManagementTypeError: For any definition without a mapping
    """
    match definition:
        case MostPlayedManagement():
            return SyncStrategy.OVERWRITE
        case JointManagement():
            return SyncStrategy.MODIFY
        case _:
            raise UnmappedManagementTypeError(
                getattr(definition, "management_type", type(definition).__name__)
            )


def compute_delta(current: Iterable[str], desired: Sequence[str]) -> PlaylistDelta:
    """Compute the set difference between current and desired track URIs.

    Both sides keep first-seen order and are deduplicated; position is not part of
    the delta, so a track present on both sides is never touched.
    """
    current = list(current)
    current_set = set(current)
    desired_set = set(desired)

    return PlaylistDelta(
        to_add=unique(uri for uri in desired if uri not in current_set),
        to_remove=unique(uri for uri in current if uri not in desired_set),
    )
