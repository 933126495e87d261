"""Track list merging for composite (joint) playlists."""

from collections.abc import Iterable, Sequence

from toolz import concat, unique


def merge_track_lists(track_lists: Iterable[Sequence[str]]) -> list[str]:
    """Merge track lists into one deduplicated list.

    The first occurrence of a URI wins, walking the lists in the order given, so
    the result is deterministic for a fixed input order.

    Example:
        >>> merge_track_lists([["a", "b"], ["b", "c"]])
        ['a', 'b', 'c']
    """
    return list(unique(concat(track_lists)))
