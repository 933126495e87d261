"""Pure synchronization rules."""

from .aggregation import merge_track_lists
from .strategy import compute_delta, select_strategy

__all__ = ["compute_delta", "merge_track_lists", "select_strategy"]
