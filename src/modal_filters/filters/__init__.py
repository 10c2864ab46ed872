from .cycling import CycleOutcome, cycle_diagonal_filter
from .diagonal import DiagonalFilter, split_circular
from .edits import (
    Edits,
    add_crossing,
    clear_filters,
    place_road_filter,
    remove_crossing,
    remove_road_filter,
    set_one_way,
    set_speed_limit,
    transaction,
)

__all__ = [
    "CycleOutcome",
    "DiagonalFilter",
    "Edits",
    "add_crossing",
    "clear_filters",
    "cycle_diagonal_filter",
    "place_road_filter",
    "remove_crossing",
    "remove_road_filter",
    "set_one_way",
    "set_speed_limit",
    "split_circular",
    "transaction",
]
