"""The edit aggregate: every filter, crossing and road override in a session.

Before making any change, call :meth:`Edits.before_edit` (or use
:func:`transaction`). Each call pushes an immutable snapshot onto a singly
linked history chain, most recent first, so undo is a pop.
"""
from __future__ import annotations

from bisect import bisect_right
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from ..domain.models import (
    ChangeKey,
    Crossing,
    CrossingType,
    Direction,
    FilterType,
    IntersectionID,
    RoadEditState,
    RoadFilter,
    RoadID,
)
from ..utils.errors import InvalidEditError, NothingToUndoError
from ..utils.logging import get_logger
from .diagonal import DiagonalFilter

LOG = get_logger()


@dataclass
class Edits:
    roads: Dict[RoadID, RoadFilter] = field(default_factory=dict)
    intersections: Dict[IntersectionID, DiagonalFilter] = field(default_factory=dict)
    # Roads with modified directions; the state also carries any speed change.
    one_ways: Dict[RoadID, RoadEditState] = field(default_factory=dict)
    speed_limits: Dict[RoadID, float] = field(default_factory=dict)
    # Sorted by increasing distance along the road.
    crossings: Dict[RoadID, List[Crossing]] = field(default_factory=dict)
    previous_version: Optional[Edits] = field(default=None, compare=False, repr=False)

    def copy_state(self) -> Edits:
        """Structural copy without history."""
        return Edits(
            roads=dict(self.roads),
            intersections=dict(self.intersections),
            one_ways=dict(self.one_ways),
            speed_limits=dict(self.speed_limits),
            crossings={r: list(seq) for r, seq in self.crossings.items()},
        )

    def before_edit(self) -> None:
        snapshot = self.copy_state()
        snapshot.previous_version = self.previous_version
        self.previous_version = snapshot

    def undo(self) -> None:
        previous = self.previous_version
        if previous is None:
            raise NothingToUndoError("no earlier version of the edits exists")
        restored = previous.copy_state()
        self.roads = restored.roads
        self.intersections = restored.intersections
        self.one_ways = restored.one_ways
        self.speed_limits = restored.speed_limits
        self.crossings = restored.crossings
        self.previous_version = previous.previous_version

    def history_depth(self) -> int:
        depth = 0
        node = self.previous_version
        while node is not None:
            depth += 1
            node = node.previous_version
        return depth

    def get_change_key(self) -> ChangeKey:
        return ChangeKey(
            roads=frozenset(self.roads.items()),
            intersections=frozenset(self.intersections.items()),
            one_ways=frozenset(self.one_ways.items()),
            crossings=frozenset((r, tuple(seq)) for r, seq in self.crossings.items() if seq),
        )


@contextmanager
def transaction(edits: Edits) -> Iterator[Edits]:
    """Snapshot ``edits`` before the body runs; roll back if the body raises."""
    edits.before_edit()
    try:
        yield edits
    except Exception:
        LOG.debug("rolling back failed edit (history depth %d)", edits.history_depth())
        edits.undo()
        raise


def place_road_filter(
    edits: Edits,
    road: RoadID,
    distance: float,
    filter_type: FilterType,
) -> RoadFilter:
    """Put a user filter on ``road``, replacing any filter already there.

    ``distance`` is not checked against the road length.
    """
    road_filter = RoadFilter.new_by_user(distance, filter_type)
    edits.roads[road] = road_filter
    LOG.info("placed %s filter on road %r at %.2f", filter_type.value, road, road_filter.distance)
    return road_filter


def remove_road_filter(edits: Edits, road: RoadID) -> Optional[RoadFilter]:
    removed = edits.roads.pop(road, None)
    if removed is not None:
        LOG.info("removed filter from road %r", road)
    return removed


def clear_filters(edits: Edits) -> None:
    LOG.info(
        "clearing %d road filters and %d diagonal filters",
        len(edits.roads),
        len(edits.intersections),
    )
    edits.roads.clear()
    edits.intersections.clear()


def add_crossing(
    edits: Edits,
    road: RoadID,
    kind: CrossingType,
    distance: float,
    *,
    user_modified: bool = True,
) -> Crossing:
    crossing = Crossing(kind=kind, distance=float(distance), user_modified=user_modified)
    seq = edits.crossings.setdefault(road, [])
    idx = bisect_right([c.distance for c in seq], crossing.distance)
    seq.insert(idx, crossing)
    LOG.info("added %s crossing on road %r at %.2f", kind.value, road, crossing.distance)
    return crossing


def remove_crossing(edits: Edits, road: RoadID, index: int) -> Crossing:
    seq = edits.crossings.get(road, [])
    if not 0 <= index < len(seq):
        raise InvalidEditError(f"road {road!r} has no crossing at index {index}")
    crossing = seq.pop(index)
    if not seq:
        del edits.crossings[road]
    return crossing


def set_one_way(edits: Edits, road: RoadID, direction: Direction) -> RoadEditState:
    state = RoadEditState(direction=direction, speed_limit_kmh=edits.speed_limits.get(road))
    edits.one_ways[road] = state
    LOG.info("set direction of road %r to %s", road, direction.value)
    return state


def set_speed_limit(edits: Edits, road: RoadID, speed_limit_kmh: float) -> None:
    if speed_limit_kmh <= 0:
        raise InvalidEditError(f"speed limit must be positive, got {speed_limit_kmh} for road {road!r}")
    edits.speed_limits[road] = float(speed_limit_kmh)
    if road in edits.one_ways:
        edits.one_ways[road] = RoadEditState(
            direction=edits.one_ways[road].direction,
            speed_limit_kmh=float(speed_limit_kmh),
        )
    LOG.info("set speed limit of road %r to %.1f km/h", road, speed_limit_kmh)


__all__ = [
    "Edits",
    "add_crossing",
    "clear_filters",
    "place_road_filter",
    "remove_crossing",
    "remove_road_filter",
    "set_one_way",
    "set_speed_limit",
    "transaction",
]
