"""Domain models for modal filters and the edits that place them."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, FrozenSet, Hashable, Optional, Tuple

if TYPE_CHECKING:
    from ..filters.diagonal import DiagonalFilter

RoadID = Hashable
IntersectionID = Hashable
Movement = Tuple[RoadID, RoadID]


class FilterType(str, Enum):
    """Kind of device; only changes how a filter is displayed, never what it blocks."""

    NO_ENTRY = "no_entry"
    WALK_CYCLE_ONLY = "walk_cycle_only"
    BUS_GATE = "bus_gate"
    SCHOOL_STREET = "school_street"


class CrossingType(str, Enum):
    UNSIGNALIZED = "unsignalized"
    SIGNALIZED = "signalized"


class Direction(str, Enum):
    BOTH = "both"
    FORWARD = "forward"
    BACKWARD = "backward"


@dataclass(frozen=True)
class RoadEditState:
    """Overridden state of a road whose direction or speed was edited."""

    direction: Direction = Direction.BOTH
    speed_limit_kmh: Optional[float] = None


@dataclass(frozen=True)
class RoadFilter:
    """A filter placed somewhere along a road."""

    distance: float
    filter_type: FilterType
    user_modified: bool = True

    @classmethod
    def new_by_user(cls, distance: float, filter_type: FilterType) -> RoadFilter:
        return cls(distance=float(distance), filter_type=filter_type, user_modified=True)

    @classmethod
    def inherited(cls, distance: float, filter_type: FilterType) -> RoadFilter:
        return cls(distance=float(distance), filter_type=filter_type, user_modified=False)


@dataclass(frozen=True)
class Crossing:
    kind: CrossingType
    distance: float
    user_modified: bool = True


@dataclass(frozen=True)
class RoutingConstraints:
    """What a routing engine must avoid to respect the current filters."""

    excluded_roads: FrozenSet[RoadID]
    forbidden_movements: FrozenSet[Movement]

    def forbids(self, from_road: RoadID, to_road: RoadID) -> bool:
        if from_road in self.excluded_roads or to_road in self.excluded_roads:
            return True
        return (from_road, to_road) in self.forbidden_movements


@dataclass(frozen=True)
class ChangeKey:
    """Snapshot that changes whenever an edit affecting legality occurs.

    History and speed limits are not captured.
    """

    roads: FrozenSet[Tuple[RoadID, RoadFilter]] = frozenset()
    intersections: FrozenSet[Tuple[IntersectionID, DiagonalFilter]] = frozenset()
    one_ways: FrozenSet[Tuple[RoadID, RoadEditState]] = frozenset()
    crossings: FrozenSet[Tuple[RoadID, Tuple[Crossing, ...]]] = frozenset()


@dataclass(frozen=True)
class SessionOptions:
    """Settings for one editing session."""

    filter_type: FilterType = FilterType.WALK_CYCLE_ONLY
    log_path: Optional[Path] = None
    console_log: bool = False
    log_level: int = logging.INFO
