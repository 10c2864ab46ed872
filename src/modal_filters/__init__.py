"""Modal filters on a road network and the turn restrictions they imply."""
from __future__ import annotations

from .domain.models import (
    ChangeKey,
    Crossing,
    CrossingType,
    Direction,
    FilterType,
    RoadEditState,
    RoadFilter,
    RoutingConstraints,
    SessionOptions,
)
from .filters import (
    CycleOutcome,
    DiagonalFilter,
    Edits,
    cycle_diagonal_filter,
    place_road_filter,
    remove_road_filter,
    transaction,
)
from .network import RoadGraph, RoadNetwork, build_network
from .routing import RoutingConstraintCache, allows_turn, get_change_key, project, shortest_route
from .session import EditSession

__all__ = [
    "ChangeKey",
    "Crossing",
    "CrossingType",
    "CycleOutcome",
    "DiagonalFilter",
    "Direction",
    "EditSession",
    "Edits",
    "FilterType",
    "RoadEditState",
    "RoadFilter",
    "RoadGraph",
    "RoadNetwork",
    "RoutingConstraintCache",
    "RoutingConstraints",
    "SessionOptions",
    "allows_turn",
    "build_network",
    "cycle_diagonal_filter",
    "get_change_key",
    "place_road_filter",
    "project",
    "remove_road_filter",
    "shortest_route",
    "transaction",
]
