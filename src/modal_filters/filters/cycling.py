"""Cycle an intersection through its possible filter configurations."""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from ..domain.models import Direction, FilterType, IntersectionID, RoadFilter, RoadID
from ..network.graph import RoadGraph
from ..utils.constants import FOUR_WAY
from ..utils.errors import ContractViolationError
from ..utils.logging import get_logger
from .diagonal import DiagonalFilter
from .edits import Edits

LOG = get_logger()


class CycleOutcome(str, Enum):
    INSTALLED = "installed"
    REPLACED = "replaced"
    REMOVED = "removed"
    MOVED = "moved"
    NOOP = "noop"


def cycle_diagonal_filter(
    edits: Edits,
    network: RoadGraph,
    i: IntersectionID,
    filter_type: FilterType,
) -> CycleOutcome:
    """Advance intersection ``i`` to its next filter configuration.

    The caller must run this inside a :func:`~modal_filters.filters.edits.transaction`.
    """
    roads = network.driveable_incident_roads(i)

    if len(roads) == FOUR_WAY:
        return _cycle_four_way(edits, network, i, roads, filter_type)
    if len(roads) > 1:
        return _cycle_road_filters(edits, network, i, roads, filter_type)
    LOG.debug("intersection %r has %d driveable roads; nothing to cycle", i, len(roads))
    return CycleOutcome.NOOP


def _cycle_four_way(
    edits: Edits,
    network: RoadGraph,
    i: IntersectionID,
    roads: List[RoadID],
    filter_type: FilterType,
) -> CycleOutcome:
    alt1 = DiagonalFilter.new(network, i, roads[0], roads[1], filter_type)
    alt2 = DiagonalFilter.new(network, i, roads[1], roads[2], filter_type)

    current = edits.intersections.get(i)
    if current is None:
        edits.intersections[i] = alt1
        LOG.info("installed diagonal filter at %r between %r and %r", i, alt1.r1, alt1.r2)
        return CycleOutcome.INSTALLED
    if alt1.approx_eq(current):
        edits.intersections[i] = alt2
        LOG.info("switched diagonal filter at %r to %r and %r", i, alt2.r1, alt2.r2)
        return CycleOutcome.REPLACED
    if alt2.approx_eq(current):
        del edits.intersections[i]
        LOG.info("removed diagonal filter at %r", i)
        return CycleOutcome.REMOVED
    raise ContractViolationError(
        f"diagonal filter at {i!r} matches neither alternative for roads {roads!r}"
    )


def _cycle_road_filters(
    edits: Edits,
    network: RoadGraph,
    i: IntersectionID,
    roads: List[RoadID],
    filter_type: FilterType,
) -> CycleOutcome:
    # A diagonal filter anywhere but a 4-way is equivalent to filtering one road.
    eligible = [r for r in roads if _is_filterable(edits, network, r)]
    if not eligible:
        LOG.debug("no filterable roads at %r", i)
        return CycleOutcome.NOOP

    add_to: Optional[RoadID] = None
    filtered = next((idx for idx, r in enumerate(eligible) if r in edits.roads), None)
    if filtered is None:
        add_to = eligible[0]
    else:
        del edits.roads[eligible[filtered]]
        if filtered != len(eligible) - 1:
            add_to = eligible[filtered + 1]

    if add_to is None:
        LOG.info("cleared road filters around %r", i)
        return CycleOutcome.REMOVED

    road = network.road(add_to)
    distance = 0.0 if road.src == i else road.length
    edits.roads[add_to] = RoadFilter.new_by_user(distance, filter_type)
    LOG.info("placed %s filter on road %r next to %r", filter_type.value, add_to, i)
    return CycleOutcome.INSTALLED if filtered is None else CycleOutcome.MOVED


def _is_filterable(edits: Edits, network: RoadGraph, r: RoadID) -> bool:
    if r in edits.one_ways:
        oneway = edits.one_ways[r].direction != Direction.BOTH
    else:
        oneway = network.oneway_for_driving(r) is not None
    return not oneway and not network.is_deadend_for_driving(r)


__all__ = ["CycleOutcome", "cycle_diagonal_filter"]
