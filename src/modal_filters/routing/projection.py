"""Project filters onto what a routing engine must avoid."""
from __future__ import annotations

from typing import Optional, Set

from ..domain.models import ChangeKey, IntersectionID, Movement, RoadID, RoutingConstraints
from ..filters.edits import Edits
from ..utils.logging import get_logger

LOG = get_logger()


def project(edits: Edits) -> RoutingConstraints:
    """Roads to avoid entirely, plus movements forbidden by diagonal filters."""
    forbidden: Set[Movement] = set()
    for diagonal in edits.intersections.values():
        forbidden.update(diagonal.avoid_movements_between_roads())
    return RoutingConstraints(
        excluded_roads=frozenset(edits.roads),
        forbidden_movements=frozenset(forbidden),
    )


def allows_turn(
    edits: Edits,
    intersection: IntersectionID,
    from_road: RoadID,
    to_road: RoadID,
) -> bool:
    if from_road in edits.roads or to_road in edits.roads:
        return False
    diagonal = edits.intersections.get(intersection)
    if diagonal is None:
        return True
    return diagonal.allows_turn(from_road, to_road)


def get_change_key(edits: Edits) -> ChangeKey:
    return edits.get_change_key()


class RoutingConstraintCache:
    """Keeps the last projection and recomputes it only when the edits change."""

    def __init__(self) -> None:
        self._key: Optional[ChangeKey] = None
        self._constraints: Optional[RoutingConstraints] = None
        self.recomputations = 0

    def get(self, edits: Edits) -> RoutingConstraints:
        key = edits.get_change_key()
        if self._constraints is None or key != self._key:
            self._constraints = project(edits)
            self._key = key
            self.recomputations += 1
            LOG.debug(
                "recomputed routing constraints: excluded=%d forbidden=%d",
                len(self._constraints.excluded_roads),
                len(self._constraints.forbidden_movements),
            )
        return self._constraints

    def invalidate(self) -> None:
        self._key = None
        self._constraints = None


__all__ = ["RoutingConstraintCache", "allows_turn", "get_change_key", "project"]
