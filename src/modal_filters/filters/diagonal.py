"""Diagonal filters spanning two roads of one intersection."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import FrozenSet, List, Sequence, Tuple

from ..domain.models import FilterType, IntersectionID, Movement, RoadID
from ..network.graph import RoadGraph
from ..utils.constants import FOUR_WAY
from ..utils.errors import ContractViolationError, InvalidFilterError
from ..utils.logging import get_logger

LOG = get_logger()

CanonicalKey = Tuple[IntersectionID, FrozenSet[FrozenSet[RoadID]]]


def split_circular(
    order: Sequence[RoadID],
    r1: RoadID,
    r2: RoadID,
) -> Tuple[Tuple[RoadID, ...], Tuple[RoadID, ...]]:
    """Split a circular ordering into the arc bounded by ``r1`` and ``r2`` and the rest.

    Both clockwise walks (``r1`` to ``r2`` and ``r2`` to ``r1``) bound an arc; the
    shorter one becomes the first group. On a tie the walk starts at whichever
    boundary comes first in ``order``, so swapping ``r1`` and ``r2`` never changes
    the result. The input sequence is never modified.
    """

    n = len(order)
    start = order.index(r1)
    end = order.index(r2)
    forward = (end - start) % n
    backward = (start - end) % n
    if backward < forward or (backward == forward and end < start):
        start, forward = end, backward

    group1 = tuple(order[(start + step) % n] for step in range(forward + 1))
    taken = set(group1)
    group2 = tuple(r for r in order if r not in taken)
    return group1, group2


@dataclass(frozen=True)
class DiagonalFilter:
    """A filter across an intersection, defined by two of its roads.

    When the intersection's roads are sorted clockwise, the pair splits the
    ordering into two groups. Turns within a group stay possible; turns across
    groups do not.

    Field equality compares the boundary roads too, so two filters producing
    the same partition may still differ under ``==``. Use :meth:`approx_eq`.
    """

    r1: RoadID
    r2: RoadID
    i: IntersectionID
    filter_type: FilterType
    user_modified: bool
    group1: FrozenSet[RoadID]
    group2: FrozenSet[RoadID]

    @classmethod
    def new(
        cls,
        network: RoadGraph,
        i: IntersectionID,
        r1: RoadID,
        r2: RoadID,
        filter_type: FilterType,
        *,
        user_modified: bool = True,
    ) -> DiagonalFilter:
        if r1 == r2:
            raise InvalidFilterError(f"diagonal filter at {i!r} needs two distinct roads, got {r1!r} twice")
        roads = network.driveable_incident_roads(i)
        for r in (r1, r2):
            if r not in roads:
                raise InvalidFilterError(f"road {r!r} is not a driveable road of intersection {i!r}")

        group1, group2 = split_circular(roads, r1, r2)
        if len(roads) == FOUR_WAY and (len(group1) != 2 or len(group2) != 2):
            raise ContractViolationError(
                f"diagonal filter at 4-way {i!r} between {r1!r} and {r2!r} split roads "
                f"into groups of {len(group1)} and {len(group2)}"
            )
        LOG.debug("diagonal filter at %r: group1=%s group2=%s", i, group1, group2)

        return cls(
            r1=r1,
            r2=r2,
            i=i,
            filter_type=filter_type,
            user_modified=user_modified,
            group1=frozenset(group1),
            group2=frozenset(group2),
        )

    def allows_turn(self, from_road: RoadID, to_road: RoadID) -> bool:
        return (from_road in self.group1) == (to_road in self.group1)

    def avoid_movements_between_roads(self) -> List[Movement]:
        pairs: List[Movement] = []
        for a in self.group1:
            for b in self.group2:
                pairs.append((a, b))
                pairs.append((b, a))
        return pairs

    def canonical_key(self) -> CanonicalKey:
        return self.i, frozenset({self.group1, self.group2})

    def approx_eq(self, other: DiagonalFilter) -> bool:
        """Whether both filters describe the same partition of the same intersection.

        Ignores ``filter_type`` and ``user_modified``, so cycling recognises a
        configuration whatever icon it currently carries.
        """
        return self.canonical_key() == other.canonical_key()

    def with_filter_type(self, filter_type: FilterType) -> DiagonalFilter:
        return replace(self, filter_type=filter_type)


__all__ = ["CanonicalKey", "DiagonalFilter", "split_circular"]
