"""Road graph provider backed by networkx."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

import networkx as nx

from ..domain.models import Direction, IntersectionID, RoadID
from ..utils.constants import COMPASS_DEGREES, DEFAULT_SPEED_KMH
from ..utils.errors import NetworkDefinitionError, UnknownIntersectionError, UnknownRoadError
from ..utils.logging import get_logger

LOG = get_logger()


@dataclass(frozen=True)
class RoadInfo:
    road_id: RoadID
    src: IntersectionID
    dst: IntersectionID
    length: float
    oneway: Direction = Direction.BOTH
    driveable: bool = True
    speed_limit_kmh: float = DEFAULT_SPEED_KMH

    def other_end(self, i: IntersectionID) -> IntersectionID:
        if i == self.src:
            return self.dst
        if i == self.dst:
            return self.src
        raise UnknownIntersectionError(f"road {self.road_id!r} does not touch intersection {i!r}")


class RoadGraph(Protocol):
    """The read-only view of the road network that filters rely on."""

    def incident_roads(self, i: IntersectionID) -> List[RoadID]: ...

    def driveable_incident_roads(self, i: IntersectionID) -> List[RoadID]: ...

    def road(self, r: RoadID) -> RoadInfo: ...

    def is_driveable(self, r: RoadID) -> bool: ...

    def oneway_for_driving(self, r: RoadID) -> Optional[Direction]: ...

    def is_deadend_for_driving(self, r: RoadID) -> bool: ...


def compass_bearing(x0: float, y0: float, x1: float, y1: float) -> float:
    """Bearing in degrees from (x0, y0) to (x1, y1); 0 is north, increasing clockwise."""
    return math.degrees(math.atan2(x1 - x0, y1 - y0)) % COMPASS_DEGREES


class RoadNetwork:
    """Intersections are graph nodes; roads are multigraph edges keyed by road id."""

    def __init__(self) -> None:
        self._graph = nx.MultiGraph()
        self._roads: Dict[RoadID, RoadInfo] = {}
        self._dead_ends: Dict[RoadID, bool] = {}

    @property
    def graph(self) -> nx.MultiGraph:
        return self._graph

    def add_intersection(
        self,
        i: IntersectionID,
        x: float,
        y: float,
        *,
        road_order: Optional[Sequence[RoadID]] = None,
    ) -> None:
        if i in self._graph:
            raise NetworkDefinitionError(f"duplicate intersection id: {i!r}")
        self._graph.add_node(i, x=float(x), y=float(y), road_order=list(road_order) if road_order else None)

    def add_road(
        self,
        r: RoadID,
        src: IntersectionID,
        dst: IntersectionID,
        *,
        length: Optional[float] = None,
        oneway: Direction = Direction.BOTH,
        driveable: bool = True,
        dead_end: Optional[bool] = None,
        speed_limit_kmh: float = DEFAULT_SPEED_KMH,
    ) -> RoadInfo:
        if r in self._roads:
            raise NetworkDefinitionError(f"duplicate road id: {r!r}")
        for i in (src, dst):
            if i not in self._graph:
                raise NetworkDefinitionError(f"road {r!r} references unknown intersection {i!r}")
        if length is None:
            a = self._graph.nodes[src]
            b = self._graph.nodes[dst]
            length = math.hypot(b["x"] - a["x"], b["y"] - a["y"])
        if length < 0:
            raise NetworkDefinitionError(f"road {r!r} has negative length {length}")
        if speed_limit_kmh <= 0:
            raise NetworkDefinitionError(f"road {r!r} has non-positive speed limit {speed_limit_kmh}")

        info = RoadInfo(
            road_id=r,
            src=src,
            dst=dst,
            length=float(length),
            oneway=oneway,
            driveable=driveable,
            speed_limit_kmh=float(speed_limit_kmh),
        )
        self._graph.add_edge(src, dst, key=r, info=info)
        self._roads[r] = info
        if dead_end is not None:
            self._dead_ends[r] = dead_end
        return info

    def roads(self) -> List[RoadID]:
        return list(self._roads)

    def intersections(self) -> List[IntersectionID]:
        return list(self._graph.nodes)

    def road(self, r: RoadID) -> RoadInfo:
        try:
            return self._roads[r]
        except KeyError:
            raise UnknownRoadError(f"unknown road: {r!r}") from None

    def incident_roads(self, i: IntersectionID) -> List[RoadID]:
        """Roads touching ``i`` in a stable clockwise order."""
        if i not in self._graph:
            raise UnknownIntersectionError(f"unknown intersection: {i!r}")
        touching = list(dict.fromkeys(key for _, _, key in self._graph.edges(i, keys=True)))
        explicit = self._graph.nodes[i].get("road_order")
        if explicit:
            ordered = [r for r in explicit if r in touching]
            missing = [r for r in touching if r not in ordered]
            if missing:
                raise NetworkDefinitionError(
                    f"road_order for intersection {i!r} omits roads: {', '.join(map(repr, missing))}"
                )
            return ordered
        return sorted(touching, key=lambda r: (self._bearing_from(i, r), repr(r)))

    def driveable_incident_roads(self, i: IntersectionID) -> List[RoadID]:
        return [r for r in self.incident_roads(i) if self.is_driveable(r)]

    def is_driveable(self, r: RoadID) -> bool:
        return self.road(r).driveable

    def oneway_for_driving(self, r: RoadID) -> Optional[Direction]:
        info = self.road(r)
        if not info.driveable or info.oneway == Direction.BOTH:
            return None
        return info.oneway

    def is_deadend_for_driving(self, r: RoadID) -> bool:
        info = self.road(r)
        if r in self._dead_ends:
            return self._dead_ends[r]
        if not info.driveable:
            return False
        return any(self._driveable_degree(i) <= 1 for i in (info.src, info.dst))

    def _driveable_degree(self, i: IntersectionID) -> int:
        return len(self.driveable_incident_roads(i))

    def _bearing_from(self, i: IntersectionID, r: RoadID) -> float:
        info = self._roads[r]
        other = info.other_end(i)
        if other == i:
            # Loops have no meaningful heading; they sort last.
            return COMPASS_DEGREES
        a = self._graph.nodes[i]
        b = self._graph.nodes[other]
        return compass_bearing(a["x"], a["y"], b["x"], b["y"])


def build_network(
    intersections: Iterable[tuple],
    roads: Iterable[dict],
) -> RoadNetwork:
    """Assemble a network from ``(id, x, y)`` tuples and keyword dicts for ``add_road``."""
    network = RoadNetwork()
    for i, x, y in intersections:
        network.add_intersection(i, x, y)
    for spec in roads:
        spec = dict(spec)
        network.add_road(spec.pop("id"), spec.pop("src"), spec.pop("dst"), **spec)
    LOG.debug(
        "built road network: intersections=%d roads=%d",
        network.graph.number_of_nodes(),
        len(network.roads()),
    )
    return network


__all__ = [
    "RoadGraph",
    "RoadInfo",
    "RoadNetwork",
    "build_network",
    "compass_bearing",
]
