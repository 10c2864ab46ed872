"""Turn-level movement graph that honours modal filters."""
from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional, Tuple

import networkx as nx

from ..domain.models import Direction, IntersectionID, RoadID, RoutingConstraints
from ..filters.edits import Edits
from ..network.graph import RoadNetwork
from ..utils.errors import NoRouteError
from ..utils.logging import get_logger
from .projection import project

LOG = get_logger()

# A directed traversal of one road: (road, entered at, left at).
Traversal = Tuple[RoadID, IntersectionID, IntersectionID]

KMH_TO_MS = 1 / 3.6


def effective_direction(network: RoadNetwork, edits: Edits, r: RoadID) -> Direction:
    if r in edits.one_ways:
        return edits.one_ways[r].direction
    return network.road(r).oneway


def travel_time_s(network: RoadNetwork, edits: Edits, r: RoadID) -> float:
    info = network.road(r)
    speed_kmh = edits.speed_limits.get(r, info.speed_limit_kmh)
    return info.length / (speed_kmh * KMH_TO_MS)


def _traversals(network: RoadNetwork, edits: Edits, r: RoadID) -> List[Traversal]:
    info = network.road(r)
    direction = effective_direction(network, edits, r)
    out: List[Traversal] = []
    if direction in (Direction.BOTH, Direction.FORWARD):
        out.append((r, info.src, info.dst))
    if direction in (Direction.BOTH, Direction.BACKWARD) and info.src != info.dst:
        out.append((r, info.dst, info.src))
    return out


def build_movement_graph(
    network: RoadNetwork,
    edits: Edits,
    constraints: Optional[RoutingConstraints] = None,
) -> nx.DiGraph:
    """
    Build a movement graph M:
    - Nodes: directed traversals (road, from_i, to_i) of driveable, unfiltered roads.
    - Edges: allowed transitions (r1, u, v) -> (r2, v, w) with weight = travel time of r2.
    """
    if constraints is None:
        constraints = project(edits)

    M = nx.DiGraph()
    starting_at: Dict[IntersectionID, List[Traversal]] = defaultdict(list)
    for r in network.roads():
        if not network.is_driveable(r) or r in constraints.excluded_roads:
            continue
        for node in _traversals(network, edits, r):
            M.add_node(node, travel_time=travel_time_s(network, edits, r))
            starting_at[node[1]].append(node)

    for node in list(M.nodes):
        r1, _, v = node
        for nxt in starting_at.get(v, []):
            r2 = nxt[0]
            if r2 == r1:
                continue
            if (r1, r2) in constraints.forbidden_movements:
                continue
            M.add_edge(node, nxt, weight=M.nodes[nxt]["travel_time"], via=v)

    LOG.debug(
        "built movement graph: traversals=%d transitions=%d",
        M.number_of_nodes(),
        M.number_of_edges(),
    )
    return M


def shortest_route(
    network: RoadNetwork,
    edits: Edits,
    origin_road: RoadID,
    destination_road: RoadID,
    constraints: Optional[RoutingConstraints] = None,
) -> List[RoadID]:
    """Quickest sequence of roads from ``origin_road`` to ``destination_road``."""
    if constraints is None:
        constraints = project(edits)
    for r in (origin_road, destination_road):
        if not network.is_driveable(r):
            raise NoRouteError(f"road {r!r} is not driveable")
        if r in constraints.excluded_roads:
            raise NoRouteError(f"road {r!r} carries a filter and cannot be routed through")
    if origin_road == destination_road:
        return [origin_road]

    M = build_movement_graph(network, edits, constraints)
    sources = [n for n in M.nodes if n[0] == origin_road]
    targets = [n for n in M.nodes if n[0] == destination_road]
    if not sources or not targets:
        raise NoRouteError(f"road {origin_road!r} or {destination_road!r} is not driveable")

    best: Optional[Tuple[float, List[Traversal]]] = None
    for target in targets:
        try:
            cost, path = nx.multi_source_dijkstra(M, set(sources), target=target, weight="weight")
        except nx.NetworkXNoPath:
            continue
        if best is None or cost < best[0]:
            best = (cost, path)

    if best is None:
        raise NoRouteError(f"no route from road {origin_road!r} to road {destination_road!r}")
    LOG.debug("route %r -> %r costs %.1fs", origin_road, destination_road, best[0])
    return [node[0] for node in best[1]]


__all__ = [
    "Traversal",
    "build_movement_graph",
    "effective_direction",
    "shortest_route",
    "travel_time_s",
]
