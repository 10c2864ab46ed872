from .movement_graph import build_movement_graph, shortest_route
from .projection import RoutingConstraintCache, allows_turn, get_change_key, project

__all__ = [
    "RoutingConstraintCache",
    "allows_turn",
    "build_movement_graph",
    "get_change_key",
    "project",
    "shortest_route",
]
