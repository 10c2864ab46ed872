from __future__ import annotations

import pytest

from modal_filters.domain.models import Direction, FilterType
from modal_filters.filters.cycling import cycle_diagonal_filter
from modal_filters.filters.edits import Edits, place_road_filter, set_one_way, set_speed_limit
from modal_filters.network.graph import build_network
from modal_filters.routing.movement_graph import build_movement_graph, shortest_route, travel_time_s
from modal_filters.utils.errors import NoRouteError, UnknownRoadError


def _ringed_four_way():
    return build_network(
        [("I", 0, 0), ("n", 0, 100), ("e", 100, 0), ("s", 0, -100), ("w", -100, 0)],
        [
            {"id": "A", "src": "I", "dst": "n"},
            {"id": "B", "src": "I", "dst": "e"},
            {"id": "C", "src": "I", "dst": "s"},
            {"id": "D", "src": "I", "dst": "w"},
            {"id": "NE", "src": "n", "dst": "e"},
            {"id": "ES", "src": "e", "dst": "s"},
            {"id": "SW", "src": "s", "dst": "w"},
            {"id": "WN", "src": "w", "dst": "n", "length": 200.0},
            {"id": "path", "src": "I", "dst": "n", "driveable": False},
        ],
    )


def test_movement_graph_skips_footpaths_and_u_turns():
    network = _ringed_four_way()
    M = build_movement_graph(network, Edits())
    assert M.number_of_nodes() == 16
    assert all(node[0] != "path" for node in M.nodes)
    assert not M.has_edge(("A", "n", "I"), ("A", "I", "n"))
    assert M.has_edge(("A", "n", "I"), ("C", "I", "s"))


def test_straight_route_without_filters():
    network = _ringed_four_way()
    assert shortest_route(network, Edits(), "A", "C") == ["A", "C"]
    assert shortest_route(network, Edits(), "A", "A") == ["A"]


def test_diagonal_filter_forces_a_detour():
    network = _ringed_four_way()
    edits = Edits()
    cycle_diagonal_filter(edits, network, "I", FilterType.WALK_CYCLE_ONLY)

    M = build_movement_graph(network, edits)
    assert not M.has_edge(("A", "n", "I"), ("C", "I", "s"))
    assert M.has_edge(("A", "n", "I"), ("B", "I", "e"))
    assert shortest_route(network, edits, "A", "C") == ["A", "B", "ES", "C"]


def test_filtered_roads_cannot_be_routed_to():
    network = _ringed_four_way()
    edits = Edits()
    place_road_filter(edits, "C", 50, FilterType.NO_ENTRY)
    with pytest.raises(NoRouteError):
        shortest_route(network, edits, "A", "C")
    assert "C" not in shortest_route(network, edits, "B", "SW")


def test_one_way_edit_changes_the_route():
    network = _ringed_four_way()
    edits = Edits()
    set_one_way(edits, "C", Direction.FORWARD)
    route = shortest_route(network, edits, "C", "A")
    assert route[0] == "C"
    assert route[-1] == "A"
    assert len(route) > 2


def test_speed_edit_changes_travel_time():
    network = _ringed_four_way()
    edits = Edits()
    base = travel_time_s(network, edits, "A")
    set_speed_limit(edits, "A", 60)
    assert travel_time_s(network, edits, "A") == pytest.approx(base / 2)


def test_unknown_or_non_driveable_endpoints_have_no_route():
    network = _ringed_four_way()
    with pytest.raises(NoRouteError):
        shortest_route(network, Edits(), "path", "C")


def test_same_road_route_still_checks_the_road():
    network = _ringed_four_way()
    with pytest.raises(UnknownRoadError):
        shortest_route(network, Edits(), "nope", "nope")
    with pytest.raises(NoRouteError):
        shortest_route(network, Edits(), "path", "path")
