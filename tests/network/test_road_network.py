from __future__ import annotations

import pytest

from modal_filters.domain.models import Direction
from modal_filters.network.graph import RoadNetwork, build_network, compass_bearing
from modal_filters.utils.errors import (
    NetworkDefinitionError,
    UnknownIntersectionError,
    UnknownRoadError,
)


def _star(with_ring: bool = True) -> RoadNetwork:
    intersections = [("I", 0, 0), ("n", 0, 100), ("e", 100, 0), ("s", 0, -100), ("w", -100, 0)]
    # Added out of clockwise order on purpose.
    roads = [
        {"id": "C", "src": "I", "dst": "s"},
        {"id": "A", "src": "I", "dst": "n"},
        {"id": "D", "src": "w", "dst": "I"},
        {"id": "B", "src": "I", "dst": "e"},
    ]
    if with_ring:
        roads += [
            {"id": "NE", "src": "n", "dst": "e"},
            {"id": "ES", "src": "e", "dst": "s"},
            {"id": "SW", "src": "s", "dst": "w"},
            {"id": "WN", "src": "w", "dst": "n"},
        ]
    return build_network(intersections, roads)


def test_compass_bearing_is_clockwise_from_north():
    assert compass_bearing(0, 0, 0, 10) == pytest.approx(0.0)
    assert compass_bearing(0, 0, 10, 0) == pytest.approx(90.0)
    assert compass_bearing(0, 0, 0, -10) == pytest.approx(180.0)
    assert compass_bearing(0, 0, -10, 0) == pytest.approx(270.0)


def test_incident_roads_sorted_clockwise_by_bearing():
    network = _star()
    assert network.incident_roads("I") == ["A", "B", "C", "D"]
    assert network.incident_roads("n") == ["NE", "A", "WN"]


def test_explicit_road_order_wins_over_geometry():
    network = RoadNetwork()
    network.add_intersection("I", 0, 0, road_order=["z", "y", "x"])
    for name, (x, y) in {"x": (0, 1), "y": (1, 0), "z": (0, -1)}.items():
        network.add_intersection(name + "_end", x, y)
        network.add_road(name, "I", name + "_end")
    assert network.incident_roads("I") == ["z", "y", "x"]


def test_explicit_road_order_must_cover_all_roads():
    network = RoadNetwork()
    network.add_intersection("I", 0, 0, road_order=["x"])
    network.add_intersection("a", 0, 1)
    network.add_intersection("b", 1, 0)
    network.add_road("x", "I", "a")
    network.add_road("y", "I", "b")
    with pytest.raises(NetworkDefinitionError):
        network.incident_roads("I")


def test_default_length_is_euclidean():
    network = _star()
    assert network.road("NE").length == pytest.approx(141.4213, rel=1e-4)
    assert network.road("A").length == pytest.approx(100.0)


def test_driveable_filter_and_oneway():
    network = _star()
    network.add_intersection("p", 50, 50)
    network.add_road("path", "I", "p", driveable=False)
    network.add_intersection("q", -50, -50)
    network.add_road("ow", "I", "q", oneway=Direction.FORWARD)

    assert "path" in network.incident_roads("I")
    assert "path" not in network.driveable_incident_roads("I")
    assert network.oneway_for_driving("ow") == Direction.FORWARD
    assert network.oneway_for_driving("A") is None
    assert network.oneway_for_driving("path") is None


def test_dead_end_detection():
    star = _star(with_ring=False)
    assert star.is_deadend_for_driving("A")
    ringed = _star()
    assert not ringed.is_deadend_for_driving("A")
    ringed.add_intersection("x", 500, 500)
    ringed.add_road("spur", "e", "x", dead_end=False)
    assert not ringed.is_deadend_for_driving("spur")


def test_duplicate_and_unknown_ids_are_rejected():
    network = _star()
    with pytest.raises(NetworkDefinitionError):
        network.add_intersection("I", 1, 1)
    with pytest.raises(NetworkDefinitionError):
        network.add_road("A", "I", "n")
    with pytest.raises(NetworkDefinitionError):
        network.add_road("Z", "I", "missing")
    with pytest.raises(UnknownRoadError):
        network.road("missing")
    with pytest.raises(UnknownIntersectionError):
        network.incident_roads("missing")
