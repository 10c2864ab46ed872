from __future__ import annotations

from itertools import permutations

from modal_filters.domain.models import CrossingType, FilterType
from modal_filters.filters.cycling import cycle_diagonal_filter
from modal_filters.filters.edits import Edits, add_crossing, place_road_filter, set_speed_limit
from modal_filters.network.graph import build_network
from modal_filters.routing.projection import RoutingConstraintCache, allows_turn, get_change_key, project


def _four_way():
    return build_network(
        [("I", 0, 0), ("n", 0, 100), ("e", 100, 0), ("s", 0, -100), ("w", -100, 0)],
        [
            {"id": "A", "src": "I", "dst": "n"},
            {"id": "B", "src": "I", "dst": "e"},
            {"id": "C", "src": "I", "dst": "s"},
            {"id": "D", "src": "I", "dst": "w"},
        ],
    )


def test_empty_edits_project_to_nothing():
    constraints = project(Edits())
    assert constraints.excluded_roads == frozenset()
    assert constraints.forbidden_movements == frozenset()


def test_projection_excludes_filtered_roads_and_cross_group_movements():
    network = _four_way()
    edits = Edits()
    cycle_diagonal_filter(edits, network, "I", FilterType.WALK_CYCLE_ONLY)
    place_road_filter(edits, "Z", 3, FilterType.NO_ENTRY)

    constraints = project(edits)
    assert constraints.excluded_roads == {"Z"}
    assert constraints.forbidden_movements == {
        ("A", "C"), ("C", "A"), ("A", "D"), ("D", "A"),
        ("B", "C"), ("C", "B"), ("B", "D"), ("D", "B"),
    }
    for a, b in constraints.forbidden_movements:
        assert (b, a) in constraints.forbidden_movements
    assert constraints.forbids("Z", "A")
    assert constraints.forbids("A", "C")
    assert not constraints.forbids("A", "B")


def test_allows_turn_defaults_to_permissive():
    assert allows_turn(Edits(), "I", "A", "C")


def test_allows_turn_is_symmetric_and_reflexive_under_a_diagonal_filter():
    network = _four_way()
    edits = Edits()
    cycle_diagonal_filter(edits, network, "I", FilterType.WALK_CYCLE_ONLY)
    diagonal = edits.intersections["I"]

    for r in diagonal.group1:
        assert allows_turn(edits, "I", r, r)
    for a, b in permutations("ABCD", 2):
        assert allows_turn(edits, "I", a, b) == allows_turn(edits, "I", b, a)
        assert allows_turn(edits, "I", a, b) == ((a, b) not in project(edits).forbidden_movements)


def test_road_filter_blocks_every_turn_through_it():
    edits = Edits()
    place_road_filter(edits, "A", 50, FilterType.BUS_GATE)
    assert not allows_turn(edits, "I", "A", "B")
    assert not allows_turn(edits, "I", "B", "A")
    assert allows_turn(edits, "I", "B", "C")


def test_get_change_key_matches_edits_method():
    edits = Edits()
    place_road_filter(edits, "A", 50, FilterType.BUS_GATE)
    assert get_change_key(edits) == edits.get_change_key()


def test_cache_recomputes_only_when_change_key_differs():
    cache = RoutingConstraintCache()
    edits = Edits()
    first = cache.get(edits)
    assert cache.get(edits) is first
    assert cache.recomputations == 1

    set_speed_limit(edits, "A", 20)
    assert cache.get(edits) is first
    assert cache.recomputations == 1

    place_road_filter(edits, "A", 1, FilterType.NO_ENTRY)
    assert cache.get(edits).excluded_roads == {"A"}
    assert cache.recomputations == 2

    add_crossing(edits, "B", CrossingType.SIGNALIZED, 4)
    cache.get(edits)
    assert cache.recomputations == 3

    cache.invalidate()
    cache.get(edits)
    assert cache.recomputations == 4
