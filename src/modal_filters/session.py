"""One user's editing session over a road network."""
from __future__ import annotations

import logging
from typing import List, Optional

from .domain.models import (
    ChangeKey,
    Crossing,
    CrossingType,
    Direction,
    FilterType,
    IntersectionID,
    RoadFilter,
    RoadID,
    RoutingConstraints,
    SessionOptions,
)
from .filters.cycling import CycleOutcome, cycle_diagonal_filter
from .filters.edits import (
    Edits,
    add_crossing,
    clear_filters,
    place_road_filter,
    remove_crossing,
    remove_road_filter,
    set_one_way,
    set_speed_limit,
    transaction,
)
from .network.graph import RoadNetwork
from .routing.movement_graph import shortest_route
from .routing.projection import RoutingConstraintCache, allows_turn
from .utils.logging import configure_logger, get_logger

LOG = get_logger()


class EditSession:
    """Owns the edits for one network; every mutation is recorded in history."""

    def __init__(self, network: RoadNetwork, options: Optional[SessionOptions] = None) -> None:
        self.network = network
        self.options = options or SessionOptions()
        self.edits = Edits()
        self._cache = RoutingConstraintCache()

    def configure_logging(self) -> logging.Logger:
        return configure_logger(
            self.options.log_path,
            console=self.options.console_log,
            level=self.options.log_level,
        )

    def place_road_filter(
        self,
        road: RoadID,
        distance: float,
        filter_type: Optional[FilterType] = None,
    ) -> RoadFilter:
        self.network.road(road)
        with transaction(self.edits):
            return place_road_filter(self.edits, road, distance, filter_type or self.options.filter_type)

    def remove_road_filter(self, road: RoadID) -> Optional[RoadFilter]:
        if road not in self.edits.roads:
            return None
        with transaction(self.edits):
            return remove_road_filter(self.edits, road)

    def cycle(self, intersection: IntersectionID) -> CycleOutcome:
        with transaction(self.edits):
            outcome = cycle_diagonal_filter(self.edits, self.network, intersection, self.options.filter_type)
        if outcome == CycleOutcome.NOOP:
            # Nothing changed; drop the snapshot so undo skips it.
            self.edits.undo()
        return outcome

    def add_crossing(self, road: RoadID, kind: CrossingType, distance: float) -> Crossing:
        self.network.road(road)
        with transaction(self.edits):
            return add_crossing(self.edits, road, kind, distance)

    def remove_crossing(self, road: RoadID, index: int) -> Crossing:
        with transaction(self.edits):
            return remove_crossing(self.edits, road, index)

    def set_one_way(self, road: RoadID, direction: Direction) -> None:
        self.network.road(road)
        with transaction(self.edits):
            set_one_way(self.edits, road, direction)

    def set_speed_limit(self, road: RoadID, speed_limit_kmh: float) -> None:
        self.network.road(road)
        with transaction(self.edits):
            set_speed_limit(self.edits, road, speed_limit_kmh)

    def clear_filters(self) -> None:
        with transaction(self.edits):
            clear_filters(self.edits)

    def undo(self) -> None:
        self.edits.undo()
        LOG.info("undid last edit; %d earlier versions remain", self.edits.history_depth())

    def change_key(self) -> ChangeKey:
        return self.edits.get_change_key()

    def constraints(self) -> RoutingConstraints:
        return self._cache.get(self.edits)

    def allows_turn(self, intersection: IntersectionID, from_road: RoadID, to_road: RoadID) -> bool:
        return allows_turn(self.edits, intersection, from_road, to_road)

    def route(self, origin_road: RoadID, destination_road: RoadID) -> List[RoadID]:
        return shortest_route(self.network, self.edits, origin_road, destination_road, self.constraints())


__all__ = ["EditSession"]
