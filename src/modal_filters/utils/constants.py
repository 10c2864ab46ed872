"""Shared constants for the filter model."""
from __future__ import annotations

LOGGER_NAME = "modal_filters"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Only intersections with exactly this many driveable roads get true diagonal filters.
FOUR_WAY = 4

DEFAULT_SPEED_KMH = 30.0
COMPASS_DEGREES = 360.0
