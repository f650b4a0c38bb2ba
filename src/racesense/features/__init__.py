"""Feature extraction: channel cleaning and per-lap aggregation."""

from .cleaning import clamp_value, clean_speed, clean_telemetry
from .lap_aggregator import aggregate_laps, get_racing_laps, is_racing_lap

__all__ = [
    "clamp_value",
    "clean_speed",
    "clean_telemetry",
    "aggregate_laps",
    "get_racing_laps",
    "is_racing_lap",
]
