"""RaceSense: race telemetry cleaning, tire degradation and pit strategy."""

from .loaders import EmptyTelemetryError, load_telemetry_csv, parse_telemetry_csv
from .pipeline import (
    advance_strategy,
    build_race_strategy,
    process_csv,
    process_telemetry,
    recommend_pit_stop,
)

__all__ = [
    "EmptyTelemetryError",
    "load_telemetry_csv",
    "parse_telemetry_csv",
    "advance_strategy",
    "build_race_strategy",
    "process_csv",
    "process_telemetry",
    "recommend_pit_stop",
]
