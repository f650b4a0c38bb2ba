"""Tunable constants for the telemetry pipeline.

Each default can be overridden at runtime with the matching environment
variable; values are read on every call so tests and long-running services
pick up changes without a reload.
"""
from __future__ import annotations

import os

# Lap reconstruction
EXPECTED_LAP_MS = 100000.0  # GR Cup at COTA runs ~90-120s laps
SF_LINE_LAT = 30.1328  # COTA start/finish latitude
SF_LINE_THRESHOLD = 0.001  # ~100 meters

# Strategy
TOTAL_RACE_LAPS = 40
PIT_LOSS_TIME = 25.0  # seconds


def expected_lap_ms() -> float:
    """Expected lap duration used by time-based lap reconstruction."""
    return float(os.getenv("RACESENSE_EXPECTED_LAP_MS", str(EXPECTED_LAP_MS)))


def sf_line_lat() -> float:
    """Start/finish reference latitude for GPS lap reconstruction."""
    return float(os.getenv("RACESENSE_SF_LINE_LAT", str(SF_LINE_LAT)))


def sf_line_threshold() -> float:
    return float(os.getenv("RACESENSE_SF_LINE_THRESHOLD", str(SF_LINE_THRESHOLD)))


def total_race_laps() -> int:
    return int(os.getenv("RACESENSE_TOTAL_LAPS", str(TOTAL_RACE_LAPS)))


def pit_loss_time() -> float:
    """Average time lost to a pit stop, in seconds."""
    return float(os.getenv("RACESENSE_PIT_LOSS_S", str(PIT_LOSS_TIME)))
