"""Group cleaned telemetry samples into per-lap records."""
from __future__ import annotations

import logging

import pandas as pd

from ..data.schemas import CleanedLap
from .cleaning import clean_telemetry

logger = logging.getLogger(__name__)

MIN_POINTS_PER_LAP = 10
PIT_LAP_MAX_AVG_SPEED = 60.0  # km/h
PIT_LAP_MIN_LAP_TIME = 180.0  # seconds
MAX_RACING_LAP_TIME = 200.0  # seconds


def aggregate_laps(df: pd.DataFrame) -> list[CleanedLap]:
    """
    Build one CleanedLap per reconstructed lap number.

    Args:
        df: Raw telemetry after lap reconstruction, in arrival order

    Returns:
        CleanedLaps sorted by lap number. Lap groups with fewer than 10
        samples are reconstruction artifacts and are dropped.
    """
    laps = []
    dropped = 0

    for lap_number, points in df.groupby("lap", sort=False):
        if len(points) < MIN_POINTS_PER_LAP:
            dropped += 1
            continue

        cleaned = clean_telemetry(points).reset_index(drop=True)
        times = cleaned["time"]
        speeds = cleaned["speed"]

        lap_time = float(times.iloc[-1] - times.iloc[0]) / 1000.0
        avg_speed = float(speeds.mean())
        max_speed = float(speeds.max())

        chassis = points["chassis_number"].iloc[0] if "chassis_number" in points.columns else None

        laps.append(CleanedLap(
            lap_number=int(lap_number),
            car_number=int(points["car_number"].iloc[0]),
            chassis_number=None if pd.isna(chassis) else int(chassis),
            lap_time=lap_time,
            avg_speed=avg_speed,
            max_speed=max_speed,
            is_pit_lap=bool(avg_speed < PIT_LAP_MAX_AVG_SPEED or lap_time > PIT_LAP_MIN_LAP_TIME),
            telemetry_points=cleaned,
        ))

    if dropped:
        logger.debug(f"Dropped {dropped} lap groups with fewer than {MIN_POINTS_PER_LAP} points")

    return sorted(laps, key=lambda lap: lap.lap_number)


def is_racing_lap(lap: CleanedLap) -> bool:
    """Green-flag lap with a plausible lap time."""
    return not lap.is_pit_lap and 0 < lap.lap_time < MAX_RACING_LAP_TIME


def get_racing_laps(laps: list[CleanedLap]) -> list[CleanedLap]:
    return [lap for lap in laps if is_racing_lap(lap)]
