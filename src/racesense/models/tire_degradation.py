"""Rolling tire degradation estimate over racing laps."""
from __future__ import annotations

import numpy as np

from ..data.schemas import CleanedLap, TireDegradation
from ..features.lap_aggregator import get_racing_laps

MIN_RACING_LAPS = 3
WINDOW_LAPS = 3
CONFIDENCE_STD_SCALE = 5.0  # seconds


def calculate_std_dev(values: list[float]) -> float:
    """Population standard deviation, 0 for an empty list."""
    if not values:
        return 0.0
    return float(np.std(values))


def baseline_lap_time(laps: list[CleanedLap]) -> float:
    """Best early-race pace: fastest of the first three racing laps."""
    racing_laps = get_racing_laps(laps)
    if not racing_laps:
        return 0.0
    return min(lap.lap_time for lap in racing_laps[:MIN_RACING_LAPS])


def calculate_tire_degradation(laps: list[CleanedLap]) -> list[TireDegradation]:
    """
    Estimate per-lap degradation from a trailing window of racing laps.

    For each racing lap the window is that lap and up to two before it. The
    rate is the lap time gained across the window per lap elapsed, and the
    next lap is predicted linearly from it. Confidence drops as lap
    times in the window spread out (1 - std/5s, clamped).

    Args:
        laps: CleanedLaps sorted by lap number

    Returns:
        One TireDegradation per racing lap, or [] with fewer than 3 racing laps
    """
    racing_laps = get_racing_laps(laps)
    if len(racing_laps) < MIN_RACING_LAPS:
        return []

    degradation = []
    for i, lap in enumerate(racing_laps):
        window = racing_laps[max(0, i - (WINDOW_LAPS - 1)): i + 1]

        if len(window) > 1:
            degradation_rate = (lap.lap_time - window[0].lap_time) / (len(window) - 1)
        else:
            degradation_rate = 0.0

        std_dev = calculate_std_dev([w.lap_time for w in window])

        degradation.append(TireDegradation(
            lap_number=lap.lap_number,
            lap_time=lap.lap_time,
            degradation_rate=degradation_rate,
            predicted_next_lap=lap.lap_time + degradation_rate,
            confidence=float(np.clip(1.0 - std_dev / CONFIDENCE_STD_SCALE, 0.0, 1.0)),
        ))

    return degradation
