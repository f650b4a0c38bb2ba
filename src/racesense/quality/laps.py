"""Lap counter corruption detection and lap boundary reconstruction.

ECU lap counters overflow (the 32768 bug) or glitch negative. When that
happens the lap column is rebuilt from GPS start/finish crossings when GPS is
logged, otherwise from time gaps between samples.
"""
from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import pandas as pd

from .. import config
from ..data.schemas import LapDetectionMethod, LapIntegrityReport, LapReconstruction

logger = logging.getLogger(__name__)

LAP_32768_BUG = 32768  # ECU 16-bit overflow
CORRUPT_LAP_THRESHOLD = 1000  # real sessions never get near this
LAP_BOUNDARY_GAP_FRACTION = 0.8


def is_corrupt_lap(lap: int) -> bool:
    return lap == LAP_32768_BUG or lap < 0 or lap > CORRUPT_LAP_THRESHOLD


def detect_corrupt_laps(df: pd.DataFrame) -> list[int]:
    """Distinct corrupt lap values, in order of first appearance."""
    laps = df["lap"].to_numpy(dtype=int)
    mask = (laps == LAP_32768_BUG) | (laps < 0) | (laps > CORRUPT_LAP_THRESHOLD)
    return [int(lap) for lap in pd.unique(laps[mask])]


def reconstruct_laps_time_based(
    df: pd.DataFrame,
    expected_lap_ms: Optional[float] = None,
) -> pd.DataFrame:
    """
    Rebuild lap numbers from time gaps, trusting sane telemetry values.

    A new lap starts when the gap to the previous sample exceeds 80% of the
    expected lap duration, or when the counter reports a plausible lap above
    the last trusted one. Any plausible counter value is adopted as-is.

    Args:
        df: Raw telemetry with meta_time (ms) and lap
        expected_lap_ms: Expected lap duration (default: config.expected_lap_ms())

    Returns:
        Copy of df with the lap column rebuilt
    """
    if len(df) == 0:
        return df.copy()
    if expected_lap_ms is None:
        expected_lap_ms = config.expected_lap_ms()

    times = df["meta_time"].to_numpy(dtype=float)
    laps = df["lap"].to_numpy(dtype=int)
    rebuilt = np.empty(len(laps), dtype=int)

    current_lap = 1
    last_valid_lap = 1
    last_time = times[0]

    for i in range(len(laps)):
        gap = times[i] - last_time
        is_boundary = (
            gap > expected_lap_ms * LAP_BOUNDARY_GAP_FRACTION
            or (laps[i] > last_valid_lap and laps[i] < CORRUPT_LAP_THRESHOLD)
        )
        if is_boundary and i > 0:
            current_lap += 1

        if 0 < laps[i] < CORRUPT_LAP_THRESHOLD:
            current_lap = int(laps[i])
            last_valid_lap = int(laps[i])

        rebuilt[i] = current_lap
        last_time = times[i]

    result = df.copy()
    result["lap"] = rebuilt
    return result


def reconstruct_laps_gps_based(
    df: pd.DataFrame,
    sf_line_lat: Optional[float] = None,
    sf_line_threshold: Optional[float] = None,
) -> pd.DataFrame:
    """
    Rebuild lap numbers from start/finish line crossings.

    A crossing is a sample whose latitude enters the tolerance band around the
    start/finish latitude from outside it. This is a coarse heuristic, not a
    geofence: only latitude is checked.

    Args:
        df: Raw telemetry with vbox_lat_min
        sf_line_lat: Start/finish latitude (default: config.sf_line_lat())
        sf_line_threshold: Band half-width (default: config.sf_line_threshold())

    Returns:
        Copy of df with the lap column rebuilt, starting at lap 1
    """
    if len(df) == 0:
        return df.copy()
    if sf_line_lat is None:
        sf_line_lat = config.sf_line_lat()
    if sf_line_threshold is None:
        sf_line_threshold = config.sf_line_threshold()

    lats = df["vbox_lat_min"].to_numpy(dtype=float)
    rebuilt = np.empty(len(lats), dtype=int)

    current_lap = 1
    last_lat = lats[0]

    for i, lat in enumerate(lats):
        crossed = (
            lat != 0
            and abs(lat - sf_line_lat) < sf_line_threshold
            and abs(last_lat - sf_line_lat) > sf_line_threshold
        )
        if crossed and i > 0:
            current_lap += 1

        rebuilt[i] = current_lap
        last_lat = lat

    result = df.copy()
    result["lap"] = rebuilt
    return result


def has_gps(df: pd.DataFrame) -> bool:
    return bool(((df["vbox_lat_min"] != 0) & (df["vbox_long_minutes"] != 0)).any())


def reconstruct_laps_hybrid(df: pd.DataFrame) -> LapReconstruction:
    """
    Pick a lap source: raw telemetry if clean, else GPS, else time gaps.

    Returns:
        LapReconstruction with the (possibly rebuilt) data and the method used
    """
    corrupt_laps = detect_corrupt_laps(df)
    if not corrupt_laps:
        return LapReconstruction(data=df, method="telemetry")

    if has_gps(df):
        logger.info(f"Corrupt lap counters {corrupt_laps}; rebuilding laps from GPS crossings")
        return LapReconstruction(data=reconstruct_laps_gps_based(df), method="gps-based")

    logger.info(f"Corrupt lap counters {corrupt_laps}; rebuilding laps from time gaps")
    return LapReconstruction(data=reconstruct_laps_time_based(df), method="time-based")


def generate_integrity_report(
    original: pd.DataFrame,
    reconstructed: pd.DataFrame,
    method: LapDetectionMethod = "hybrid",
) -> LapIntegrityReport:
    """
    Summarize lap corruption and which laps had to be rebuilt.

    Args:
        original: Raw telemetry as logged
        reconstructed: Same rows after lap reconstruction
        method: Detection method that produced ``reconstructed``

    Returns:
        LapIntegrityReport
    """
    corrupted_laps = detect_corrupt_laps(original)

    original_laps = original["lap"].to_numpy(dtype=int)
    rebuilt_laps = reconstructed["lap"].to_numpy(dtype=int)
    n = min(len(original_laps), len(rebuilt_laps))
    changed = original_laps[:n] != rebuilt_laps[:n]
    reconstructed_laps = [int(lap) for lap in pd.unique(rebuilt_laps[:n][changed])]

    total_laps = int(rebuilt_laps.max()) if len(rebuilt_laps) else 0
    confidence = 1.0 - len(corrupted_laps) / (total_laps or 1)

    return LapIntegrityReport(
        total_laps=total_laps,
        corrupted_laps=corrupted_laps,
        reconstructed_laps=reconstructed_laps,
        lap_detection_method=method,
        confidence=float(np.clip(confidence, 0.0, 1.0)),
    )
