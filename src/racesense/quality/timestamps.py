"""ECU clock drift detection and correction.

The logger clock (``meta_time``) is centrally issued and treated as ground
truth; the ECU clock (``ecu_time``) drifts and occasionally jumps.
"""
from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from ..data.schemas import TimestampCorrection

logger = logging.getLogger(__name__)

MIN_SAMPLES = 10
DRIFT_REANCHOR_MS = 100.0
REANCHOR_WINDOW = 6  # current sample + 5 prior
CONFIDENCE_SCALE_MS = 1000.0


def analyze_time_drift(df: pd.DataFrame) -> list[TimestampCorrection]:
    """
    Measure ECU drift against the logger clock, one correction per sample.

    The ECU/logger offset is anchored on the first sample. Whenever a sample
    drifts more than 100ms from that anchor, the offset is re-anchored to the
    mean offset of the trailing window so a single glitch cannot shift it.

    Args:
        df: Raw telemetry with meta_time and ecu_time (ms)

    Returns:
        List of TimestampCorrection aligned with df rows, or [] when fewer
        than 10 samples are available
    """
    if len(df) < MIN_SAMPLES:
        return []

    meta = df["meta_time"].to_numpy(dtype=float)
    ecu = df["ecu_time"].to_numpy(dtype=float)
    offsets = meta - ecu

    baseline_offset = offsets[0]
    corrections = []
    reanchors = 0

    for i in range(len(meta)):
        expected_ecu_time = meta[i] - baseline_offset
        drift = expected_ecu_time - ecu[i]

        if abs(drift) > DRIFT_REANCHOR_MS and i > 0:
            window = offsets[max(0, i - (REANCHOR_WINDOW - 1)): i + 1]
            baseline_offset = float(window.mean())
            reanchors += 1

        corrections.append(TimestampCorrection(
            original_ecu_time=float(ecu[i]),
            corrected_timestamp=float(meta[i]),
            drift_offset=float(drift),
            confidence=float(np.clip(1.0 - abs(drift) / CONFIDENCE_SCALE_MS, 0.0, 1.0)),
        ))

    if reanchors:
        logger.info(f"ECU clock re-anchored {reanchors} times over {len(meta)} samples")
    return corrections


def calculate_drift_percentage(corrections: list[TimestampCorrection]) -> float:
    """Mean absolute drift as a percentage of the final corrected timestamp."""
    if not corrections:
        return 0.0

    avg_drift = sum(abs(c.drift_offset) for c in corrections) / len(corrections)
    max_expected_time = corrections[-1].corrected_timestamp
    if max_expected_time == 0:
        return 0.0
    return avg_drift / max_expected_time * 100.0


def apply_corrections(
    df: pd.DataFrame,
    corrections: list[TimestampCorrection],
) -> pd.DataFrame:
    """Return a copy of df with ecu_time replaced by the corrected timestamps."""
    corrected = df.copy()
    timestamps = pd.Series(
        [c.corrected_timestamp for c in corrections[: len(df)]],
        index=df.index[: len(corrections)],
        dtype=float,
    )
    timestamps = timestamps.where(timestamps != 0)
    corrected["ecu_time"] = timestamps.reindex(df.index).fillna(df["meta_time"])
    return corrected
