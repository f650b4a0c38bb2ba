"""Telemetry health report: one score for timestamp, lap and ID quality."""
from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd

from ..data.schemas import (
    CorrectionCounts,
    LapDetectionMethod,
    TelemetryHealthReport,
    TimestampCorrection,
)
from .laps import detect_corrupt_laps, generate_integrity_report
from .timestamps import analyze_time_drift, calculate_drift_percentage
from .vehicles import build_vehicle_map, count_car_number_mismatches

MAX_DRIFT_PENALTY = 20.0
MAX_LAP_ANOMALY_PENALTY = 30.0
MAX_MISMATCH_PENALTY = 15.0
CORRECTED_DRIFT_MS = 10.0


def calculate_quality_score(
    timestamp_drift_percent: float,
    lap_anomaly_count: int,
    car_number_mismatch_count: int,
    total_data_points: int,
) -> float:
    """
    Data quality score from 0 to 100.

    Each penalty is capped independently:
    - drift: 2 points per percent, up to 20
    - lap anomalies: 1000 x (anomalies / points), up to 30
    - car number changes: 5 points each, up to 15
    """
    score = 100.0
    score -= min(MAX_DRIFT_PENALTY, timestamp_drift_percent * 2)

    lap_anomaly_ratio = lap_anomaly_count / (total_data_points or 1)
    score -= min(MAX_LAP_ANOMALY_PENALTY, lap_anomaly_ratio * 1000)

    score -= min(MAX_MISMATCH_PENALTY, car_number_mismatch_count * 5)

    return float(np.clip(score, 0.0, 100.0))


def generate_health_report(
    original: pd.DataFrame,
    processed: pd.DataFrame,
    method: LapDetectionMethod = "hybrid",
    corrections: Optional[list[TimestampCorrection]] = None,
) -> TelemetryHealthReport:
    """
    Combine timestamp, vehicle and lap diagnostics into one report.

    Args:
        original: Raw telemetry as logged
        processed: Telemetry after lap reconstruction (same rows)
        method: Lap detection method used for ``processed``
        corrections: Precomputed timestamp corrections for ``original``;
            computed here when omitted

    Returns:
        TelemetryHealthReport
    """
    if corrections is None:
        corrections = analyze_time_drift(original)
    timestamp_drift_percent = calculate_drift_percentage(corrections)

    vehicle_map = build_vehicle_map(original)
    car_number_mismatch_count = count_car_number_mismatches(vehicle_map)

    corrupted_laps = detect_corrupt_laps(original)
    lap_integrity = generate_integrity_report(original, processed, method=method)

    data_quality_score = calculate_quality_score(
        timestamp_drift_percent=timestamp_drift_percent,
        lap_anomaly_count=len(corrupted_laps),
        car_number_mismatch_count=car_number_mismatch_count,
        total_data_points=len(original),
    )

    return TelemetryHealthReport(
        timestamp_drift_percent=timestamp_drift_percent,
        lap_anomaly_count=len(corrupted_laps),
        car_number_mismatch_count=car_number_mismatch_count,
        recovered_laps_count=len(lap_integrity.reconstructed_laps),
        data_quality_score=data_quality_score,
        vehicle_identities=vehicle_map.values(),
        lap_integrity=lap_integrity,
        corrections=CorrectionCounts(
            timestamps_corrected=sum(1 for c in corrections if abs(c.drift_offset) > CORRECTED_DRIFT_MS),
            lap_numbers_fixed=len(lap_integrity.reconstructed_laps),
            vehicle_ids_resolved=len(vehicle_map),
        ),
    )
