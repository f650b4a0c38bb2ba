"""End-to-end telemetry processing.

Two entry points:
- ``process_csv`` / ``process_telemetry``: raw dataset -> cleaned laps and a
  health report
- ``recommend_pit_stop``: current lap + laps/degradation seen so far -> pit
  recommendation
"""
from __future__ import annotations

import dataclasses
import logging
from typing import Optional

import pandas as pd

from .data.schemas import (
    CleanedLap,
    PitRecommendation,
    RaceStrategy,
    SessionResult,
    TireDegradation,
)
from .features.lap_aggregator import aggregate_laps, get_racing_laps
from .loaders import EmptyTelemetryError, parse_telemetry_csv
from .models.tire_degradation import calculate_tire_degradation
from .quality.health import generate_health_report
from .quality.laps import reconstruct_laps_hybrid
from .quality.timestamps import analyze_time_drift, apply_corrections
from .strategy.pit_strategy import calculate_pit_recommendation

logger = logging.getLogger(__name__)


def process_telemetry(raw: pd.DataFrame) -> SessionResult:
    """
    Clean a full raw telemetry session.

    Args:
        raw: Parsed raw telemetry (see loaders.parse_telemetry_csv)

    Returns:
        SessionResult with cleaned laps and the health report
    """
    corrections = analyze_time_drift(raw)
    corrected = apply_corrections(raw, corrections)

    reconstruction = reconstruct_laps_hybrid(corrected)
    laps = aggregate_laps(reconstruction.data)

    health_report = generate_health_report(
        raw,
        reconstruction.data,
        method=reconstruction.method,
        corrections=corrections,
    )

    logger.info(
        f"Processed {len(raw)} points into {len(laps)} laps "
        f"(method={reconstruction.method}, quality={health_report.data_quality_score:.1f})"
    )
    return SessionResult(laps=laps, health_report=health_report, raw_points=len(raw))


def process_csv(text: str) -> SessionResult:
    """Parse and process CSV text; unusable input is reported, not raised."""
    try:
        raw = parse_telemetry_csv(text)
    except EmptyTelemetryError as e:
        logger.warning(f"No telemetry processed: {e}")
        return SessionResult(laps=[], health_report=None, error=str(e))
    return process_telemetry(raw)


def build_race_strategy(
    raw: pd.DataFrame,
    laps: list[CleanedLap],
    current_lap: int = 1,
) -> RaceStrategy:
    """Assemble the RaceStrategy snapshot for a processed session."""
    tire_deg = calculate_tire_degradation(laps)
    racing_laps = get_racing_laps(laps)

    average_lap_time = (
        sum(lap.lap_time for lap in racing_laps) / len(racing_laps) if racing_laps else 0.0
    )
    best_lap_time = min((lap.lap_time for lap in racing_laps), default=0.0)

    chassis = raw["chassis_number"].iloc[0] if len(raw) else None

    return RaceStrategy(
        car_number=int(raw["car_number"].iloc[0]) if len(raw) else 0,
        chassis_number=None if chassis is None or pd.isna(chassis) else int(chassis),
        current_lap=current_lap,
        total_laps=max((lap.lap_number for lap in laps), default=0),
        laps=laps,
        tire_degradation=tire_deg,
        pit_recommendations=[],
        average_lap_time=average_lap_time,
        best_lap_time=best_lap_time,
    )


def recommend_pit_stop(
    current_lap: int,
    laps: list[CleanedLap],
    tire_deg: list[TireDegradation],
    total_laps: Optional[int] = None,
) -> PitRecommendation:
    """Pit recommendation using only laps completed by ``current_lap``."""
    visible_laps = [lap for lap in laps if lap.lap_number <= current_lap]
    visible_deg = [d for d in tire_deg if d.lap_number <= current_lap]
    return calculate_pit_recommendation(current_lap, visible_laps, visible_deg, total_laps)


def advance_strategy(strategy: RaceStrategy, current_lap: int) -> RaceStrategy:
    """New snapshot of ``strategy`` at ``current_lap`` with a fresh recommendation."""
    recommendation = recommend_pit_stop(
        current_lap,
        strategy.laps,
        strategy.tire_degradation,
        strategy.total_laps,
    )
    if recommendation.urgency == "high":
        logger.info(f"Lap {current_lap}: high urgency pit call for lap {recommendation.recommended_lap}")
    return dataclasses.replace(strategy, current_lap=current_lap, pit_recommendations=[recommendation])
