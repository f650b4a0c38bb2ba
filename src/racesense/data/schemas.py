"""Typed dataclasses for telemetry-derived structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

import pandas as pd

LapDetectionMethod = Literal["telemetry", "time-based", "gps-based", "hybrid"]
Urgency = Literal["low", "medium", "high"]


@dataclass(frozen=True)
class TimestampCorrection:
    original_ecu_time: float
    corrected_timestamp: float
    drift_offset: float  # ms
    confidence: float  # 0-1


@dataclass(frozen=True)
class CarNumberChange:
    lap: int
    old_number: int
    new_number: int


@dataclass
class VehicleIdentity:
    """Per-chassis identity; car numbers are display-only and may change."""

    chassis_number: int
    car_numbers: List[int]
    primary_car_number: int
    last_seen_car_number: int
    car_number_changes: List[CarNumberChange] = field(default_factory=list)


@dataclass(frozen=True)
class LapIntegrityReport:
    total_laps: int
    corrupted_laps: List[int]
    reconstructed_laps: List[int]
    lap_detection_method: LapDetectionMethod
    confidence: float


@dataclass(frozen=True)
class LapReconstruction:
    data: pd.DataFrame = field(repr=False, compare=False)
    method: LapDetectionMethod


@dataclass(frozen=True)
class CleanedLap:
    lap_number: int
    car_number: int
    chassis_number: Optional[int]
    lap_time: float  # seconds
    avg_speed: float
    max_speed: float
    is_pit_lap: bool
    telemetry_points: pd.DataFrame = field(repr=False, compare=False)


@dataclass(frozen=True)
class TireDegradation:
    lap_number: int
    lap_time: float
    degradation_rate: float  # seconds per lap
    predicted_next_lap: float
    confidence: float


@dataclass(frozen=True)
class PitScenario:
    pit_lap: int
    total_time: float
    description: str
    projected_position: int = 0


@dataclass(frozen=True)
class PitRecommendation:
    recommended_lap: int
    current_lap: int
    reason: str
    time_saving: float
    urgency: Urgency
    scenarios: List[PitScenario]


@dataclass(frozen=True)
class WhatIfComparison:
    scenario_a: PitScenario
    scenario_b: PitScenario
    time_difference: float  # b - a; positive means a is faster
    degradation_rate: float
    baseline_lap_time: float


@dataclass(frozen=True)
class UndercutAnalysis:
    has_opportunity: bool
    advantage: float
    description: str


@dataclass(frozen=True)
class CorrectionCounts:
    timestamps_corrected: int
    lap_numbers_fixed: int
    vehicle_ids_resolved: int


@dataclass(frozen=True)
class TelemetryHealthReport:
    timestamp_drift_percent: float
    lap_anomaly_count: int
    car_number_mismatch_count: int
    recovered_laps_count: int
    data_quality_score: float  # 0-100
    vehicle_identities: List[VehicleIdentity]
    lap_integrity: LapIntegrityReport
    corrections: CorrectionCounts


@dataclass(frozen=True)
class LapDelta:
    lap_number: int
    lap_time: float
    delta_to_best: float
    delta_to_average: float


@dataclass(frozen=True)
class RaceSummary:
    best_lap_number: int
    best_lap_time: float
    average_lap_time: float
    total_degradation: float
    average_degradation_rate: float
    observed_pit_lap: int
    high_urgency_count: int
    time_savings_estimate: float


@dataclass
class RaceStrategy:
    car_number: int
    chassis_number: Optional[int]
    current_lap: int
    total_laps: int
    laps: List[CleanedLap]
    tire_degradation: List[TireDegradation]
    pit_recommendations: List[PitRecommendation]
    average_lap_time: float
    best_lap_time: float


@dataclass(frozen=True)
class SessionResult:
    laps: List[CleanedLap]
    health_report: Optional[TelemetryHealthReport]
    raw_points: int = 0
    error: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return self.error is None and self.health_report is not None
