"""Result types shared across the pipeline."""

from .schemas import (
    CarNumberChange,
    CleanedLap,
    CorrectionCounts,
    LapDelta,
    LapIntegrityReport,
    LapReconstruction,
    PitRecommendation,
    PitScenario,
    RaceStrategy,
    RaceSummary,
    SessionResult,
    TelemetryHealthReport,
    TimestampCorrection,
    TireDegradation,
    UndercutAnalysis,
    VehicleIdentity,
    WhatIfComparison,
)

__all__ = [
    "CarNumberChange",
    "CleanedLap",
    "CorrectionCounts",
    "LapDelta",
    "LapIntegrityReport",
    "LapReconstruction",
    "PitRecommendation",
    "PitScenario",
    "RaceStrategy",
    "RaceSummary",
    "SessionResult",
    "TelemetryHealthReport",
    "TimestampCorrection",
    "TireDegradation",
    "UndercutAnalysis",
    "VehicleIdentity",
    "WhatIfComparison",
]
