"""Data quality: clock drift, vehicle identity, lap integrity, health score."""

from .health import calculate_quality_score, generate_health_report
from .laps import (
    detect_corrupt_laps,
    generate_integrity_report,
    is_corrupt_lap,
    reconstruct_laps_gps_based,
    reconstruct_laps_hybrid,
    reconstruct_laps_time_based,
)
from .timestamps import analyze_time_drift, apply_corrections, calculate_drift_percentage
from .vehicles import (
    VehicleRegistry,
    build_vehicle_map,
    count_car_number_mismatches,
    get_vehicle_identity,
)

__all__ = [
    "analyze_time_drift",
    "apply_corrections",
    "calculate_drift_percentage",
    "VehicleRegistry",
    "build_vehicle_map",
    "count_car_number_mismatches",
    "get_vehicle_identity",
    "is_corrupt_lap",
    "detect_corrupt_laps",
    "reconstruct_laps_time_based",
    "reconstruct_laps_gps_based",
    "reconstruct_laps_hybrid",
    "generate_integrity_report",
    "calculate_quality_score",
    "generate_health_report",
]
