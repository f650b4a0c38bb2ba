"""Convenience exports for RaceSense model components."""

from .tire_degradation import (
    baseline_lap_time,
    calculate_std_dev,
    calculate_tire_degradation,
)

__all__ = [
    "baseline_lap_time",
    "calculate_std_dev",
    "calculate_tire_degradation",
]
