"""Pit strategy: scenario search, undercut check, race summary."""

from .pit_strategy import (
    calculate_pit_recommendation,
    calculate_pit_scenarios,
    candidate_pit_laps,
    classify_urgency,
    compare_pit_laps,
    get_baseline_lap_time,
    project_no_stop_scenario,
    simulate_pit_scenario,
)
from .summary import calculate_lap_deltas, summarize_race
from .undercut import analyze_undercut_opportunity

__all__ = [
    "calculate_pit_recommendation",
    "calculate_pit_scenarios",
    "candidate_pit_laps",
    "classify_urgency",
    "compare_pit_laps",
    "get_baseline_lap_time",
    "project_no_stop_scenario",
    "simulate_pit_scenario",
    "analyze_undercut_opportunity",
    "calculate_lap_deltas",
    "summarize_race",
]
