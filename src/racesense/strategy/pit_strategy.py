"""Pit window search over discrete candidate pit laps.

Each candidate pit lap is scored by projected time to the flag: laps on the
current tires accrue linear degradation, the stop costs a fixed pit loss, and
fresh tires start with a pace benefit that fades while wearing at a reduced
rate. The recommendation is the cheapest candidate.
"""
from __future__ import annotations

from typing import Optional

from .. import config
from ..data.schemas import (
    CleanedLap,
    PitRecommendation,
    PitScenario,
    TireDegradation,
    Urgency,
    WhatIfComparison,
)
from ..features.lap_aggregator import get_racing_laps

TIRE_CHANGE_BENEFIT = 2.5  # seconds per lap on fresh tires
DEGRADATION_THRESHOLD = 0.3  # s/lap
FRESH_BENEFIT_DECAY = 0.5
FRESH_DEGRADATION_FACTOR = 0.3
DEFAULT_BASELINE_LAP_TIME = 90.0  # COTA
DEFAULT_DEGRADATION_RATE = 0.2

MIN_DEGRADATION_POINTS = 5
RECENT_DEGRADATION_LAPS = 3
PIT_WINDOW_LAPS = 15
PIT_WINDOW_STEP = 2
FINISH_BUFFER_LAPS = 5
PIT_NOW_LAPS = 2
PIT_SOON_LAPS = 5


def get_baseline_lap_time(laps: list[CleanedLap]) -> float:
    """Mean of the three fastest racing laps (90s when there are none)."""
    lap_times = sorted(lap.lap_time for lap in get_racing_laps(laps))
    if not lap_times:
        return DEFAULT_BASELINE_LAP_TIME
    best = lap_times[:3]
    return sum(best) / len(best)


def recent_degradation_rate(tire_deg: list[TireDegradation]) -> float:
    recent = tire_deg[-RECENT_DEGRADATION_LAPS:]
    return sum(d.degradation_rate for d in recent) / len(recent)


def simulate_pit_scenario(
    pit_lap: int,
    current_lap: int,
    total_laps: int,
    degradation_rate: float,
    baseline_lap_time: float,
    pit_loss: Optional[float] = None,
) -> PitScenario:
    """
    Project total remaining race time when pitting on ``pit_lap``.

    Args:
        pit_lap: Lap to pit on
        current_lap: Current lap
        total_laps: Race distance in laps
        degradation_rate: Current tire degradation (s/lap)
        baseline_lap_time: Reference clean-air lap time (s)
        pit_loss: Time lost in the pit lane (default: config.pit_loss_time())

    Returns:
        PitScenario
    """
    if pit_loss is None:
        pit_loss = config.pit_loss_time()

    laps_on_current_tires = pit_lap - current_lap
    time_on_old_tires = 0.0
    for i in range(laps_on_current_tires):
        time_on_old_tires += baseline_lap_time + degradation_rate * (current_lap + i - 1)

    laps_on_new_tires = total_laps - pit_lap
    time_on_new_tires = 0.0
    for i in range(laps_on_new_tires):
        fresh_tire_benefit = max(0.0, TIRE_CHANGE_BENEFIT - i * degradation_rate * FRESH_BENEFIT_DECAY)
        time_on_new_tires += (
            baseline_lap_time - fresh_tire_benefit + degradation_rate * i * FRESH_DEGRADATION_FACTOR
        )

    return PitScenario(
        pit_lap=pit_lap,
        total_time=time_on_old_tires + pit_loss + time_on_new_tires,
        description=(
            f"Pit lap {pit_lap}: {laps_on_current_tires} laps old tires, "
            f"{laps_on_new_tires} laps fresh tires"
        ),
    )


def candidate_pit_laps(current_lap: int, total_laps: int) -> list[int]:
    """Every other lap from next lap, up to 15 laps out and 5 laps before the flag."""
    last_candidate = min(current_lap + PIT_WINDOW_LAPS, total_laps - FINISH_BUFFER_LAPS)
    return list(range(current_lap + 1, last_candidate + 1, PIT_WINDOW_STEP))


def calculate_pit_scenarios(
    current_lap: int,
    total_laps: int,
    degradation_rate: float,
    baseline_lap_time: float,
) -> list[PitScenario]:
    """
    Score every candidate pit lap.

    Returns:
        Scenarios ranked by total time. The sort is stable over an ascending
        lap sweep, so equal times keep the earlier pit lap first.
    """
    scenarios = [
        simulate_pit_scenario(pit_lap, current_lap, total_laps, degradation_rate, baseline_lap_time)
        for pit_lap in candidate_pit_laps(current_lap, total_laps)
    ]
    return sorted(scenarios, key=lambda s: s.total_time)


def project_no_stop_scenario(
    current_lap: int,
    total_laps: int,
    degradation_rate: float,
    baseline_lap_time: float,
) -> PitScenario:
    """Remaining race time running to the flag on the current tires."""
    total_time = 0.0
    for i in range(total_laps - current_lap):
        total_time += baseline_lap_time + degradation_rate * (current_lap + i)

    return PitScenario(
        pit_lap=-1,
        total_time=total_time,
        description="No pit stop - run to end on current tires",
    )


def classify_urgency(degradation_rate: float) -> Urgency:
    if degradation_rate > DEGRADATION_THRESHOLD * 2:
        return "high"
    if degradation_rate > DEGRADATION_THRESHOLD:
        return "medium"
    return "low"


def _recommendation_reason(
    pit_lap: int,
    current_lap: int,
    degradation_rate: float,
    time_saving: float,
) -> str:
    if pit_lap <= current_lap + PIT_NOW_LAPS:
        return (
            f"Pit NOW! Tires degrading at {degradation_rate:.3f}s/lap. "
            f"Expected to save {time_saving:.1f}s."
        )
    if pit_lap <= current_lap + PIT_SOON_LAPS:
        return (
            f"Pit in {pit_lap - current_lap} laps. Tire deg accelerating. "
            f"Save {time_saving:.1f}s vs no-stop."
        )
    return (
        f"Stay out. Optimal window: Lap {pit_lap}. "
        f"Current deg: {degradation_rate:.3f}s/lap."
    )


def calculate_pit_recommendation(
    current_lap: int,
    laps: list[CleanedLap],
    tire_deg: list[TireDegradation],
    total_race_laps: Optional[int] = None,
) -> PitRecommendation:
    """
    Recommend a pit lap from the laps seen so far.

    Args:
        current_lap: Current lap
        laps: CleanedLaps up to the current lap
        tire_deg: Degradation entries up to the current lap
        total_race_laps: Race distance (default: config.total_race_laps())

    Returns:
        PitRecommendation. With fewer than 5 degradation entries a low-urgency
        placeholder for current_lap + 10 is returned; when no candidate pit
        lap remains the car is told to stay out.
    """
    if total_race_laps is None:
        total_race_laps = config.total_race_laps()

    if len(tire_deg) < MIN_DEGRADATION_POINTS:
        return PitRecommendation(
            recommended_lap=current_lap + 10,
            current_lap=current_lap,
            reason="Insufficient data - building tire model...",
            time_saving=0.0,
            urgency="low",
            scenarios=[],
        )

    degradation_rate = recent_degradation_rate(tire_deg)
    baseline = get_baseline_lap_time(laps)

    scenarios = calculate_pit_scenarios(current_lap, total_race_laps, degradation_rate, baseline)
    if not scenarios:
        return PitRecommendation(
            recommended_lap=total_race_laps,
            current_lap=current_lap,
            reason="Race ending - stay out and push to the finish!",
            time_saving=0.0,
            urgency="low",
            scenarios=[],
        )

    optimal = scenarios[0]
    no_stop = project_no_stop_scenario(current_lap, total_race_laps, degradation_rate, baseline)
    time_saving = no_stop.total_time - optimal.total_time

    return PitRecommendation(
        recommended_lap=optimal.pit_lap,
        current_lap=current_lap,
        reason=_recommendation_reason(optimal.pit_lap, current_lap, degradation_rate, time_saving),
        time_saving=time_saving,
        urgency=classify_urgency(degradation_rate),
        scenarios=scenarios,
    )


def compare_pit_laps(
    current_lap: int,
    total_laps: int,
    laps: list[CleanedLap],
    tire_deg: list[TireDegradation],
    pit_lap_a: int,
    pit_lap_b: int,
) -> WhatIfComparison:
    """
    Compare two user-chosen pit laps under the same cost model.

    The degradation rate falls back to 0.2 s/lap until three degradation
    entries exist.
    """
    if len(tire_deg) < RECENT_DEGRADATION_LAPS:
        degradation_rate = DEFAULT_DEGRADATION_RATE
    else:
        degradation_rate = recent_degradation_rate(tire_deg)
    baseline = get_baseline_lap_time(laps)

    scenario_a = simulate_pit_scenario(pit_lap_a, current_lap, total_laps, degradation_rate, baseline)
    scenario_b = simulate_pit_scenario(pit_lap_b, current_lap, total_laps, degradation_rate, baseline)

    return WhatIfComparison(
        scenario_a=scenario_a,
        scenario_b=scenario_b,
        time_difference=scenario_b.total_time - scenario_a.total_time,
        degradation_rate=degradation_rate,
        baseline_lap_time=baseline,
    )
