"""Post-race summary: best/average pace, lap deltas, pit timing review."""
from __future__ import annotations

from ..data.schemas import (
    CleanedLap,
    LapDelta,
    PitRecommendation,
    RaceSummary,
    TireDegradation,
)
from ..features.lap_aggregator import get_racing_laps


def calculate_lap_deltas(
    laps: list[CleanedLap],
    best_lap_time: float,
    average_lap_time: float,
) -> list[LapDelta]:
    """Each lap's time relative to the best and the average lap."""
    return [
        LapDelta(
            lap_number=lap.lap_number,
            lap_time=lap.lap_time,
            delta_to_best=lap.lap_time - best_lap_time,
            delta_to_average=lap.lap_time - average_lap_time,
        )
        for lap in laps
    ]


def summarize_race(
    laps: list[CleanedLap],
    tire_deg: list[TireDegradation],
    pit_recommendations: list[PitRecommendation],
) -> RaceSummary:
    """
    Summarize a finished (or partially replayed) session.

    The time savings estimate prices the gap between the observed pit lap and
    the first high-urgency recommendation at the average degradation rate.
    """
    racing_laps = get_racing_laps(laps)
    best_lap = min(racing_laps, key=lambda lap: lap.lap_time, default=None)
    average_lap_time = (
        sum(lap.lap_time for lap in racing_laps) / len(racing_laps) if racing_laps else 0.0
    )

    total_degradation = tire_deg[-1].lap_time - tire_deg[0].lap_time if tire_deg else 0.0
    average_degradation_rate = total_degradation / len(tire_deg) if len(tire_deg) > 1 else 0.0

    high_urgency = [rec for rec in pit_recommendations if rec.urgency == "high"]
    optimal_pit_lap = high_urgency[0].recommended_lap if high_urgency else 0
    observed_pit_lap = next((lap.lap_number for lap in laps if lap.is_pit_lap), 0)

    if observed_pit_lap > 0 and optimal_pit_lap > 0:
        time_savings_estimate = abs(observed_pit_lap - optimal_pit_lap) * average_degradation_rate
    else:
        time_savings_estimate = 0.0

    return RaceSummary(
        best_lap_number=best_lap.lap_number if best_lap else 0,
        best_lap_time=best_lap.lap_time if best_lap else 0.0,
        average_lap_time=average_lap_time,
        total_degradation=total_degradation,
        average_degradation_rate=average_degradation_rate,
        observed_pit_lap=observed_pit_lap,
        high_urgency_count=len(high_urgency),
        time_savings_estimate=time_savings_estimate,
    )
