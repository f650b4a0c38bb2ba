"""Undercut check against a single competitor's tire degradation."""
from __future__ import annotations

from typing import Optional

from ..data.schemas import TireDegradation, UndercutAnalysis

RECENT_LAPS = 3
OPPORTUNITY_RATIO = 1.2
ADVANTAGE_LAPS = 3


def _recent_rate(tire_deg: list[TireDegradation]) -> float:
    return sum(d.degradation_rate for d in tire_deg[-RECENT_LAPS:]) / RECENT_LAPS


def analyze_undercut_opportunity(
    current_lap: int,
    my_tire_deg: list[TireDegradation],
    competitor_tire_deg: Optional[list[TireDegradation]] = None,
) -> UndercutAnalysis:
    """
    Flag an undercut when the competitor's tires fade 20% faster than ours.

    Args:
        current_lap: Current lap (informational)
        my_tire_deg: Our degradation history
        competitor_tire_deg: Competitor degradation history, if known

    Returns:
        UndercutAnalysis; advantage is the rate gap over three laps in seconds
    """
    if not competitor_tire_deg or len(my_tire_deg) < RECENT_LAPS:
        return UndercutAnalysis(
            has_opportunity=False,
            advantage=0.0,
            description="Insufficient data for undercut analysis",
        )

    my_rate = _recent_rate(my_tire_deg)
    competitor_rate = _recent_rate(competitor_tire_deg)

    has_opportunity = competitor_rate > my_rate * OPPORTUNITY_RATIO
    if not has_opportunity:
        return UndercutAnalysis(
            has_opportunity=False,
            advantage=0.0,
            description="No clear undercut opportunity",
        )

    return UndercutAnalysis(
        has_opportunity=True,
        advantage=(competitor_rate - my_rate) * ADVANTAGE_LAPS,
        description=(
            f"Undercut available on lap {current_lap}! Competitor deg: {competitor_rate:.3f}s/lap "
            f"vs yours: {my_rate:.3f}s/lap"
        ),
    )
