import pytest

from racesense.data.schemas import PitRecommendation
from racesense.strategy.summary import calculate_lap_deltas, summarize_race

from conftest import make_degradation, make_lap


def recommendation(lap, urgency):
    return PitRecommendation(
        recommended_lap=lap,
        current_lap=lap - 3,
        reason="",
        time_saving=0.0,
        urgency=urgency,
        scenarios=[],
    )


def test_lap_deltas():
    laps = [make_lap(1, 92.0), make_lap(2, 90.0), make_lap(3, 94.0)]
    deltas = calculate_lap_deltas(laps, best_lap_time=90.0, average_lap_time=92.0)

    assert [d.delta_to_best for d in deltas] == [2.0, 0.0, 4.0]
    assert [d.delta_to_average for d in deltas] == [0.0, -2.0, 2.0]


def test_summarize_race():
    laps = [
        make_lap(1, 92.0),
        make_lap(2, 90.0),
        make_lap(3, 191.0, is_pit_lap=True),
        make_lap(4, 91.0),
    ]
    tire_deg = make_degradation([0.5, 0.5, 0.5, 0.5])  # lap times 90.0 .. 91.5
    recs = [recommendation(5, "medium"), recommendation(6, "high"), recommendation(8, "high")]

    summary = summarize_race(laps, tire_deg, recs)

    assert summary.best_lap_number == 2
    assert summary.best_lap_time == 90.0
    assert summary.average_lap_time == pytest.approx(91.0)
    assert summary.total_degradation == pytest.approx(1.5)
    assert summary.average_degradation_rate == pytest.approx(0.375)
    assert summary.observed_pit_lap == 3
    assert summary.high_urgency_count == 2
    # |3 - 6| laps at the average rate
    assert summary.time_savings_estimate == pytest.approx(3 * 0.375)


def test_summary_of_empty_session():
    summary = summarize_race([], [], [])
    assert summary.best_lap_number == 0
    assert summary.average_lap_time == 0.0
    assert summary.observed_pit_lap == 0
    assert summary.time_savings_estimate == 0.0
