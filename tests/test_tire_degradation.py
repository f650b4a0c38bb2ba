import pytest

from racesense.models.tire_degradation import (
    baseline_lap_time,
    calculate_std_dev,
    calculate_tire_degradation,
)

from conftest import make_lap


def test_linear_fade_gives_constant_rate():
    laps = [make_lap(n, t) for n, t in enumerate([90.0, 90.5, 91.0, 91.5], start=1)]

    degradation = calculate_tire_degradation(laps)

    assert [d.lap_number for d in degradation] == [1, 2, 3, 4]
    assert degradation[0].degradation_rate == 0.0
    assert degradation[1].degradation_rate == pytest.approx(0.5)
    assert degradation[3].degradation_rate == pytest.approx(0.5)
    assert degradation[3].predicted_next_lap == pytest.approx(92.0)


def test_fewer_than_three_racing_laps_yields_nothing():
    laps = [make_lap(1, 90.0), make_lap(2, 90.5), make_lap(3, 190.0, is_pit_lap=True)]
    assert calculate_tire_degradation(laps) == []


def test_pit_laps_are_skipped_in_the_window():
    laps = [
        make_lap(1, 90.0),
        make_lap(2, 90.4),
        make_lap(3, 190.0, is_pit_lap=True),
        make_lap(4, 90.8),
    ]

    degradation = calculate_tire_degradation(laps)

    assert [d.lap_number for d in degradation] == [1, 2, 4]
    assert degradation[-1].degradation_rate == pytest.approx(0.4)


def test_confidence_drops_with_lap_time_spread():
    steady = calculate_tire_degradation([make_lap(n, 90.0) for n in range(1, 4)])
    assert all(d.confidence == 1.0 for d in steady)

    scattered = calculate_tire_degradation(
        [make_lap(1, 90.0), make_lap(2, 110.0), make_lap(3, 130.0)]
    )
    assert scattered[-1].confidence == 0.0
    assert 0.0 <= scattered[1].confidence < 1.0


def test_std_dev_is_population():
    assert calculate_std_dev([]) == 0.0
    assert calculate_std_dev([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0]) == pytest.approx(2.0)


def test_baseline_is_fastest_of_first_three_racing_laps():
    laps = [
        make_lap(1, 95.0),
        make_lap(2, 190.0, is_pit_lap=True),
        make_lap(3, 93.0),
        make_lap(4, 94.0),
        make_lap(5, 80.0),
    ]
    assert baseline_lap_time(laps) == 93.0
    assert baseline_lap_time([]) == 0.0
