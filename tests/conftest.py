"""Shared fixtures and frame builders."""
from __future__ import annotations

import pandas as pd
import pytest

from racesense.data.schemas import CleanedLap, TireDegradation
from racesense.loaders import RAW_COLUMNS, parse_telemetry_csv
from racesense.sample_data import generate_sample_cota_data


def make_raw(n=None, **columns) -> pd.DataFrame:
    """Raw telemetry frame with RAW_COLUMNS; unspecified channels are 0."""
    if n is None:
        n = max(len(v) for v in columns.values() if isinstance(v, (list, tuple)))
    data = {}
    for name in RAW_COLUMNS:
        value = columns.get(name)
        if value is None:
            value = [i * 1000.0 for i in range(1, n + 1)] if name in ("meta_time", "ecu_time") else 0
        if not isinstance(value, (list, tuple)):
            value = [value] * n
        data[name] = list(value)
    df = pd.DataFrame(data)
    df["chassis_number"] = df["chassis_number"].astype("Int64")
    return df


def make_lap(lap_number: int, lap_time: float, is_pit_lap: bool = False) -> CleanedLap:
    return CleanedLap(
        lap_number=lap_number,
        car_number=42,
        chassis_number=7,
        lap_time=lap_time,
        avg_speed=40.0 if is_pit_lap else 120.0,
        max_speed=180.0,
        is_pit_lap=is_pit_lap,
        telemetry_points=pd.DataFrame(),
    )


def make_degradation(rates: list[float], start_lap: int = 1) -> list[TireDegradation]:
    return [
        TireDegradation(
            lap_number=start_lap + i,
            lap_time=90.0 + i * rate,
            degradation_rate=rate,
            predicted_next_lap=90.0 + (i + 1) * rate,
            confidence=1.0,
        )
        for i, rate in enumerate(rates)
    ]


@pytest.fixture(scope="session")
def sample_csv() -> str:
    return generate_sample_cota_data(seed=42)


@pytest.fixture
def sample_raw(sample_csv) -> pd.DataFrame:
    return parse_telemetry_csv(sample_csv)
