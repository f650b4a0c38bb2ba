import pytest

from racesense.data.schemas import TimestampCorrection
from racesense.quality.timestamps import (
    analyze_time_drift,
    apply_corrections,
    calculate_drift_percentage,
)

from conftest import make_raw


def test_fewer_than_ten_samples_yields_no_corrections():
    df = make_raw(9)
    assert analyze_time_drift(df) == []


def test_constant_offset_has_no_drift():
    meta = [1000.0 * i for i in range(1, 13)]
    df = make_raw(meta_time=meta, ecu_time=[t - 250.0 for t in meta])

    corrections = analyze_time_drift(df)

    assert len(corrections) == 12
    assert all(c.drift_offset == 0 for c in corrections)
    assert all(c.confidence == 1.0 for c in corrections)
    assert [c.corrected_timestamp for c in corrections] == meta


def test_clock_jump_reanchors_on_trailing_window():
    meta = [1000.0 * i for i in range(12)]
    ecu = [t - 1000.0 if i < 5 else t - 1500.0 for i, t in enumerate(meta)]
    df = make_raw(meta_time=meta, ecu_time=ecu)

    corrections = analyze_time_drift(df)

    # Drift is reported against the offset in force before re-anchoring.
    assert corrections[4].drift_offset == 0
    assert corrections[5].drift_offset == pytest.approx(500.0)
    assert corrections[5].confidence == pytest.approx(0.5)
    # New offset = mean of samples 0..5 = (5 * 1000 + 1500) / 6
    assert corrections[6].drift_offset == pytest.approx(1500.0 - 6500.0 / 6)
    assert corrections[5].original_ecu_time == ecu[5]
    assert corrections[5].corrected_timestamp == meta[5]


def test_confidence_is_clamped():
    meta = [1000.0 * i for i in range(1, 12)]
    ecu = list(meta)
    ecu[3] -= 5000.0
    corrections = analyze_time_drift(make_raw(meta_time=meta, ecu_time=ecu))
    assert corrections[3].confidence == 0.0


def test_drift_percentage():
    corrections = [
        TimestampCorrection(0.0, 500.0, 10.0, 0.99),
        TimestampCorrection(0.0, 1000.0, -30.0, 0.97),
    ]
    assert calculate_drift_percentage(corrections) == pytest.approx(2.0)
    assert calculate_drift_percentage([]) == 0.0


def test_apply_corrections_uses_logger_clock():
    meta = [1000.0 * i for i in range(1, 13)]
    df = make_raw(meta_time=meta, ecu_time=[t + 40.0 for t in meta])

    corrected = apply_corrections(df, analyze_time_drift(df))

    assert corrected["ecu_time"].tolist() == meta
    assert df["ecu_time"].iloc[0] == 1040.0  # input untouched


def test_apply_corrections_without_corrections_falls_back_to_meta_time():
    df = make_raw(meta_time=[1000.0, 2000.0], ecu_time=[5.0, 6.0])
    corrected = apply_corrections(df, [])
    assert corrected["ecu_time"].tolist() == [1000.0, 2000.0]
