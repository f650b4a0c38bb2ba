import pandas as pd
import pytest

from racesense.loaders import (
    RAW_COLUMNS,
    EmptyTelemetryError,
    load_telemetry_csv,
    parse_telemetry_csv,
    resolve_columns,
)

CANONICAL_HEADER = (
    "meta_time,ecu_time,lap,car_number,chassis_number,Speed,Gear,nmot,ath,aps,"
    "pbrake_f,pbrake_r,accx_can,accy_can,Steering_Angle,VBOX_Long_Minutes,"
    "VBOX_Lat_Min,Laptrigger_lapdist_dls"
)


def test_canonical_header_maps_every_field_in_order():
    column_map = resolve_columns(CANONICAL_HEADER.split(","))
    assert [column_map[name] for name in RAW_COLUMNS] == list(range(18))


def test_aliases_are_case_insensitive_and_first_match_wins():
    column_map = resolve_columns(["Timestamp", "ECU", "LapNumber", "Car", "Velocity", "RPM"])
    assert column_map["meta_time"] == 0
    assert column_map["ecu_time"] == 1
    assert column_map["lap"] == 2
    assert column_map["car_number"] == 3
    assert column_map["speed"] == 4
    assert column_map["nmot"] == 5
    assert column_map["chassis_number"] == -1
    assert column_map["ath"] == -1


def test_parse_canonical_rows():
    text = "\n".join([
        CANONICAL_HEADER,
        "1000,990,3,42,7,150.5,5,7500,90.0,88.0,1.0,0.5,0.4,-0.2,-12.5,-97.6,30.13,120.0",
        "1100,1090,3,42,7,151.0,5,7600,91.0,89.0,1.0,0.5,0.4,-0.2,-12.0,-97.6,30.13,125.0",
    ])
    df = parse_telemetry_csv(text)

    assert list(df.columns) == RAW_COLUMNS
    assert len(df) == 2
    assert df["meta_time"].tolist() == [1000.0, 1100.0]
    assert df["lap"].tolist() == [3, 3]
    assert df["chassis_number"].tolist() == [7, 7]
    assert df["speed"].iloc[0] == pytest.approx(150.5)
    assert df["steering_angle"].iloc[1] == pytest.approx(-12.0)


def test_missing_columns_default():
    df = parse_telemetry_csv("timestamp,lap,speed\n1000,2,100\n2000,2,110\n")

    assert df["ecu_time"].tolist() == [1000.0, 2000.0]  # falls back to the other clock
    assert df["car_number"].tolist() == [0, 0]
    assert df["nmot"].tolist() == [0.0, 0.0]
    assert df["chassis_number"].isna().all()


def test_unparseable_values_fall_back():
    text = "\n".join([
        "meta_time,ecu_time,lap,car_number,Speed",
        "abc,,x,42,fast",
        "abc,,2.9,42,120",
        "5000,,2,42,130",
    ])
    df = parse_telemetry_csv(text)

    # Row 0 gets a synthetic 0ms timestamp and is dropped; row 1 gets 100ms.
    assert df["meta_time"].tolist() == [100.0, 5000.0]
    assert df["ecu_time"].tolist() == [100.0, 5000.0]
    assert df["lap"].tolist() == [2, 2]
    assert df["speed"].tolist() == [120.0, 130.0]


def test_blank_lines_and_whitespace_are_ignored():
    text = "\nmeta_time , lap\n\n 1000 , 1 \n\n2000,1\n"
    df = parse_telemetry_csv(text)
    assert df["meta_time"].tolist() == [1000.0, 2000.0]


@pytest.mark.parametrize("text", ["", "meta_time,lap", "\n\n"])
def test_too_few_lines_raises(text):
    with pytest.raises(EmptyTelemetryError):
        parse_telemetry_csv(text)


def test_no_valid_rows_raises():
    with pytest.raises(EmptyTelemetryError, match="No valid data points"):
        parse_telemetry_csv("meta_time,ecu_time,lap\n-5,-5,1\n")


def test_load_from_file(tmp_path, sample_csv):
    path = tmp_path / "session.csv"
    path.write_text(sample_csv, encoding="utf-8")
    df = load_telemetry_csv(path)
    assert len(df) > 4000
    assert isinstance(df, pd.DataFrame)


def test_quoted_fields_are_parsed():
    text = "\n".join([
        '"meta_time","ecu_time","lap","car_number","Speed"',
        '"1000","990","3","42","150.5"',
        '"2000","1990","3","42","151.0"',
    ])
    df = parse_telemetry_csv(text)

    assert df["meta_time"].tolist() == [1000.0, 2000.0]
    assert df["ecu_time"].tolist() == [990.0, 1990.0]
    assert df["lap"].tolist() == [3, 3]
    assert df["speed"].tolist() == [150.5, 151.0]


def test_quoted_field_may_contain_a_comma():
    text = 'meta_time,note,Speed\n1000,"pit in, slow",50\n2000,ok,60\n'
    df = parse_telemetry_csv(text)
    assert df["speed"].tolist() == [50.0, 60.0]
