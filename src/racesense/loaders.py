"""Loaders for raw vehicle telemetry CSV exports.

Telemetry loggers disagree on column naming and order, so headers are matched
against an alias table instead of fixed positions. The result is a DataFrame
with the canonical raw columns, one row per sample, in arrival order.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Dict, List, Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

# Candidate header substrings per canonical field, highest priority first.
COLUMN_ALIASES: Dict[str, List[str]] = {
    "meta_time": ["meta_time", "metatime", "timestamp", "time"],
    "ecu_time": ["ecu_time", "ecutime", "ecu"],
    "lap": ["lap", "lapnumber", "lap_number"],
    "car_number": ["car_number", "carnumber", "car", "number"],
    "chassis_number": ["chassis_number", "chassisnumber", "chassis"],
    "speed": ["speed", "velocity"],
    "gear": ["gear"],
    "nmot": ["nmot", "rpm", "engine_rpm", "enginerpm"],
    "ath": ["ath", "throttle", "throttle_position"],
    "aps": ["aps", "throttle", "accelerator"],
    "pbrake_f": ["pbrake_f", "pbrakef", "brake_front", "brakefront"],
    "pbrake_r": ["pbrake_r", "pbraker", "brake_rear", "brakerear"],
    "accx_can": ["accx_can", "accx", "accel_x", "acceleration_x"],
    "accy_can": ["accy_can", "accy", "accel_y", "acceleration_y"],
    "steering_angle": ["steering_angle", "steeringangle", "steering"],
    "vbox_long_minutes": ["vbox_long_minutes", "longitude", "long", "lon"],
    "vbox_lat_min": ["vbox_lat_min", "latitude", "lat"],
    "laptrigger_lapdist_dls": ["laptrigger_lapdist_dls", "lapdist", "distance", "lap_distance"],
}

RAW_COLUMNS = list(COLUMN_ALIASES)
INTEGER_COLUMNS = ["lap", "car_number", "gear"]
SYNTHETIC_TIME_STEP_MS = 100.0


class EmptyTelemetryError(ValueError):
    """Raised when a CSV holds no usable telemetry rows."""


def resolve_columns(headers: List[str]) -> Dict[str, int]:
    """Map each canonical field to a header index.

    Args:
        headers: Header cells from the first CSV line

    Returns:
        Dict of field name -> column index, -1 where no alias matched
    """
    normalized = [h.strip().lower() for h in headers]
    column_map = {}
    for field_name, aliases in COLUMN_ALIASES.items():
        column_map[field_name] = -1
        for alias in aliases:
            index = next((i for i, h in enumerate(normalized) if alias in h), -1)
            if index != -1:
                column_map[field_name] = index
                break
    return column_map


def _numeric_column(cells: pd.DataFrame, index: int) -> pd.Series:
    """Parse one column to floats; missing columns come back all-NaN."""
    if index == -1 or index >= cells.shape[1]:
        return pd.Series(np.nan, index=cells.index, dtype=float)
    values = cells.iloc[:, index].str.strip()
    return pd.to_numeric(values, errors="coerce").astype(float)


def _timestamp_column(primary: pd.Series, secondary: pd.Series) -> pd.Series:
    """Own value, else the competing clock, else a row-position timestamp."""
    synthetic = pd.Series(np.arange(len(primary)) * SYNTHETIC_TIME_STEP_MS, index=primary.index)
    primary = primary.where(primary != 0)
    secondary = secondary.where(secondary != 0)
    return primary.fillna(secondary).fillna(synthetic)


def parse_telemetry_csv(text: str) -> pd.DataFrame:
    """Parse raw CSV text into canonical telemetry rows.

    Args:
        text: Full CSV content, first non-blank line is the header

    Returns:
        DataFrame with RAW_COLUMNS. ``chassis_number`` is a nullable Int64
        column (NA when absent).

    Raises:
        EmptyTelemetryError: fewer than two lines, or no row with a positive
            timestamp
    """
    lines = [line for line in text.strip().splitlines() if line.strip()]
    if len(lines) < 2:
        raise EmptyTelemetryError("CSV file is empty or has no data rows")

    cells = pd.read_csv(
        io.StringIO(text),
        dtype=str,
        index_col=False,
        skip_blank_lines=True,
        skipinitialspace=True,
        on_bad_lines="skip",
    )
    column_map = resolve_columns([str(c) for c in cells.columns])
    missing = [name for name, index in column_map.items() if index == -1]
    if missing:
        logger.debug(f"Columns not found, using defaults: {missing}")

    parsed = {name: _numeric_column(cells, index) for name, index in column_map.items()}

    df = pd.DataFrame(index=cells.index)
    df["meta_time"] = _timestamp_column(parsed["meta_time"], parsed["ecu_time"])
    df["ecu_time"] = _timestamp_column(parsed["ecu_time"], parsed["meta_time"])
    for name in RAW_COLUMNS:
        if name in ("meta_time", "ecu_time"):
            continue
        values = parsed[name]
        if name == "chassis_number":
            df[name] = np.trunc(values).astype("Int64")
        elif name in INTEGER_COLUMNS:
            df[name] = np.trunc(values.fillna(0.0)).astype(int)
        else:
            df[name] = values.fillna(0.0)

    valid = (df["meta_time"] > 0) | (df["ecu_time"] > 0)
    df = df[valid].reset_index(drop=True)

    if len(df) == 0:
        raise EmptyTelemetryError("No valid data points found in CSV")

    logger.info(f"Loaded {len(df)} telemetry points from {len(cells)} CSV rows")
    return df[RAW_COLUMNS]


def load_telemetry_csv(filepath: Union[str, Path]) -> pd.DataFrame:
    """Load and parse a telemetry CSV file from disk."""
    return parse_telemetry_csv(Path(filepath).read_text(encoding="utf-8"))
