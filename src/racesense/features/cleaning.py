"""Sensor channel cleaning: clamp each channel to a physically plausible range."""
from __future__ import annotations

from typing import Optional

import pandas as pd

SPEED_MAX = 200.0  # COTA top speed is ~180 mph

# (canonical, legacy fallback, legacy scale, lower, upper)
CHANNEL_LIMITS = [
    ("gear", None, 1.0, 0.0, 6.0),
    ("nmot", "rpm", 1.0, 0.0, 15000.0),
    ("ath", "throttle", 1.0, 0.0, 100.0),
    ("aps", "throttle", 1.0, 0.0, 100.0),
    ("pbrake_f", "brake", 0.5, 0.0, 200.0),  # legacy brake is front + rear combined
    ("pbrake_r", "brake", 0.5, 0.0, 200.0),
    ("accx_can", None, 1.0, -5.0, 5.0),
    ("accy_can", None, 1.0, -5.0, 5.0),
    ("steering_angle", "steering", 1.0, -900.0, 900.0),
]

# Passed through unclamped
PASSTHROUGH_CHANNELS = [
    ("vbox_long_minutes", "longitude"),
    ("vbox_lat_min", "latitude"),
    ("laptrigger_lapdist_dls", None),
]

CLEANED_COLUMNS = (
    ["time", "speed"]
    + [name for name, *_ in CHANNEL_LIMITS]
    + [name for name, _ in PASSTHROUGH_CHANNELS]
)


def clean_speed(speed: float) -> float:
    """Impossible or missing speeds (NaN, negative, above 200) become 0."""
    if pd.isna(speed) or speed < 0 or speed > SPEED_MAX:
        return 0.0
    return float(speed)


def clamp_value(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))


def _channel(
    df: pd.DataFrame,
    column: str,
    legacy: Optional[str] = None,
    legacy_scale: float = 1.0,
) -> pd.Series:
    """Canonical channel, falling back to a legacy alias where it reads 0."""
    if column in df.columns:
        values = df[column].astype(float).fillna(0.0)
    else:
        values = pd.Series(0.0, index=df.index)

    if legacy is not None and legacy in df.columns:
        fallback = df[legacy].astype(float).fillna(0.0) * legacy_scale
        values = values.where(values != 0, fallback)
    return values


def clean_telemetry(df: pd.DataFrame) -> pd.DataFrame:
    """
    Clean raw telemetry samples.

    The logger clock (meta_time) becomes the single ``time`` column. Each
    sensor channel is clamped independently; legacy aliases (rpm, throttle,
    brake, steering, latitude, longitude) fill in where the canonical channel
    is missing or zero.

    Args:
        df: Raw telemetry rows

    Returns:
        DataFrame with CLEANED_COLUMNS, same index as df
    """
    cleaned = pd.DataFrame(index=df.index)
    cleaned["time"] = df["meta_time"].astype(float)

    speed = _channel(df, "speed")
    cleaned["speed"] = speed.where(speed.between(0.0, SPEED_MAX), 0.0)

    for name, legacy, scale, lower, upper in CHANNEL_LIMITS:
        cleaned[name] = _channel(df, name, legacy, scale).clip(lower, upper)

    for name, legacy in PASSTHROUGH_CHANNELS:
        cleaned[name] = _channel(df, name, legacy)

    return cleaned[CLEANED_COLUMNS]
