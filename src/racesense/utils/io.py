"""IO utilities for saving/loading reports."""
from __future__ import annotations

import dataclasses
import json
from pathlib import Path

import numpy as np
import pandas as pd


def to_serializable(obj, include_points: bool = False):
    """
    Convert result dataclasses to JSON-compatible structures.

    Args:
        obj: Dataclass, list, dict, DataFrame or scalar
        include_points: Keep each lap's telemetry_points (large)

    Returns:
        Nested dicts/lists of plain Python values
    """
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: to_serializable(getattr(obj, f.name), include_points)
            for f in dataclasses.fields(obj)
            if include_points or f.name not in ("telemetry_points", "data")
        }
    if isinstance(obj, pd.DataFrame):
        return to_serializable(obj.to_dict(orient="records"), include_points)
    if isinstance(obj, dict):
        return {key: to_serializable(value, include_points) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_serializable(value, include_points) for value in obj]
    if isinstance(obj, np.generic):
        return obj.item()
    if obj is pd.NA:
        return None
    return obj


def save_json(data: dict, path: Path | str, indent: int = 2):
    """Save dict to JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        json.dump(data, f, indent=indent, default=str)


def load_json(path: Path | str) -> dict:
    """Load dict from JSON file."""
    path = Path(path)

    with open(path) as f:
        return json.load(f)
