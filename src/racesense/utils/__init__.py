"""Shared helpers."""

from .io import load_json, save_json, to_serializable

__all__ = ["load_json", "save_json", "to_serializable"]
