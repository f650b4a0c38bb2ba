"""Chassis-keyed vehicle identification.

Car numbers are per-event display identifiers: they can be a 0 placeholder or
change mid-session. The chassis number is the only stable key.
"""
from __future__ import annotations

from typing import Iterator, Optional

import pandas as pd

from ..data.schemas import CarNumberChange, VehicleIdentity

PLACEHOLDER_CAR_NUMBER = 0
UNKNOWN_CHASSIS = 0


class VehicleRegistry:
    """Vehicle identities for one session, keyed by chassis number."""

    def __init__(self):
        self._vehicles: dict[int, VehicleIdentity] = {}

    def get(self, chassis_number: int) -> Optional[VehicleIdentity]:
        return self._vehicles.get(chassis_number)

    def get_or_create(self, chassis_number: int, car_number: int) -> tuple[VehicleIdentity, bool]:
        """
        Fetch the identity for a chassis, creating it on first sight.

        Returns:
            (identity, created)
        """
        vehicle = self._vehicles.get(chassis_number)
        if vehicle is not None:
            return vehicle, False

        vehicle = VehicleIdentity(
            chassis_number=chassis_number,
            car_numbers=[car_number] if car_number != PLACEHOLDER_CAR_NUMBER else [],
            primary_car_number=car_number,
            last_seen_car_number=car_number,
        )
        self._vehicles[chassis_number] = vehicle
        return vehicle, True

    def values(self) -> list[VehicleIdentity]:
        return list(self._vehicles.values())

    def __contains__(self, chassis_number: int) -> bool:
        return chassis_number in self._vehicles

    def __iter__(self) -> Iterator[VehicleIdentity]:
        return iter(self._vehicles.values())

    def __len__(self) -> int:
        return len(self._vehicles)


def _observe(vehicle: VehicleIdentity, car_number: int, lap: int) -> None:
    """Record a car number seen on an existing vehicle."""
    if car_number == vehicle.last_seen_car_number or car_number == PLACEHOLDER_CAR_NUMBER:
        return

    vehicle.car_number_changes.append(CarNumberChange(
        lap=lap,
        old_number=vehicle.last_seen_car_number,
        new_number=car_number,
    ))
    if car_number not in vehicle.car_numbers:
        vehicle.car_numbers.append(car_number)
    if vehicle.primary_car_number == PLACEHOLDER_CAR_NUMBER:
        vehicle.primary_car_number = car_number
    vehicle.last_seen_car_number = car_number


def build_vehicle_map(df: pd.DataFrame) -> VehicleRegistry:
    """
    Build vehicle identities from raw telemetry in arrival order.

    Args:
        df: Raw telemetry with chassis_number, car_number and lap columns

    Returns:
        A fresh VehicleRegistry. Points without a chassis number are tracked
        under chassis 0.
    """
    registry = VehicleRegistry()

    if "chassis_number" in df.columns:
        chassis = df["chassis_number"].astype("Int64").fillna(UNKNOWN_CHASSIS).to_numpy(dtype=int)
    else:
        chassis = [UNKNOWN_CHASSIS] * len(df)
    car_numbers = df["car_number"].fillna(PLACEHOLDER_CAR_NUMBER).to_numpy(dtype=int)
    laps = df["lap"].to_numpy(dtype=int)

    for chassis_number, car_number, lap in zip(chassis, car_numbers, laps):
        vehicle, created = registry.get_or_create(int(chassis_number), int(car_number))
        if not created:
            _observe(vehicle, int(car_number), int(lap))

    return registry


def get_vehicle_identity(
    registry: VehicleRegistry,
    chassis_or_car_number: int,
    is_chassis_number: bool = True,
) -> Optional[VehicleIdentity]:
    """Look up a vehicle by chassis number, or by any car number it has used."""
    if is_chassis_number:
        return registry.get(chassis_or_car_number)

    for vehicle in registry:
        if chassis_or_car_number in vehicle.car_numbers:
            return vehicle
    return None


def count_car_number_mismatches(registry: VehicleRegistry) -> int:
    """Total car number change events across all vehicles."""
    return sum(len(vehicle.car_number_changes) for vehicle in registry)
