import pandas as pd

from racesense.data.schemas import CarNumberChange
from racesense.quality.vehicles import (
    VehicleRegistry,
    build_vehicle_map,
    count_car_number_mismatches,
    get_vehicle_identity,
)

from conftest import make_raw


def test_placeholder_zero_is_not_a_number_change():
    df = make_raw(car_number=[42, 42, 0, 43, 43], chassis_number=7, lap=[1, 1, 2, 3, 3])

    registry = build_vehicle_map(df)
    vehicle = get_vehicle_identity(registry, 7)

    assert len(registry) == 1
    assert vehicle.car_number_changes == [CarNumberChange(lap=3, old_number=42, new_number=43)]
    assert vehicle.car_numbers == [42, 43]
    assert vehicle.primary_car_number == 42
    assert vehicle.last_seen_car_number == 43
    assert count_car_number_mismatches(registry) == 1


def test_switching_back_counts_again_without_duplicating_history():
    df = make_raw(car_number=[42, 43, 42], chassis_number=7)
    vehicle = get_vehicle_identity(build_vehicle_map(df), 7)

    assert len(vehicle.car_number_changes) == 2
    assert vehicle.car_numbers == [42, 43]


def test_missing_chassis_is_tracked_as_unknown_vehicle():
    df = make_raw(car_number=[5, 5, 5], chassis_number=[pd.NA, pd.NA, pd.NA])
    registry = build_vehicle_map(df)

    assert 0 in registry
    assert get_vehicle_identity(registry, 0).primary_car_number == 5


def test_vehicles_are_keyed_by_chassis_not_car_number():
    df = make_raw(car_number=[0, 0, 12, 12], chassis_number=[4, 9, 4, 9])
    registry = build_vehicle_map(df)

    assert len(registry) == 2
    # Same display number on two chassis: lookup by number returns the first.
    assert get_vehicle_identity(registry, 12, is_chassis_number=False).chassis_number == 4
    assert get_vehicle_identity(registry, 99, is_chassis_number=False) is None
    assert get_vehicle_identity(registry, 9).primary_car_number == 12


def test_get_or_create_returns_existing_identity():
    registry = VehicleRegistry()
    first, created = registry.get_or_create(7, 42)
    again, created_again = registry.get_or_create(7, 43)

    assert created and not created_again
    assert first is again
    assert again.primary_car_number == 42


def test_each_build_gets_a_fresh_registry():
    df = make_raw(car_number=[42, 43], chassis_number=7)
    assert build_vehicle_map(df) is not build_vehicle_map(df)
    assert count_car_number_mismatches(build_vehicle_map(df)) == 1
