"""Synthetic COTA race telemetry for demos and tests.

35 laps for car 42 / chassis 7 with linear tire wear, a pit stop on lap 18,
noisy sensors and a jittered logger clock.
"""
from __future__ import annotations

import numpy as np

SAMPLE_HEADER = (
    "meta_time,ecu_time,lap,car_number,chassis_number,Speed,Gear,nmot,ath,aps,"
    "pbrake_f,pbrake_r,accx_can,accy_can,Steering_Angle,VBOX_Long_Minutes,"
    "VBOX_Lat_Min,Laptrigger_lapdist_dls"
)

SAMPLE_LAPS = 35
SAMPLE_CAR_NUMBER = 42
SAMPLE_CHASSIS_NUMBER = 7
SAMPLE_PIT_LAP = 18

POINTS_PER_LAP = 120  # ~1Hz over a 2 minute lap
PIT_LAP_POINTS = 180
BASELINE_LAP_TIME = 128.5  # seconds
TIRE_DEG_PER_LAP = 0.08  # seconds
PIT_STOP_TIME = 60.0  # pit lane transit + stationary time, seconds
TRACK_LENGTH_M = 5513.0
SF_LAT = 30.1328
SF_LONG = -97.6411

SAMPLE_DATA_INFO = {
    "description": "Toyota GR Cup Series - Circuit of the Americas",
    "laps": SAMPLE_LAPS,
    "car_number": SAMPLE_CAR_NUMBER,
    "chassis_number": SAMPLE_CHASSIS_NUMBER,
    "features": [
        f"Linear tire degradation ({TIRE_DEG_PER_LAP}s/lap)",
        f"Pit stop on lap {SAMPLE_PIT_LAP}",
        "COTA-specific speed profiles",
        "Timestamp drift simulation",
        "Noisy sensor data",
    ],
}


def _speed_at(progress: float, is_pit_lap: bool, rng: np.random.Generator) -> float:
    if is_pit_lap and 0.3 < progress < 0.7:
        return 20 + rng.random() * 10  # pit lane limiter
    if progress < 0.15 or 0.5 < progress < 0.65:
        return 160 + rng.random() * 15  # straights
    return 70 + rng.random() * 30  # corners


def _sample_row(
    lap: int,
    progress: float,
    is_pit_lap: bool,
    current_time: float,
    rng: np.random.Generator,
) -> str:
    speed = _speed_at(progress, is_pit_lap, rng)
    gear = min(6, int(speed // 25) + 1)
    nmot = 4000 + speed * 45 + rng.random() * 500
    ath = 85 + rng.random() * 15 if speed > 120 else 30 + rng.random() * 40
    aps = ath + (rng.random() * 5 - 2.5)

    braking = speed < 80
    pbrake_f = 60 + rng.random() * 40 if braking else rng.random() * 5
    pbrake_r = 40 + rng.random() * 30 if braking else rng.random() * 3

    if ath > 70:
        accx = 0.3 + rng.random() * 0.4
    elif pbrake_f > 20:
        accx = -0.8 - rng.random() * 0.5
    else:
        accx = rng.random() * 0.2
    accy = (rng.random() - 0.5) * (1.5 if speed < 100 else 0.6)
    steering = -250 + rng.random() * 500 if speed < 100 else -80 + rng.random() * 160

    # closed loop that reaches the start/finish latitude only at the line
    lat = SF_LAT + (1 - np.cos(progress * np.pi * 2)) * 0.005
    long = SF_LONG + np.sin(progress * np.pi * 2) * 0.015
    lapdist = progress * TRACK_LENGTH_M

    ecu_time = current_time
    meta_time = current_time + (rng.random() * 50 - 25)  # logger clock jitter

    return (
        f"{meta_time:.0f},{ecu_time:.0f},{lap},{SAMPLE_CAR_NUMBER},{SAMPLE_CHASSIS_NUMBER},"
        f"{speed:.1f},{gear},{nmot:.0f},{ath:.1f},{aps:.1f},"
        f"{pbrake_f:.1f},{pbrake_r:.1f},{accx:.3f},{accy:.3f},"
        f"{steering:.1f},{long:.6f},{lat:.6f},{lapdist:.1f}"
    )


def generate_sample_cota_data(seed: int = 42, laps: int = SAMPLE_LAPS) -> str:
    """
    Generate a full sample race as CSV text.

    Args:
        seed: RNG seed; the same seed always yields the same CSV
        laps: Number of laps to generate

    Returns:
        CSV text with the canonical 18-column header
    """
    rng = np.random.default_rng(seed)
    rows = [SAMPLE_HEADER]
    current_time = 0.0

    for lap in range(1, laps + 1):
        is_pit_lap = lap == SAMPLE_PIT_LAP
        points = PIT_LAP_POINTS if is_pit_lap else POINTS_PER_LAP

        lap_time = BASELINE_LAP_TIME + (lap - 1) * TIRE_DEG_PER_LAP + (rng.random() * 0.5 - 0.25)
        if is_pit_lap:
            lap_time += PIT_STOP_TIME
        time_step = lap_time * 1000.0 / points

        for point in range(points):
            rows.append(_sample_row(lap, point / points, is_pit_lap, current_time, rng))
            current_time += time_step

    return "\n".join(rows)
