"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable track factories so the
analysis tests share one way of building trips.
"""
from __future__ import annotations

import os
import sys
from typing import List, Sequence

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from route_analysis.geo import haversine_km
from route_analysis.models import PlannedWaypoint, TrackPoint


# --- Factory helpers -------------------------------------------------
def _build_point(
    index: int,
    *,
    lat: float = 0.0,
    lng: float = 0.0,
    t_s: float = 0.0,
    speed: float = 0.0,
    stopped: bool = False,
    distance_km: float = 0.0,
    altitude_m: float | None = None,
) -> TrackPoint:
    return TrackPoint(
        sequence_index=index,
        lat=lat,
        lng=lng,
        timestamp_ms=int(round(t_s * 1000)),
        speed_kmh=speed,
        distance_from_start_km=distance_km,
        is_stopped=stopped,
        altitude_m=altitude_m,
    )


def _build_track(
    coords: Sequence[tuple[float, float]],
    times_s: Sequence[float],
    speeds: Sequence[float],
    stopped: Sequence[bool] | None = None,
) -> List[TrackPoint]:
    """Build a track with cumulative haversine distance filled in."""

    flags = list(stopped) if stopped is not None else [s <= 3.0 for s in speeds]
    points: List[TrackPoint] = []
    travelled = 0.0
    for idx, (coord, t_s, speed, flag) in enumerate(zip(coords, times_s, speeds, flags)):
        if idx:
            prev = coords[idx - 1]
            travelled += haversine_km(prev[0], prev[1], coord[0], coord[1])
        points.append(
            _build_point(
                idx,
                lat=coord[0],
                lng=coord[1],
                t_s=t_s,
                speed=speed,
                stopped=flag,
                distance_km=travelled,
            )
        )
    return points


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def make_point():
    return _build_point


@pytest.fixture
def make_track():
    return _build_track


@pytest.fixture
def equator_trip() -> List[TrackPoint]:
    """Ten points east along the equator over 120 s with a 90 s stop in the middle."""

    lngs = [0.000, 0.001, 0.002, 0.004, 0.004, 0.004, 0.004, 0.006, 0.008, 0.010]
    times = [0, 5, 10, 15, 45, 75, 105, 110, 115, 120]
    speeds = [40, 40, 40, 0, 0, 0, 0, 40, 40, 40]
    return _build_track([(0.0, lng) for lng in lngs], times, speeds)


@pytest.fixture
def corridor() -> List[PlannedWaypoint]:
    return [
        PlannedWaypoint(lat=0.0, lng=0.0, name="Depot"),
        PlannedWaypoint(lat=0.0, lng=0.1, name="Client"),
    ]
