"""Great-circle distance helpers."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Return the great-circle distance in kilometres between two points.

    NaN inputs propagate to a NaN result.
    """

    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2.0) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lng / 2.0) ** 2
    )
    return EARTH_RADIUS_KM * 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))


def haversine_km_array(
    lat1: ArrayLike, lng1: ArrayLike, lat2: ArrayLike, lng2: ArrayLike
) -> NDArray[np.float64]:
    """Vectorised :func:`haversine_km` following numpy broadcasting rules."""

    phi1 = np.radians(np.asarray(lat1, dtype=float))
    phi2 = np.radians(np.asarray(lat2, dtype=float))
    d_phi = phi2 - phi1
    d_lambda = np.radians(np.asarray(lng2, dtype=float) - np.asarray(lng1, dtype=float))
    a = np.sin(d_phi / 2.0) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2.0) ** 2
    # Rounding can push ``a`` a hair past 1 for antipodal points.
    a = np.clip(a, 0.0, 1.0)
    return EARTH_RADIUS_KM * 2.0 * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))


def path_length_km(coords: Iterable[Sequence[float]]) -> float:
    """Sum the haversine distance between consecutive (lat, lng) pairs."""

    total = 0.0
    previous: Sequence[float] | None = None
    for coord in coords:
        if previous is not None:
            total += haversine_km(previous[0], previous[1], coord[0], coord[1])
        previous = coord
    return total


__all__ = ["EARTH_RADIUS_KM", "haversine_km", "haversine_km_array", "path_length_km"]
