"""Detect samples that stray from a planned waypoint corridor."""

from __future__ import annotations

from enum import Enum
import logging
from typing import List, Sequence

import numpy as np
from numpy.typing import NDArray
from pyproj import CRS, Transformer
from shapely.geometry import LineString, Point

from .config import DEVIATION_MAX_SAMPLES, DEVIATION_TOLERANCE_KM
from .geo import haversine_km_array
from .models import (
    DeviationSeverity,
    LatLng,
    PlannedWaypoint,
    RouteDeviation,
    TrackPoint,
)

_LOG = logging.getLogger(__name__)

MetricArray = NDArray[np.float64]


class CorridorMode(str, Enum):
    """How the distance from a sample to the corridor is measured."""

    # Nearest single waypoint (great-circle).
    WAYPOINT = "waypoint"
    # Nearest point on the polyline joining the waypoints (local UTM metres).
    SEGMENT = "segment"


def sample_stride(count: int, max_samples: int) -> int:
    """Return the index stride that keeps roughly ``max_samples`` samples."""

    return max(1, count // max(1, max_samples))


def decimate(points: Sequence[TrackPoint], max_samples: int) -> List[TrackPoint]:
    """Keep every ``stride``-th point, starting with the first."""

    step = sample_stride(len(points), max_samples)
    return list(points[::step])


def classify_severity(distance_km: float, tolerance_km: float) -> DeviationSeverity | None:
    """Return the severity for ``distance_km`` or ``None`` when within tolerance."""

    if not distance_km > tolerance_km:
        return None
    if distance_km > tolerance_km * 2.0:
        return DeviationSeverity.MAJOR
    return DeviationSeverity.MINOR


def _waypoint_distances_km(
    samples: Sequence[TrackPoint], waypoints: Sequence[PlannedWaypoint]
) -> MetricArray:
    wp_lat = np.asarray([wp.lat for wp in waypoints], dtype=float)
    wp_lng = np.asarray([wp.lng for wp in waypoints], dtype=float)
    distances = np.empty(len(samples), dtype=float)
    for i, point in enumerate(samples):
        distances[i] = float(
            np.min(haversine_km_array(point.lat, point.lng, wp_lat, wp_lng))
        )
    return distances


def _build_local_transformer(coords: Sequence[LatLng]) -> Transformer:
    """Build a UTM transformer for the zone containing the coordinates' centroid."""

    mean_lat = float(np.mean([c[0] for c in coords]))
    mean_lon = float(np.mean([c[1] for c in coords]))
    zone = int((mean_lon + 180.0) // 6.0) + 1
    zone = max(1, min(zone, 60))
    epsg = 32600 + zone if mean_lat >= 0 else 32700 + zone
    return Transformer.from_crs(CRS.from_epsg(4326), CRS.from_epsg(epsg), always_xy=True)


def _project(coords: Sequence[LatLng], transformer: Transformer) -> MetricArray:
    lats = np.asarray([c[0] for c in coords], dtype=float)
    lngs = np.asarray([c[1] for c in coords], dtype=float)
    xs, ys = transformer.transform(lngs, lats)
    return np.column_stack((xs, ys)).astype(float, copy=False)


def _corridor_distances_km(
    samples: Sequence[TrackPoint], waypoints: Sequence[PlannedWaypoint]
) -> MetricArray:
    corridor_coords = [(wp.lat, wp.lng) for wp in waypoints]
    transformer = _build_local_transformer(corridor_coords)
    corridor = LineString(_project(corridor_coords, transformer))
    metric_samples = _project([p.coord for p in samples], transformer)
    offsets_m = np.asarray(
        [corridor.distance(Point(xy)) for xy in metric_samples], dtype=float
    )
    return offsets_m / 1000.0


def detect_deviations(
    real_points: Sequence[TrackPoint],
    planned_waypoints: Sequence[PlannedWaypoint],
    tolerance_km: float = DEVIATION_TOLERANCE_KM,
    *,
    max_samples: int = DEVIATION_MAX_SAMPLES,
    corridor_mode: CorridorMode = CorridorMode.WAYPOINT,
) -> List[RouteDeviation]:
    """Flag decimated samples farther than ``tolerance_km`` from the corridor.

    Samples are taken at a fixed index stride so at most about
    ``max_samples`` points are inspected. Distances beyond twice the
    tolerance are ``MAJOR``, the rest ``MINOR``. Fewer than two waypoints
    means there is no corridor and nothing is reported.
    """

    if len(planned_waypoints) < 2 or not real_points:
        return []

    sampled = decimate(real_points, max_samples)
    if corridor_mode is CorridorMode.SEGMENT:
        distances = _corridor_distances_km(sampled, planned_waypoints)
    else:
        distances = _waypoint_distances_km(sampled, planned_waypoints)

    deviations: List[RouteDeviation] = []
    for point, distance in zip(sampled, distances):
        severity = classify_severity(float(distance), tolerance_km)
        if severity is None:
            continue
        deviations.append(
            RouteDeviation(
                source_index=point.sequence_index,
                point=point.coord,
                distance_from_planned_km=float(distance),
                timestamp_ms=point.timestamp_ms,
                severity=severity,
            )
        )

    _LOG.debug(
        "Inspected %d of %d samples against %d waypoints (%s): %d deviations",
        len(sampled),
        len(real_points),
        len(planned_waypoints),
        corridor_mode.value,
        len(deviations),
    )
    return deviations


__all__ = [
    "CorridorMode",
    "classify_severity",
    "decimate",
    "detect_deviations",
    "sample_stride",
]
