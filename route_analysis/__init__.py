"""Public entry points for the historical route analysis package."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .classification import MovementClassifier
from .comparison import compare_route_stats
from .config import (
    DEVIATION_MAX_SAMPLES,
    DEVIATION_TOLERANCE_KM,
    LARGE_TRIP_POINT_THRESHOLD,
    MIN_STOP_DURATION_SEC,
    STOP_SPEED_THRESHOLD_KMH,
)
from .deviation import CorridorMode, detect_deviations
from .errors import RouteAnalysisError, TrackFormatError, TrackValidationError
from .geo import haversine_km
from .models import (
    DetectedStop,
    DeviationSeverity,
    MetricDiff,
    PlannedWaypoint,
    RouteDeviation,
    RouteStatsBundle,
    SegmentKind,
    StopIntensity,
    TrackPoint,
    TripAnalysis,
    TripSegment,
    TripSummary,
)
from .segmentation import segment_trip
from .stats import compute_route_stats, summarize_trip
from .stops import detect_stops
from .validation import validate_track

_LOG = logging.getLogger(__name__)


def analyze_trip(
    points: Sequence[TrackPoint],
    planned_waypoints: Optional[Sequence[PlannedWaypoint]] = None,
    *,
    speed_threshold_kmh: float = STOP_SPEED_THRESHOLD_KMH,
    min_stop_duration_sec: float = MIN_STOP_DURATION_SEC,
    tolerance_km: float = DEVIATION_TOLERANCE_KM,
    max_samples: int = DEVIATION_MAX_SAMPLES,
    corridor_mode: CorridorMode = CorridorMode.WAYPOINT,
) -> TripAnalysis:
    """Run every single-trip analysis over the same point sequence.

    The call is synchronous. Deviations are only computed when a corridor is
    supplied.
    """

    if len(points) > LARGE_TRIP_POINT_THRESHOLD:
        _LOG.info(
            "Analysing large trip with %d points; consider running it off the UI thread",
            len(points),
        )
    deviations = (
        detect_deviations(
            points,
            planned_waypoints,
            tolerance_km,
            max_samples=max_samples,
            corridor_mode=corridor_mode,
        )
        if planned_waypoints
        else []
    )
    return TripAnalysis(
        segments=segment_trip(points),
        stops=detect_stops(points, speed_threshold_kmh, min_stop_duration_sec),
        deviations=deviations,
        stats=compute_route_stats(points),
    )


__all__ = [
    "CorridorMode",
    "DetectedStop",
    "DeviationSeverity",
    "MetricDiff",
    "MovementClassifier",
    "PlannedWaypoint",
    "RouteAnalysisError",
    "RouteDeviation",
    "RouteStatsBundle",
    "SegmentKind",
    "StopIntensity",
    "TrackFormatError",
    "TrackPoint",
    "TrackValidationError",
    "TripAnalysis",
    "TripSegment",
    "TripSummary",
    "analyze_trip",
    "compare_route_stats",
    "compute_route_stats",
    "detect_deviations",
    "detect_stops",
    "haversine_km",
    "segment_trip",
    "summarize_trip",
    "validate_track",
]
