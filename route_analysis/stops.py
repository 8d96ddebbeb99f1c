"""Duration-filtered stop detection from raw speed samples."""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

from .config import MIN_STOP_DURATION_SEC, STOP_SPEED_THRESHOLD_KMH
from .models import DetectedStop, TrackPoint

_LOG = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _close_run(
    points: Sequence[TrackPoint],
    start: int,
    end: int,
    min_stop_duration_sec: float,
) -> Optional[DetectedStop]:
    """Return a stop for ``points[start:end]`` when it lasted long enough."""

    first = points[start]
    last = points[end - 1]
    duration_sec = (last.timestamp_ms - first.timestamp_ms) / 1000.0
    if duration_sec < min_stop_duration_sec:
        return None
    run = points[start:end]
    count = len(run)
    duration_min = _round_half_up(duration_sec / 60.0)
    # Rounding down must never report less than the configured minimum.
    duration_min = max(duration_min, math.ceil(min_stop_duration_sec / 60.0))
    return DetectedStop(
        avg_lat=sum(p.lat for p in run) / count,
        avg_lng=sum(p.lng for p in run) / count,
        start_timestamp_ms=first.timestamp_ms,
        end_timestamp_ms=last.timestamp_ms,
        duration_min=duration_min,
        point_count=count,
    )


def detect_stops(
    points: Sequence[TrackPoint],
    speed_threshold_kmh: float = STOP_SPEED_THRESHOLD_KMH,
    min_stop_duration_sec: float = MIN_STOP_DURATION_SEC,
) -> List[DetectedStop]:
    """Find runs of samples at or below ``speed_threshold_kmh``.

    The precomputed ``is_stopped`` flag is ignored; classification relies on
    speed alone. Runs shorter than ``min_stop_duration_sec`` are dropped. A
    run still open when the trip ends is closed and evaluated like any other.

    Args:
        points: Time-ordered samples of one trip.
        speed_threshold_kmh: Highest speed still treated as stationary.
        min_stop_duration_sec: Minimum run duration to report.

    Returns:
        Stops in traversal order.
    """

    stops: List[DetectedStop] = []
    run_start: Optional[int] = None

    for idx, point in enumerate(points):
        slow = point.speed_kmh <= speed_threshold_kmh
        if slow and run_start is None:
            run_start = idx
        elif not slow and run_start is not None:
            stop = _close_run(points, run_start, idx, min_stop_duration_sec)
            if stop is not None:
                stops.append(stop)
            run_start = None

    if run_start is not None:
        stop = _close_run(points, run_start, len(points), min_stop_duration_sec)
        if stop is not None:
            stops.append(stop)

    _LOG.debug(
        "Detected %d stops in %d points (threshold=%.1f km/h, min=%.0fs)",
        len(stops),
        len(points),
        speed_threshold_kmh,
        min_stop_duration_sec,
    )
    return stops


__all__ = ["detect_stops"]
