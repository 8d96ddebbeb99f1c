"""Trip statistics: comparable bundles and panel summaries.

Pure transformation: given the samples of one trip it produces aggregate
figures. ``compute_route_stats`` recomputes distance from raw coordinates and
does not reconcile with ``distance_from_start_km``; ``summarize_trip`` builds
on the segmenter so its moving/stopped split matches the segment list.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .config import STATS_STOP_SPEED_KMH
from .geo import path_length_km
from .models import RouteStatsBundle, SegmentKind, TrackPoint, TripSummary
from .segmentation import segment_trip

_LOG = logging.getLogger(__name__)


def compute_route_stats(
    points: Sequence[TrackPoint],
    stop_speed_kmh: float = STATS_STOP_SPEED_KMH,
) -> RouteStatsBundle:
    """Return distance, duration, speeds and an edge-triggered stop count.

    A stop is counted each time speed drops below ``stop_speed_kmh`` after
    being at or above it. The trip is assumed to start in motion, so a trip
    that begins slow counts its first stop at the second sample.
    """

    if len(points) < 2:
        return RouteStatsBundle(point_count=len(points))

    total_km = path_length_km(p.coord for p in points)
    max_speed = points[0].speed_kmh
    stop_count = 0
    in_stop = False
    for current in points[1:]:
        speed = current.speed_kmh
        if speed > max_speed:
            max_speed = speed
        if speed < stop_speed_kmh:
            if not in_stop:
                stop_count += 1
                in_stop = True
        else:
            in_stop = False

    duration_min = (points[-1].timestamp_ms - points[0].timestamp_ms) / 60000.0
    avg_speed = total_km / duration_min * 60.0 if duration_min > 0 else 0.0
    return RouteStatsBundle(
        distance_km=total_km,
        duration_min=duration_min,
        avg_speed_kmh=avg_speed,
        max_speed_kmh=max_speed,
        stop_count=stop_count,
        point_count=len(points),
    )


def summarize_trip(points: Sequence[TrackPoint]) -> TripSummary:
    """Return totals for a statistics panel.

    Speed figures only consider samples flagged as moving. Stopped time is
    the summed duration of the stop segments; moving time is the remainder.
    """

    if not points:
        return TripSummary(
            total_distance_km=0.0,
            max_speed_kmh=0.0,
            avg_speed_kmh=0.0,
            moving_time_sec=0.0,
            stopped_time_sec=0.0,
            total_time_sec=0.0,
            total_points=0,
            total_stops=0,
            start_coord=None,
            end_coord=None,
        )

    total_km = path_length_km(p.coord for p in points)

    speeds = [p.speed_kmh for p in points if not p.is_stopped]
    max_speed = max(speeds) if speeds else 0.0
    avg_speed = sum(speeds) / len(speeds) if speeds else 0.0

    total_sec = (points[-1].timestamp_ms - points[0].timestamp_ms) / 1000.0
    stop_segments = [s for s in segment_trip(points) if s.kind is SegmentKind.STOPPED]
    stopped_sec = sum(s.duration_sec for s in stop_segments)
    summary = TripSummary(
        total_distance_km=total_km,
        max_speed_kmh=max_speed,
        avg_speed_kmh=avg_speed,
        moving_time_sec=max(total_sec - stopped_sec, 0.0),
        stopped_time_sec=stopped_sec,
        total_time_sec=total_sec,
        total_points=len(points),
        total_stops=len(stop_segments),
        start_coord=points[0].coord,
        end_coord=points[-1].coord,
    )
    _LOG.debug(
        "Summarised trip: %.2f km over %.0fs (%d stops)",
        summary.total_distance_km,
        summary.total_time_sec,
        summary.total_stops,
    )
    return summary


__all__ = ["compute_route_stats", "summarize_trip"]
