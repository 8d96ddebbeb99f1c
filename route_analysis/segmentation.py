"""Split a trip into alternating moving and stopped segments.

The segmenter trusts the precomputed ``is_stopped`` flag on every point. Use
:class:`route_analysis.classification.MovementClassifier` to recompute those
flags from speed when the ingestion source does not provide reliable ones.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from .models import SegmentKind, TrackPoint, TripSegment

_LOG = logging.getLogger(__name__)

_LABEL_PREFIX: Dict[SegmentKind, str] = {
    SegmentKind.MOVING: "Tramo",
    SegmentKind.STOPPED: "Parada",
}


def _kind_of(point: TrackPoint) -> SegmentKind:
    return SegmentKind.STOPPED if point.is_stopped else SegmentKind.MOVING


def _build_segment(
    points: Sequence[TrackPoint],
    start: int,
    end: int,
    kind: SegmentKind,
    ordinal: int,
) -> TripSegment:
    first = points[start]
    last = points[end]
    avg_speed = 0.0
    max_speed = 0.0
    if kind is SegmentKind.MOVING:
        # Only points flagged as moving contribute, in case a stray stopped
        # sample ended up inside the run.
        speeds = [p.speed_kmh for p in points[start : end + 1] if not p.is_stopped]
        if speeds:
            avg_speed = sum(speeds) / len(speeds)
            max_speed = max(speeds)
    return TripSegment(
        kind=kind,
        start_index=start,
        end_index=end,
        start_coord=first.coord,
        end_coord=last.coord,
        duration_sec=(last.timestamp_ms - first.timestamp_ms) / 1000.0,
        distance_km=last.distance_from_start_km - first.distance_from_start_km,
        avg_speed_kmh=avg_speed,
        max_speed_kmh=max_speed,
        label=f"{_LABEL_PREFIX[kind]} {ordinal}",
    )


def segment_trip(points: Sequence[TrackPoint]) -> List[TripSegment]:
    """Partition ``points`` into maximal runs of the same movement state.

    Segment indices are positions in ``points``; together the segments cover
    every index exactly once, in ascending order. Trips with fewer than two
    points have nothing to segment and yield an empty list.
    """

    if len(points) < 2:
        return []

    segments: List[TripSegment] = []
    ordinals: Dict[SegmentKind, int] = {kind: 0 for kind in SegmentKind}
    run_start = 0
    run_kind = _kind_of(points[0])

    for idx in range(1, len(points) + 1):
        if idx < len(points) and _kind_of(points[idx]) is run_kind:
            continue
        ordinals[run_kind] += 1
        segments.append(
            _build_segment(points, run_start, idx - 1, run_kind, ordinals[run_kind])
        )
        if idx < len(points):
            run_start = idx
            run_kind = _kind_of(points[idx])

    _LOG.debug(
        "Segmented %d points into %d moving and %d stopped segments",
        len(points),
        ordinals[SegmentKind.MOVING],
        ordinals[SegmentKind.STOPPED],
    )
    return segments


__all__ = ["segment_trip"]
