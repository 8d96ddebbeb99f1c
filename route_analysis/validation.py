"""Ingestion-boundary checks for trip point sequences.

Analysis functions assume a well-formed sequence and never re-check it.
Call :func:`validate_track` once where points enter the library.
"""

from __future__ import annotations

import math
from typing import Iterable, Tuple

from .errors import TrackValidationError
from .models import TrackPoint


def validate_track(
    points: Iterable[TrackPoint],
    *,
    require_finite_coords: bool = True,
) -> Tuple[TrackPoint, ...]:
    """Return ``points`` as a tuple after checking the stream invariants.

    Raises:
        TrackValidationError: on decreasing timestamps, negative speed,
            decreasing cumulative distance or (optionally) non-finite
            coordinates. ``index`` on the error is the offending position.
    """

    track = tuple(points)
    previous: TrackPoint | None = None
    for idx, point in enumerate(track):
        if require_finite_coords and not (
            math.isfinite(point.lat) and math.isfinite(point.lng)
        ):
            raise TrackValidationError(
                f"Point {idx} has non-finite coordinates ({point.lat}, {point.lng})",
                index=idx,
            )
        if point.speed_kmh < 0:
            raise TrackValidationError(
                f"Point {idx} has negative speed {point.speed_kmh}", index=idx
            )
        if previous is not None:
            if point.timestamp_ms < previous.timestamp_ms:
                raise TrackValidationError(
                    f"Timestamp goes backwards at point {idx} "
                    f"({point.timestamp_ms} < {previous.timestamp_ms})",
                    index=idx,
                )
            if point.distance_from_start_km < previous.distance_from_start_km:
                raise TrackValidationError(
                    f"Cumulative distance decreases at point {idx}", index=idx
                )
        previous = point
    return track


__all__ = ["validate_track"]
