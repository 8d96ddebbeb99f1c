"""Single movement classification policy shared across components."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Sequence

from .config import MOVEMENT_MIN_DWELL_SEC, MOVEMENT_SPEED_THRESHOLD_KMH
from .models import TrackPoint


@dataclass(frozen=True, slots=True)
class MovementClassifier:
    """Derive per-point stopped flags from speed.

    A point is slow when its speed is at or below ``speed_threshold_kmh``.
    With ``min_dwell_sec`` greater than zero a slow run is only flagged as
    stopped when it lasts at least that long; shorter runs stay moving.
    """

    speed_threshold_kmh: float = MOVEMENT_SPEED_THRESHOLD_KMH
    min_dwell_sec: float = MOVEMENT_MIN_DWELL_SEC

    def is_slow(self, point: TrackPoint) -> bool:
        return point.speed_kmh <= self.speed_threshold_kmh

    def classify(self, points: Sequence[TrackPoint]) -> List[bool]:
        flags = [self.is_slow(p) for p in points]
        if self.min_dwell_sec <= 0:
            return flags

        idx = 0
        while idx < len(flags):
            if not flags[idx]:
                idx += 1
                continue
            end = idx
            while end + 1 < len(flags) and flags[end + 1]:
                end += 1
            dwell_sec = (points[end].timestamp_ms - points[idx].timestamp_ms) / 1000.0
            if dwell_sec < self.min_dwell_sec:
                for j in range(idx, end + 1):
                    flags[j] = False
            idx = end + 1
        return flags

    def with_stopped_flags(self, points: Sequence[TrackPoint]) -> List[TrackPoint]:
        """Return copies of ``points`` whose ``is_stopped`` follows this policy."""

        return [
            point if point.is_stopped == flag else replace(point, is_stopped=flag)
            for point, flag in zip(points, self.classify(points))
        ]


__all__ = ["MovementClassifier"]
