"""Side-by-side comparison of two trip statistics bundles."""

from __future__ import annotations

from typing import Callable, List, Tuple

from .models import MetricDiff, RouteStatsBundle

DISTANCE_LABEL = "Distance (km)"
DURATION_LABEL = "Duration (min)"
AVG_SPEED_LABEL = "Avg Speed (km/h)"
MAX_SPEED_LABEL = "Max Speed (km/h)"
STOP_COUNT_LABEL = "Stops"

# (label, accessor, lower_is_better)
_METRICS: List[Tuple[str, Callable[[RouteStatsBundle], float], bool]] = [
    (DISTANCE_LABEL, lambda s: s.distance_km, True),
    (DURATION_LABEL, lambda s: s.duration_min, True),
    (AVG_SPEED_LABEL, lambda s: s.avg_speed_kmh, False),
    (MAX_SPEED_LABEL, lambda s: s.max_speed_kmh, True),
    (STOP_COUNT_LABEL, lambda s: float(s.stop_count), True),
]


def _diff(label: str, value_a: float, value_b: float, lower_is_better: bool) -> MetricDiff:
    delta = value_b - value_a
    percent = delta / value_a * 100.0 if value_a != 0 else 0.0
    better = value_b < value_a if lower_is_better else value_b > value_a
    return MetricDiff(
        label=label,
        value_a=value_a,
        value_b=value_b,
        absolute_delta=delta,
        percent_delta=percent,
        is_better=better,
    )


def compare_route_stats(a: RouteStatsBundle, b: RouteStatsBundle) -> List[MetricDiff]:
    """Return one :class:`MetricDiff` per metric, treating ``a`` as the baseline.

    Distance, duration, max speed and stop count improve when they drop;
    average speed improves when it rises.
    """

    return [
        _diff(label, accessor(a), accessor(b), lower_is_better)
        for label, accessor, lower_is_better in _METRICS
    ]


__all__ = [
    "AVG_SPEED_LABEL",
    "DISTANCE_LABEL",
    "DURATION_LABEL",
    "MAX_SPEED_LABEL",
    "STOP_COUNT_LABEL",
    "compare_route_stats",
]
