"""Benchmark the trip analysis pipeline with large point counts."""

from __future__ import annotations

import argparse
import statistics
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Late imports rely on the adjusted sys.path above.
from route_analysis import (  # noqa: E402
    CorridorMode,
    PlannedWaypoint,
    TrackPoint,
    compute_route_stats,
    detect_deviations,
    detect_stops,
    segment_trip,
)


@dataclass(slots=True)
class StageDurations:
    """Timing measurements (in seconds) for one pass over a trip."""

    segments: float
    stops: float
    deviations: float
    stats: float

    @property
    def total(self) -> float:
        return self.segments + self.stops + self.deviations + self.stats


def _build_trip(point_count: int) -> List[TrackPoint]:
    """Generate a northbound trip that stops for ten samples every hundred."""

    step_deg = 1.0e-4
    points: List[TrackPoint] = []
    for idx in range(point_count):
        stopped = idx % 100 >= 90
        points.append(
            TrackPoint(
                sequence_index=idx,
                lat=-12.0 + idx * step_deg,
                lng=-77.0,
                timestamp_ms=idx * 15_000,
                speed_kmh=0.0 if stopped else 45.0,
                distance_from_start_km=idx * 0.011,
                is_stopped=stopped,
            )
        )
    return points


def _build_corridor(trip: List[TrackPoint], waypoint_count: int) -> List[PlannedWaypoint]:
    stride = max(1, len(trip) // max(1, waypoint_count))
    return [
        PlannedWaypoint(lat=p.lat, lng=p.lng + 0.002, name=f"WP{i}")
        for i, p in enumerate(trip[::stride])
    ]


def _timed(func, *args, **kwargs) -> float:
    start = time.perf_counter()
    func(*args, **kwargs)
    return time.perf_counter() - start


def run_benchmark(
    point_count: int, iterations: int, corridor_mode: CorridorMode
) -> Dict[str, float]:
    """Run the analysis stages ``iterations`` times and return mean/worst timings."""

    trip = _build_trip(point_count)
    corridor = _build_corridor(trip, 50)
    runs: List[StageDurations] = []
    for _ in range(max(1, iterations)):
        runs.append(
            StageDurations(
                segments=_timed(segment_trip, trip),
                stops=_timed(detect_stops, trip, 3.0, 120.0),
                deviations=_timed(
                    detect_deviations, trip, corridor, 0.5, corridor_mode=corridor_mode
                ),
                stats=_timed(compute_route_stats, trip),
            )
        )
    return {
        "point_count": point_count,
        "iterations": len(runs),
        "mean_segments_ms": statistics.fmean(r.segments for r in runs) * 1000.0,
        "mean_stops_ms": statistics.fmean(r.stops for r in runs) * 1000.0,
        "mean_deviations_ms": statistics.fmean(r.deviations for r in runs) * 1000.0,
        "mean_stats_ms": statistics.fmean(r.stats for r in runs) * 1000.0,
        "mean_total_ms": statistics.fmean(r.total for r in runs) * 1000.0,
        "worst_total_ms": max(r.total for r in runs) * 1000.0,
    }


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Benchmark the trip analysis pipeline with large trips",
    )
    parser.add_argument(
        "--points",
        type=int,
        default=20000,
        help="Number of points in the synthetic trip",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=5,
        help="Number of repetitions for averaging",
    )
    parser.add_argument(
        "--corridor-mode",
        choices=[mode.value for mode in CorridorMode],
        default=CorridorMode.WAYPOINT.value,
        help="Distance model used by the deviation stage",
    )
    return parser.parse_args()


def main() -> None:
    """Entry point when running the module as a script."""

    args = _parse_args()
    summary = run_benchmark(args.points, args.iterations, CorridorMode(args.corridor_mode))
    for key, value in summary.items():
        if key in {"point_count", "iterations"}:
            print(f"{key}: {value}")
        else:
            print(f"{key}: {value:.3f}")


if __name__ == "__main__":
    main()
