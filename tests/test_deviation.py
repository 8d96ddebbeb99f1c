"""Unit tests covering corridor deviation detection."""

from __future__ import annotations

import pytest

from route_analysis import (
    CorridorMode,
    DeviationSeverity,
    PlannedWaypoint,
    detect_deviations,
)
from route_analysis.deviation import classify_severity, decimate, sample_stride


@pytest.fixture
def single_point(make_point):
    """One fast sample at ``lat``/``lng`` with a recognisable sequence index."""

    def _build(lat: float, lng: float = 0.0):
        return [make_point(7, lat=lat, lng=lng, t_s=42.0, speed=50.0)]

    return _build


def test_within_tolerance_is_ignored(single_point, corridor):
    # ~0.56 km north of the depot
    assert detect_deviations(single_point(0.005), corridor, 1.0) == []


def test_minor_deviation(single_point, corridor):
    # ~1.45 km north of the depot
    deviations = detect_deviations(single_point(0.013), corridor, 1.0)
    assert len(deviations) == 1
    dev = deviations[0]
    assert dev.severity is DeviationSeverity.MINOR
    assert dev.distance_from_planned_km == pytest.approx(1.4455, abs=1e-3)
    assert dev.source_index == 7
    assert dev.point == (0.013, 0.0)
    assert dev.timestamp_ms == 42_000


def test_major_deviation(single_point, corridor):
    # ~3.34 km north of the depot
    deviations = detect_deviations(single_point(0.03), corridor, 1.0)
    assert [d.severity for d in deviations] == [DeviationSeverity.MAJOR]


def test_severity_boundaries():
    assert classify_severity(1.0, 1.0) is None
    assert classify_severity(1.0001, 1.0) is DeviationSeverity.MINOR
    assert classify_severity(2.0, 1.0) is DeviationSeverity.MINOR
    assert classify_severity(2.0001, 1.0) is DeviationSeverity.MAJOR
    assert classify_severity(float("nan"), 1.0) is None


def test_needs_two_waypoints(single_point):
    points = single_point(5.0)
    assert detect_deviations(points, [], 0.5) == []
    assert detect_deviations(points, [PlannedWaypoint(0.0, 0.0, "Only")], 0.5) == []


def test_empty_track(corridor):
    assert detect_deviations([], corridor, 0.5) == []


def test_decimation_stride_is_deterministic(make_point, corridor):
    points = [make_point(i, lat=1.0, lng=0.0, t_s=float(i), speed=40.0) for i in range(250)]
    assert sample_stride(250, 100) == 2
    assert sample_stride(50, 100) == 1
    assert sample_stride(1000, 100) == 10

    deviations = detect_deviations(points, corridor, 0.5)
    assert len(deviations) == 125
    assert [d.source_index for d in deviations] == list(range(0, 250, 2))
    assert all(d.severity is DeviationSeverity.MAJOR for d in deviations)
    assert detect_deviations(points, corridor, 0.5) == deviations


def test_decimate_keeps_first_point(make_point):
    points = [make_point(i) for i in range(305)]
    sampled = decimate(points, 100)
    assert sampled[0] is points[0]
    assert len(sampled) == 102


def test_inputs_are_not_mutated(make_point, corridor):
    points = [make_point(i, lat=0.02, t_s=float(i)) for i in range(10)]
    before = list(points)
    waypoints_before = list(corridor)
    detect_deviations(points, corridor, 0.5)
    assert points == before
    assert corridor == waypoints_before


def test_segment_mode_follows_long_legs(single_point):
    waypoints = [PlannedWaypoint(0.0, 0.0, "A"), PlannedWaypoint(0.0, 0.2, "B")]
    # Midway along a 22 km leg, ~110 m north of the line.
    on_leg = single_point(0.001, lng=0.1)
    by_vertex = detect_deviations(on_leg, waypoints, 0.5)
    assert [d.severity for d in by_vertex] == [DeviationSeverity.MAJOR]

    by_segment = detect_deviations(
        on_leg, waypoints, 0.5, corridor_mode=CorridorMode.SEGMENT
    )
    assert by_segment == []


def test_segment_mode_reports_offset_from_line(single_point):
    waypoints = [PlannedWaypoint(0.0, 0.0, "A"), PlannedWaypoint(0.0, 0.2, "B")]
    off_leg = single_point(0.02, lng=0.1)
    deviations = detect_deviations(
        off_leg, waypoints, 0.5, corridor_mode=CorridorMode.SEGMENT
    )
    assert len(deviations) == 1
    assert deviations[0].distance_from_planned_km == pytest.approx(2.22, abs=0.05)
    assert deviations[0].severity is DeviationSeverity.MAJOR
