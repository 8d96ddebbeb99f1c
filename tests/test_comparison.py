import pytest

from route_analysis import RouteStatsBundle, compare_route_stats
from route_analysis.comparison import (
    AVG_SPEED_LABEL,
    DISTANCE_LABEL,
    DURATION_LABEL,
    MAX_SPEED_LABEL,
    STOP_COUNT_LABEL,
)


@pytest.fixture
def baseline():
    return RouteStatsBundle(
        distance_km=100.0,
        duration_min=120.0,
        avg_speed_kmh=50.0,
        max_speed_kmh=90.0,
        stop_count=4,
        point_count=500,
    )


def _by_label(diffs):
    return {d.label: d for d in diffs}


def test_metric_order(baseline):
    labels = [d.label for d in compare_route_stats(baseline, baseline)]
    assert labels == [
        DISTANCE_LABEL,
        DURATION_LABEL,
        AVG_SPEED_LABEL,
        MAX_SPEED_LABEL,
        STOP_COUNT_LABEL,
    ]


def test_lower_values_better_except_average_speed(baseline):
    faster = RouteStatsBundle(
        distance_km=90.0,
        duration_min=100.0,
        avg_speed_kmh=54.0,
        max_speed_kmh=80.0,
        stop_count=2,
        point_count=450,
    )
    diffs = _by_label(compare_route_stats(baseline, faster))
    assert all(d.is_better for d in diffs.values())

    diffs = _by_label(compare_route_stats(faster, baseline))
    assert not any(d.is_better for d in diffs.values())


def test_deltas_and_percentages(baseline):
    other = RouteStatsBundle(
        distance_km=110.0,
        duration_min=90.0,
        avg_speed_kmh=40.0,
        max_speed_kmh=90.0,
        stop_count=5,
        point_count=510,
    )
    diffs = _by_label(compare_route_stats(baseline, other))

    distance = diffs[DISTANCE_LABEL]
    assert distance.absolute_delta == pytest.approx(10.0)
    assert distance.percent_delta == pytest.approx(10.0)
    assert distance.is_better is False

    duration = diffs[DURATION_LABEL]
    assert duration.absolute_delta == pytest.approx(-30.0)
    assert duration.percent_delta == pytest.approx(-25.0)
    assert duration.is_better is True

    avg = diffs[AVG_SPEED_LABEL]
    assert avg.percent_delta == pytest.approx(-20.0)
    assert avg.is_better is False

    # Equal values are neither better nor worse.
    assert diffs[MAX_SPEED_LABEL].absolute_delta == 0.0
    assert diffs[MAX_SPEED_LABEL].is_better is False

    stops = diffs[STOP_COUNT_LABEL]
    assert stops.value_a == 4
    assert stops.value_b == 5
    assert stops.is_better is False


def test_zero_baseline_has_zero_percent():
    empty = RouteStatsBundle()
    other = RouteStatsBundle(distance_km=5.0, avg_speed_kmh=30.0, stop_count=1)
    diffs = _by_label(compare_route_stats(empty, other))
    assert diffs[DISTANCE_LABEL].percent_delta == 0.0
    assert diffs[DISTANCE_LABEL].absolute_delta == pytest.approx(5.0)
    assert diffs[AVG_SPEED_LABEL].is_better is True
    assert diffs[STOP_COUNT_LABEL].is_better is False
