import math

import numpy as np
import pytest

from route_analysis.geo import haversine_km, haversine_km_array, path_length_km


def test_haversine_same_point_is_zero():
    assert haversine_km(-12.0464, -77.0428, -12.0464, -77.0428) == 0.0


def test_haversine_is_symmetric():
    a = (-12.0464, -77.0428)
    b = (-13.5320, -71.9675)
    assert haversine_km(*a, *b) == pytest.approx(haversine_km(*b, *a))


def test_one_degree_longitude_at_equator():
    assert haversine_km(0.0, 0.0, 0.0, 1.0) == pytest.approx(111.19, abs=0.5)


def test_nan_propagates():
    assert math.isnan(haversine_km(float("nan"), 0.0, 0.0, 1.0))


def test_array_matches_scalar():
    lats = np.array([0.0, 10.0, -33.9])
    lngs = np.array([1.0, 20.0, 151.2])
    result = haversine_km_array(0.0, 0.0, lats, lngs)
    expected = [haversine_km(0.0, 0.0, lat, lng) for lat, lng in zip(lats, lngs)]
    assert result == pytest.approx(expected)


def test_path_length_sums_legs():
    coords = [(0.0, 0.0), (0.0, 0.5), (0.0, 1.0)]
    assert path_length_km(coords) == pytest.approx(haversine_km(0.0, 0.0, 0.0, 1.0))
    assert path_length_km([]) == 0.0
    assert path_length_km([(1.0, 1.0)]) == 0.0
