"""
Unit tests for HeritageStamp distance and compass helpers.
"""

import pytest

from engine.metrics import bearing_deg, compass_direction, distance_m, format_distance, haversine_m
from engine.kalman import SmoothedFix


def test_haversine_distance():
    # Gangnam Station to roughly 111m north
    lat1, lng1 = 37.49794, 127.02764
    lat2, lng2 = 37.49894, 127.02764

    distance = haversine_m(lat1, lng1, lat2, lng2)
    # 0.001 degree of latitude is roughly 111.19 meters
    assert 110 < distance < 112


def test_haversine_seoul_to_busan():
    # Seoul City Hall -> Busan City Hall
    distance = haversine_m(37.5665, 126.9780, 35.1796, 129.0756)
    assert 323_000 <= distance <= 327_000


def test_haversine_symmetry_and_zero():
    a = (37.5796, 126.9770)
    b = (37.5512, 126.9882)
    assert haversine_m(*a, *b) == haversine_m(*b, *a)
    assert haversine_m(*a, *a) == 0.0


def test_haversine_accepts_out_of_range_input():
    # no validation: still a number
    assert haversine_m(95.0, 200.0, 0.0, 0.0) >= 0.0


def test_distance_m_on_objects():
    a = SmoothedFix(37.5665, 126.9780, 10.0)
    b = SmoothedFix(37.5675, 126.9780, 10.0)
    assert distance_m(a, b) == pytest.approx(haversine_m(37.5665, 126.9780, 37.5675, 126.9780))


def test_format_distance():
    assert format_distance(0) == "0m"
    assert format_distance(850) == "850m"
    assert format_distance(999.4) == "999m"
    assert format_distance(3200) == "3.2km"
    assert format_distance(27_000) == "27km"


def test_compass_direction():
    assert compass_direction(0) == "N"
    assert compass_direction(44) == "NE"
    assert compass_direction(90) == "E"
    assert compass_direction(180) == "S"
    assert compass_direction(359) == "N"
    assert compass_direction(-90) == "W"


def test_bearing_deg():
    assert bearing_deg(37.0, 127.0, 38.0, 127.0) == pytest.approx(0.0, abs=1e-9)
    assert bearing_deg(0.0, 0.0, 0.0, 1.0) == pytest.approx(90.0)
    assert bearing_deg(38.0, 127.0, 37.0, 127.0) == pytest.approx(180.0)
