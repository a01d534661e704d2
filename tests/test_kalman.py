"""
Unit tests for the two-axis GPS Kalman filter.
"""

import math
import random

import pytest

from engine.kalman import FilterSession, RawSample, measurement_variance


SEOUL = RawSample(latitude=37.5665, longitude=126.9780, accuracy=20.0)


def test_reset_defaults():
    session = FilterSession()
    session.update(SEOUL)
    session.reset()

    state = session.state
    assert (state.estimate.lat, state.estimate.lng) == (0.0, 0.0)
    assert (state.covariance.lat, state.covariance.lng) == (8000.0, 8000.0)
    assert (state.process_noise.lat, state.process_noise.lng) == (25.0, 25.0)
    assert state.initialized is False
    assert session.sample_count == 0


def test_first_sample_passes_through():
    session = FilterSession()
    sample = RawSample(latitude=37.1234567, longitude=127.7654321, accuracy=87.5, timestamp=1.0)

    fix = session.update(sample)

    assert fix.latitude == sample.latitude
    assert fix.longitude == sample.longitude
    assert fix.accuracy == sample.accuracy
    assert session.initialized is True
    assert session.sample_count == 1
    # covariance untouched by the seeding step
    assert session.state.covariance.lat == 8000.0


def test_second_sample_matches_hand_computation():
    session = FilterSession()
    session.update(RawSample(37.0, 127.0, 10.0))
    fix = session.update(RawSample(37.001, 127.002, 300.0))

    r = 100.0  # max(300 / 3, 30)
    p_pred = 8000.0 + 25.0
    k = p_pred / (p_pred + r)
    assert fix.latitude == pytest.approx(37.0 + k * 0.001)
    assert fix.longitude == pytest.approx(127.0 + k * 0.002)
    p = (1 - k) * p_pred
    assert fix.accuracy == pytest.approx(math.sqrt(2 * p))


def test_measurement_variance_floor():
    assert measurement_variance(300.0) == 100.0
    assert measurement_variance(20.0) == 30.0
    assert measurement_variance(0.0) == 30.0
    assert measurement_variance(-5.0) == 30.0


def test_convergence_on_repeated_identical_input():
    session = FilterSession()
    session.reset()

    first = session.update(SEOUL)
    fix = first
    for _ in range(19):
        fix = session.update(SEOUL)

    assert abs(session.state.estimate.lat - 37.5665) < 1e-6
    assert abs(session.state.estimate.lng - 126.9780) < 1e-6
    assert fix.accuracy < first.accuracy
    assert session.sample_count == 20


def test_estimate_never_overshoots():
    rng = random.Random(42)
    session = FilterSession()
    session.update(RawSample(37.57, 126.98, 30.0))

    for _ in range(200):
        sample = RawSample(
            latitude=37.57 + rng.uniform(-0.002, 0.002),
            longitude=126.98 + rng.uniform(-0.002, 0.002),
            accuracy=rng.choice([0.5, 5.0, 25.0, 120.0, 3000.0]),
        )
        prev_lat = session.state.estimate.lat
        prev_lng = session.state.estimate.lng

        session.update(sample)

        lat = session.state.estimate.lat
        lng = session.state.estimate.lng
        assert min(prev_lat, sample.latitude) - 1e-12 <= lat <= max(prev_lat, sample.latitude) + 1e-12
        assert min(prev_lng, sample.longitude) - 1e-12 <= lng <= max(prev_lng, sample.longitude) + 1e-12
        assert session.state.covariance.lat >= 0.0
        assert session.state.covariance.lng >= 0.0


def test_update_without_reset_keeps_accumulating():
    session = FilterSession()
    for _ in range(3):
        session.update(SEOUL)
    assert session.sample_count == 3
    assert session.initialized is True


def test_degenerate_accuracy_does_not_raise():
    session = FilterSession()
    session.update(RawSample(37.0, 127.0, 0.0))
    fix = session.update(RawSample(37.0001, 127.0001, -10.0))
    assert math.isfinite(fix.accuracy)


def test_sessions_are_independent():
    a = FilterSession()
    b = FilterSession()
    a.update(SEOUL)
    assert b.initialized is False
    assert b.sample_count == 0


def test_rounded_fix():
    fix = FilterSession().update(RawSample(37.123456789, 127.987654321, 15.0))
    rounded = fix.rounded()
    assert rounded.latitude == 37.1234568
    assert rounded.longitude == 127.9876543
    assert rounded.accuracy == 15.0
