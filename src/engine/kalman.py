"""
HeritageStamp: GPS Position Filter

기기에서 들어오는 (lat, lng, accuracy) 측정값을 축별 독립 칼만필터로 평활화합니다.
- 위도/경도를 서로 독립으로 취급 (교차 공분산 없음)
- 운동 모델 없이 고정 프로세스 노이즈만 주입 (사용자 준정지 가정)
- 첫 측정값은 그대로 반환 (사전 정보 없음)

사용법:
    from engine.kalman import FilterSession, RawSample

    session = FilterSession()
    fix = session.update(RawSample(latitude=37.5665, longitude=126.9780, accuracy=20.0))
    # → SmoothedFix(latitude=..., longitude=..., accuracy=...)

세션 하나는 하나의 추적 흐름에서만 갱신해야 합니다 (동시 update 금지).
"""

import logging
from dataclasses import dataclass, field, replace
from math import sqrt
from typing import Optional, Tuple

from shared.constants import (
    GPS_COORD_DIGITS,
    KALMAN_ACCURACY_DAMPING,
    KALMAN_INITIAL_COVARIANCE,
    KALMAN_MIN_MEASUREMENT_VAR,
    KALMAN_PROCESS_NOISE,
)

logger = logging.getLogger("PositionFilter")


@dataclass(frozen=True)
class RawSample:
    """A single geolocation reading. `timestamp` is informational only."""

    latitude: float
    longitude: float
    accuracy: float
    timestamp: Optional[float] = None


@dataclass(frozen=True)
class SmoothedFix:
    latitude: float
    longitude: float
    accuracy: float

    def rounded(self, digits: int = GPS_COORD_DIGITS) -> "SmoothedFix":
        """Copy with lat/lng rounded the way positions are persisted."""
        return replace(
            self,
            latitude=round(self.latitude, digits),
            longitude=round(self.longitude, digits),
        )


@dataclass
class AxisPair:
    lat: float
    lng: float


@dataclass
class FilterState:
    estimate: AxisPair = field(default_factory=lambda: AxisPair(0.0, 0.0))
    covariance: AxisPair = field(
        default_factory=lambda: AxisPair(KALMAN_INITIAL_COVARIANCE, KALMAN_INITIAL_COVARIANCE)
    )
    process_noise: AxisPair = field(
        default_factory=lambda: AxisPair(KALMAN_PROCESS_NOISE, KALMAN_PROCESS_NOISE)
    )
    initialized: bool = False
    sample_count: int = 0


def measurement_variance(accuracy: float) -> float:
    """기기 보고 정확도 → 측정 분산 R (과신 방지용 하한 포함)"""
    return max(accuracy / KALMAN_ACCURACY_DAMPING, KALMAN_MIN_MEASUREMENT_VAR)


def _update_axis(
    estimate: float, covariance: float, noise: float, measured: float, r: float
) -> Tuple[float, float]:
    """One predict/correct step for a single axis. Returns (estimate, covariance)."""
    p_pred = covariance + noise
    gain = p_pred / (p_pred + r)
    return estimate + gain * (measured - estimate), (1 - gain) * p_pred


class FilterSession:
    """
    Two-axis discrete Kalman filter owned by one tracking flow.

    A fresh session starts un-initialized, so the first `update` seeds the
    estimate. `reset()` starts a new session on the same instance.
    """

    def __init__(self):
        self._state = FilterState()

    @property
    def state(self) -> FilterState:
        return self._state

    @property
    def initialized(self) -> bool:
        return self._state.initialized

    @property
    def sample_count(self) -> int:
        return self._state.sample_count

    def reset(self) -> None:
        self._state = FilterState()

    def update(self, sample: RawSample) -> SmoothedFix:
        state = self._state
        state.sample_count += 1

        if not state.initialized:
            state.estimate = AxisPair(sample.latitude, sample.longitude)
            state.initialized = True
            logger.debug(f"Filter seeded at ({sample.latitude}, {sample.longitude})")
            return SmoothedFix(sample.latitude, sample.longitude, sample.accuracy)

        r = measurement_variance(sample.accuracy)
        lat, p_lat = _update_axis(
            state.estimate.lat, state.covariance.lat, state.process_noise.lat, sample.latitude, r
        )
        lng, p_lng = _update_axis(
            state.estimate.lng, state.covariance.lng, state.process_noise.lng, sample.longitude, r
        )
        state.estimate = AxisPair(lat, lng)
        state.covariance = AxisPair(p_lat, p_lng)

        accuracy = sqrt(p_lat + p_lng)
        logger.debug(
            f"Filter update #{state.sample_count}: ({lat:.7f}, {lng:.7f}) accuracy={accuracy:.2f}"
        )
        return SmoothedFix(lat, lng, accuracy)
