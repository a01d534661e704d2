"""
GPS fix acquisition policy and last-known-position cache.

초기 위치 수집: 세션을 리셋하고 정확도가 목표치 이하가 될 때까지
(최대 N회) 측정값을 필터에 넣습니다. 측정값이 하나도 없으면 서울시청 기본 위치.
"""

import logging
import time
from dataclasses import dataclass
from typing import Iterable, Optional

from engine.kalman import FilterSession, RawSample, SmoothedFix
from shared.constants import (
    DEFAULT_ACCURACY_M,
    DEFAULT_LATITUDE,
    DEFAULT_LONGITUDE,
    GPS_CACHE_TTL_S,
    GPS_MAX_SAMPLES,
    GPS_TARGET_ACCURACY_M,
)

logger = logging.getLogger("Acquisition")

DEFAULT_FIX = SmoothedFix(DEFAULT_LATITUDE, DEFAULT_LONGITUDE, DEFAULT_ACCURACY_M)


@dataclass(frozen=True)
class AcquisitionResult:
    fix: SmoothedFix
    samples_used: int
    converged: bool
    is_default: bool = False


def is_converged(fix: SmoothedFix, target_accuracy_m: float = GPS_TARGET_ACCURACY_M) -> bool:
    return fix.accuracy <= target_accuracy_m


def acquire_fix(
    session: FilterSession,
    samples: Iterable[RawSample],
    target_accuracy_m: float = GPS_TARGET_ACCURACY_M,
    max_samples: int = GPS_MAX_SAMPLES,
) -> AcquisitionResult:
    """
    Feed `samples` into a freshly reset `session` until convergence.

    Stops at the first fix with accuracy <= `target_accuracy_m`, or after
    `max_samples` samples; the last fix is returned either way.
    """
    session.reset()
    fix: Optional[SmoothedFix] = None
    used = 0

    for sample in samples:
        if used >= max_samples:
            break
        fix = session.update(sample)
        used += 1
        if is_converged(fix, target_accuracy_m):
            logger.info(f"GPS converged after {used} samples (accuracy {fix.accuracy:.1f}m)")
            return AcquisitionResult(fix=fix.rounded(), samples_used=used, converged=True)

    if fix is None:
        logger.warning("No GPS samples available — using default position (Seoul City Hall)")
        return AcquisitionResult(fix=DEFAULT_FIX, samples_used=0, converged=False, is_default=True)

    logger.info(f"GPS not converged after {used} samples (accuracy {fix.accuracy:.1f}m)")
    return AcquisitionResult(fix=fix.rounded(), samples_used=used, converged=False)


class LastKnownPosition:
    """Last good fix, served only while younger than `ttl_s`."""

    def __init__(self, ttl_s: float = GPS_CACHE_TTL_S):
        self.ttl_s = ttl_s
        self._fix: Optional[SmoothedFix] = None
        self._captured_at: float = 0.0

    def store(self, fix: SmoothedFix, now: Optional[float] = None) -> None:
        self._fix = fix
        self._captured_at = time.time() if now is None else now

    def get(self, now: Optional[float] = None) -> Optional[SmoothedFix]:
        if self._fix is None:
            return None
        now = time.time() if now is None else now
        if now - self._captured_at < self.ttl_s:
            return self._fix
        return None

    def clear(self) -> None:
        self._fix = None
        self._captured_at = 0.0
