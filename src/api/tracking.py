"""
HeritageStamp: GPS Tracking Session API

클라이언트(화면)마다 칼만필터 세션을 하나씩 발급하고,
측정값을 순서대로 받아 평활화된 위치를 돌려줍니다.

엔드포인트:
    POST   /api/v1/sessions
    POST   /api/v1/sessions/{session_id}/samples
    POST   /api/v1/sessions/{session_id}/acquire
    POST   /api/v1/sessions/{session_id}/reset
    DELETE /api/v1/sessions/{session_id}
"""

import logging
import threading
import time
import uuid
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from engine.acquisition import LastKnownPosition, acquire_fix, is_converged
from engine.kalman import FilterSession, RawSample, SmoothedFix
from shared.config import settings

logger = logging.getLogger("Tracking")

router = APIRouter(prefix="/api/v1", tags=["tracking"])


class SampleRequest(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0, allow_inf_nan=False)
    longitude: float = Field(..., ge=-180.0, le=180.0, allow_inf_nan=False)
    accuracy: float = Field(..., allow_inf_nan=False, description="기기 보고 수평 정확도 (m)")
    timestamp: Optional[float] = None

    def to_sample(self) -> RawSample:
        return RawSample(self.latitude, self.longitude, self.accuracy, self.timestamp)


class AcquireRequest(BaseModel):
    samples: List[SampleRequest] = Field(default_factory=list)


class TrackedSession:
    """A filter session plus its lock and last converged fix."""

    def __init__(self, cache_ttl_s: float):
        self.filter = FilterSession()
        self.lock = threading.Lock()
        self.last_known = LastKnownPosition(ttl_s=cache_ttl_s)
        self.last_fix: Optional[SmoothedFix] = None
        self.touched = time.time()

    def current_fix(self) -> Optional[SmoothedFix]:
        """Fresh converged fix if any, else the latest filter output."""
        return self.last_known.get() or self.last_fix


class SessionRegistry:
    """
    In-memory session store. Updates to one session are serialized by its lock.

    Sessions untouched for `idle_ttl_s` are evicted on the next create/get.
    """

    def __init__(
        self,
        cache_ttl_s: float = settings.GPS_CACHE_TTL_S,
        idle_ttl_s: float = settings.SESSION_IDLE_TTL_S,
    ):
        self.cache_ttl_s = cache_ttl_s
        self.idle_ttl_s = idle_ttl_s
        self._sessions: Dict[str, TrackedSession] = {}
        self._lock = threading.Lock()

    def _evict_idle(self, now: float) -> None:
        expired = [sid for sid, s in self._sessions.items() if now - s.touched >= self.idle_ttl_s]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info(f"Evicted {len(expired)} idle tracking session(s)")

    def create(self) -> str:
        session_id = uuid.uuid4().hex
        with self._lock:
            self._evict_idle(time.time())
            self._sessions[session_id] = TrackedSession(self.cache_ttl_s)
        return session_id

    def get(self, session_id: str) -> Optional[TrackedSession]:
        now = time.time()
        with self._lock:
            self._evict_idle(now)
            tracked = self._sessions.get(session_id)
            if tracked is not None:
                tracked.touched = now
            return tracked

    def remove(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


registry = SessionRegistry()


def _require(session_id: str) -> TrackedSession:
    tracked = registry.get(session_id)
    if tracked is None:
        raise HTTPException(status_code=404, detail=f"SESSION_NOT_FOUND: {session_id}")
    return tracked


def _fix_payload(fix: SmoothedFix) -> dict:
    return {"latitude": fix.latitude, "longitude": fix.longitude, "accuracy": fix.accuracy}


@router.post("/sessions", status_code=201)
async def create_session():
    """새 추적 세션 발급"""
    session_id = registry.create()
    logger.info(f"Tracking session created: {session_id}")
    return {"session_id": session_id}


@router.post("/sessions/{session_id}/samples")
def add_sample(session_id: str, req: SampleRequest):
    """
    측정값 1개 → 평활화된 위치

    Response:
        {
            "position": { "latitude": 37.5665, "longitude": 126.978, "accuracy": 12.3 },
            "sample_count": 4,
            "converged": true
        }
    """
    tracked = _require(session_id)
    with tracked.lock:
        fix = tracked.filter.update(req.to_sample()).rounded()
        tracked.last_fix = fix
        converged = is_converged(fix, settings.GPS_TARGET_ACCURACY_M)
        if converged:
            tracked.last_known.store(fix)
        count = tracked.filter.sample_count

    return {"position": _fix_payload(fix), "sample_count": count, "converged": converged}


@router.post("/sessions/{session_id}/acquire")
def acquire(session_id: str, req: AcquireRequest):
    """초기 위치 수집 (세션 리셋 후 수렴할 때까지 측정값 투입)"""
    tracked = _require(session_id)
    with tracked.lock:
        result = acquire_fix(
            tracked.filter,
            (s.to_sample() for s in req.samples),
            target_accuracy_m=settings.GPS_TARGET_ACCURACY_M,
            max_samples=settings.GPS_MAX_SAMPLES,
        )
        tracked.last_fix = result.fix
        if result.converged:
            tracked.last_known.store(result.fix)

    return {
        "position": _fix_payload(result.fix),
        "samples_used": result.samples_used,
        "converged": result.converged,
        "is_default": result.is_default,
    }


@router.post("/sessions/{session_id}/reset")
def reset_session(session_id: str):
    tracked = _require(session_id)
    with tracked.lock:
        tracked.filter.reset()
        tracked.last_fix = None
        tracked.last_known.clear()
    return {"session_id": session_id, "sample_count": 0}


@router.delete("/sessions/{session_id}")
def delete_session(session_id: str):
    if not registry.remove(session_id):
        raise HTTPException(status_code=404, detail=f"SESSION_NOT_FOUND: {session_id}")
    logger.info(f"Tracking session closed: {session_id}")
    return {"deleted": True}
