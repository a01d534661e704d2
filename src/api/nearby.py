"""
HeritageStamp: Nearby Sites & Check-in API

현재 위치 기준으로 가까운 관광지/문화재를 순위화하고,
체크인(스탬프 획득) 대상 장소를 판정합니다.

관광지 목록은 백엔드(TOURIST_SPOT_API_URL)가 설정되어 있으면 우선 사용하고,
실패하거나 비어 있으면 내장 문화재 카탈로그로 폴백합니다.

엔드포인트:
    POST /api/v1/nearby
    POST /api/v1/checkin
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

import aiohttp
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from api.tracking import registry
from engine.catalog import catalog_from_records, load_heritage_catalog
from engine.metrics import format_distance
from engine.proximity import MatchResult, PointOfInterest, closest_site, nearest_k
from shared.config import settings

logger = logging.getLogger("NearbyAPI")

router = APIRouter(prefix="/api/v1", tags=["nearby"])


class NearbyRequest(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0, allow_inf_nan=False)
    longitude: float = Field(..., ge=-180.0, le=180.0, allow_inf_nan=False)
    max_radius_m: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    limit: Optional[int] = Field(None, ge=1)


class CheckinRequest(BaseModel):
    session_id: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90.0, le=90.0, allow_inf_nan=False)
    longitude: Optional[float] = Field(None, ge=-180.0, le=180.0, allow_inf_nan=False)


async def _fetch_backend_spots(lat: float, lng: float, limit: int) -> List[Dict[str, Any]]:
    """백엔드 관광지 조회 (실패 시 빈 리스트)"""
    url = settings.TOURIST_SPOT_API_URL
    if not url:
        return []

    params = {"latitude": lat, "longitude": lng, "limit": limit}
    timeout = aiohttp.ClientTimeout(total=settings.TOURIST_SPOT_TIMEOUT_S)
    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url, params=params) as resp:
                if resp.status != 200:
                    logger.warning(f"Tourist spot backend returned {resp.status}")
                    return []
                data = await resp.json()
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        logger.error(f"Tourist spot backend error: {e}")
        return []

    if isinstance(data, dict):
        data = data.get("data") or data.get("items") or []
    if not isinstance(data, list):
        logger.warning("Tourist spot backend returned an unexpected payload")
        return []
    return [item for item in data if isinstance(item, dict)]


async def resolve_catalog(lat: float, lng: float, limit: int) -> Sequence[PointOfInterest]:
    records = await _fetch_backend_spots(lat, lng, limit)
    catalog = catalog_from_records(records)
    if catalog:
        return catalog
    return load_heritage_catalog()


def _match_payload(match: MatchResult) -> dict:
    site = match.site
    return {
        "id": match.site_id,
        "name": site.name if site else None,
        "name_en": site.name_en if site else None,
        "address": site.address if site else None,
        "location": {"lat": site.latitude, "lng": site.longitude} if site else None,
        "distance_m": round(match.distance_m, 1),
        "formatted_distance": format_distance(match.distance_m),
        "is_inside": match.is_inside_bounding_area,
    }


@router.post("/nearby")
async def nearby_sites(req: NearbyRequest):
    """
    현재 위치 → 가까운 장소 순위

    Request:
        { "latitude": 37.5796, "longitude": 126.9770, "max_radius_m": 500, "limit": 3 }
    """
    limit = req.limit or settings.NEARBY_LIMIT
    catalog = await resolve_catalog(req.latitude, req.longitude, limit)
    matches = nearest_k(req.latitude, req.longitude, catalog, limit, req.max_radius_m)

    return {
        "origin": {"lat": req.latitude, "lng": req.longitude},
        "results": [_match_payload(m) for m in matches],
        "total": len(matches),
    }


@router.post("/checkin")
async def checkin(req: CheckinRequest):
    """
    체크인 판정: 세션의 현재 위치(또는 직접 준 좌표) 기준 반경 내 가장 가까운 장소

    Response:
        { "matched": true, "site": { ... }, "position": { "lat": ..., "lng": ... } }
    """
    if req.session_id is not None:
        tracked = registry.get(req.session_id)
        if tracked is None:
            raise HTTPException(status_code=404, detail=f"SESSION_NOT_FOUND: {req.session_id}")
        with tracked.lock:
            fix = tracked.current_fix()
        if fix is None:
            raise HTTPException(status_code=409, detail="SESSION_NOT_READY: no GPS samples yet")
        lat, lng = fix.latitude, fix.longitude
    elif req.latitude is not None and req.longitude is not None:
        lat, lng = req.latitude, req.longitude
    else:
        raise HTTPException(status_code=400, detail="INVALID_REQUEST: session_id or latitude/longitude required")

    catalog = await resolve_catalog(lat, lng, settings.NEARBY_LIMIT)
    match = closest_site(lat, lng, catalog, settings.CHECKIN_RADIUS_M)
    position = {"lat": lat, "lng": lng}

    if match is None:
        logger.info(f"Check-in miss at ({lat}, {lng})")
        return {"matched": False, "site": None, "position": position}

    logger.info(f"Check-in hit: {match.site_id} ({match.distance_m:.1f}m)")
    return {"matched": True, "site": _match_payload(match), "position": position}
