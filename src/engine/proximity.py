"""
HeritageStamp: Proximity Matcher

평활화된 위치와 관광지/문화재 카탈로그를 받아 근접 순위를 계산합니다.
1. 사각형 영역(bounding area) 안이면 해당 장소를 거리 0으로 확정 (카탈로그 순서상 첫 번째 우선)
2. 아니면 모든 장소까지 Haversine 거리 계산
3. (선택) 반경 밖 장소 제거
4. 거리 오름차순 안정 정렬 (동거리는 카탈로그 순서 유지)
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from engine.metrics import haversine_m

LatLng = Tuple[float, float]


@dataclass(frozen=True)
class BoundingArea:
    """Axis-aligned lat/lng rectangle given by its northwest and southeast corners."""

    nw: LatLng
    se: LatLng

    @property
    def north(self) -> float:
        return self.nw[0]

    @property
    def south(self) -> float:
        return self.se[0]

    @property
    def west(self) -> float:
        return self.nw[1]

    @property
    def east(self) -> float:
        return self.se[1]

    @classmethod
    def from_corners(cls, nw: Sequence[float], se: Sequence[float]) -> "BoundingArea":
        return cls(nw=(float(nw[0]), float(nw[1])), se=(float(se[0]), float(se[1])))


@dataclass(frozen=True)
class PointOfInterest:
    id: str
    name: str
    latitude: float
    longitude: float
    name_en: Optional[str] = None
    address: Optional[str] = None
    bounding_area: Optional[BoundingArea] = None


@dataclass(frozen=True)
class MatchResult:
    site_id: str
    distance_m: float
    is_inside_bounding_area: bool
    site: Optional[PointOfInterest] = None


def contains_point(lat: float, lng: float, area: BoundingArea) -> bool:
    """Inclusive rectangle test, no geodesic correction."""
    return area.south <= lat <= area.north and area.west <= lng <= area.east


def _inside_match(lat: float, lng: float, catalog: Sequence[PointOfInterest]) -> Optional[MatchResult]:
    for poi in catalog:
        if poi.bounding_area is not None and contains_point(lat, lng, poi.bounding_area):
            return MatchResult(site_id=poi.id, distance_m=0.0, is_inside_bounding_area=True, site=poi)
    return None


def match_nearest(
    lat: float,
    lng: float,
    catalog: Sequence[PointOfInterest],
    max_radius_m: Optional[float] = None,
) -> List[MatchResult]:
    """
    Rank catalog entries by distance from (lat, lng).

    A containing bounding area wins outright and is returned alone. Entries
    farther than `max_radius_m` are dropped. An empty catalog yields [].
    """
    inside = _inside_match(lat, lng, catalog)
    if inside is not None:
        return [inside]

    results = [
        MatchResult(
            site_id=poi.id,
            distance_m=haversine_m(lat, lng, poi.latitude, poi.longitude),
            is_inside_bounding_area=False,
            site=poi,
        )
        for poi in catalog
    ]
    if max_radius_m is not None:
        results = [r for r in results if r.distance_m <= max_radius_m]

    # sorted() is stable: equal distances keep catalog order
    return sorted(results, key=lambda r: r.distance_m)


def nearest_k(
    lat: float,
    lng: float,
    catalog: Sequence[PointOfInterest],
    k: int,
    max_radius_m: Optional[float] = None,
) -> List[MatchResult]:
    return match_nearest(lat, lng, catalog, max_radius_m)[:max(k, 0)]


def closest_site(
    lat: float,
    lng: float,
    catalog: Sequence[PointOfInterest],
    max_radius_m: Optional[float] = None,
) -> Optional[MatchResult]:
    """체크인 대상 장소 (없으면 None)"""
    matches = match_nearest(lat, lng, catalog, max_radius_m)
    return matches[0] if matches else None
