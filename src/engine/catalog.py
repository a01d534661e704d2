"""
POI catalog loading and backend record normalization.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from engine.proximity import BoundingArea, PointOfInterest

logger = logging.getLogger("Catalog")

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
HERITAGE_FILE = DATA_DIR / "heritage_sites.json"


def _first(record: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


def _parse_bounding_area(raw: Any) -> Optional[BoundingArea]:
    if not isinstance(raw, dict):
        return None
    try:
        return BoundingArea.from_corners(raw["nw"], raw["se"])
    except (KeyError, IndexError, TypeError, ValueError):
        logger.warning(f"Ignoring malformed bounding area: {raw}")
        return None


def _parse_coords(record: Dict[str, Any]) -> Optional[Tuple[float, float]]:
    # 관광공사 형식: mapY = 위도, mapX = 경도
    lat = _first(record, "mapY", "mapy", "lat", "latitude")
    lng = _first(record, "mapX", "mapx", "lng", "longitude")
    try:
        return float(lat), float(lng)
    except (TypeError, ValueError):
        return None


def poi_from_record(record: Dict[str, Any]) -> Optional[PointOfInterest]:
    """
    관광지 레코드(백엔드/정적 JSON) → PointOfInterest

    좌표를 파싱할 수 없는 레코드는 None.
    """
    coords = _parse_coords(record)
    poi_id = _first(record, "content_id", "contentId", "id")
    if coords is None or poi_id is None:
        logger.warning(f"Skipping tourist spot without id/coordinates: {record.get('title') or record.get('name')}")
        return None

    name = _first(record, "title", "name") or str(poi_id)
    return PointOfInterest(
        id=str(poi_id),
        name=str(name),
        latitude=coords[0],
        longitude=coords[1],
        name_en=_first(record, "name_en", "nameEn"),
        address=_first(record, "addr1", "address"),
        bounding_area=_parse_bounding_area(record.get("bounding_area") or record.get("polygon")),
    )


def catalog_from_records(records: Iterable[Dict[str, Any]]) -> List[PointOfInterest]:
    catalog = []
    for record in records:
        if not isinstance(record, dict):
            logger.warning(f"Skipping non-object tourist spot record: {record!r}")
            continue
        poi = poi_from_record(record)
        if poi is not None:
            catalog.append(poi)
    return catalog


@lru_cache(maxsize=1)
def load_heritage_catalog() -> Tuple[PointOfInterest, ...]:
    """Static Seoul heritage catalog bundled with the service."""
    if not HERITAGE_FILE.exists():
        logger.error(f"Heritage catalog not found: {HERITAGE_FILE}")
        return ()
    with open(HERITAGE_FILE, encoding="utf-8") as f:
        records = json.load(f)
    catalog = tuple(catalog_from_records(records))
    logger.info(f"Loaded {len(catalog)} heritage sites from {HERITAGE_FILE.name}")
    return catalog
