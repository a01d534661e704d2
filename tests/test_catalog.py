"""
Unit tests for catalog loading and tourist-spot record normalization.
"""

from engine.catalog import catalog_from_records, load_heritage_catalog, poi_from_record


def test_backend_record_normalization():
    poi = poi_from_record({
        "contentId": 126508,
        "title": "경복궁",
        "mapX": "126.9770350",
        "mapY": "37.5796010",
        "addr1": "서울특별시 종로구 사직로 161",
    })

    assert poi.id == "126508"
    assert poi.name == "경복궁"
    assert poi.latitude == 37.579601
    assert poi.longitude == 126.977035
    assert poi.address == "서울특별시 종로구 사직로 161"
    assert poi.bounding_area is None


def test_content_id_preferred_over_id():
    poi = poi_from_record({"content_id": "A1", "id": 7, "name": "x", "lat": 37.0, "lng": 127.0})
    assert poi.id == "A1"


def test_polygon_record_gets_bounding_area():
    poi = poi_from_record({
        "id": "geunjeongjeon",
        "name": "근정전",
        "lat": 37.5786,
        "lng": 126.9770,
        "polygon": {"nw": [37.5792, 126.9764], "se": [37.5781, 126.9777]},
    })
    area = poi.bounding_area
    assert (area.north, area.west, area.south, area.east) == (37.5792, 126.9764, 37.5781, 126.9777)


def test_malformed_bounding_area_is_ignored():
    poi = poi_from_record({"id": "x", "lat": 37.0, "lng": 127.0, "bounding_area": {"nw": [37.0]}})
    assert poi is not None
    assert poi.bounding_area is None


def test_records_without_coordinates_are_skipped():
    records = [
        {"contentId": 1, "title": "좌표 없음"},
        {"contentId": 2, "title": "잘못된 좌표", "mapX": "abc", "mapY": "37.5"},
        {"contentId": 3, "title": "정상", "mapX": "127.0", "mapY": "37.5"},
    ]
    catalog = catalog_from_records(records)
    assert [p.id for p in catalog] == ["3"]


def test_bundled_heritage_catalog():
    catalog = load_heritage_catalog()

    assert len(catalog) == 20
    ids = [p.id for p in catalog]
    assert len(set(ids)) == len(ids)
    assert catalog[0].id == "geunjeongjeon"
    assert catalog[0].bounding_area is not None
    assert any(p.bounding_area is None for p in catalog)


def test_non_object_records_are_skipped():
    records = ["oops", 3, None, {"contentId": 9, "title": "정상", "mapX": 127.0, "mapY": 37.5}]
    assert [p.id for p in catalog_from_records(records)] == ["9"]
