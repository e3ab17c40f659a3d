import json

import pytest

from catalog import (
    Kind, Session, Status, format_clock, format_duration, load_catalog, load_catalog_file,
    parse_clock, parse_credit_hours, parse_registered_sections, repair_text,
)
from errors import CatalogError


def test_load_catalog_keeps_order_and_maps_values(raw_catalog):
    catalog = load_catalog(raw_catalog)

    assert [s.section_id for s in catalog.sections] == ["101", "102", "201", "202"]
    first = catalog.get("101")
    assert first.kind is Kind.THEORETICAL
    assert first.status is Status.OPEN
    assert first.credit_hours == 3
    assert first.sessions[0] == Session(1, 480, 570, "A101", "x")
    assert catalog.get("102").kind is Kind.PRACTICAL
    assert catalog.get("201").status is Status.CLOSED
    assert catalog.course_codes() == ["CS101", "CS102"]
    assert catalog.day_mapping["1"] == "الأحد"


def test_summary_counts(raw_catalog):
    summary = load_catalog(raw_catalog).summary()
    assert summary["totalSessions"] == 5
    assert summary["sectionsWithSchedule"] == 4
    assert summary["sectionsByStatus"] == {"مفتوحة": 3, "مغلقة": 1}


def test_session_rejects_day_outside_week():
    with pytest.raises(ValueError):
        Session(6, 480, 540)
    with pytest.raises(ValueError):
        Session(0, 480, 540)


def test_out_of_range_day_is_kept_unplaceable(raw_catalog):
    raw_catalog["courses"][0]["schedule"]["sessions"][0]["day"] = 7
    sec = load_catalog(raw_catalog).get("101")
    assert sec.sessions[0].day is None
    assert sec.sessions[1].day == 3


def test_bad_times_are_dropped(raw_catalog):
    sessions = raw_catalog["courses"][1]["schedule"]["sessions"]
    sessions.append({"day": 4, "startTime": "11:00", "endTime": "10:00", "room": "x"})
    sessions.append({"day": 4, "startTime": "soon", "endTime": "10:00", "room": "x"})
    assert len(load_catalog(raw_catalog).get("102").sessions) == 1


def test_unknown_status_fails_closed_and_unknown_type_is_skipped(raw_catalog):
    raw_catalog["courses"][2]["status"] = "???"
    raw_catalog["courses"][3]["type"] = "seminar"
    catalog = load_catalog(raw_catalog)
    assert catalog.get("201").status is Status.CLOSED
    assert catalog.get("202") is None


def test_duplicate_section_id_rejected(raw_catalog):
    raw_catalog["courses"][1]["sectionId"] = "101"
    with pytest.raises(CatalogError):
        load_catalog(raw_catalog)


@pytest.mark.parametrize("doc", [None, [], {"courses": "nope"}, {"courses": [1]}, {"courses": [{"code": "X"}]}])
def test_malformed_documents(doc):
    with pytest.raises(CatalogError):
        load_catalog(doc)


def test_load_catalog_file(tmp_path, raw_catalog):
    path = tmp_path / "courses.json"
    path.write_text(json.dumps(raw_catalog, ensure_ascii=False), encoding="utf-8")
    assert len(load_catalog_file(str(path))) == 4

    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog_file(str(path))


@pytest.mark.parametrize("value,expected", [(3, 3), ("4", 4), ("3 ساعات", 3), ("", 0), (None, 0), ("abc", 0), (True, 0)])
def test_parse_credit_hours(value, expected):
    assert parse_credit_hours(value) == expected


def test_clock_helpers():
    assert parse_clock("08:05") == 485
    assert parse_clock("8:05") == 485
    assert parse_clock("24:00") is None
    assert parse_clock(None) is None
    assert format_clock(485) == "08:05"
    assert format_duration(95) == "1:35"


def test_repair_text_fixes_mojibake_only():
    assert repair_text("نظري") == "نظري"
    assert repair_text("Room 5") == "Room 5"
    assert repair_text(None) is None
    assert repair_text("مفتوحة".encode("utf-8").decode("latin-1")) == "مفتوحة"
    assert repair_text("نظري".encode("utf-8").decode("cp1252")) == "نظري"


def test_parse_registered_sections():
    assert parse_registered_sections(" 101, 202 ,,101 ") == ("101", "202")
    assert parse_registered_sections(["5", " 6 "]) == ("5", "6")
    assert parse_registered_sections(None) == ()


def test_resolve_registered(raw_catalog):
    known, unknown = load_catalog(raw_catalog).resolve_registered(["101", "999"])
    assert known == ["101"]
    assert unknown == ["999"]
