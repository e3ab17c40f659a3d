import pytest

from catalog import Kind, Section, Session, Status


def section(code, sid, kind=Kind.THEORETICAL, credits=3, status=Status.OPEN, times=()):
    sessions = tuple(Session(day, start, end, "R1") for day, start, end in times)
    return Section(code, sid, f"Course {code}", kind, credits, status, "Dr. X", sessions)


@pytest.fixture
def make_section():
    return section


@pytest.fixture
def raw_catalog():
    # Shape produced by the scraper.
    def sess(day, start, end, room="A101"):
        return {"day": day, "dayName": "x", "startTime": start, "endTime": end, "room": room}

    return {
        "courses": [
            {"code": "CS101", "name": "Intro", "sectionId": "101", "type": "نظري", "creditHours": "3",
             "status": "مفتوحة", "instructor": "Dr. A",
             "schedule": {"sessions": [sess(1, "08:00", "09:30"), sess(3, "08:00", "09:30")]}},
            {"code": "CS101", "name": "Intro", "sectionId": "102", "type": "عملي", "creditHours": "0",
             "status": "مفتوحة", "instructor": "Dr. A",
             "schedule": {"sessions": [sess(2, "10:00", "12:00")]}},
            {"code": "CS102", "name": "Data", "sectionId": "201", "type": "نظري", "creditHours": "3",
             "status": "مغلقة", "instructor": "Dr. B",
             "schedule": {"sessions": [sess(1, "10:00", "11:30")]}},
            {"code": "CS102", "name": "Data", "sectionId": "202", "type": "نظري", "creditHours": "3",
             "status": "مفتوحة", "instructor": "Dr. B",
             "schedule": {"sessions": [sess(1, "08:30", "10:00")]}},
        ],
        "dayMapping": {"1": "الأحد", "2": "الاثنين", "3": "الثلاثاء", "4": "الأربعاء", "5": "الخميس"},
    }
