# catalog.py
# Immutable course catalog model and loader for the scraper's JSON document.

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from errors import CatalogError

__all__ = [
    "Kind", "Status", "Session", "Section", "Catalog", "DAYS", "DEFAULT_DAY_MAPPING",
    "load_catalog", "load_catalog_file", "parse_registered_sections",
    "repair_text", "parse_clock", "format_clock", "format_duration",
]

logger = logging.getLogger(__name__)

DAYS = (1, 2, 3, 4, 5)

DEFAULT_DAY_MAPPING = {
    "1": "الأحد",
    "2": "الاثنين",
    "3": "الثلاثاء",
    "4": "الأربعاء",
    "5": "الخميس",
}


class Kind(Enum):
    THEORETICAL = "نظري"
    PRACTICAL = "عملي"


class Status(Enum):
    OPEN = "مفتوحة"
    CLOSED = "مغلقة"


_KIND_ALIASES = {
    "نظري": Kind.THEORETICAL, "theoretical": Kind.THEORETICAL, "theory": Kind.THEORETICAL,
    "عملي": Kind.PRACTICAL, "practical": Kind.PRACTICAL, "lab": Kind.PRACTICAL,
}
_OPEN_ALIASES = {"مفتوحة", "open"}
_CLOCK = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")
_LEADING_INT = re.compile(r"^\s*(\d+)")


@dataclass(frozen=True)
class Session:
    # One weekly time block. `day` is None when the source day was unusable.
    day: Optional[int]
    start: int
    end: int
    room: str = ""
    day_name: str = ""

    def __post_init__(self):
        if self.day is not None and self.day not in DAYS:
            raise ValueError(f"session day must be in 1..5, got {self.day!r}")
        if not (0 <= self.start < self.end < 24 * 60):
            raise ValueError(f"invalid session time {self.start}-{self.end}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day": self.day,
            "dayName": self.day_name,
            "startTime": format_clock(self.start),
            "endTime": format_clock(self.end),
            "room": self.room,
        }


@dataclass(frozen=True)
class Section:
    course_code: str
    section_id: str
    name: str
    kind: Kind
    credit_hours: int
    status: Status
    instructor: str = ""
    sessions: Tuple[Session, ...] = field(default_factory=tuple)

    @property
    def is_open(self) -> bool:
        return self.status is Status.OPEN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.course_code,
            "sectionId": self.section_id,
            "name": self.name,
            "type": self.kind.value,
            "creditHours": self.credit_hours,
            "status": self.status.value,
            "instructor": self.instructor,
            "schedule": {"sessions": [s.to_dict() for s in self.sessions]},
        }


class Catalog:
    # Ordered, read-only collection of sections plus the display day mapping.
    def __init__(self, sections: Iterable[Section], day_mapping: Optional[Dict[str, str]] = None):
        self._sections = tuple(sections)
        self._by_id: Dict[str, Section] = {}
        for sec in self._sections:
            if sec.section_id in self._by_id:
                raise CatalogError(f"duplicate sectionId {sec.section_id!r}")
            self._by_id[sec.section_id] = sec
        self.day_mapping = dict(day_mapping or DEFAULT_DAY_MAPPING)

    @property
    def sections(self) -> Tuple[Section, ...]:
        return self._sections

    def __len__(self) -> int:
        return len(self._sections)

    def get(self, section_id: str) -> Optional[Section]:
        return self._by_id.get(section_id)

    def course_codes(self) -> List[str]:
        # First-appearance order.
        return list(dict.fromkeys(sec.course_code for sec in self._sections))

    def resolve_registered(self, section_ids: Iterable[str]) -> Tuple[List[str], List[str]]:
        known, unknown = [], []
        for sid in section_ids:
            (known if sid in self._by_id else unknown).append(sid)
        return known, unknown

    def summary(self) -> Dict[str, Any]:
        by_status: Dict[str, int] = {}
        for sec in self._sections:
            by_status[sec.status.value] = by_status.get(sec.status.value, 0) + 1
        return {
            "totalSessions": sum(len(sec.sessions) for sec in self._sections),
            "sectionsWithSchedule": sum(1 for sec in self._sections if sec.sessions),
            "sectionsByStatus": by_status,
        }


def repair_text(text: Any) -> Any:
    # Undo UTF-8 text that was decoded as cp1252/latin-1 somewhere upstream.
    if not isinstance(text, str) or text.isascii():
        return text
    for codec in ("cp1252", "latin-1"):
        try:
            return text.encode(codec).decode("utf-8")
        except (UnicodeEncodeError, UnicodeDecodeError):
            continue
    return text


def parse_clock(value: Any) -> Optional[int]:
    # Parse an "HH:MM" 24-hour string into minutes since midnight, or None.
    if not isinstance(value, str):
        return None
    m = _CLOCK.match(value)
    if not m:
        return None
    hours, minutes = int(m.group(1)), int(m.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def format_clock(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_duration(minutes: int) -> str:
    return f"{minutes // 60}:{minutes % 60:02d}"


def parse_credit_hours(value: Any) -> int:
    # Scraped data: anything unparseable counts as zero credits.
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        return max(int(value), 0)
    if isinstance(value, str):
        m = _LEADING_INT.match(value)
        if m:
            return int(m.group(1))
    return 0


def parse_registered_sections(text: Any) -> Tuple[str, ...]:
    # Split a comma-separated list (or an iterable) of section IDs.
    if text is None:
        return ()
    items = text.split(",") if isinstance(text, str) else [str(t) for t in text]
    return tuple(dict.fromkeys(s.strip() for s in items if s.strip()))


def _parse_day(raw: Any) -> Optional[int]:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def _build_session(raw: Dict[str, Any], where: str) -> Optional[Session]:
    if not isinstance(raw, dict):
        logger.warning("Dropping malformed session %r in %s", raw, where)
        return None
    start = parse_clock(raw.get("startTime"))
    end = parse_clock(raw.get("endTime"))
    if start is None or end is None or start >= end:
        logger.warning("Dropping session with unusable time %r-%r in %s",
                       raw.get("startTime"), raw.get("endTime"), where)
        return None

    room = repair_text(raw.get("room") or "")
    day_name = repair_text(raw.get("dayName") or "")
    day = _parse_day(raw.get("day"))
    try:
        return Session(day, start, end, room, day_name)
    except ValueError:
        # Kept, but unplaceable: no day filter will ever contain None.
        logger.warning("Session day %r out of range in %s; section cannot be scheduled",
                       raw.get("day"), where)
        return Session(None, start, end, room, day_name)


def _build_section(raw: Dict[str, Any], index: int) -> Optional[Section]:
    code = str(raw.get("code") or "").strip()
    section_id = str(raw.get("sectionId") or "").strip()
    if not code or not section_id:
        raise CatalogError(f"course entry #{index} is missing code or sectionId")

    kind = _KIND_ALIASES.get(str(repair_text(raw.get("type") or "")).strip().lower())
    if kind is None:
        logger.warning("Skipping section %s of %s with unknown type %r", section_id, code, raw.get("type"))
        return None

    status_text = str(repair_text(raw.get("status") or "")).strip().lower()
    status = Status.OPEN if status_text in _OPEN_ALIASES else Status.CLOSED

    sessions_raw = (raw.get("schedule") or {}).get("sessions") or []
    where = f"{code}/{section_id}"
    sessions = tuple(s for s in (_build_session(r, where) for r in sessions_raw) if s is not None)

    return Section(
        course_code=code,
        section_id=section_id,
        name=repair_text(raw.get("name") or ""),
        kind=kind,
        credit_hours=parse_credit_hours(raw.get("creditHours")),
        status=status,
        instructor=repair_text(raw.get("instructor") or ""),
        sessions=sessions,
    )


def load_catalog(document: Any) -> Catalog:
    # Build a Catalog from the scraper's `{courses, dayMapping}` document.
    if not isinstance(document, dict) or not isinstance(document.get("courses"), list):
        raise CatalogError("catalog document must be an object with a 'courses' list")

    sections = []
    for i, raw in enumerate(document["courses"]):
        if not isinstance(raw, dict):
            raise CatalogError(f"course entry #{i} is not an object")
        sec = _build_section(raw, i)
        if sec is not None:
            sections.append(sec)

    day_mapping = document.get("dayMapping")
    if day_mapping is not None and not isinstance(day_mapping, dict):
        raise CatalogError("dayMapping must be an object")
    if day_mapping:
        day_mapping = {str(k): repair_text(v) for k, v in day_mapping.items()}

    catalog = Catalog(sections, day_mapping)
    logger.info("Loaded catalog with %d sections across %d courses",
                len(catalog), len(catalog.course_codes()))
    return catalog


def load_catalog_file(path: str) -> Catalog:
    with open(path, encoding="utf-8") as f:
        try:
            document = json.load(f)
        except json.JSONDecodeError as exc:
            raise CatalogError(f"catalog file is not valid JSON: {exc}") from exc
    return load_catalog(document)
