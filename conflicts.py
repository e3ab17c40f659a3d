# conflicts.py
# Time-overlap predicates over sessions, units and whole schedules.

from typing import AbstractSet, Iterable, Sequence

from catalog import Session
from units import CourseUnit, unit_sessions, units_sessions

__all__ = ["sessions_overlap", "conflicts", "units_conflict", "is_valid_schedule", "on_days"]


def sessions_overlap(a: Session, b: Session) -> bool:
    # Half-open intervals: back-to-back sessions do not clash.
    return a.day == b.day and a.start < b.end and b.start < a.end


def conflicts(sessions_a: Iterable[Session], sessions_b: Iterable[Session]) -> bool:
    # True if any session of A overlaps any session of B on the same day.
    sessions_b = list(sessions_b)
    for sa in sessions_a:
        for sb in sessions_b:
            if sessions_overlap(sa, sb):
                return True
    return False


def units_conflict(a: CourseUnit, b: CourseUnit) -> bool:
    return conflicts(unit_sessions(a), unit_sessions(b))


def on_days(sessions: Iterable[Session], days: AbstractSet[int]) -> bool:
    return all(s.day in days for s in sessions)


def is_valid_schedule(units: Sequence[CourseUnit], days: AbstractSet[int]) -> bool:
    # Full pairwise check over every session of a finished candidate.
    sessions = units_sessions(units)
    for i in range(len(sessions)):
        for j in range(i + 1, len(sessions)):
            if sessions_overlap(sessions[i], sessions[j]):
                return False
    return on_days(sessions, days)
