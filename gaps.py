# gaps.py
# Idle time between consecutive sessions of a schedule, per day.

from dataclasses import dataclass
from typing import Dict, Iterable, List

from catalog import Session, format_clock, format_duration
from units import CourseUnit, units_sessions

__all__ = ["Gap", "GAP_THRESHOLD_MINUTES", "daily_gaps", "schedule_gaps", "total_gap_minutes"]

# Short walks between rooms are not idle time.
GAP_THRESHOLD_MINUTES = 10


@dataclass(frozen=True)
class Gap:
    after: int
    before: int

    @property
    def minutes(self) -> int:
        return self.before - self.after

    def to_dict(self) -> Dict[str, object]:
        return {
            "gapMinutes": self.minutes,
            "gapText": format_duration(self.minutes),
            "afterTime": format_clock(self.after),
            "beforeTime": format_clock(self.before),
        }


def daily_gaps(sessions: Iterable[Session]) -> Dict[int, List[Gap]]:
    # Map each day that has sessions to its gaps, in time order.
    by_day: Dict[int, List[Session]] = {}
    for s in sessions:
        by_day.setdefault(s.day, []).append(s)

    result: Dict[int, List[Gap]] = {}
    for day in sorted(by_day, key=lambda d: (d is None, d or 0)):
        day_sessions = sorted(by_day[day], key=lambda s: s.start)
        result[day] = [
            Gap(prev.end, cur.start)
            for prev, cur in zip(day_sessions, day_sessions[1:])
            if cur.start - prev.end > GAP_THRESHOLD_MINUTES
        ]
    return result


def schedule_gaps(units: Iterable[CourseUnit]) -> Dict[int, List[Gap]]:
    return daily_gaps(units_sessions(units))


def total_gap_minutes(gaps: Dict[int, List[Gap]]) -> int:
    return sum(g.minutes for day in gaps.values() for g in day)
