# units.py
# Groups catalog sections into the selectable course units used by the search.

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple, Union

from catalog import Kind, Section, Session

__all__ = [
    "TheoreticalOnly", "PracticalOnly", "Combined", "CourseUnit",
    "build_course_units", "unit_kind", "unit_sessions", "units_sessions", "unit_to_dict",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TheoreticalOnly:
    theoretical: Section

    @property
    def course_code(self) -> str:
        return self.theoretical.course_code

    @property
    def sections(self) -> Tuple[Section, ...]:
        return (self.theoretical,)

    @property
    def credit_hours(self) -> int:
        return self.theoretical.credit_hours


@dataclass(frozen=True)
class PracticalOnly:
    practical: Section

    @property
    def course_code(self) -> str:
        return self.practical.course_code

    @property
    def sections(self) -> Tuple[Section, ...]:
        return (self.practical,)

    @property
    def credit_hours(self) -> int:
        # Credit is carried by the theory section; a lone lab counts for nothing.
        return 0


@dataclass(frozen=True)
class Combined:
    theoretical: Section
    practical: Section

    @property
    def course_code(self) -> str:
        return self.theoretical.course_code

    @property
    def sections(self) -> Tuple[Section, ...]:
        return (self.theoretical, self.practical)

    @property
    def credit_hours(self) -> int:
        return self.theoretical.credit_hours


CourseUnit = Union[TheoreticalOnly, PracticalOnly, Combined]


def unit_sessions(unit: CourseUnit) -> List[Session]:
    return [s for sec in unit.sections for s in sec.sessions]


def build_course_units(sections: Sequence[Section]) -> Dict[str, List[CourseUnit]]:
    # Pair each theory section with the practical section right after it.
    # Pairing is positional, so the input must be in catalog order.
    # Every section ends up in exactly one unit.
    units: Dict[str, List[CourseUnit]] = {}
    i = 0
    while i < len(sections):
        sec = sections[i]
        bucket = units.setdefault(sec.course_code, [])

        if sec.kind is Kind.THEORETICAL:
            nxt = sections[i + 1] if i + 1 < len(sections) else None
            if nxt is not None and nxt.course_code == sec.course_code and nxt.kind is Kind.PRACTICAL:
                bucket.append(Combined(sec, nxt))
                i += 2
                continue
            bucket.append(TheoreticalOnly(sec))
        else:
            bucket.append(PracticalOnly(sec))
        i += 1

    logger.debug("Built %d units for %d courses", sum(len(u) for u in units.values()), len(units))
    return units


def unit_kind(unit: CourseUnit) -> str:
    if isinstance(unit, Combined):
        return "combined"
    if isinstance(unit, TheoreticalOnly):
        return "theoretical"
    if isinstance(unit, PracticalOnly):
        return "practical"
    raise TypeError(f"not a course unit: {unit!r}")


def unit_to_dict(unit: CourseUnit) -> Dict[str, object]:
    out: Dict[str, object] = {
        "type": unit_kind(unit),
        "code": unit.course_code,
        "totalCredits": unit.credit_hours,
    }
    if isinstance(unit, (TheoreticalOnly, Combined)):
        out["theoretical"] = unit.theoretical.to_dict()
    if isinstance(unit, (PracticalOnly, Combined)):
        out["practical"] = unit.practical.to_dict()
    return out


def units_sessions(units: Iterable[CourseUnit]) -> List[Session]:
    return [s for u in units for s in unit_sessions(u)]
