# schedule_finder.py
# Enumerates conflict-free schedules with a two-phase backtracking DFS, then ranks them.

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple

from catalog import DAYS, parse_registered_sections
from conflicts import is_valid_schedule, on_days, units_conflict
from errors import ValidationError
from gaps import Gap, schedule_gaps, total_gap_minutes
from scoring import score_schedule
from units import CourseUnit, unit_sessions, unit_to_dict

__all__ = [
    "Constraints", "ScheduleResult", "generate_schedules",
    "course_options", "find_unresolvable_pairs",
]

logger = logging.getLogger(__name__)

Schedule = Tuple[CourseUnit, ...]


@dataclass(frozen=True)
class Constraints:
    # Everything one generation request needs; never mutated during search.
    selected_courses: Tuple[str, ...]
    days: FrozenSet[int] = frozenset(DAYS)
    mandatory_courses: FrozenSet[str] = frozenset()
    registered_sections: FrozenSet[str] = frozenset()
    min_credits: int = 12
    max_credits: int = 18
    max_results: int = 100
    include_closed: bool = False
    allow_partial: bool = False

    @classmethod
    def from_dict(cls, body: Mapping[str, Any]) -> "Constraints":
        # Build from the JSON request shape used by the API.
        if not isinstance(body, Mapping):
            raise ValidationError("request body must be a JSON object")

        def int_field(name: str, default: int) -> int:
            value = body.get(name, default)
            if isinstance(value, bool):
                raise ValidationError(f"{name} must be an integer")
            try:
                return int(value)
            except (TypeError, ValueError):
                raise ValidationError(f"{name} must be an integer") from None

        def bool_field(name: str, default: bool) -> bool:
            value = body.get(name, default)
            if not isinstance(value, bool):
                raise ValidationError(f"{name} must be true or false")
            return value

        def list_field(name: str) -> List[Any]:
            value = body.get(name) or []
            if not isinstance(value, list):
                raise ValidationError(f"{name} must be a list")
            return value

        days = []
        for d in list_field("days") if "days" in body else DAYS:
            if isinstance(d, bool):
                raise ValidationError(f"invalid day {d!r}")
            try:
                days.append(int(d))
            except (TypeError, ValueError):
                raise ValidationError(f"invalid day {d!r}") from None

        return cls(
            selected_courses=tuple(dict.fromkeys(str(c) for c in list_field("selectedCourses"))),
            days=frozenset(days),
            mandatory_courses=frozenset(str(c) for c in list_field("mandatoryCourses")),
            registered_sections=frozenset(parse_registered_sections(body.get("registeredSections"))),
            min_credits=int_field("minCredits", cls.min_credits),
            max_credits=int_field("maxCredits", cls.max_credits),
            max_results=int_field("maxResults", cls.max_results),
            include_closed=bool_field("includeClosed", cls.include_closed),
            allow_partial=bool_field("allowPartial", cls.allow_partial),
        )

    def validate(self, units_by_course: Optional[Mapping[str, Sequence[CourseUnit]]] = None) -> None:
        if not self.selected_courses:
            raise ValidationError("select at least one course")
        if not self.days:
            raise ValidationError("select at least one day")
        bad_days = sorted(d for d in self.days if d not in DAYS)
        if bad_days:
            raise ValidationError("days must be between 1 and 5", details={"days": bad_days})
        missing = sorted(self.mandatory_courses.difference(self.selected_courses))
        if missing:
            raise ValidationError(
                "mandatory courses must also be selected: " + ", ".join(missing),
                details={"missingMandatory": missing},
            )
        if self.min_credits < 0 or self.max_credits < 0:
            raise ValidationError("credit bounds must not be negative")
        if self.min_credits > self.max_credits:
            raise ValidationError("minCredits must not exceed maxCredits")
        if self.max_results < 0:
            raise ValidationError("maxResults must not be negative")

        if units_by_course is not None:
            unknown = [c for c in self.selected_courses if c not in units_by_course]
            if len(unknown) == len(self.selected_courses):
                raise ValidationError("none of the selected courses exist in the catalog",
                                      details={"unknownCourses": unknown})
            if unknown:
                logger.warning("Ignoring unknown course codes: %s", ", ".join(unknown))


@dataclass(frozen=True)
class ScheduleResult:
    units: Schedule
    total_credits: int
    score: int
    gaps: Dict[int, List[Gap]] = field(default_factory=dict, compare=False)

    @property
    def total_gap_minutes(self) -> int:
        return total_gap_minutes(self.gaps)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "units": [unit_to_dict(u) for u in self.units],
            "totalCredits": self.total_credits,
            "score": self.score,
            "gaps": {str(day): [g.to_dict() for g in gaps] for day, gaps in self.gaps.items()},
            "totalGapMinutes": self.total_gap_minutes,
        }


def _unit_allowed(unit: CourseUnit, constraints: Constraints) -> bool:
    if not constraints.include_closed:
        for sec in unit.sections:
            if not sec.is_open and sec.section_id not in constraints.registered_sections:
                return False
    # A unit meeting on an excluded day can never be part of a valid schedule.
    return on_days(unit_sessions(unit), constraints.days)


def course_options(
    units_by_course: Mapping[str, Sequence[CourseUnit]],
    constraints: Constraints,
) -> List[Tuple[str, List[CourseUnit]]]:
    # Selected courses (known to the catalog) with their usable units, in selection order.
    options = []
    for code in constraints.selected_courses:
        if code not in units_by_course:
            continue
        units = [u for u in units_by_course[code] if _unit_allowed(u, constraints)]
        options.append((code, units))
    return options


def _fits(unit: CourseUnit, schedule: Schedule) -> bool:
    return not any(units_conflict(unit, placed) for placed in schedule)


def _mandatory_bases(options: List[Tuple[str, List[CourseUnit]]], days) -> List[Tuple[Schedule, int]]:
    bases: List[Tuple[Schedule, int]] = []

    def dfs(i: int, schedule: Schedule, credits: int) -> None:
        if i == len(options):
            if is_valid_schedule(schedule, days):
                bases.append((schedule, credits))
            return
        _, units = options[i]
        for unit in units:
            if _fits(unit, schedule):
                dfs(i + 1, schedule + (unit,), credits + unit.credit_hours)

    dfs(0, (), 0)
    return bases


def generate_schedules(
    units_by_course: Mapping[str, Sequence[CourseUnit]],
    constraints: Constraints,
) -> List[ScheduleResult]:
    # Return every valid schedule for the request, best score first.
    # Mandatory courses are placed first; each conflict-free placement of them
    # seeds a second search over the optional courses. Emission stops as soon
    # as `max_results` schedules exist (0 means no limit).
    constraints.validate(units_by_course)
    started = time.perf_counter()

    options = course_options(units_by_course, constraints)
    mandatory = [o for o in options if o[0] in constraints.mandatory_courses]
    optional = [o for o in options if o[0] not in constraints.mandatory_courses and o[1]]
    logger.info("Generating schedules: %d mandatory, %d optional courses", len(mandatory), len(optional))

    placed_mandatory = {code for code, _ in mandatory}
    if constraints.mandatory_courses - placed_mandatory:
        logger.info("Mandatory courses missing from catalog: %s",
                    ", ".join(sorted(constraints.mandatory_courses - placed_mandatory)))
        return []

    bases = _mandatory_bases(mandatory, constraints.days)
    if not bases:
        logger.info("No conflict-free combination of the mandatory courses")
        return []

    results: List[ScheduleResult] = []
    cap = constraints.max_results
    lo, hi = constraints.min_credits, constraints.max_credits

    def full() -> bool:
        return cap > 0 and len(results) >= cap

    def emit(schedule: Schedule, credits: int) -> None:
        if not is_valid_schedule(schedule, constraints.days):
            # The search only extends conflict-free schedules on allowed days.
            logger.error("Search produced an invalid schedule; discarding it")
            return
        gaps = schedule_gaps(schedule)
        score = score_schedule(schedule, constraints.registered_sections, gaps)
        results.append(ScheduleResult(schedule, credits, score, gaps))

    partial = constraints.allow_partial

    def dfs(i: int, schedule: Schedule, credits: int, extended: bool) -> None:
        if full():
            return
        ends_here = i >= len(optional) or credits >= hi
        # Skipping a course reaches the same schedule again; only emit once.
        # Without partial schedules only branch ends are emitted.
        if extended and schedule and lo <= credits <= hi and (partial or ends_here):
            emit(schedule, credits)
            if full():
                return

        if ends_here:
            return

        _, units = optional[i]
        for unit in units:
            new_credits = credits + unit.credit_hours
            if new_credits <= hi and _fits(unit, schedule):
                dfs(i + 1, schedule + (unit,), new_credits, True)
                if full():
                    return

        if partial:
            dfs(i + 1, schedule, credits, False)

    for schedule, credits in bases:
        dfs(0, schedule, credits, True)
        if full():
            break

    results.sort(key=lambda r: r.score, reverse=True)
    logger.info("Generated %d schedules in %.2fms", len(results), (time.perf_counter() - started) * 1000)
    return results


def find_unresolvable_pairs(
    units_by_course: Mapping[str, Sequence[CourseUnit]],
    constraints: Constraints,
) -> List[List[str]]:
    # Pairs of selected courses for which every unit combination clashes.
    options = course_options(units_by_course, constraints)
    bad_pairs = []
    for i in range(len(options)):
        for j in range(i + 1, len(options)):
            (code_a, units_a), (code_b, units_b) = options[i], options[j]
            if not any(not units_conflict(ua, ub) for ua in units_a for ub in units_b):
                bad_pairs.append([code_a, code_b])
    return bad_pairs
