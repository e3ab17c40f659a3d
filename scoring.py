# scoring.py
# Ranks candidate schedules: registered seats first, open seats next, compact days preferred.

from typing import AbstractSet, Dict, List, Optional, Sequence

from catalog import Section
from gaps import Gap, schedule_gaps, total_gap_minutes
from units import Combined, CourseUnit, PracticalOnly, TheoreticalOnly

__all__ = ["BASE_SCORE", "section_points", "score_schedule"]

BASE_SCORE = 100

# (registered, open, closed) points per section kind.
THEORETICAL_POINTS = (100, 20, -5)
PRACTICAL_POINTS = (50, 10, -3)


def section_points(section: Section, registered: AbstractSet[str], points) -> int:
    registered_pts, open_pts, closed_pts = points
    if section.section_id in registered:
        return registered_pts
    if section.is_open:
        return open_pts
    return closed_pts


def score_schedule(
    units: Sequence[CourseUnit],
    registered: AbstractSet[str],
    gaps: Optional[Dict[int, List[Gap]]] = None,
) -> int:
    # Higher is better. Only used for ordering, never for pruning.
    score = BASE_SCORE
    for unit in units:
        if isinstance(unit, (TheoreticalOnly, Combined)):
            score += section_points(unit.theoretical, registered, THEORETICAL_POINTS)
        if isinstance(unit, (PracticalOnly, Combined)):
            score += section_points(unit.practical, registered, PRACTICAL_POINTS)

    if gaps is None:
        gaps = schedule_gaps(units)
    return score - total_gap_minutes(gaps) // 10
