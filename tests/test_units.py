from catalog import Kind
from units import Combined, PracticalOnly, TheoreticalOnly, build_course_units, unit_to_dict

T, P = Kind.THEORETICAL, Kind.PRACTICAL


def test_theory_followed_by_practical_is_combined(make_section):
    sections = [
        make_section("CS101", "1", T),
        make_section("CS101", "2", P),
        make_section("CS102", "3", T),
    ]
    units = build_course_units(sections)

    assert units["CS101"] == [Combined(sections[0], sections[1])]
    assert units["CS102"] == [TheoreticalOnly(sections[2])]


def test_every_section_lands_in_exactly_one_unit(make_section):
    sections = [
        make_section("A", "1", T),
        make_section("A", "2", P),
        make_section("A", "3", P),
        make_section("A", "4", T),
        make_section("B", "5", P),
        make_section("A", "6", P),
    ]
    units = build_course_units(sections)
    seen = [s.section_id for us in units.values() for u in us for s in u.sections]
    assert sorted(seen) == ["1", "2", "3", "4", "5", "6"]
    assert [type(u) for u in units["A"]] == [Combined, PracticalOnly, TheoreticalOnly, PracticalOnly]


def test_pairing_is_positional(make_section):
    # A practical separated from its theory by another course is not merged.
    sections = [make_section("A", "1", T), make_section("B", "2", T), make_section("A", "3", P)]
    units = build_course_units(sections)
    assert units["A"] == [TheoreticalOnly(sections[0]), PracticalOnly(sections[2])]


def test_credit_hours_come_from_theory(make_section):
    theory = make_section("A", "1", T, credits=4)
    lab = make_section("A", "2", P, credits=2)
    assert Combined(theory, lab).credit_hours == 4
    assert TheoreticalOnly(theory).credit_hours == 4
    assert PracticalOnly(lab).credit_hours == 0


def test_practical_only_course(make_section):
    units = build_course_units([make_section("LAB", "1", P, credits=1), make_section("LAB", "2", P)])
    assert all(isinstance(u, PracticalOnly) and u.credit_hours == 0 for u in units["LAB"])


def test_unit_to_dict(make_section):
    unit = Combined(make_section("A", "1", T), make_section("A", "2", P))
    out = unit_to_dict(unit)
    assert out["type"] == "combined"
    assert out["totalCredits"] == 3
    assert out["theoretical"]["sectionId"] == "1"
    assert out["practical"]["sectionId"] == "2"
    assert "practical" not in unit_to_dict(TheoreticalOnly(unit.theoretical))
