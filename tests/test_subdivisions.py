# tests/test_subdivisions.py

import random

from conftest import MONTH, WEEK, make_config
from talecal.core.types import CalendarSubdivision
from talecal.engines.specs import CORUSCANT, GREGORIAN
from talecal.engines.subdivisions import (
    cycle_index,
    day_of_subdivision,
    find_subdivision,
    iter_cycles,
    resolve_subdivisions,
    unit_label,
    unit_span,
    unit_spans,
)


def test_first_day_of_year_zero(month_week):
    r = resolve_subdivisions(month_week, 1, 0)
    assert r["month"].unit_index == 0
    assert r["week"].unit_index == 0


def test_month_walk(month_week):
    assert resolve_subdivisions(month_week, 30, 0)["month"].unit_index == 0
    assert resolve_subdivisions(month_week, 31, 0)["month"].unit_index == 1
    assert resolve_subdivisions(month_week, 331, 0)["month"].unit_index == 11
    assert resolve_subdivisions(month_week, 365, 0)["month"].unit_index == 11
    assert resolve_subdivisions(month_week, 365, 0)["month"].label == "Month 12"


def test_cycle_is_periodic_and_crosses_years(month_week):
    random.seed(42)
    for _ in range(500):
        year = random.randint(-200, 200)
        doy = random.randint(1, 365)
        here = resolve_subdivisions(month_week, doy, year)["week"].unit_index
        nxt_year, nxt_doy = (year + 1, 1) if doy == 365 else (year, doy + 1)
        there = resolve_subdivisions(month_week, nxt_doy, nxt_year)["week"].unit_index
        assert there == (here + 1) % 7


def test_cycle_negative_days():
    weekday = find_subdivision(GREGORIAN, "weekday")
    # day 1 of year 0 is Monday, so the day before is Sunday
    assert cycle_index(weekday, 0) == 1
    assert cycle_index(weekday, -1) == 0
    assert cycle_index(weekday, -8) == 0
    r = resolve_subdivisions(GREGORIAN, 365, -1)
    assert r["weekday"].label == "Sunday"
    assert r["month"].label == "December"


def test_nested_quarters_and_weeks():
    r = resolve_subdivisions(CORUSCANT, 8, 0)
    assert r["quarter"].label == "Conference Season"
    assert r["week"].unit_index == 1
    assert r["week"].label == "Week 2"

    r = resolve_subdivisions(CORUSCANT, 93, 0)
    assert r["quarter"].number == 2
    assert r["quarter"].label == "Gala Season"
    assert r["week"].unit_index == 0

    # festival day: past the 13 weeks, stays in the last week
    r = resolve_subdivisions(CORUSCANT, 92, 0)
    assert r["quarter"].unit_index == 0
    assert r["week"].unit_index == 12


def test_unit_spans():
    assert unit_spans(CORUSCANT, "quarter") == [(1, 92), (93, 184), (185, 276), (277, 368)]
    weeks = unit_spans(CORUSCANT, "week")
    assert len(weeks) == 52
    assert weeks[0] == (1, 7)
    assert unit_span(CORUSCANT, "week", 14) == (93, 99)
    assert unit_span(CORUSCANT, "week", 53) is None
    assert unit_span(GREGORIAN, "month", 12) == (335, 365)
    assert unit_spans(GREGORIAN, "weekday") == []
    assert unit_spans(GREGORIAN, "nope") == []


def test_day_of_subdivision():
    assert day_of_subdivision(GREGORIAN, "month", 32) == 1
    assert day_of_subdivision(GREGORIAN, "month", 59) == 28
    assert day_of_subdivision(GREGORIAN, "month", 365) == 31
    assert day_of_subdivision(CORUSCANT, "quarter", 184) == 92


def test_labels():
    node = CalendarSubdivision(id="m", name="Moon", count=3, days_per_unit_fixed=10, labels=("Frost", "  "))
    assert unit_label(node, 0) == "Frost"
    assert unit_label(node, 1) == "Moon 2"
    assert unit_label(node, 2) == "Moon 3"

    off = CalendarSubdivision(
        id="m", name="Moon", count=3, days_per_unit_fixed=10,
        labels=("Frost",), use_custom_labels=False, label_format="{name} #{n}",
    )
    assert unit_label(off, 0) == "Moon #1"


def test_nested_cycle_is_global():
    tide = CalendarSubdivision(id="tide", name="Tide", count=3, is_cycle=True, epoch_starts_on_unit=2)
    season = CalendarSubdivision(id="season", name="Season", count=5, days_per_unit_fixed=73, subdivisions=(tide,))
    cfg = make_config(subdivisions=(season,))
    assert [c.id for c in iter_cycles(cfg)] == ["tide"]
    # absolute day 74 in year 0, day 1 of season 2
    assert resolve_subdivisions(cfg, 75, 0)["tide"].unit_index == (74 + 2) % 3
    assert resolve_subdivisions(cfg, 1, 1)["tide"].unit_index == (365 + 2) % 3


def test_short_units_resolve_to_last_unit():
    short = CalendarSubdivision(id="m", name="Month", count=2, days_per_unit=(100, 100))
    cfg = make_config(subdivisions=(short,))
    assert resolve_subdivisions(cfg, 250, 0)["m"].unit_index == 1


def test_resolves_every_id(month_week):
    assert set(resolve_subdivisions(month_week, 200, 5)) == {WEEK.id, MONTH.id}
