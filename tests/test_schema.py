# tests/test_schema.py

import json

import pytest

from talecal.core.errors import ConfigError
from talecal.core.schema import calendar_from_dict, calendar_to_dict, dump_calendar, load_calendar
from talecal.core.types import ComputedHoliday, FindInCycleStep, OffsetFromHoliday, StartOfYearStep
from talecal.engines.specs import ALL_SPECS, CORUSCANT, MEDIEVAL

STORED = {
    "id": "hearth",
    "name": "Hearth Reckoning",
    "description": "A stored calendar",
    "minutesPerHour": 60,
    "hoursPerDay": 24,
    "minutesPerDay": 9999,
    "daysPerYear": 365,
    "minutesPerYear": 1,
    "subdivisions": [
        {"id": "week", "name": "Week", "pluralName": "Weeks", "count": 7, "isCycle": True, "epochStartsOnUnit": 0},
        {
            "id": "month",
            "name": "Month",
            "pluralName": "Months",
            "count": 12,
            "daysPerUnit": [30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 35],
            "labelFormat": "Moon {n}",
        },
    ],
    "eras": {"positive": "AH", "negative": "BH", "zeroLabel": "Kindling"},
    "display": {
        "defaultFormat": "<%= month %> <%= dayOfMonth %>",
        "shortFormat": "<%= month %>",
        "includeTimeByDefault": False,
        "hourFormat": "12",
    },
    "holidays": [
        {
            "type": "computed",
            "name": "Thaw",
            "steps": [
                {"type": "startOfYear"},
                {"type": "offset", "days": 79},
                {"type": "findInCycle", "cycleId": "week", "dayInCycle": 0, "direction": "onOrAfter"},
            ],
        },
        {"type": "offsetFromHoliday", "name": "Thaw Eve", "baseHoliday": "Thaw", "offsetDays": -1, "description": "Night before"},
    ],
}


def test_decode_stored_payload():
    cfg = calendar_from_dict(STORED)
    assert cfg.id == "hearth"
    # derived fields in the payload are ignored
    assert cfg.minutes_per_day == 1440
    assert cfg.minutes_per_year == 525600
    assert cfg.subdivisions[0].is_cycle
    assert cfg.subdivisions[1].days_per_unit[-1] == 35
    assert cfg.subdivisions[1].label_format == "Moon {n}"
    assert cfg.eras.zero_label == "Kindling"
    assert cfg.display.hour_format == "12"
    assert cfg.display.include_time_by_default is False

    thaw, eve = cfg.holidays
    assert isinstance(thaw, ComputedHoliday)
    assert thaw.steps[0] == StartOfYearStep()
    assert thaw.steps[2] == FindInCycleStep("week", 0, "onOrAfter")
    assert eve == OffsetFromHoliday("Thaw Eve", "Thaw", -1, "Night before")


def test_encode_uses_wire_names():
    d = calendar_to_dict(MEDIEVAL)
    assert d["minutesPerDay"] == 1440
    assert d["minutesPerYear"] == 525600
    assert "epochOffset" not in d
    easter = next(h for h in d["holidays"] if h["name"] == "Easter")
    assert easter["steps"][1] == {"type": "findInCycle", "cycleId": "lunar", "dayInCycle": 14, "direction": "onOrAfter"}
    epiphany = next(h for h in d["holidays"] if h["name"] == "Epiphany")
    assert epiphany["baseHoliday"] == "Christmas"
    assert epiphany["offsetDays"] == 12
    assert d["subdivisions"][1]["isCycle"] is True
    assert "isCycle" not in d["subdivisions"][0]
    assert json.loads(json.dumps(d)) == d


@pytest.mark.parametrize("name", sorted(ALL_SPECS))
def test_presets_survive_the_wire_form(name):
    assert calendar_from_dict(calendar_to_dict(ALL_SPECS[name])) == ALL_SPECS[name]


def test_nested_subdivisions_keep_their_shape():
    d = calendar_to_dict(CORUSCANT)
    week = d["subdivisions"][0]["subdivisions"][0]
    assert week == {
        "id": "week",
        "name": "Week",
        "pluralName": "Weeks",
        "count": 13,
        "daysPerUnitFixed": 7,
        "labelFormat": "Week {n}",
    }


@pytest.mark.parametrize(
    "patch, fragment",
    [
        ({"daysPerYear": None}, "daysPerYear"),
        ({"hoursPerDay": "24"}, "hoursPerDay"),
        ({"eras": None}, "eras"),
        ({"display": "x"}, r"display: Input should be a valid dictionary"),
        ({"subdivisions": {"id": "x"}}, r"subdivisions: Input should be a valid list"),
        ({"holidays": [{"type": "moonrise", "name": "X"}]}, "moonrise"),
        ({"holidays": [{"type": "fixed", "name": "X", "subdivisionId": "month", "unit": 1}]}, r"holidays\.0\.fixed\.day: Field required"),
        ({"holidays": [{"type": "computed", "name": "X", "steps": [{"type": "jump"}]}]}, "jump"),
        (
            {"holidays": [{"type": "computed", "name": "X", "steps": [
                {"type": "findInCycle", "cycleId": "week", "dayInCycle": 0, "direction": "sideways"}]}]},
            "direction",
        ),
    ],
)
def test_bad_shapes_raise(patch, fragment):
    bad = {**STORED, **patch}
    with pytest.raises(ConfigError, match=fragment):
        calendar_from_dict(bad)


@pytest.mark.parametrize(
    "field, value",
    [
        ("daysPerUnit", 30),
        ("daysPerUnit", ["x"] * 12),
        ("daysPerUnit", [30.5] * 12),
        ("daysPerUnitFixed", "abc"),
        ("labels", [None] * 12),
        ("isCycle", "yes"),
        ("subdivisions", [{"id": "inner"}]),
    ],
)
def test_bad_subdivision_fields_raise(field, value):
    month = {**STORED["subdivisions"][1], field: value}
    bad = {**STORED, "subdivisions": [STORED["subdivisions"][0], month]}
    with pytest.raises(ConfigError, match=r"subdivisions\.1\."):
        calendar_from_dict(bad)


def test_not_an_object():
    with pytest.raises(ConfigError):
        calendar_from_dict([1, 2, 3])


def test_files(tmp_path):
    path = tmp_path / "medieval.json"
    dump_calendar(MEDIEVAL, path)
    assert load_calendar(path) == MEDIEVAL
    assert load_calendar(str(path)) == MEDIEVAL

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid JSON"):
        load_calendar(broken)
