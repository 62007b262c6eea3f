# tests/test_formatter.py

from conftest import MONTH, MPD, MPY, WEEK, make_config
from talecal.core.types import CalendarDate, CalendarSubdivision, DisplayConfig, Eras
from talecal.engines.calendar import CalendarEngine
from talecal.engines.formatter import build_format_data, format_date, format_story_time
from talecal.engines.specs import CORUSCANT, GREGORIAN, MEDIEVAL, SIMPLE365


def test_simple_formats():
    assert format_story_time(SIMPLE365, 0) == "Day 1, Year 0 AE at 00:00"
    assert format_story_time(SIMPLE365, 0, include_time=False) == "Day 1, Year 0 AE"
    assert format_story_time(SIMPLE365, -1) == "Day 365, Year 1 BE at 23:59"
    assert format_story_time(SIMPLE365, MPY + 2 * MPD + 9 * 60 + 5) == "Day 3, Year 1 AE at 09:05"


def test_gregorian_epoch():
    assert format_story_time(GREGORIAN, 0) == "Monday, January 1, 0 CE at 00:00"
    assert format_story_time(GREGORIAN, 0, include_time=False) == "January 1, 0 CE"


def test_format_date_normalizes_fields():
    assert format_date(SIMPLE365, CalendarDate(0, "positive", 366)) == "Day 1, Year 1 AE at 00:00"


def test_holiday_in_namespace():
    eng = CalendarEngine(MEDIEVAL)
    assert eng.format(eng.encode(1, 90)) == "Sunday, March 31, 1 AD (Easter) at 00:00"
    data = eng.format_data(eng.encode(1, 90, 12))
    assert data["holiday"] == "Easter"
    assert data["holidayDescription"].startswith("Resurrection")
    assert eng.format(eng.encode(1, 91), include_time=False) == "April 1, 1 AD"


def test_holiday_branch_in_template():
    eng = CalendarEngine(CORUSCANT)
    assert eng.format(0) == "Day 1, Conference Season (Q1), 0 ABY at 00:00"
    assert eng.format(eng.encode(0, 92)) == "Festival Day, Conference Season (Q1), 0 ABY at 00:00"
    assert eng.format(eng.encode(0, 93), include_time=False) == "Q2 Day 1, 0 ABY"


def test_namespace_keys():
    data = build_format_data(GREGORIAN, CalendarDate(3, "negative", 32, 7, 4))
    assert data["year"] == 3
    assert data["signedYear"] == -3
    assert data["era"] == "BCE"
    assert data["dayOfYear"] == 32
    assert (data["hour"], data["minute"], data["ampm"]) == ("07", "04", "")
    assert data["month"] == "February"
    assert data["monthNumber"] == 2
    assert data["dayOfMonth"] == 1
    assert "weekday" in data and "weekdayNumber" in data
    assert "dayOfWeekday" not in data
    assert data["holiday"] == ""


def test_twelve_hour_clock():
    cfg = make_config(
        display=DisplayConfig(
            default_format="<%= hour %>:<%= minute %> <%= ampm %>",
            short_format="",
            hour_format="12",
        )
    )
    assert format_story_time(cfg, 0) == "12:00 AM"
    assert format_story_time(cfg, 13 * 60 + 5) == "1:05 PM"
    assert format_story_time(cfg, 12 * 60) == "12:00 PM"
    assert format_story_time(cfg, 11 * 60 + 59) == "11:59 AM"


def test_zero_label():
    cfg = make_config(eras=Eras(positive="AF", negative="BF", zero_label="Founding Year"))
    assert format_story_time(cfg, 0) == "Day 1, Year 0 Founding Year at 00:00"
    assert format_story_time(cfg, MPY) == "Day 1, Year 1 AF at 00:00"
    assert format_story_time(cfg, -1).endswith("BF at 23:59")


def test_several_cycles():
    days = CalendarSubdivision(
        id="dayName", name="Day", count=5, is_cycle=True,
        labels=("Moonday", "Starday", "Windday", "Stoneday", "Restday"),
    )
    element = CalendarSubdivision(
        id="element", name="Element", count=3, is_cycle=True, labels=("Flame", "Tide", "Stone"),
    )
    month = CalendarSubdivision(id="month", name="Month", count=13, days_per_unit_fixed=28, label_format="Month {n}")
    cfg = make_config(
        days_per_year=364,
        subdivisions=(days, element, month),
        display=DisplayConfig(
            default_format="<%= dayName %> / <%= element %>, <%= month %> Day <%= dayOfMonth %>",
            short_format="",
        ),
    )
    assert format_story_time(cfg, 0) == "Moonday / Flame, Month 1 Day 1"
    assert format_story_time(cfg, 29 * 24 * 60) == "Restday / Stone, Month 2 Day 2"


def test_template_error_is_contained():
    bad = make_config(display=DisplayConfig(default_format="<%= unknownVar %>", short_format="<% if (x %>"))
    out = format_story_time(bad, 0)
    assert out.startswith("[Template error: ")
    assert "unknownVar" in out
    assert format_story_time(bad, 0, include_time=False).startswith("[Template error: ")
    # later calls are unaffected
    assert format_story_time(SIMPLE365, 0) == "Day 1, Year 0 AE at 00:00"
    assert format_story_time(bad, MPD).startswith("[Template error: ")


def test_cleared_units_still_format():
    assert format_story_time(make_config(hours_per_day=0), 0) == "Day 1, Year 0 AE at 00:00"
    assert format_story_time(make_config(minutes_per_hour=0), 0) == "Day 1, Year 0 AE at 00:00"
    cfg = make_config(days_per_year=0, subdivisions=(WEEK, MONTH))
    assert CalendarEngine(cfg).format(12345)
    assert format_story_time(cfg, -12345)


def test_runaway_templates_are_contained():
    huge = "9" * 400
    for fmt in (
        f"<%= {huge} / 3 %>",
        "<%= " + "(" * 3000 + "year" + ")" * 3000 + " %>",
        "<%= " + " + ".join(["year"] * 3000) + " %>",
    ):
        cfg = make_config(display=DisplayConfig(default_format=fmt, short_format=fmt))
        assert format_story_time(cfg, 0).startswith("[Template error: ")
    cfg = make_config(display=DisplayConfig(default_format=f"<%= {huge}.5 * -1 %>", short_format=f"<%= {huge}.5 * -1 %>"))
    assert format_story_time(cfg, 0) == "-Infinity"
