# tests/test_time.py

import random

import pytest

from conftest import MPD, MPY, make_config
from talecal.core import time as tc
from talecal.core.types import CalendarDate


def _key(d):
    return (d.signed_year, d.day_of_year, d.hour, d.minute)


def test_story_time_roundtrip(plain):
    random.seed(42)
    for _ in range(5000):
        t = random.randint(-10**9, 10**9)
        d = tc.story_time_to_date(plain, t)
        assert 1 <= d.day_of_year <= plain.days_per_year
        assert 0 <= d.hour < plain.hours_per_day
        assert 0 <= d.minute < plain.minutes_per_hour
        assert tc.date_to_story_time(plain, d) == t


def test_date_roundtrip_odd_units():
    """Non-earthly unit sizes: 400-day years, 20-hour days, 50-minute hours."""
    cfg = make_config(days_per_year=400, hours_per_day=20, minutes_per_hour=50)
    random.seed(42)
    for _ in range(2000):
        d = CalendarDate.from_signed(
            random.randint(-3000, 3000),
            random.randint(1, 400),
            random.randint(0, 19),
            random.randint(0, 49),
        )
        assert tc.story_time_to_date(cfg, tc.date_to_story_time(cfg, d)) == d


def test_decode_is_monotonic(plain):
    random.seed(7)
    ts = sorted(random.randint(-5 * MPY, 5 * MPY) for _ in range(2000))
    keys = [_key(tc.story_time_to_date(plain, t)) for t in ts]
    assert keys == sorted(keys)


def test_add_days_composes(plain):
    random.seed(42)
    for _ in range(1000):
        t = random.randint(-10**8, 10**8)
        a, b = random.randint(-1000, 1000), random.randint(-1000, 1000)
        assert tc.add_days(plain, tc.add_days(plain, t, a), b) == tc.add_days(plain, t, a + b)
    assert tc.add_days(plain, 0, 1) == MPD
    assert tc.add_hours(plain, 0, 2) == 120
    assert tc.add_minutes(plain, 5, -10) == -5


def test_year_zero_is_positive(plain):
    d = tc.story_time_to_date(plain, 0)
    assert d == CalendarDate(0, "positive", 1, 0, 0)


def test_negative_story_time(plain):
    d = tc.story_time_to_date(plain, -1)
    assert d == CalendarDate(1, "negative", 365, 23, 59)
    assert d.signed_year == -1
    assert tc.date_to_story_time(plain, d) == -1
    assert tc.story_time_to_date(plain, -MPY).signed_year == -1
    assert tc.story_time_to_date(plain, -MPY - 1).signed_year == -2


def test_out_of_range_fields_normalize(plain):
    over = CalendarDate(0, "positive", 366)
    t = tc.date_to_story_time(plain, over)
    assert t == MPY
    assert tc.story_time_to_date(plain, t) == CalendarDate(1, "positive", 1)

    d = tc.story_time_to_date(plain, tc.date_to_story_time(plain, CalendarDate(0, "positive", 1, 3, 75)))
    assert (d.hour, d.minute) == (4, 15)

    d = tc.story_time_to_date(plain, tc.date_to_story_time(plain, CalendarDate(0, "positive", 0)))
    assert (d.signed_year, d.day_of_year) == (-1, 365)


def test_epoch_offset_shifts_year_zero():
    cfg = make_config(epoch_offset=10)
    assert tc.date_to_story_time(cfg, CalendarDate(0, "positive", 1)) == 10 * MPY
    assert tc.story_time_to_date(cfg, 0).signed_year == -10
    assert tc.absolute_day(cfg, 0, 1) == 0
    assert tc.start_of_year(cfg, 10 * MPY + 5) == 10 * MPY


def test_absolute_day(plain):
    assert tc.absolute_day(plain, 0, 1) == 0
    assert tc.absolute_day(plain, 1, 1) == 365
    assert tc.absolute_day(plain, CalendarDate(1, "negative", 365)) == -1
    assert tc.from_absolute_day(plain, -1) == CalendarDate(1, "negative", 365)
    assert tc.day_start(plain, 1, 2) == MPY + MPD


def test_round_to_hour(plain):
    assert tc.round_to_hour(plain, 29) == 0
    assert tc.round_to_hour(plain, 30) == 60
    assert tc.round_to_hour(plain, 90) == 120
    assert tc.round_to_hour(plain, -30) == 0
    assert tc.round_to_hour(plain, -31) == -60


def test_start_of_day_and_year(plain):
    assert tc.start_of_day(plain, MPD + 5) == MPD
    assert tc.start_of_day(plain, -1) == -MPD
    assert tc.start_of_year(plain, MPY + 3 * MPD) == MPY
    assert tc.start_of_year(plain, -1) == -MPY


def test_ages(plain):
    birth = 100
    assert tc.calculate_age(plain, birth, birth + 3 * MPY + MPY // 2) == pytest.approx(3.5)
    assert tc.format_age(plain, birth, birth + 3 * MPY) == "3 years old"
    assert tc.format_age(plain, birth, birth + 3 * MPY + MPY // 2) == "3.5 years old"
    assert tc.format_age(plain, birth, birth + 4 * MPY - 1) == "3.9 years old"
    assert tc.format_age(plain, birth, birth) == "0 years old"


@pytest.mark.parametrize(
    "field",
    ["hours_per_day", "minutes_per_hour", "days_per_year"],
)
@pytest.mark.parametrize("value", [0, -3])
def test_cleared_units_do_not_divide_by_zero(field, value):
    cfg = make_config(**{field: value})
    random.seed(42)
    for _ in range(200):
        t = random.randint(-10**6, 10**6)
        d = tc.story_time_to_date(cfg, t)
        assert tc.date_to_story_time(cfg, d) == t
    assert tc.from_absolute_day(cfg, 5).signed_year >= 0
    assert tc.start_of_day(cfg, 1234) <= 1234
    assert tc.start_of_year(cfg, 1234) <= 1234
    assert tc.round_to_hour(cfg, 1234) >= 0
    tc.format_age(cfg, 0, 1234)


def test_cleared_hours_read_as_one_hour_days():
    cfg = make_config(hours_per_day=0)
    d = tc.story_time_to_date(cfg, 2 * 60 + 5)
    assert (d.signed_year, d.day_of_year, d.hour, d.minute) == (0, 3, 0, 5)
