"""
talecal.core.time
-----------------
Bidirectional mapping between story time (signed integer minutes since the
epoch) and structured calendar dates.

All arithmetic uses floor division so that negative years decode the same way
as positive ones: story time -1 is the last minute of year -1, not year 0.
Out-of-range fields (day 400 of a 365-day year, minute 75 of a 60-minute hour)
are not rejected; they flow linearly into the next unit, and decoding always
returns canonical fields. A non-positive base unit (a cleared field in an
unfinished config) is read as 1 so that decoding never divides by zero.
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Tuple, Union

from .types import CalendarConfig, CalendarDate

StoryTime = int


def _sizes(config: CalendarConfig) -> Tuple[int, int, int]:
    """(minutes per hour, day, year); a non-positive base unit counts as 1."""
    mph = max(config.minutes_per_hour, 1)
    mpd = mph * max(config.hours_per_day, 1)
    return mph, mpd, mpd * max(config.days_per_year, 1)


def date_to_story_time(config: CalendarConfig, date: CalendarDate) -> StoryTime:
    """Encode ``date`` as minutes since story time 0."""
    mph, mpd, mpy = _sizes(config)
    y = date.signed_year + config.epoch_offset
    return (
        y * mpy
        + (date.day_of_year - 1) * mpd
        + date.hour * mph
        + date.minute
    )


def story_time_to_date(config: CalendarConfig, minutes: StoryTime) -> CalendarDate:
    """Inverse of :func:`date_to_story_time`."""
    mph, mpd, mpy = _sizes(config)
    signed_year, rem = divmod(minutes - config.epoch_offset * mpy, mpy)
    day0, rem = divmod(rem, mpd)
    hour, minute = divmod(rem, mph)
    return CalendarDate.from_signed(signed_year, day0 + 1, hour, minute)


def absolute_day(config: CalendarConfig, year_or_date: Union[int, CalendarDate], day_of_year: int = 1) -> int:
    """
    Signed day count with day 0 = day 1 of the calendar's year 0.

    Accepts either a CalendarDate or a signed year plus a 1-based day of year.
    """
    if isinstance(year_or_date, CalendarDate):
        return year_or_date.signed_year * max(config.days_per_year, 1) + (year_or_date.day_of_year - 1)
    return year_or_date * max(config.days_per_year, 1) + (day_of_year - 1)


def from_absolute_day(config: CalendarConfig, day: int) -> CalendarDate:
    signed_year, day0 = divmod(day, max(config.days_per_year, 1))
    return CalendarDate.from_signed(signed_year, day0 + 1)


def day_start(config: CalendarConfig, signed_year: int, day_of_year: int) -> StoryTime:
    """Story time of 00:00 on ``day_of_year`` of ``signed_year``."""
    return date_to_story_time(config, CalendarDate.from_signed(signed_year, day_of_year))


# ---------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------

def add_minutes(config: CalendarConfig, t: StoryTime, minutes: int) -> StoryTime:
    return t + minutes


def add_hours(config: CalendarConfig, t: StoryTime, hours: int) -> StoryTime:
    return t + hours * _sizes(config)[0]


def add_days(config: CalendarConfig, t: StoryTime, days: int) -> StoryTime:
    return t + days * _sizes(config)[1]


# ---------------------------------------------------------
# Rounding
# ---------------------------------------------------------

def round_to_hour(config: CalendarConfig, t: StoryTime) -> StoryTime:
    """Round to the nearest hour boundary; exact halves round up."""
    mph = _sizes(config)[0]
    rem = t % mph
    if rem * 2 < mph:
        return t - rem
    return t + (mph - rem)


def start_of_day(config: CalendarConfig, t: StoryTime) -> StoryTime:
    _, mpd, mpy = _sizes(config)
    return t - (t - config.epoch_offset * mpy) % mpd


def start_of_year(config: CalendarConfig, t: StoryTime) -> StoryTime:
    mpy = _sizes(config)[2]
    return t - (t - config.epoch_offset * mpy) % mpy


# ---------------------------------------------------------
# Ages
# ---------------------------------------------------------

def calculate_age(config: CalendarConfig, birth: StoryTime, now: StoryTime) -> float:
    """Age in (fractional) calendar years."""
    return (now - birth) / _sizes(config)[2]


def format_age(config: CalendarConfig, birth: StoryTime, now: StoryTime) -> str:
    # floor to tenths on the exact ratio, not on the float
    tenths = math.floor(Fraction((now - birth) * 10, _sizes(config)[2]))
    if tenths % 10 == 0:
        return f"{tenths // 10} years old"
    return f"{tenths / 10} years old"
