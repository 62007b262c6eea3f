"""
talecal.engines.calendar
------------------------
The Orchestrator. Binds one CalendarConfig to the time core, the subdivision
resolver, the holiday engine and the formatter, and memoizes holiday maps per
year.

The config is frozen, so the per-year caches stay valid for the lifetime of
the engine. They are bounded LRU caches of HOLIDAY_CACHE_YEARS years each.
Editing a calendar means building a new engine.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Optional

from ..core import time as tc
from ..core.time import StoryTime
from ..core.types import CalendarConfig, CalendarDate, ResolvedUnit
from . import formatter as fmt
from .holidays import HolidayEvaluation, evaluate_holidays_report, holiday_description, spill_into_year
from .subdivisions import resolve_subdivisions

HOLIDAY_CACHE_YEARS = 256


class CalendarEngine:
    """
    Story-time calendar bound to a single configuration.

    All methods are pure functions of the config and their arguments; the only
    state is the per-year holiday cache.
    """
    def __init__(self, config: CalendarConfig):
        self.config = config
        self._report = lru_cache(maxsize=HOLIDAY_CACHE_YEARS)(self._evaluate_year)
        self._by_day = lru_cache(maxsize=HOLIDAY_CACHE_YEARS)(self._spill_year)

    @property
    def id(self) -> str:
        return self.config.id

    def info(self) -> Dict[str, Any]:
        c = self.config
        return {
            "id": c.id,
            "name": c.name,
            "description": c.description,
            "days_per_year": c.days_per_year,
            "hours_per_day": c.hours_per_day,
            "minutes_per_hour": c.minutes_per_hour,
            "minutes_per_day": c.minutes_per_day,
            "minutes_per_year": c.minutes_per_year,
            "epoch_offset": c.epoch_offset,
            "subdivisions": [s.id for s in c.subdivisions],
            "holidays": len(c.holidays),
        }

    # ---------------------------------------------------------
    # Conversion
    # ---------------------------------------------------------

    def to_date(self, t: StoryTime) -> CalendarDate:
        return tc.story_time_to_date(self.config, t)

    def to_story_time(self, d: CalendarDate) -> StoryTime:
        return tc.date_to_story_time(self.config, d)

    def encode(self, year: int, day_of_year: int = 1, hour: int = 0, minute: int = 0) -> StoryTime:
        """Story time of a signed ``year`` and 1-based ``day_of_year``."""
        return self.to_story_time(CalendarDate.from_signed(year, day_of_year, hour, minute))

    def resolve(self, d: CalendarDate) -> Dict[str, ResolvedUnit]:
        d = self.to_date(self.to_story_time(d))
        return resolve_subdivisions(self.config, d.day_of_year, d.signed_year)

    # ---------------------------------------------------------
    # Arithmetic
    # ---------------------------------------------------------

    def add_minutes(self, t: StoryTime, n: int) -> StoryTime:
        return tc.add_minutes(self.config, t, n)

    def add_hours(self, t: StoryTime, n: int) -> StoryTime:
        return tc.add_hours(self.config, t, n)

    def add_days(self, t: StoryTime, n: int) -> StoryTime:
        return tc.add_days(self.config, t, n)

    def round_to_hour(self, t: StoryTime) -> StoryTime:
        return tc.round_to_hour(self.config, t)

    def start_of_day(self, t: StoryTime) -> StoryTime:
        return tc.start_of_day(self.config, t)

    def start_of_year(self, t: StoryTime) -> StoryTime:
        return tc.start_of_year(self.config, t)

    def calculate_age(self, birth: StoryTime, now: StoryTime) -> float:
        return tc.calculate_age(self.config, birth, now)

    def format_age(self, birth: StoryTime, now: StoryTime) -> str:
        return tc.format_age(self.config, birth, now)

    # ---------------------------------------------------------
    # Holidays (memoized per year)
    # ---------------------------------------------------------

    def _evaluate_year(self, year: int) -> HolidayEvaluation:
        return evaluate_holidays_report(self.config, year)

    def _spill_year(self, year: int) -> Dict[int, str]:
        return spill_into_year(self.config, year, self._report)

    def holiday_report(self, year: int) -> HolidayEvaluation:
        return self._report(year)

    def holidays(self, year: int) -> Dict[str, StoryTime]:
        return dict(self.holiday_report(year).dates)

    def holidays_by_day(self, year: int) -> Dict[int, str]:
        return self._by_day(year)

    def match_holiday(self, t: StoryTime) -> Optional[str]:
        if not self.config.holidays:
            return None
        d = self.to_date(t)
        return self.holidays_by_day(d.signed_year).get(d.day_of_year)

    def holiday_description(self, name: str) -> Optional[str]:
        return holiday_description(self.config, name)

    # ---------------------------------------------------------
    # Display
    # ---------------------------------------------------------

    def format_date(self, d: CalendarDate, *, include_time: Optional[bool] = None) -> str:
        return self.format(self.to_story_time(d), include_time=include_time)

    def format(self, t: StoryTime, *, include_time: Optional[bool] = None) -> str:
        """Render ``t``; ``include_time=None`` follows ``display.include_time_by_default``."""
        if include_time is None:
            include_time = self.config.display.include_time_by_default
        d = self.to_date(t)
        return fmt.render_date(self.config, d, include_time, holiday=self.match_holiday(t) or "")

    def format_data(self, t: StoryTime) -> Dict[str, Any]:
        return fmt.build_format_data(self.config, self.to_date(t), holiday=self.match_holiday(t) or "")

    def __repr__(self) -> str:
        return f"CalendarEngine(id={self.config.id!r})"
