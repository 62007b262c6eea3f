from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from .core.engine import CalendarEngineProtocol, CalendarRegistry
from .core.errors import ConfigError
from .core.time import StoryTime
from .core.types import CalendarConfig, CalendarDate, ResolvedUnit
from .core.validate import validate
from .engines.calendar import CalendarEngine
from .engines.holidays import HolidayEvaluation
from .engines.specs import DEFAULT_CALENDAR

CalendarRef = Union[str, CalendarConfig, CalendarEngineProtocol]

_registry: Optional[CalendarRegistry] = None

def set_registry(reg: CalendarRegistry) -> None:
    global _registry
    _registry = reg

def _reg() -> CalendarRegistry:
    if _registry is None:
        raise RuntimeError("Calendar registry not initialized")
    return _registry

def _engine(calendar: CalendarRef) -> CalendarEngineProtocol:
    """Accept a registered name, a bare config, or an engine."""
    if isinstance(calendar, str):
        return _reg().get(calendar)
    if isinstance(calendar, CalendarConfig):
        return CalendarEngine(calendar)
    return calendar

# ============================================================
# Registry
# ============================================================

def list_calendars() -> List[str]:
    return _reg().list()

def calendar_info(calendar: CalendarRef = DEFAULT_CALENDAR) -> Dict[str, Any]:
    return _engine(calendar).info()

def get_calendar(name: str = DEFAULT_CALENDAR) -> CalendarConfig:
    try:
        return _reg().get(name).config
    except KeyError as e:
        raise ConfigError(str(e.args[0])) from e

def make_engine(config: CalendarConfig) -> CalendarEngine:
    return CalendarEngine(config)

def register_calendar(config: CalendarConfig, *, name: Optional[str] = None, overwrite: bool = False) -> CalendarEngine:
    """Register a user calendar under ``name`` (defaults to ``config.id``)."""
    problems = validate(config)
    if problems:
        raise ConfigError(f"Calendar '{config.id}' is invalid: " + "; ".join(problems))
    eng = CalendarEngine(config)
    _reg().register(name or config.id, eng, overwrite=overwrite)
    return eng

# ============================================================
# Conversion
# ============================================================

def to_date(t: StoryTime, *, calendar: CalendarRef = DEFAULT_CALENDAR) -> CalendarDate:
    return _engine(calendar).to_date(t)

def to_story_time(d: CalendarDate, *, calendar: CalendarRef = DEFAULT_CALENDAR) -> StoryTime:
    return _engine(calendar).to_story_time(d)

def encode(
    year: int,
    day_of_year: int = 1,
    hour: int = 0,
    minute: int = 0,
    *,
    calendar: CalendarRef = DEFAULT_CALENDAR,
) -> StoryTime:
    """Story time for a signed year (negative = negative era)."""
    return to_story_time(CalendarDate.from_signed(year, day_of_year, hour, minute), calendar=calendar)

def resolve(t: StoryTime, *, calendar: CalendarRef = DEFAULT_CALENDAR) -> Dict[str, ResolvedUnit]:
    eng = _engine(calendar)
    return eng.resolve(eng.to_date(t))

# ============================================================
# Holidays
# ============================================================

def holidays(year: int, *, calendar: CalendarRef = DEFAULT_CALENDAR) -> Dict[str, StoryTime]:
    return _engine(calendar).holidays(year)

def holiday_report(year: int, *, calendar: CalendarRef = DEFAULT_CALENDAR) -> HolidayEvaluation:
    eng = _engine(calendar)
    if isinstance(eng, CalendarEngine):
        return eng.holiday_report(year)
    return CalendarEngine(eng.config).holiday_report(year)

def holiday_on(t: StoryTime, *, calendar: CalendarRef = DEFAULT_CALENDAR) -> Optional[str]:
    return _engine(calendar).match_holiday(t)

# ============================================================
# Display
# ============================================================

def format_time(
    t: StoryTime,
    *,
    calendar: CalendarRef = DEFAULT_CALENDAR,
    include_time: Optional[bool] = None,
) -> str:
    return _engine(calendar).format(t, include_time=include_time)
