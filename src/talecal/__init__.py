"""talecal public API.

Keep this surface small: users should mostly interact with functions re-exported here.
"""

# Initialize registry on import
from . import api_init as _api_init  # noqa: F401

from .api import (
    list_calendars,
    calendar_info,
    get_calendar,
    make_engine,
    register_calendar,
    to_date,
    to_story_time,
    encode,
    resolve,
    holidays,
    holiday_report,
    holiday_on,
    format_time,
)
from .core.errors import ConfigError, TalecalError, TemplateError
from .core.schema import calendar_from_dict, calendar_to_dict, load_calendar
from .core.types import CalendarConfig, CalendarDate, CalendarSubdivision
from .core.validate import prune_incomplete, validate
from .engines.calendar import CalendarEngine

__all__ = [
    "list_calendars",
    "calendar_info",
    "get_calendar",
    "make_engine",
    "register_calendar",
    "to_date",
    "to_story_time",
    "encode",
    "resolve",
    "holidays",
    "holiday_report",
    "holiday_on",
    "format_time",
    "ConfigError",
    "TalecalError",
    "TemplateError",
    "calendar_from_dict",
    "calendar_to_dict",
    "load_calendar",
    "CalendarConfig",
    "CalendarDate",
    "CalendarSubdivision",
    "prune_incomplete",
    "validate",
    "CalendarEngine",
]
