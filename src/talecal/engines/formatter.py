from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..core.errors import TemplateError
from ..core.time import StoryTime, date_to_story_time, story_time_to_date
from ..core.types import CalendarConfig, CalendarDate
from .holidays import holiday_description, match_holiday
from .subdivisions import day_of_subdivision, find_subdivision, resolve_subdivisions
from .template import render

log = logging.getLogger(__name__)

TEMPLATE_ERROR_PREFIX = "[Template error: "


def era_label(config: CalendarConfig, date: CalendarDate) -> str:
    if date.signed_year == 0 and config.eras.zero_label:
        return config.eras.zero_label
    return config.eras.negative if date.era == "negative" else config.eras.positive


def clock(config: CalendarConfig, hour: int) -> tuple[int, str]:
    """Return (display hour, AM/PM marker) honoring ``display.hour_format``."""
    if config.display.hour_format != "12":
        return hour, ""
    half = config.hours_per_day // 2 or 1
    marker = "AM" if hour < half else "PM"
    h = hour % half
    return (h or half), marker


def build_format_data(
    config: CalendarConfig,
    date: CalendarDate,
    holiday: Optional[str] = None,
) -> Dict[str, Any]:
    """
    The template namespace for ``date``.

    ``holiday`` may be passed in by callers that already know it (e.g. the
    memoizing CalendarEngine); otherwise it is looked up here.
    """
    if holiday is None:
        holiday = match_holiday(config, date_to_story_time(config, date)) or ""

    hour, ampm = clock(config, date.hour)
    data: Dict[str, Any] = {
        "year": date.year,
        "signedYear": date.signed_year,
        "era": era_label(config, date),
        "dayOfYear": date.day_of_year,
        "hour": f"{hour:02d}" if config.display.hour_format != "12" else str(hour),
        "minute": f"{date.minute:02d}",
        "ampm": ampm,
        "holiday": holiday,
        "holidayDescription": (holiday_description(config, holiday) or "") if holiday else "",
    }

    for sub_id, unit in resolve_subdivisions(config, date.day_of_year, date.signed_year).items():
        data[sub_id] = unit.label
        data[f"{sub_id}Number"] = unit.number
        node = find_subdivision(config, sub_id)
        if node is not None and not node.is_cycle and sub_id:
            data[f"dayOf{sub_id[0].upper()}{sub_id[1:]}"] = day_of_subdivision(config, sub_id, date.day_of_year)
    return data


def render_date(config: CalendarConfig, date: CalendarDate, include_time: bool, holiday: Optional[str] = None) -> str:
    template = config.display.default_format if include_time else config.display.short_format
    try:
        return render(template, build_format_data(config, date, holiday))
    except TemplateError as e:
        log.debug("template %r failed for %r: %s", template, date, e)
        return f"{TEMPLATE_ERROR_PREFIX}{e}]"


def format_date(config: CalendarConfig, date: CalendarDate, include_time: bool = True) -> str:
    """Render ``date`` through the calendar's display template; never raises on template errors."""
    # out-of-range fields are normalized the same way the time core does
    canonical = story_time_to_date(config, date_to_story_time(config, date))
    return render_date(config, canonical, include_time)


def format_story_time(config: CalendarConfig, minutes: StoryTime, include_time: bool = True) -> str:
    return format_date(config, story_time_to_date(config, minutes), include_time)
