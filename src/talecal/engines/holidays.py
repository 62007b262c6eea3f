"""
talecal.engines.holidays
------------------------
Evaluates the declarative holiday rules of a calendar for one year.

Rules are evaluated in list order; ``offsetFromHoliday`` may only refer to a
rule that appears earlier. A rule that cannot be resolved (unknown
subdivision or cycle, missing unit, unresolved base holiday, no n-th
occurrence) is skipped and reported as a diagnostic. Nothing here raises on
bad data.

Internally every rule produces a day-of-year in the evaluated year. Offsets
may push that day outside ``[1, days_per_year]``; the conversion to story
time is linear, so such a holiday simply lands in the neighbouring year.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from ..core.time import StoryTime, absolute_day, day_start, story_time_to_date
from ..core.types import (
    CalendarConfig,
    CalendarSubdivision,
    ComputedHoliday,
    FindInCycleStep,
    FixedHoliday,
    FixedStep,
    HolidayRule,
    HolidayStep,
    LastCycleDayHoliday,
    LastDayHoliday,
    NthCycleDayHoliday,
    OffsetFromHoliday,
    OffsetStep,
    StartOfYearStep,
)
from .subdivisions import Span, cycle_index, find_subdivision, unit_span

log = logging.getLogger(__name__)


class _RuleSkipped(Exception):
    """A rule could not be resolved for the year being evaluated."""


@dataclass(frozen=True)
class HolidayEvaluation:
    year: int
    dates: Dict[str, StoryTime]  # name -> story time of 00:00 (later rule wins on repeated names)
    days: Tuple[Tuple[HolidayRule, StoryTime], ...]  # every resolved rule, in list order
    diagnostics: Tuple[str, ...] = ()


# ---------------------------------------------------------
# Lookups
# ---------------------------------------------------------

def _span(config: CalendarConfig, sub_id: str, unit: int) -> Span:
    node = find_subdivision(config, sub_id)
    if node is None:
        raise _RuleSkipped(f"unknown subdivision '{sub_id}'")
    if node.is_cycle:
        raise _RuleSkipped(f"'{sub_id}' is a cycle, not a hierarchical subdivision")
    span = unit_span(config, sub_id, unit)
    if span is None:
        raise _RuleSkipped(f"subdivision '{sub_id}' has no unit {unit}")
    return span


def _cycle(config: CalendarConfig, cycle_id: str, day_in_cycle: int) -> CalendarSubdivision:
    node = find_subdivision(config, cycle_id)
    if node is None or not node.is_cycle:
        raise _RuleSkipped(f"unknown cycle '{cycle_id}'")
    if not 0 <= day_in_cycle < node.count:
        raise _RuleSkipped(f"cycle '{cycle_id}' has no position {day_in_cycle}")
    return node


def _fixed_day(config: CalendarConfig, sub_id: str, unit: int, day: int) -> int:
    first, last = _span(config, sub_id, unit)
    if not 1 <= day <= last - first + 1:
        raise _RuleSkipped(f"unit {unit} of '{sub_id}' has no day {day}")
    return first + day - 1


def _matches(config: CalendarConfig, cycle: CalendarSubdivision, year: int, day: int, target: int) -> bool:
    return cycle_index(cycle, absolute_day(config, year, day)) == target


# ---------------------------------------------------------
# Rule evaluation
# ---------------------------------------------------------

def _nth_cycle_day(config: CalendarConfig, rule: NthCycleDayHoliday, year: int) -> int:
    first, last = _span(config, rule.subdivision_id, rule.unit)
    cycle = _cycle(config, rule.cycle_id, rule.day_in_cycle)
    seen = 0
    for day in range(first, last + 1):
        if _matches(config, cycle, year, day, rule.day_in_cycle):
            seen += 1
            if seen == rule.n:
                return day
    raise _RuleSkipped(
        f"no occurrence {rule.n} of position {rule.day_in_cycle} of '{rule.cycle_id}' "
        f"in unit {rule.unit} of '{rule.subdivision_id}'"
    )


def _last_cycle_day(config: CalendarConfig, rule: LastCycleDayHoliday, year: int) -> int:
    first, last = _span(config, rule.subdivision_id, rule.unit)
    cycle = _cycle(config, rule.cycle_id, rule.day_in_cycle)
    for day in range(last, first - 1, -1):
        if _matches(config, cycle, year, day, rule.day_in_cycle):
            return day
    raise _RuleSkipped(
        f"position {rule.day_in_cycle} of '{rule.cycle_id}' never occurs "
        f"in unit {rule.unit} of '{rule.subdivision_id}'"
    )


def find_in_cycle(config: CalendarConfig, year: int, start_day: int, step: FindInCycleStep) -> int:
    """Nearest day (inclusive of ``start_day``) in the step's direction on the target cycle position."""
    cycle = _cycle(config, step.cycle_id, step.day_in_cycle)
    sign = 1 if step.direction == "onOrAfter" else -1
    for k in range(cycle.count):
        day = start_day + sign * k
        if _matches(config, cycle, year, day, step.day_in_cycle):
            return day
    raise _RuleSkipped(f"position {step.day_in_cycle} of '{step.cycle_id}' not found")  # pragma: no cover


def run_steps(config: CalendarConfig, steps: Tuple[HolidayStep, ...], year: int) -> int:
    """Run a computed pipeline against a working day that starts on day 1."""
    if not steps:
        raise _RuleSkipped("computed holiday has no steps")
    day = 1
    for step in steps:
        if isinstance(step, StartOfYearStep):
            day = 1
        elif isinstance(step, FixedStep):
            day = _fixed_day(config, step.subdivision_id, step.unit, step.day)
        elif isinstance(step, OffsetStep):
            day += step.days
        elif isinstance(step, FindInCycleStep):
            day = find_in_cycle(config, year, day, step)
        else:
            raise _RuleSkipped(f"unsupported step {step!r}")
    return day


def _evaluate_rule(config: CalendarConfig, rule: HolidayRule, year: int, by_name: Dict[str, int]) -> int:
    if isinstance(rule, FixedHoliday):
        return _fixed_day(config, rule.subdivision_id, rule.unit, rule.day)
    if isinstance(rule, NthCycleDayHoliday):
        return _nth_cycle_day(config, rule, year)
    if isinstance(rule, LastCycleDayHoliday):
        return _last_cycle_day(config, rule, year)
    if isinstance(rule, LastDayHoliday):
        return _span(config, rule.subdivision_id, rule.unit)[1]
    if isinstance(rule, ComputedHoliday):
        return run_steps(config, rule.steps, year)
    if isinstance(rule, OffsetFromHoliday):
        if rule.base_holiday not in by_name:
            raise _RuleSkipped(f"base holiday '{rule.base_holiday}' is not defined earlier in the list")
        return by_name[rule.base_holiday] + rule.offset_days
    raise _RuleSkipped(f"unsupported rule type {type(rule).__name__}")


def _evaluate(config: CalendarConfig, year: int) -> HolidayEvaluation:
    by_name: Dict[str, int] = {}
    dates: Dict[str, StoryTime] = {}
    days: List[Tuple[HolidayRule, StoryTime]] = []
    diagnostics: List[str] = []

    for rule in config.holidays:
        try:
            day = _evaluate_rule(config, rule, year, by_name)
        except _RuleSkipped as e:
            diagnostics.append(f"{rule.name}: {e}")
            log.debug("holiday %r skipped for year %d: %s", rule.name, year, e)
            continue
        t = day_start(config, year, day)
        by_name[rule.name] = day
        dates[rule.name] = t
        days.append((rule, t))

    return HolidayEvaluation(year=year, dates=dates, days=tuple(days), diagnostics=tuple(diagnostics))


# ---------------------------------------------------------
# Public API
# ---------------------------------------------------------

def evaluate_holidays_report(config: CalendarConfig, year: int) -> HolidayEvaluation:
    """Evaluate every rule for the signed ``year``, logging each skipped rule."""
    ev = _evaluate(config, year)
    for msg in ev.diagnostics:
        log.warning("calendar %r, year %d: %s", config.id, year, msg)
    return ev


def evaluate_holidays(config: CalendarConfig, year: int) -> Dict[str, StoryTime]:
    """Map holiday name -> story time (start of day) for the signed ``year``."""
    return evaluate_holidays_report(config, year).dates


def spill_into_year(
    config: CalendarConfig, year: int, report_for: Callable[[int], HolidayEvaluation]
) -> Dict[int, str]:
    """
    Map day-of-year -> holiday name for days of ``year``.

    ``report_for`` supplies the evaluation of a signed year. The first rule
    landing on a day wins. Holidays of the previous or next year's evaluation
    that land inside ``year`` (e.g. twelve days after a late-year feast) fill
    the days still free.
    """
    out: Dict[int, str] = {}
    for y in (year, year - 1, year + 1):
        for rule, t in report_for(y).days:
            d = story_time_to_date(config, t)
            if d.signed_year == year and d.day_of_year not in out:
                out[d.day_of_year] = rule.name
    return out


def holidays_by_day(config: CalendarConfig, year: int) -> Dict[int, str]:
    return spill_into_year(config, year, lambda y: _evaluate(config, y))


def match_holiday(config: CalendarConfig, story_time: StoryTime) -> Optional[str]:
    """Holiday falling on the day of ``story_time`` (time of day ignored), or None."""
    if not config.holidays:
        return None
    d = story_time_to_date(config, story_time)
    return holidays_by_day(config, d.signed_year).get(d.day_of_year)


def holiday_description(config: CalendarConfig, name: str) -> Optional[str]:
    for rule in config.holidays:
        if rule.name == name:
            return rule.description
    return None
