"""
talecal.core.schema
-------------------
JSON wire form of CalendarConfig (camelCase keys, as stored by the CRUD layer).

The wire form is described by pydantic models with camelCase aliases and
``type``-discriminated unions for holiday rules and computed steps. Decoding
is shape-only: a payload that the models reject raises ConfigError, and
semantic checks are left to ``core.validate``. Derived fields present in
stored payloads (``minutesPerDay``, ``minutesPerYear``) are ignored.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, ValidationError
from pydantic.alias_generators import to_camel

from .errors import ConfigError
from .types import (
    CalendarConfig,
    CalendarSubdivision,
    ComputedHoliday,
    DisplayConfig,
    Eras,
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


class _Wire(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


# ---------------------------------------------------------
# Computed steps
# ---------------------------------------------------------

class StartOfYearStepWire(_Wire):
    type: Literal["startOfYear"] = "startOfYear"

    def to_value(self) -> HolidayStep:
        return StartOfYearStep()


class FixedStepWire(_Wire):
    type: Literal["fixed"] = "fixed"
    subdivision_id: StrictStr
    unit: StrictInt
    day: StrictInt

    def to_value(self) -> HolidayStep:
        return FixedStep(self.subdivision_id, self.unit, self.day)


class OffsetStepWire(_Wire):
    type: Literal["offset"] = "offset"
    days: StrictInt

    def to_value(self) -> HolidayStep:
        return OffsetStep(self.days)


class FindInCycleStepWire(_Wire):
    type: Literal["findInCycle"] = "findInCycle"
    cycle_id: StrictStr
    day_in_cycle: StrictInt
    direction: Literal["onOrAfter", "onOrBefore"] = "onOrAfter"

    def to_value(self) -> HolidayStep:
        return FindInCycleStep(self.cycle_id, self.day_in_cycle, self.direction)


StepWire = Annotated[
    Union[StartOfYearStepWire, FixedStepWire, OffsetStepWire, FindInCycleStepWire],
    Field(discriminator="type"),
]


# ---------------------------------------------------------
# Holiday rules
# ---------------------------------------------------------

class _RuleWire(_Wire):
    name: StrictStr
    description: Optional[StrictStr] = None


class FixedHolidayWire(_RuleWire):
    type: Literal["fixed"] = "fixed"
    subdivision_id: StrictStr
    unit: StrictInt
    day: StrictInt

    def to_value(self) -> HolidayRule:
        return FixedHoliday(self.name, self.subdivision_id, self.unit, self.day, self.description)


class NthCycleDayHolidayWire(_RuleWire):
    type: Literal["nthCycleDay"] = "nthCycleDay"
    subdivision_id: StrictStr
    unit: StrictInt
    n: StrictInt
    cycle_id: StrictStr
    day_in_cycle: StrictInt

    def to_value(self) -> HolidayRule:
        return NthCycleDayHoliday(
            self.name, self.subdivision_id, self.unit, self.n, self.cycle_id, self.day_in_cycle, self.description
        )


class LastCycleDayHolidayWire(_RuleWire):
    type: Literal["lastCycleDay"] = "lastCycleDay"
    subdivision_id: StrictStr
    unit: StrictInt
    cycle_id: StrictStr
    day_in_cycle: StrictInt

    def to_value(self) -> HolidayRule:
        return LastCycleDayHoliday(
            self.name, self.subdivision_id, self.unit, self.cycle_id, self.day_in_cycle, self.description
        )


class LastDayHolidayWire(_RuleWire):
    type: Literal["lastDay"] = "lastDay"
    subdivision_id: StrictStr
    unit: StrictInt

    def to_value(self) -> HolidayRule:
        return LastDayHoliday(self.name, self.subdivision_id, self.unit, self.description)


class ComputedHolidayWire(_RuleWire):
    type: Literal["computed"] = "computed"
    steps: List[StepWire] = Field(default_factory=list)

    def to_value(self) -> HolidayRule:
        return ComputedHoliday(self.name, tuple(s.to_value() for s in self.steps), self.description)


class OffsetFromHolidayWire(_RuleWire):
    type: Literal["offsetFromHoliday"] = "offsetFromHoliday"
    base_holiday: StrictStr
    offset_days: StrictInt

    def to_value(self) -> HolidayRule:
        return OffsetFromHoliday(self.name, self.base_holiday, self.offset_days, self.description)


RuleWire = Annotated[
    Union[
        FixedHolidayWire,
        NthCycleDayHolidayWire,
        LastCycleDayHolidayWire,
        LastDayHolidayWire,
        ComputedHolidayWire,
        OffsetFromHolidayWire,
    ],
    Field(discriminator="type"),
]


# ---------------------------------------------------------
# Calendar
# ---------------------------------------------------------

class SubdivisionWire(_Wire):
    id: StrictStr = ""
    name: StrictStr = ""
    plural_name: StrictStr = ""
    count: StrictInt
    days_per_unit: Optional[List[StrictInt]] = None
    days_per_unit_fixed: Optional[StrictInt] = None
    labels: Optional[List[StrictStr]] = None
    label_format: Optional[StrictStr] = None
    use_custom_labels: Optional[StrictBool] = None
    is_cycle: Optional[StrictBool] = None
    epoch_starts_on_unit: Optional[StrictInt] = None
    subdivisions: Optional[List[SubdivisionWire]] = None

    def to_value(self) -> CalendarSubdivision:
        return CalendarSubdivision(
            id=self.id,
            name=self.name,
            plural_name=self.plural_name,
            count=self.count,
            days_per_unit=tuple(self.days_per_unit) if self.days_per_unit is not None else None,
            days_per_unit_fixed=self.days_per_unit_fixed,
            labels=tuple(self.labels or ()),
            label_format=self.label_format,
            use_custom_labels=self.use_custom_labels,
            is_cycle=bool(self.is_cycle),
            epoch_starts_on_unit=self.epoch_starts_on_unit or 0,
            subdivisions=tuple(s.to_value() for s in self.subdivisions or ()),
        )

    @classmethod
    def from_value(cls, s: CalendarSubdivision) -> "SubdivisionWire":
        # empty and default fields stay off the wire
        return cls(
            id=s.id,
            name=s.name,
            plural_name=s.plural_name,
            count=s.count,
            days_per_unit=list(s.days_per_unit) if s.days_per_unit is not None else None,
            days_per_unit_fixed=s.days_per_unit_fixed,
            labels=list(s.labels) if s.labels else None,
            label_format=s.label_format,
            use_custom_labels=s.use_custom_labels,
            is_cycle=True if s.is_cycle else None,
            epoch_starts_on_unit=s.epoch_starts_on_unit if s.is_cycle else None,
            subdivisions=[cls.from_value(c) for c in s.subdivisions] if s.subdivisions else None,
        )


class ErasWire(_Wire):
    positive: StrictStr = ""
    negative: StrictStr = ""
    zero_label: Optional[StrictStr] = None


class DisplayWire(_Wire):
    default_format: StrictStr = ""
    short_format: StrictStr = ""
    include_time_by_default: StrictBool = True
    # any string; ``core.validate`` reports values other than "12"/"24"
    hour_format: StrictStr = "24"


class CalendarWire(_Wire):
    id: StrictStr = ""
    name: StrictStr = ""
    description: StrictStr = ""
    minutes_per_hour: StrictInt
    hours_per_day: StrictInt
    minutes_per_day: Optional[int] = None  # derived; written, never read back
    days_per_year: StrictInt
    minutes_per_year: Optional[int] = None  # derived; written, never read back
    subdivisions: List[SubdivisionWire] = Field(default_factory=list)
    eras: ErasWire
    display: DisplayWire
    holidays: Optional[List[RuleWire]] = None
    epoch_offset: Optional[StrictInt] = None

    def to_value(self) -> CalendarConfig:
        return CalendarConfig(
            id=self.id,
            name=self.name,
            description=self.description,
            days_per_year=self.days_per_year,
            hours_per_day=self.hours_per_day,
            minutes_per_hour=self.minutes_per_hour,
            subdivisions=tuple(s.to_value() for s in self.subdivisions),
            eras=Eras(self.eras.positive, self.eras.negative, self.eras.zero_label),
            display=DisplayConfig(
                default_format=self.display.default_format,
                short_format=self.display.short_format,
                include_time_by_default=self.display.include_time_by_default,
                hour_format=self.display.hour_format,  # type: ignore[arg-type]
            ),
            holidays=tuple(h.to_value() for h in self.holidays or ()),
            epoch_offset=self.epoch_offset or 0,
        )


_STEP_WIRES = {w.model_fields["type"].default: w for w in (
    StartOfYearStepWire, FixedStepWire, OffsetStepWire, FindInCycleStepWire,
)}
_RULE_WIRES = {w.model_fields["type"].default: w for w in (
    FixedHolidayWire,
    NthCycleDayHolidayWire,
    LastCycleDayHolidayWire,
    LastDayHolidayWire,
    ComputedHolidayWire,
    OffsetFromHolidayWire,
)}


def _step_wire(step: HolidayStep) -> BaseModel:
    fields = {k: getattr(step, k) for k in _STEP_WIRES[step.type].model_fields if k != "type"}
    return _STEP_WIRES[step.type](**fields)


def _rule_wire(rule: HolidayRule) -> BaseModel:
    wire = _RULE_WIRES[rule.type]
    fields = {k: getattr(rule, k) for k in wire.model_fields if k not in ("type", "steps")}
    if isinstance(rule, ComputedHoliday):
        fields["steps"] = [_step_wire(s) for s in rule.steps]
    return wire(**fields)


# ---------------------------------------------------------
# Public API
# ---------------------------------------------------------

def _config_error(e: ValidationError) -> ConfigError:
    problems = []
    for err in e.errors():
        where = ".".join(str(p) for p in err["loc"]) or "calendar"
        problems.append(f"{where}: {err['msg']}")
    return ConfigError("invalid calendar payload: " + "; ".join(problems))


def calendar_from_dict(data: Mapping[str, Any]) -> CalendarConfig:
    """Decode a stored camelCase payload; raises ConfigError on a wrong shape."""
    try:
        wire = CalendarWire.model_validate(data)
    except ValidationError as e:
        raise _config_error(e) from e
    return wire.to_value()


def calendar_to_dict(config: CalendarConfig) -> Dict[str, Any]:
    wire = CalendarWire(
        id=config.id,
        name=config.name,
        description=config.description,
        minutes_per_hour=config.minutes_per_hour,
        hours_per_day=config.hours_per_day,
        minutes_per_day=config.minutes_per_day,
        days_per_year=config.days_per_year,
        minutes_per_year=config.minutes_per_year,
        subdivisions=[SubdivisionWire.from_value(s) for s in config.subdivisions],
        eras=ErasWire(
            positive=config.eras.positive,
            negative=config.eras.negative,
            zero_label=config.eras.zero_label,
        ),
        display=DisplayWire(
            default_format=config.display.default_format,
            short_format=config.display.short_format,
            include_time_by_default=config.display.include_time_by_default,
            hour_format=config.display.hour_format,
        ),
        holidays=[_rule_wire(h) for h in config.holidays] or None,
        epoch_offset=config.epoch_offset or None,
    )
    return wire.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------
# Files
# ---------------------------------------------------------

def load_calendar(path: Union[str, Path]) -> CalendarConfig:
    """Read a CalendarConfig from a JSON file."""
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"{p}: invalid JSON ({e})") from e
    return calendar_from_dict(data)


def dump_calendar(config: CalendarConfig, path: Union[str, Path]) -> None:
    Path(path).write_text(json.dumps(calendar_to_dict(config), indent=2) + "\n", encoding="utf-8")
