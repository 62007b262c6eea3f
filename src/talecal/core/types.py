from __future__ import annotations
from dataclasses import dataclass
from typing import ClassVar, Literal, Optional, Tuple, Union

EraSide = Literal["positive", "negative"]
HourFormat = Literal["12", "24"]
Direction = Literal["onOrAfter", "onOrBefore"]

DEFAULT_LABEL_FORMAT = "{name} {n}"


@dataclass(frozen=True)
class CalendarSubdivision:
    """One node of the subdivision tree (hierarchical) or a global cycle."""
    id: str
    name: str
    plural_name: str = ""
    count: int = 1
    days_per_unit: Optional[Tuple[int, ...]] = None
    days_per_unit_fixed: Optional[int] = None
    labels: Tuple[str, ...] = ()
    label_format: Optional[str] = None
    use_custom_labels: Optional[bool] = None  # None behaves as True
    is_cycle: bool = False
    epoch_starts_on_unit: int = 0  # cycles only
    subdivisions: Tuple["CalendarSubdivision", ...] = ()

    def unit_length(self, i: int) -> int:
        """Days in unit ``i`` (0-based); 0 for cycles and unsized nodes."""
        if self.days_per_unit_fixed:
            return self.days_per_unit_fixed
        if self.days_per_unit and 0 <= i < len(self.days_per_unit):
            return self.days_per_unit[i]
        return 0

    def unit_lengths(self) -> Tuple[int, ...]:
        return tuple(self.unit_length(i) for i in range(self.count))


@dataclass(frozen=True)
class Eras:
    positive: str
    negative: str
    zero_label: Optional[str] = None


@dataclass(frozen=True)
class DisplayConfig:
    default_format: str
    short_format: str
    include_time_by_default: bool = True
    hour_format: HourFormat = "24"


# ---------------------------------------------------------
# Holiday steps (used only inside computed rules)
# ---------------------------------------------------------

@dataclass(frozen=True)
class StartOfYearStep:
    type: ClassVar[str] = "startOfYear"


@dataclass(frozen=True)
class FixedStep:
    subdivision_id: str
    unit: int
    day: int
    type: ClassVar[str] = "fixed"


@dataclass(frozen=True)
class OffsetStep:
    days: int
    type: ClassVar[str] = "offset"


@dataclass(frozen=True)
class FindInCycleStep:
    cycle_id: str
    day_in_cycle: int
    direction: Direction = "onOrAfter"
    type: ClassVar[str] = "findInCycle"


HolidayStep = Union[StartOfYearStep, FixedStep, OffsetStep, FindInCycleStep]


# ---------------------------------------------------------
# Holiday rules
# ---------------------------------------------------------

@dataclass(frozen=True)
class FixedHoliday:
    name: str
    subdivision_id: str
    unit: int
    day: int
    description: Optional[str] = None
    type: ClassVar[str] = "fixed"


@dataclass(frozen=True)
class NthCycleDayHoliday:
    name: str
    subdivision_id: str
    unit: int
    n: int  # 1..5
    cycle_id: str
    day_in_cycle: int
    description: Optional[str] = None
    type: ClassVar[str] = "nthCycleDay"


@dataclass(frozen=True)
class LastCycleDayHoliday:
    name: str
    subdivision_id: str
    unit: int
    cycle_id: str
    day_in_cycle: int
    description: Optional[str] = None
    type: ClassVar[str] = "lastCycleDay"


@dataclass(frozen=True)
class LastDayHoliday:
    name: str
    subdivision_id: str
    unit: int
    description: Optional[str] = None
    type: ClassVar[str] = "lastDay"


@dataclass(frozen=True)
class ComputedHoliday:
    name: str
    steps: Tuple[HolidayStep, ...]
    description: Optional[str] = None
    type: ClassVar[str] = "computed"


@dataclass(frozen=True)
class OffsetFromHoliday:
    name: str
    base_holiday: str
    offset_days: int
    description: Optional[str] = None
    type: ClassVar[str] = "offsetFromHoliday"


HolidayRule = Union[
    FixedHoliday,
    NthCycleDayHoliday,
    LastCycleDayHoliday,
    LastDayHoliday,
    ComputedHoliday,
    OffsetFromHoliday,
]

HOLIDAY_RULE_TYPES: Tuple[type, ...] = (
    FixedHoliday,
    NthCycleDayHoliday,
    LastCycleDayHoliday,
    LastDayHoliday,
    ComputedHoliday,
    OffsetFromHoliday,
)

HOLIDAY_STEP_TYPES: Tuple[type, ...] = (StartOfYearStep, FixedStep, OffsetStep, FindInCycleStep)


@dataclass(frozen=True)
class CalendarConfig:
    """Pure data payload describing one fictional calendar."""
    id: str
    name: str
    description: str
    days_per_year: int
    hours_per_day: int
    minutes_per_hour: int
    subdivisions: Tuple[CalendarSubdivision, ...]
    eras: Eras
    display: DisplayConfig
    holidays: Tuple[HolidayRule, ...] = ()
    epoch_offset: int = 0  # years between story time 0 and this calendar's year 0

    @property
    def minutes_per_day(self) -> int:
        return self.hours_per_day * self.minutes_per_hour

    @property
    def minutes_per_year(self) -> int:
        return self.minutes_per_day * self.days_per_year


@dataclass(frozen=True)
class CalendarDate:
    year: int  # magnitude; the sign lives in ``era``
    era: EraSide
    day_of_year: int  # 1-based
    hour: int = 0
    minute: int = 0

    @property
    def signed_year(self) -> int:
        if self.era == "negative":
            return -abs(self.year)
        return self.year

    @staticmethod
    def from_signed(signed_year: int, day_of_year: int, hour: int = 0, minute: int = 0) -> "CalendarDate":
        era: EraSide = "negative" if signed_year < 0 else "positive"
        return CalendarDate(abs(signed_year), era, day_of_year, hour, minute)


@dataclass(frozen=True)
class ResolvedUnit:
    unit_index: int  # 0-based
    label: str

    @property
    def number(self) -> int:
        return self.unit_index + 1
