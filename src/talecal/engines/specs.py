from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from ..core.types import (
    CalendarConfig,
    CalendarSubdivision,
    ComputedHoliday,
    DisplayConfig,
    Eras,
    FindInCycleStep,
    FixedHoliday,
    FixedStep,
    LastDayHoliday,
    OffsetFromHoliday,
)


# ============================================================
# SHARED BUILDING BLOCKS
# ============================================================

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

HIJRI_MONTH_NAMES = (
    "Muharram", "Safar", "Rabi' al-Awwal", "Rabi' al-Thani",
    "Jumada al-Awwal", "Jumada al-Thani", "Rajab", "Sha'ban",
    "Ramadan", "Shawwal", "Dhu al-Qi'dah", "Dhu al-Hijjah",
)
HIJRI_MONTH_DAYS = (30, 29) * 6

# 29-position lunar cycle; the full moon sits at index 14
MOON_PHASES = (
    ("New Moon",)
    + tuple(f"Waxing Crescent {i}" for i in range(1, 7))
    + ("First Quarter",)
    + tuple(f"Waxing Gibbous {i}" for i in range(1, 7))
    + ("Full Moon",)
    + tuple(f"Waning Gibbous {i}" for i in range(1, 7))
    + ("Last Quarter",)
    + tuple(f"Waning Crescent {i}" for i in range(1, 8))
)
FULL_MOON = 14
SUNDAY = 0

MONTHS = CalendarSubdivision(
    id="month",
    name="Month",
    plural_name="Months",
    count=12,
    days_per_unit=MONTH_DAYS,
    labels=MONTH_NAMES,
    use_custom_labels=True,
)

# year 0, day 1 is a Monday
WEEKDAYS = CalendarSubdivision(
    id="weekday",
    name="Weekday",
    plural_name="Weekdays",
    count=7,
    is_cycle=True,
    epoch_starts_on_unit=1,
    labels=WEEKDAY_NAMES,
)

# new moon on day 1 of year 0
MOON = CalendarSubdivision(
    id="lunar",
    name="Moon Phase",
    plural_name="Moon Phases",
    count=29,
    is_cycle=True,
    epoch_starts_on_unit=0,
    labels=MOON_PHASES,
)

_DEFAULT_HOURS = dict(hours_per_day=24, minutes_per_hour=60)


# ============================================================
# SIMPLE 365 (default)
# ============================================================

SIMPLE365 = CalendarConfig(
    id="simple365",
    name="Simple 365-Day Calendar",
    description="Basic 365-day year, no subdivisions",
    days_per_year=365,
    subdivisions=(),
    eras=Eras(positive="AE", negative="BE"),
    display=DisplayConfig(
        default_format="Day <%= dayOfYear %>, Year <%= year %> <%= era %> at <%= hour %>:<%= minute %>",
        short_format="Day <%= dayOfYear %>, Year <%= year %> <%= era %>",
    ),
    **_DEFAULT_HOURS,
)


# ============================================================
# GREGORIAN (no leap years)
# ============================================================

GREGORIAN = CalendarConfig(
    id="gregorian",
    name="Gregorian Calendar",
    description="Standard 12-month solar calendar (365 days)",
    days_per_year=365,
    subdivisions=(MONTHS, WEEKDAYS),
    eras=Eras(positive="CE", negative="BCE"),
    display=DisplayConfig(
        default_format=(
            "<%= weekday %>, <%= month %> <%= dayOfMonth %>, <%= year %> <%= era %>"
            " at <%= hour %>:<%= minute %>"
        ),
        short_format="<%= month %> <%= dayOfMonth %>, <%= year %> <%= era %>",
    ),
    **_DEFAULT_HOURS,
)


# ============================================================
# ISLAMIC (Hijri, fixed 354-day year)
# ============================================================

ISLAMIC = CalendarConfig(
    id="islamic",
    name="Islamic (Hijri) Calendar",
    description="Lunar calendar with 12 months (354 days, seasons drift)",
    days_per_year=354,
    subdivisions=(
        CalendarSubdivision(
            id="month",
            name="Month",
            plural_name="Months",
            count=12,
            days_per_unit=HIJRI_MONTH_DAYS,
            labels=HIJRI_MONTH_NAMES,
            use_custom_labels=True,
        ),
    ),
    eras=Eras(positive="AH", negative="BH"),
    display=DisplayConfig(
        default_format="<%= dayOfMonth %> <%= month %>, <%= year %> <%= era %> at <%= hour %>:<%= minute %>",
        short_format="<%= dayOfMonth %> <%= month %>, <%= year %> <%= era %>",
    ),
    **_DEFAULT_HOURS,
)


# ============================================================
# MEDIEVAL (Julian-like year, Easter from a lunar cycle)
# ============================================================

def _feast(name: str, month: int, day: int, description: str) -> FixedHoliday:
    return FixedHoliday(name, "month", month, day, description)


def _after_easter(name: str, days: int, description: str) -> OffsetFromHoliday:
    return OffsetFromHoliday(name, "Easter", days, description)


# Christmas comes first: the Christmastide feasts are offsets from it.
MEDIEVAL_FIXED_FEASTS = (
    _feast("Christmas", 12, 25, "Nativity of Christ; opens the twelve days of Christmastide"),
    OffsetFromHoliday("Circumcision of Christ", "Christmas", 7, "Eighth day of Christmastide"),
    OffsetFromHoliday("Epiphany", "Christmas", 12, "Visit of the Magi; the eve is Twelfth Night"),
    _feast("Candlemas", 2, 2, "Presentation at the Temple; candles are blessed for the year"),
    _feast("St Matthias", 2, 24, "Apostle chosen by lot to replace Judas"),
    _feast("St Gregory", 3, 12, "Pope Gregory the Great"),
    _feast("St Benedict", 3, 21, "Father of Western monasticism"),
    _feast("Annunciation", 3, 25, "Lady Day; once the start of the civil year"),
    _feast("St George", 4, 23, "Soldier martyr and patron of England"),
    _feast("Sts Philip and James", 5, 1, "Apostles; shares the day with May Day"),
    _feast("Nativity of St John the Baptist", 6, 24, "Midsummer; bonfires and gathering of herbs"),
    _feast("Sts Peter and Paul", 6, 29, "The two foremost apostles, martyred in Rome"),
    _feast("St James the Greater", 7, 25, "Patron of pilgrims; shrine at Compostela"),
    _feast("Lammas", 8, 1, "Loaf-mass; first fruits of the harvest"),
    _feast("Assumption of the Virgin", 8, 15, "Holy Day of Obligation"),
    _feast("Nativity of the Virgin", 9, 8, "Marymas"),
    _feast("Holy Rood Day", 9, 14, "Exaltation of the True Cross"),
    _feast("Michaelmas", 9, 29, "Quarter day; feast of the archangels"),
    _feast("All Saints Day", 11, 1, "Hallowmas"),
    _feast("All Souls Day", 11, 2, "Commemoration of the faithful departed"),
    _feast("Martinmas", 11, 11, "Slaughter of livestock for winter; first wine"),
    _feast("St Andrew", 11, 30, "Apostle; patron of Scotland"),
    _feast("St Nicholas", 12, 6, "Bishop of Myra; gifts for children"),
    _feast("St Lucy", 12, 13, "Feast of light near the winter solstice"),
    _feast("St Thomas the Apostle", 12, 21, "Doubting Thomas"),
    _feast("St Stephen", 12, 26, "First martyr; second day of Christmastide"),
    _feast("St John the Evangelist", 12, 27, "Third day of Christmastide"),
    _feast("Holy Innocents", 12, 28, "Childermas; a day of ill omen"),
    _feast("St Silvester", 12, 31, "Seventh day of Christmastide"),
)

# first Sunday after the first full moon on or after March 21
EASTER = ComputedHoliday(
    "Easter",
    (
        FixedStep("month", 3, 21),
        FindInCycleStep("lunar", FULL_MOON, "onOrAfter"),
        FindInCycleStep("weekday", SUNDAY, "onOrAfter"),
    ),
    "Resurrection of Christ; the greatest feast of the year",
)

MEDIEVAL_MOVEABLE_FEASTS = (
    EASTER,
    _after_easter("Shrove Tuesday", -47, "Last day before Lent"),
    _after_easter("Ash Wednesday", -46, "First day of Lent"),
    _after_easter("Palm Sunday", -7, "Entry into Jerusalem"),
    _after_easter("Maundy Thursday", -3, "The Last Supper"),
    _after_easter("Good Friday", -2, "The Crucifixion; a day of fasting"),
    _after_easter("Holy Saturday", -1, "Vigil before Easter"),
    _after_easter("Rogation Sunday", 35, "Beginning of Rogationtide"),
    _after_easter("Rogation Monday", 36, "Processions to bless the fields"),
    _after_easter("Rogation Tuesday", 37, "Beating the bounds"),
    _after_easter("Rogation Wednesday", 38, "Last day of Rogationtide"),
    _after_easter("Ascension Day", 39, "Forty days after the Resurrection"),
    _after_easter("Whitsunday", 49, "Pentecost"),
    _after_easter("Whit Monday", 50, "Second day of Whitsuntide"),
    _after_easter("Trinity Sunday", 56, "Feast of the Holy Trinity"),
    _after_easter("Corpus Christi", 60, "Feast of the Body of Christ"),
)

MEDIEVAL = CalendarConfig(
    id="medieval",
    name="Medieval European Calendar",
    description="Julian calendar with lunar cycle for Easter (365 days)",
    days_per_year=365,
    subdivisions=(MONTHS, WEEKDAYS, MOON),
    eras=Eras(positive="AD", negative="BC"),
    display=DisplayConfig(
        default_format=(
            "<%= weekday %>, <%= month %> <%= dayOfMonth %>, <%= year %> <%= era %>"
            "<% if (holiday) { %> (<%= holiday %>)<% } %> at <%= hour %>:<%= minute %>"
        ),
        short_format="<%= month %> <%= dayOfMonth %>, <%= year %> <%= era %>",
    ),
    holidays=MEDIEVAL_FIXED_FEASTS + MEDIEVAL_MOVEABLE_FEASTS,
    **_DEFAULT_HOURS,
)


# ============================================================
# CORUSCANT (368 days: four 92-day quarters of 13 weeks + festival day)
# ============================================================

CORUSCANT = CalendarConfig(
    id="coruscant",
    name="Coruscant Standard Calendar",
    description="Galactic standard timekeeping (368 days, BBY/ABY)",
    days_per_year=368,
    subdivisions=(
        CalendarSubdivision(
            id="quarter",
            name="Quarter",
            plural_name="Quarters",
            count=4,
            days_per_unit_fixed=92,
            labels=("Conference Season", "Gala Season", "Recess Season", "Budget Season"),
            subdivisions=(
                CalendarSubdivision(
                    id="week",
                    name="Week",
                    plural_name="Weeks",
                    count=13,
                    days_per_unit_fixed=7,
                    label_format="Week {n}",
                ),
            ),
        ),
    ),
    eras=Eras(positive="ABY", negative="BBY"),
    display=DisplayConfig(
        default_format=(
            "<% if (holiday) { %><%= holiday %><% } else { %>Day <%= dayOfQuarter %><% } %>, "
            "<%= quarter %> (Q<%= quarterNumber %>), <%= year %> <%= era %> at <%= hour %>:<%= minute %>"
        ),
        short_format="Q<%= quarterNumber %> Day <%= dayOfQuarter %>, <%= year %> <%= era %>",
    ),
    holidays=tuple(LastDayHoliday("Festival Day", "quarter", q) for q in range(1, 5)),
    **_DEFAULT_HOURS,
)


DEFAULT_CALENDAR = "simple365"

ALL_SPECS: Dict[str, CalendarConfig] = {
    "gregorian": GREGORIAN,
    "islamic": ISLAMIC,
    "medieval": MEDIEVAL,
    "coruscant": CORUSCANT,
    "simple365": SIMPLE365,
}


# ============================================================
# SUBDIVISION PRESETS (building blocks for the editor)
# ============================================================

@dataclass(frozen=True)
class SubdivisionPreset:
    id: str
    name: str
    description: str
    subdivision: CalendarSubdivision


SUBDIVISION_PRESETS: Tuple[SubdivisionPreset, ...] = (
    SubdivisionPreset(
        id="earth-months",
        name="Earth Months",
        description="12 months with standard day counts (Jan=31, Feb=28, etc.)",
        subdivision=CalendarSubdivision(
            id="month",
            name="Month",
            plural_name="Months",
            count=12,
            days_per_unit=MONTH_DAYS,
            labels=MONTH_NAMES,
            label_format="Month {n}",
            use_custom_labels=True,
        ),
    ),
    SubdivisionPreset(
        id="earth-seasons",
        name="Earth Seasons",
        description="4 seasons (Spring 92d, Summer 92d, Fall 91d, Winter 90d)",
        subdivision=CalendarSubdivision(
            id="season",
            name="Season",
            plural_name="Seasons",
            count=4,
            days_per_unit=(92, 92, 91, 90),
            labels=("Spring", "Summer", "Fall", "Winter"),
            label_format="Season {n}",
            use_custom_labels=True,
        ),
    ),
    SubdivisionPreset(
        id="seven-day-week",
        name="7-Day Week",
        description="Standard week cycle (Sunday through Saturday)",
        subdivision=CalendarSubdivision(
            id="weekday",
            name="Weekday",
            plural_name="Weekdays",
            count=7,
            is_cycle=True,
            epoch_starts_on_unit=1,
            labels=WEEKDAY_NAMES,
            label_format="Day {n}",
            use_custom_labels=True,
        ),
    ),
)
