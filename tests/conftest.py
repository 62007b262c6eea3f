# tests/conftest.py

import pytest

from talecal.api import set_registry
from talecal.bootstrap import build_registry
from talecal.core.types import (
    CalendarConfig,
    CalendarSubdivision,
    DisplayConfig,
    Eras,
)

MPD = 24 * 60
MPY = 365 * MPD


def make_config(**kw) -> CalendarConfig:
    base = dict(
        id="test",
        name="Test Calendar",
        description="",
        days_per_year=365,
        hours_per_day=24,
        minutes_per_hour=60,
        subdivisions=(),
        eras=Eras(positive="AE", negative="BE"),
        display=DisplayConfig(
            default_format="Day <%= dayOfYear %>, Year <%= year %> <%= era %> at <%= hour %>:<%= minute %>",
            short_format="Day <%= dayOfYear %>, Year <%= year %> <%= era %>",
        ),
    )
    base.update(kw)
    return CalendarConfig(**base)


WEEK = CalendarSubdivision(id="week", name="Week", count=7, is_cycle=True, epoch_starts_on_unit=0)

# eleven 30-day months and a 35-day twelfth
MONTH = CalendarSubdivision(
    id="month",
    name="Month",
    plural_name="Months",
    count=12,
    days_per_unit=(30,) * 11 + (35,),
)


@pytest.fixture
def plain():
    return make_config()


@pytest.fixture
def month_week():
    return make_config(id="month-week", subdivisions=(WEEK, MONTH))


@pytest.fixture
def fresh_registry():
    """Give a test its own registry and restore the presets afterwards."""
    set_registry(build_registry())
    yield
    set_registry(build_registry())
