from __future__ import annotations
from talecal.core.engine import CalendarRegistry
from talecal.engines.specs import ALL_SPECS
from talecal.engines.calendar import CalendarEngine

def build_registry() -> CalendarRegistry:
    engines = {}
    for name, config in ALL_SPECS.items():
        engines[name] = CalendarEngine(config)
    return CalendarRegistry(engines)
