from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from .time import StoryTime
from .types import CalendarConfig, CalendarDate, ResolvedUnit

class CalendarEngineProtocol(Protocol):
    config: CalendarConfig

    def info(self) -> Dict[str, Any]: ...
    def to_date(self, t: StoryTime) -> CalendarDate: ...
    def to_story_time(self, d: CalendarDate) -> StoryTime: ...
    def resolve(self, d: CalendarDate) -> Dict[str, ResolvedUnit]: ...
    def holidays(self, year: int) -> Dict[str, StoryTime]: ...
    def match_holiday(self, t: StoryTime) -> Optional[str]: ...
    def format(self, t: StoryTime, *, include_time: Optional[bool] = None) -> str: ...

@dataclass
class CalendarRegistry:
    _engines: Dict[str, CalendarEngineProtocol]

    def get(self, name: str) -> CalendarEngineProtocol:
        if name not in self._engines:
            raise KeyError(f"Unknown calendar '{name}'. Available: {sorted(self._engines)}")
        return self._engines[name]

    def list(self) -> List[str]:
        return sorted(self._engines.keys())

    def register(self, name: str, engine: CalendarEngineProtocol, *, overwrite: bool = False) -> None:
        if (not overwrite) and (name in self._engines):
            raise KeyError(f"Calendar '{name}' already exists. Use overwrite=True to replace.")
        self._engines[name] = engine
