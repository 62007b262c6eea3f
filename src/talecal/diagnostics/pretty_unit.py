from __future__ import annotations

import argparse
from typing import List, Optional

import talecal
from talecal.core.types import CalendarConfig, CalendarSubdivision
from talecal.engines.calendar import CalendarEngine
from talecal.engines.subdivisions import iter_cycles, iter_subdivisions, unit_label, unit_spans


def cell(top: str, bot: str, w: int = 6) -> tuple[str, str]:
    return (top[:w].ljust(w), bot[:w].ljust(w))


def print_grid(title: str, header: str, weeks: list[list[tuple[str, str]]]) -> None:
    print(title)
    if header:
        print(header)
        print("-" * len(header))
    for wk in weeks:
        print(" ".join(c[0] for c in wk))
        print(" ".join(c[1] for c in wk))
    print()


def default_subdivision(config: CalendarConfig) -> Optional[str]:
    for node in iter_subdivisions(config):
        if not node.is_cycle:
            return node.id
    return None


def week_cycle(config: CalendarConfig, cycle_id: Optional[str]) -> Optional[CalendarSubdivision]:
    """Cycle used for the grid columns: the one named, else the first 7-day cycle."""
    for c in iter_cycles(config):
        if (cycle_id and c.id == cycle_id) or (not cycle_id and c.count == 7):
            return c
    return None


def unit_grid(eng: CalendarEngine, sub_id: str, unit: int, year: int, cycle_id: Optional[str]) -> None:
    config = eng.config
    spans = unit_spans(config, sub_id)
    if not 1 <= unit <= len(spans):
        raise SystemExit(f"'{sub_id}' has {len(spans)} units; got --unit {unit}")
    first, last = spans[unit - 1]

    cols = week_cycle(config, cycle_id)
    width = cols.count if cols else 7
    header = " ".join(unit_label(cols, i)[:6].ljust(6) for i in range(cols.count)) if cols else ""

    holidays = eng.holidays_by_day(year)
    cells: list[tuple[str, str]] = []
    for doy in range(first, last + 1):
        mark = "*" if doy in holidays else ""
        cells.append(cell(f"{doy - first + 1:2d}{mark}", f"d{doy}"))

    weeks: list[list[tuple[str, str]]] = []
    pad = 0
    if cols is not None:
        t = eng.encode(year, first)
        pad = eng.resolve(eng.to_date(t))[cols.id].unit_index
    wk: list[tuple[str, str]] = [cell("", "") for _ in range(pad)]
    for c in cells:
        wk.append(c)
        if len(wk) == width:
            weeks.append(wk)
            wk = []
    if wk:
        while len(wk) < width:
            wk.append(cell("", ""))
        weeks.append(wk)

    label = eng.resolve(eng.to_date(eng.encode(year, first)))[sub_id].label
    title = f"{config.id}  {sub_id} {unit} ({label})  year {year}   (days {first} .. {last})"
    print_grid(title, header, weeks)

    names = [(doy, holidays[doy]) for doy in range(first, last + 1) if doy in holidays]
    for doy, name in names:
        print(f"  * {doy - first + 1:2d}  {name}")
    if names:
        print()


def main(argv: List[str] | None = None) -> int:
    p = argparse.ArgumentParser(
        description="Print one subdivision unit as a grid, with cycle positions as columns and holidays marked."
    )
    p.add_argument("--calendar", default="gregorian")
    p.add_argument("--config", default=None, help="JSON calendar file (overrides --calendar)")
    p.add_argument("--year", type=int, default=1, help="signed year (default: 1)")
    p.add_argument("--subdivision", default=None, help="hierarchical subdivision id (default: first one)")
    p.add_argument("--unit", type=int, default=1, help="1-based unit number (default: 1)")
    p.add_argument("--cycle", default=None, help="cycle used for columns (default: first 7-day cycle)")
    args = p.parse_args(argv)

    config = talecal.load_calendar(args.config) if args.config else talecal.get_calendar(args.calendar)
    sub_id = args.subdivision or default_subdivision(config)
    if sub_id is None:
        print(f"{config.id} has no hierarchical subdivisions")
        return 0

    unit_grid(CalendarEngine(config), sub_id, args.unit, args.year, args.cycle)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
