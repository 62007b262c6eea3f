from __future__ import annotations

import argparse
from typing import List, Optional, Tuple

import talecal
from talecal.core.types import ComputedHoliday, OffsetFromHoliday
from talecal.engines.calendar import CalendarEngine


def parse_names(arg: str) -> List[str]:
    """
    Parse holiday names from CLI.
    Example:
      --holidays "Easter,Whitsunday,Ash Wednesday"
    """
    return [x.strip() for x in arg.split(",") if x.strip()]


def moveable_names(eng: CalendarEngine) -> List[str]:
    """Names of computed and offset rules, in list order, without repeats."""
    out: List[str] = []
    for rule in eng.config.holidays:
        if isinstance(rule, (ComputedHoliday, OffsetFromHoliday)) and rule.name not in out:
            out.append(rule.name)
    return out


def day_cell(eng: CalendarEngine, year: int, name: str, style: str) -> Tuple[str, Optional[int]]:
    t = eng.holidays(year).get(name)
    if t is None:
        return "-", None
    d = eng.to_date(t)
    if style == "doy":
        text = str(d.day_of_year)
    else:
        text = eng.format(t, include_time=False)
    if d.signed_year != year:
        text += "'"
    return text, d.day_of_year


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Print a table of holiday dates, one row per year.")
    p.add_argument("--calendar", default="medieval")
    p.add_argument("--config", default=None, help="JSON calendar file (overrides --calendar)")
    p.add_argument("--from-year", type=int, default=1)
    p.add_argument("--to-year", type=int, default=20)
    p.add_argument(
        "--holidays",
        type=str,
        default="",
        help='Comma list like "Easter,Whitsunday" (default: computed and offset holidays, first 4).',
    )
    p.add_argument(
        "--dates",
        choices=("doy", "short"),
        default="doy",
        help="Cell format: day of year, or the calendar's short format (default: doy).",
    )
    args = p.parse_args(argv)

    config = talecal.load_calendar(args.config) if args.config else talecal.get_calendar(args.calendar)
    eng = CalendarEngine(config)
    names = parse_names(args.holidays) if args.holidays else moveable_names(eng)[:4]
    if not names:
        names = [r.name for r in config.holidays][:4]
    if not names:
        print(f"{config.id} defines no holidays")
        return 0

    Y0, Y1 = args.from_year, args.to_year
    if Y1 < Y0:
        raise SystemExit("--to-year must be >= --from-year")

    # table header
    headers = ["Year"] + names
    colw = [6] + [max(8, len(h)) for h in names]
    if args.dates == "short":
        colw = [6] + [max(24, len(h)) for h in names]
    line = "  ".join(h.ljust(w) for h, w in zip(headers, colw))
    print(line)
    print("-" * len(line))

    spread: dict[str, Tuple[int, int]] = {}
    for Y in range(Y0, Y1 + 1):
        row = [str(Y).ljust(colw[0])]
        for name, w in zip(names, colw[1:]):
            text, doy = day_cell(eng, Y, name, args.dates)
            row.append(text.ljust(w))
            if doy is not None:
                lo, hi = spread.get(name, (doy, doy))
                spread[name] = (min(lo, doy), max(hi, doy))
        print("  ".join(row))

    print("\nDay-of-year range:")
    for name in names:
        if name in spread:
            lo, hi = spread[name]
            print(f"  {name}: {lo} .. {hi}")
        else:
            print(f"  {name}: (never resolved)")
    print("(' = falls in the neighbouring year)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
