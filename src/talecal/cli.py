from __future__ import annotations

import argparse
import importlib
import inspect
import logging
import sys

from talecal.core.errors import ConfigError


def _run_module_main(modpath: str, argv: list[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def _setup_logging(verbose: int) -> None:
    level = logging.DEBUG if verbose > 0 else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def add_calendar_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--calendar", default="simple365", help="registered calendar name (default: simple365)")
    p.add_argument("--config", default=None, help="JSON calendar file (overrides --calendar)")


def engine_from_args(args: argparse.Namespace):
    import talecal

    if args.config:
        return talecal.make_engine(talecal.load_calendar(args.config))
    return talecal.make_engine(talecal.get_calendar(args.calendar))


def cmd_date(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="talecal date", description="Story time (minutes) -> formatted date")
    p.add_argument("minutes", type=int)
    add_calendar_args(p)
    p.add_argument("--short", action="store_true", help="use the short format (no time of day)")
    args = p.parse_args(argv)

    eng = engine_from_args(args)
    d = eng.to_date(args.minutes)
    print(eng.format(args.minutes, include_time=not args.short))
    print(f"  year={d.year} era={d.era} day_of_year={d.day_of_year} hour={d.hour} minute={d.minute}")
    for sub_id, unit in eng.resolve(d).items():
        print(f"  {sub_id}: {unit.label} (#{unit.number})")
    return 0


def cmd_encode(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="talecal encode", description="Calendar date -> story time (minutes)")
    p.add_argument("year", type=int, help="year magnitude")
    p.add_argument("day", type=int, help="1-based day of year")
    p.add_argument("--era", choices=("positive", "negative"), default="positive")
    p.add_argument("--hour", type=int, default=0)
    p.add_argument("--minute", type=int, default=0)
    add_calendar_args(p)
    args = p.parse_args(argv)

    from talecal.core.types import CalendarDate

    eng = engine_from_args(args)
    t = eng.to_story_time(CalendarDate(abs(args.year), args.era, args.day, args.hour, args.minute))
    print(t)
    return 0


def cmd_holidays(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="talecal holidays", description="Holiday table for one year")
    p.add_argument("year", type=int, help="signed year (negative = negative era)")
    add_calendar_args(p)
    args = p.parse_args(argv)

    eng = engine_from_args(args)
    report = eng.holiday_report(args.year)
    if not report.days:
        print(f"{eng.config.name}: no holidays in year {args.year}")
    for rule, t in sorted(report.days, key=lambda rt: rt[1]):
        d = eng.to_date(t)
        print(f"{d.day_of_year:4d}  {rule.name:<32s} {eng.format(t, include_time=False)}")
    for msg in report.diagnostics:
        print(f"skipped: {msg}")
    return 0


def cmd_validate(argv: list[str]) -> int:
    from talecal.core.schema import load_calendar
    from talecal.core.validate import validate

    p = argparse.ArgumentParser(prog="talecal validate", description="Check a JSON calendar file")
    p.add_argument("file")
    p.add_argument("--strict", action="store_true", help="also check spans and holiday references")
    args = p.parse_args(argv)

    try:
        config = load_calendar(args.file)
    except (ConfigError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    problems = validate(config, strict=args.strict)
    for msg in problems:
        print(msg)
    if problems:
        return 1
    print(f"{config.id}: OK")
    return 0


def cmd_presets(argv: list[str]) -> int:
    import talecal
    from talecal.engines.specs import SUBDIVISION_PRESETS

    p = argparse.ArgumentParser(prog="talecal presets", description="List built-in calendars")
    p.add_argument("--subdivisions", action="store_true", help="list subdivision presets instead")
    args = p.parse_args(argv)

    if args.subdivisions:
        for sp in SUBDIVISION_PRESETS:
            print(f"{sp.id:<16s} {sp.description}")
        return 0
    for name in talecal.list_calendars():
        info = talecal.calendar_info(name)
        print(f"{name:<12s} {info['days_per_year']:4d} days  {info['description']}")
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(prog="talecal", description="Story-time calendar toolkit CLI.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("date", help="Story time -> formatted date", add_help=False)
    sub.add_parser("encode", help="Calendar date -> story time", add_help=False)
    sub.add_parser("holidays", help="Holiday table for one year", add_help=False)
    sub.add_parser("validate", help="Check a JSON calendar file", add_help=False)
    sub.add_parser("presets", help="List built-in calendars", add_help=False)

    # diagnostics
    sub.add_parser("pretty-unit", help="Print a grid of one subdivision unit (diagnostics)", add_help=False)
    sub.add_parser("holiday-table", help="Print holiday dates across years (diagnostics)", add_help=False)

    p_diag = sub.add_parser("diag", help="Diagnostics tools")
    p_diag.add_argument(
        "tool",
        choices=["round-trip", "holiday-scatter"],
        help="Which diagnostic to run",
    )

    args, rest = p.parse_known_args(argv)
    _setup_logging(args.verbose)

    commands = {
        "date": cmd_date,
        "encode": cmd_encode,
        "holidays": cmd_holidays,
        "validate": cmd_validate,
        "presets": cmd_presets,
    }
    try:
        if args.cmd in commands:
            return commands[args.cmd](rest)

        if args.cmd == "pretty-unit":
            return _run_module_main("talecal.diagnostics.pretty_unit", rest)

        if args.cmd == "holiday-table":
            return _run_module_main("talecal.diagnostics.holiday_table", rest)

        if args.cmd == "diag":
            tool_map = {
                "round-trip": "talecal.diagnostics.round_trip",
                "holiday-scatter": "talecal.diagnostics.holiday_scatter",
            }
            return _run_module_main(tool_map[args.tool], rest)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    raise RuntimeError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
