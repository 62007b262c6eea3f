from __future__ import annotations

import argparse
import random
from typing import List, Tuple

import talecal
from talecal.core.time import add_days, date_to_story_time, story_time_to_date
from talecal.core.types import CalendarConfig, CalendarDate


def parse_calendars(s: str) -> List[str]:
    # "gregorian,medieval" -> ["gregorian", "medieval"]
    return [x.strip() for x in s.split(",") if x.strip()]


def _key(d: CalendarDate) -> Tuple[int, int, int, int]:
    return (d.signed_year, d.day_of_year, d.hour, d.minute)


def roundtrip_test(
    config: CalendarConfig,
    N: int,
    span_years: int,
    seed: int,
    *,
    max_failures: int,
) -> int:
    random.seed(seed)
    failures = 0
    bound = span_years * config.minutes_per_year

    for _ in range(N):
        t0 = random.randint(-bound, bound)
        d = story_time_to_date(config, t0)
        back = date_to_story_time(config, d)
        if back != t0:
            failures += 1
            print("\nFAIL (decode/encode)")
            print("calendar:", config.id)
            print("t0:", t0)
            print("date:", d)
            print("back:", back)
            if failures >= max_failures:
                return failures

        a, b = random.randint(-500, 500), random.randint(-500, 500)
        lhs = add_days(config, add_days(config, t0, a), b)
        rhs = add_days(config, t0, a + b)
        if lhs != rhs:
            failures += 1
            print("\nFAIL (add_days composition)")
            print("calendar:", config.id, "t0:", t0, "a:", a, "b:", b)
            if failures >= max_failures:
                return failures

        t1 = t0 + random.randint(0, config.minutes_per_year)
        if _key(story_time_to_date(config, t1)) < _key(d):
            failures += 1
            print("\nFAIL (monotonicity)")
            print("calendar:", config.id, "t0:", t0, "t1:", t1)
            if failures >= max_failures:
                return failures

    return failures


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Random round-trip tests: story time -> date -> story time.")
    p.add_argument("--calendars", type=str, default="",
                   help="Comma-separated calendar list (default: all registered).")
    p.add_argument("--N", type=int, default=2000, help="Trials per calendar.")
    p.add_argument("--span-years", type=int, default=5000, help="Sample story times within +/- this many years.")
    p.add_argument("--seed", type=int, default=123, help="RNG seed.")
    p.add_argument("--max-failures", type=int, default=5, help="Stop after this many failures per calendar.")
    args = p.parse_args(argv)

    names = parse_calendars(args.calendars) if args.calendars else talecal.list_calendars()

    total_fail = 0
    for name in names:
        print(f"Testing {name} ...")
        config = talecal.get_calendar(name)
        total_fail += roundtrip_test(
            config, N=args.N, span_years=args.span_years, seed=args.seed, max_failures=args.max_failures
        )

    if total_fail == 0:
        print("All round-trip tests passed.")
        return 0

    print(f"Round-trip failures: {total_fail}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
