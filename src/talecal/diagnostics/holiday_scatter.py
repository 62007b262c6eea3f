#!/usr/bin/env python3
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import argparse

import talecal
from talecal.engines.calendar import CalendarEngine


def _need_numpy():
    try:
        import numpy as np
        return np
    except ImportError as e:
        raise RuntimeError('Need numpy. Install: pip install "talecal[diagnostics]"') from e


def _need_matplotlib():
    try:
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise RuntimeError('Need matplotlib. Install: pip install "talecal[diagnostics]"') from e


def rolling_median(np, y, win: int = 11):
    """Centered rolling median with edge padding."""
    if win < 3:
        return y.astype(float)
    if win % 2 == 0:
        win += 1
    k = win // 2
    ypad = np.pad(y, (k, k), mode="edge")
    out = np.empty_like(y, dtype=float)
    for i in range(len(y)):
        out[i] = float(np.median(ypad[i : i + win]))
    return out


@dataclass(frozen=True)
class Style:
    color: str
    marker: str
    size: float = 14.0


PALETTE = ("tab:blue", "tab:red", "tab:green", "tab:purple", "0.45")
MARKERS = ("o", "s", "^", "D", "_")


def build_series(np, eng: CalendarEngine, name: str, start_year: int, end_year: int) -> Tuple["np.ndarray", "np.ndarray"]:
    """Day of year of ``name`` for each year; NaN where the rule was skipped."""
    years = np.arange(start_year, end_year + 1, dtype=int)
    y = np.full(years.shape, np.nan, dtype=float)
    per_year = eng.config.days_per_year

    for i, Y in enumerate(years):
        t = eng.holidays(int(Y)).get(name)
        if t is None:
            continue
        d = eng.to_date(t)
        # spill-over into a neighbouring year stays on a continuous axis
        y[i] = float(d.day_of_year + (d.signed_year - int(Y)) * per_year)

    return years, y


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Scatter plot of moveable holiday dates across years.")
    p.add_argument("--calendar", default="medieval")
    p.add_argument("--config", default=None, help="JSON calendar file (overrides --calendar)")
    p.add_argument("--holidays", default="Easter", help="Comma list of holiday names (default: Easter).")
    p.add_argument("--start-year", type=int, default=1)
    p.add_argument("--end-year", type=int, default=300)
    p.add_argument("--show-trend", action="store_true")
    p.add_argument("--trend-win", type=int, default=11, help="Rolling median window (odd recommended).")
    p.add_argument("--outbase", default="holiday_scatter", help="Output base name (writes .png)")
    args = p.parse_args(argv)

    np = _need_numpy()
    plt = _need_matplotlib()

    config = talecal.load_calendar(args.config) if args.config else talecal.get_calendar(args.calendar)
    eng = CalendarEngine(config)
    names = [x.strip() for x in args.holidays.split(",") if x.strip()]

    plt.rcParams.update({
        "font.size": 10,
        "axes.labelsize": 11,
        "axes.titlesize": 12,
        "legend.fontsize": 10,
        "axes.linewidth": 0.8,
    })

    fig, ax = plt.subplots(figsize=(9.2, 4.8), constrained_layout=True)
    ax.set_axisbelow(True)
    ax.grid(True, which="major", color="0.88", linewidth=0.7)
    ax.minorticks_off()

    ax.set_xlabel(f"Year ({config.eras.positive})")
    ax.set_ylabel("Day of year")
    ax.set_title(f"{config.name}: holiday dates across years")

    for i, name in enumerate(names):
        st = Style(PALETTE[i % len(PALETTE)], MARKERS[i % len(MARKERS)])
        x, y = build_series(np, eng, name, args.start_year, args.end_year)
        ax.scatter(x, y, s=st.size, marker=st.marker, c=st.color, alpha=0.5, label=name)

        if args.show_trend:
            y_med = rolling_median(np, y, win=int(args.trend_win))
            ax.plot(x, y_med, color=st.color, linewidth=1.8, alpha=0.95)

    ax.legend(loc="center left", bbox_to_anchor=(1.02, 0.5), frameon=False)

    outbase = args.outbase
    fig.savefig(outbase + ".png", dpi=300)
    print(f"Saved: {outbase}.png")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
