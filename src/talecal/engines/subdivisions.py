"""
talecal.engines.subdivisions
----------------------------
Resolves which unit of every subdivision a given day falls into.

Two independent mechanisms:
  * hierarchical nodes divide their parent's span (the year at top level) and
    are resolved by a depth-first walk that consumes unit lengths in order;
  * cycles repeat forever regardless of year boundaries and are resolved by
    floor-modulo on the absolute day count, anchored so that day 1 of year 0
    sits on ``epoch_starts_on_unit``.

Spans are not re-validated here. A day past the end of a node's units resolves
into the node's last unit (see ``core.validate.validate(strict=True)``).
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from ..core.time import absolute_day
from ..core.types import (
    DEFAULT_LABEL_FORMAT,
    CalendarConfig,
    CalendarSubdivision,
    ResolvedUnit,
)

Span = Tuple[int, int]  # (first_day, last_day), 1-based and inclusive


# ---------------------------------------------------------
# Tree helpers
# ---------------------------------------------------------

def find_subdivision(config: CalendarConfig, sub_id: str) -> Optional[CalendarSubdivision]:
    """Depth-first lookup of a subdivision by id."""
    return _find(config.subdivisions, sub_id)


def _find(nodes: Sequence[CalendarSubdivision], sub_id: str) -> Optional[CalendarSubdivision]:
    for node in nodes:
        if node.id == sub_id:
            return node
        found = _find(node.subdivisions, sub_id)
        if found is not None:
            return found
    return None


def iter_subdivisions(config: CalendarConfig) -> Iterator[CalendarSubdivision]:
    """Every node of the tree, pre-order."""
    stack = list(reversed(config.subdivisions))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.subdivisions))


def iter_cycles(config: CalendarConfig) -> Iterator[CalendarSubdivision]:
    return (node for node in iter_subdivisions(config) if node.is_cycle)


# ---------------------------------------------------------
# Labels
# ---------------------------------------------------------

def unit_label(node: CalendarSubdivision, unit_index: int) -> str:
    if node.use_custom_labels is not False and 0 <= unit_index < len(node.labels):
        custom = node.labels[unit_index]
        if custom.strip():
            return custom
    fmt = node.label_format or DEFAULT_LABEL_FORMAT
    return fmt.replace("{n}", str(unit_index + 1)).replace("{name}", node.name)


# ---------------------------------------------------------
# Cycles
# ---------------------------------------------------------

def cycle_index(cycle: CalendarSubdivision, abs_day: int) -> int:
    """0-based position of ``abs_day`` within ``cycle`` (day 0 = year 0, day 1)."""
    if cycle.count < 1:
        return 0
    # Python's % is floor-modulo, so negative days wrap correctly
    return (abs_day + cycle.epoch_starts_on_unit) % cycle.count


def cycle_index_on(config: CalendarConfig, cycle: CalendarSubdivision, year: int, day_of_year: int) -> int:
    return cycle_index(cycle, absolute_day(config, year, day_of_year))


# ---------------------------------------------------------
# Hierarchical walk
# ---------------------------------------------------------

def _locate(node: CalendarSubdivision, offset: int) -> Tuple[int, int]:
    """Return (unit_index, days consumed before that unit) for a 0-based offset."""
    if offset < 0 or node.count < 1:
        return 0, 0
    if node.days_per_unit_fixed:
        idx = min(offset // node.days_per_unit_fixed, node.count - 1)
        return idx, idx * node.days_per_unit_fixed
    if node.days_per_unit:
        consumed = 0
        last = min(node.count, len(node.days_per_unit)) - 1
        for i in range(last + 1):
            length = node.days_per_unit[i]
            if consumed + length > offset or i == last:
                return i, consumed
            consumed += length
    return 0, 0


def _walk(
    nodes: Sequence[CalendarSubdivision],
    offset: int,
    abs_day: int,
    out: Dict[str, ResolvedUnit],
) -> None:
    for node in nodes:
        if node.is_cycle:
            idx = cycle_index(node, abs_day)
            out[node.id] = ResolvedUnit(idx, unit_label(node, idx))
            continue
        idx, consumed = _locate(node, offset)
        out[node.id] = ResolvedUnit(idx, unit_label(node, idx))
        if node.subdivisions:
            _walk(node.subdivisions, offset - consumed, abs_day, out)


def resolve_subdivisions(config: CalendarConfig, day_of_year: int, year: int) -> Dict[str, ResolvedUnit]:
    """
    Map every subdivision id to the unit containing ``day_of_year`` of the
    signed ``year``.
    """
    out: Dict[str, ResolvedUnit] = {}
    _walk(config.subdivisions, day_of_year - 1, absolute_day(config, year, day_of_year), out)
    return out


# ---------------------------------------------------------
# Spans (inverse of the walk)
# ---------------------------------------------------------

def _iter_units(nodes: Sequence[CalendarSubdivision], start: int) -> Iterator[Tuple[CalendarSubdivision, int, int, int]]:
    """Yield (node, unit_index, start_offset, length) for every hierarchical unit."""
    for node in nodes:
        if node.is_cycle:
            continue
        pos = start
        for i in range(node.count):
            length = node.unit_length(i)
            yield node, i, pos, length
            yield from _iter_units(node.subdivisions, pos)
            pos += length


def unit_spans(config: CalendarConfig, sub_id: str) -> List[Span]:
    """
    Day-of-year ranges of every occurrence of a hierarchical subdivision.

    Top-level subdivisions have ``count`` occurrences. A nested subdivision
    repeats inside each parent unit, and its occurrences are numbered
    sequentially across the whole year (quarter 2, week 1 is occurrence 14 of
    a 13-week quarter).
    """
    return [
        (pos + 1, pos + length)
        for node, _, pos, length in _iter_units(config.subdivisions, 0)
        if node.id == sub_id and length > 0
    ]


def unit_span(config: CalendarConfig, sub_id: str, unit: int) -> Optional[Span]:
    """Span of the 1-based occurrence ``unit``, or None when it does not exist."""
    spans = unit_spans(config, sub_id)
    if 1 <= unit <= len(spans):
        return spans[unit - 1]
    return None


def day_of_subdivision(config: CalendarConfig, sub_id: str, day_of_year: int) -> int:
    """1-based day within the occurrence of ``sub_id`` that holds ``day_of_year``."""
    spans = unit_spans(config, sub_id)
    if not spans:
        return 1
    for first, last in spans:
        if first <= day_of_year <= last:
            return day_of_year - first + 1
    # beyond the configured units: count on from the nearest edge unit
    first = spans[0][0] if day_of_year < spans[0][0] else spans[-1][0]
    return day_of_year - first + 1
