"""
talecal.core.validate
---------------------
Shape checks for CalendarConfig. Violations are returned as strings; callers
(the editor, the CLI) decide whether they block a save.

The computation engines never call this: they assume a valid config and stay
total on invalid ones.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Sequence, Set, Tuple

from .types import (
    HOLIDAY_RULE_TYPES,
    HOLIDAY_STEP_TYPES,
    CalendarConfig,
    CalendarSubdivision,
    ComputedHoliday,
    FindInCycleStep,
    FixedStep,
    LastCycleDayHoliday,
    NthCycleDayHoliday,
    OffsetFromHoliday,
)


def _is_blank(s: Optional[str]) -> bool:
    return not (s and s.strip())


def _check_node(
    node: CalendarSubdivision,
    path: str,
    parent_lengths: Tuple[int, ...],
    seen: Set[str],
    strict: bool,
    out: List[str],
) -> None:
    has_id, has_name = not _is_blank(node.id), not _is_blank(node.name)
    if not has_id and not has_name:
        # an empty row from the editor; filtered out before persistence
        return
    if has_id != has_name:
        out.append(f"{path}: subdivision needs both an id and a name")
    where = f"{path} ('{node.id or node.name}')"
    if has_id:
        if node.id in seen:
            out.append(f"{where}: duplicate subdivision id")
        seen.add(node.id)

    if node.count < 1:
        out.append(f"{where}: count must be at least 1 (got {node.count})")
    if len(node.labels) > max(node.count, 0):
        out.append(f"{where}: {len(node.labels)} labels for {node.count} units")

    if node.is_cycle:
        if node.days_per_unit is not None or node.days_per_unit_fixed is not None:
            out.append(f"{where}: a cycle cannot define days per unit")
        if node.subdivisions:
            out.append(f"{where}: a cycle cannot contain nested subdivisions")
        if node.count >= 1 and not 0 <= node.epoch_starts_on_unit < node.count:
            out.append(f"{where}: epochStartsOnUnit must be in 0..{node.count - 1}")
        return

    fixed, per_unit = node.days_per_unit_fixed, node.days_per_unit
    if fixed is None and per_unit is None:
        out.append(f"{where}: needs daysPerUnitFixed or daysPerUnit")
    elif fixed is not None and per_unit is not None:
        out.append(f"{where}: daysPerUnitFixed and daysPerUnit are mutually exclusive")
    elif fixed is not None and fixed < 1:
        out.append(f"{where}: daysPerUnitFixed must be at least 1")
    elif per_unit is not None:
        if len(per_unit) != node.count:
            out.append(f"{where}: daysPerUnit has {len(per_unit)} entries for {node.count} units")
        if any(n < 1 for n in per_unit):
            out.append(f"{where}: every daysPerUnit entry must be at least 1")
        elif strict and len(per_unit) == node.count:
            _check_span(node, where, parent_lengths, out)
    if strict and fixed is not None and per_unit is None and fixed >= 1:
        _check_span(node, where, parent_lengths, out)

    lengths = node.unit_lengths()
    for i, child in enumerate(node.subdivisions):
        _check_node(child, f"{path}.subdivisions[{i}]", lengths, seen, strict, out)


def _check_span(node: CalendarSubdivision, where: str, parent_lengths: Tuple[int, ...], out: List[str]) -> None:
    total = sum(node.unit_lengths())
    for k, span in enumerate(parent_lengths, start=1):
        if total != span:
            suffix = "" if len(parent_lengths) == 1 else f" (parent unit {k})"
            out.append(f"{where}: units cover {total} days but the parent span is {span}{suffix}")
            return


def _check_references(config: CalendarConfig, ids: Set[str], cycles: Set[str], out: List[str]) -> None:
    defined: Set[str] = set()
    for i, rule in enumerate(config.holidays):
        where = f"holidays[{i}] ('{rule.name}')"
        sub_id = getattr(rule, "subdivision_id", None)
        if sub_id is not None and (sub_id not in ids or sub_id in cycles):
            out.append(f"{where}: unknown subdivision '{sub_id}'")
        if isinstance(rule, (NthCycleDayHoliday, LastCycleDayHoliday)) and rule.cycle_id not in cycles:
            out.append(f"{where}: unknown cycle '{rule.cycle_id}'")
        if isinstance(rule, OffsetFromHoliday) and rule.base_holiday not in defined:
            out.append(f"{where}: base holiday '{rule.base_holiday}' must appear earlier in the list")
        if isinstance(rule, ComputedHoliday):
            for step in rule.steps:
                if isinstance(step, FixedStep) and (step.subdivision_id not in ids or step.subdivision_id in cycles):
                    out.append(f"{where}: step references unknown subdivision '{step.subdivision_id}'")
                if isinstance(step, FindInCycleStep) and step.cycle_id not in cycles:
                    out.append(f"{where}: step references unknown cycle '{step.cycle_id}'")
        defined.add(rule.name)


def validate(config: CalendarConfig, *, strict: bool = False) -> List[str]:
    """
    Return a list of human-readable violations (empty when the config is valid).

    ``strict`` additionally checks that every hierarchical node's unit lengths
    add up to the span it divides, and that holiday rules reference existing
    subdivisions, cycles and earlier holidays.
    """
    out: List[str] = []
    if _is_blank(config.id):
        out.append("calendar: id is required")
    if _is_blank(config.name):
        out.append("calendar: name is required")
    for field in ("days_per_year", "hours_per_day", "minutes_per_hour"):
        if getattr(config, field) < 1:
            out.append(f"calendar: {field} must be at least 1")
    if config.display.hour_format not in ("12", "24"):
        out.append(f"display: hourFormat must be '12' or '24' (got {config.display.hour_format!r})")

    seen: Set[str] = set()
    for i, node in enumerate(config.subdivisions):
        _check_node(node, f"subdivisions[{i}]", (config.days_per_year,), seen, strict, out)

    for i, rule in enumerate(config.holidays):
        if not isinstance(rule, HOLIDAY_RULE_TYPES):
            out.append(f"holidays[{i}]: unknown rule type {type(rule).__name__}")
            continue
        if _is_blank(rule.name):
            out.append(f"holidays[{i}]: name is required")
        if isinstance(rule, NthCycleDayHoliday) and not 1 <= rule.n <= 5:
            out.append(f"holidays[{i}] ('{rule.name}'): n must be in 1..5")
        if isinstance(rule, ComputedHoliday):
            if not rule.steps:
                out.append(f"holidays[{i}] ('{rule.name}'): computed holiday needs at least one step")
            for j, step in enumerate(rule.steps):
                if not isinstance(step, HOLIDAY_STEP_TYPES):
                    out.append(f"holidays[{i}].steps[{j}]: unknown step type {type(step).__name__}")

    if strict:
        nodes = _flatten(config.subdivisions)
        ids = {n.id for n in nodes if n.id}
        cycles = {n.id for n in nodes if n.id and n.is_cycle}
        _check_references(config, ids, cycles, out)
    return out


def _flatten(nodes: Sequence[CalendarSubdivision]) -> List[CalendarSubdivision]:
    out: List[CalendarSubdivision] = []
    for n in nodes:
        out.append(n)
        out.extend(_flatten(n.subdivisions))
    return out


def _prune(nodes: Sequence[CalendarSubdivision]) -> Tuple[CalendarSubdivision, ...]:
    return tuple(
        replace(n, subdivisions=_prune(n.subdivisions))
        for n in nodes
        if not _is_blank(n.id) and not _is_blank(n.name)
    )


def prune_incomplete(config: CalendarConfig) -> CalendarConfig:
    """Drop subdivisions missing an id or a name (what the editor does before saving)."""
    return replace(config, subdivisions=_prune(config.subdivisions))
