"""Condition mapping between the graph model and runtime condition modes."""
from __future__ import annotations

from typing import Optional, Tuple

from animgraph.ir.model import Comparison, Condition, ValueKind
from animgraph.runtime.builder import ConditionMode

_FLOAT_MODES = {
    Comparison.GREATER: ConditionMode.GREATER,
    Comparison.LESS: ConditionMode.LESS,
}

_INT_MODES = {
    Comparison.EQUALS: ConditionMode.EQUALS,
    Comparison.NOT_EQUALS: ConditionMode.NOT_EQUAL,
    Comparison.GREATER: ConditionMode.GREATER,
    Comparison.LESS: ConditionMode.LESS,
}


def condition_to_runtime(condition: Condition) -> Tuple[ConditionMode, float, Optional[str]]:
    """Map a condition to (mode, threshold, warning).

    Float parameters only support greater/less; anything else falls back to
    GREATER and comes back with a warning.
    """
    kind = condition.value_kind
    if kind == ValueKind.BOOL:
        return (ConditionMode.IF if condition.bool_value else ConditionMode.IF_NOT), 0.0, None
    if kind == ValueKind.TRIGGER:
        return ConditionMode.IF, 0.0, None
    if kind == ValueKind.FLOAT:
        mode = _FLOAT_MODES.get(condition.comparison)
        if mode is None:
            warning = (
                f"Float condition '{condition.parameter_name}' cannot use comparison "
                f"'{condition.comparison.value}'; using 'greater'."
            )
            return ConditionMode.GREATER, condition.number_value, warning
        return mode, condition.number_value, None
    return _INT_MODES.get(condition.comparison, ConditionMode.EQUALS), condition.number_value, None


def condition_from_runtime(
    mode: ConditionMode,
    threshold: float,
    parameter: str,
    parameter_kind: Optional[ValueKind] = None,
) -> Condition:
    """Inverse of `condition_to_runtime`, using the registered parameter kind when known."""
    if parameter_kind == ValueKind.TRIGGER:
        return Condition(parameter_name=parameter, value_kind=ValueKind.TRIGGER)
    if mode in (ConditionMode.IF, ConditionMode.IF_NOT):
        return Condition(parameter_name=parameter, value_kind=ValueKind.BOOL, bool_value=mode == ConditionMode.IF)
    if mode in (ConditionMode.GREATER, ConditionMode.LESS):
        kind = ValueKind.INT if parameter_kind == ValueKind.INT else ValueKind.FLOAT
        comparison = Comparison.GREATER if mode == ConditionMode.GREATER else Comparison.LESS
    else:
        kind = ValueKind.FLOAT if parameter_kind == ValueKind.FLOAT else ValueKind.INT
        comparison = Comparison.EQUALS if mode == ConditionMode.EQUALS else Comparison.NOT_EQUALS
    return Condition(parameter_name=parameter, value_kind=kind, number_value=float(threshold), comparison=comparison)
