"""Structural validator for animation graph documents.

Every rule is checked independently and every violation is reported, so a
document with N defects yields N diagnostics.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as RecordValidationError

from animgraph.ir.model import Comparison, Dimensionality, StateKind, ValueKind
from animgraph.ir.normalizer import normalize_token
from animgraph.ir.records import (
    SUPPORTED_VERSIONS,
    BlendTreeRecord,
    ConditionRecord,
    GraphDecodeError,
    StateRecord,
    load_payload,
)

VALID_STATE_TYPES = StateKind.tokens()
VALID_BLEND_TYPES = Dimensionality.tokens()
VALID_CONDITION_TYPES = ValueKind.tokens()
VALID_COMPARISONS = Comparison.tokens()

RecordT = TypeVar("RecordT", bound=BaseModel)


def _validate_version(version: Any, errors: List[str]) -> None:
    if version is None:
        return
    if isinstance(version, bool) or not isinstance(version, int) or version not in SUPPORTED_VERSIONS:
        supported = ", ".join(str(v) for v in SUPPORTED_VERSIONS)
        errors.append(f"Unsupported document version: {version!r}. Supported: {supported}.")


def _validate_state(
    state: Optional[StateRecord], errors: List[str], label: str, blend_tree_reported: bool = False
) -> None:
    if state is None:
        errors.append(f"{label} is missing.")
        return

    state_type = normalize_token(state.type)
    if state_type not in VALID_STATE_TYPES:
        errors.append(f"{label} has invalid type: {state.type}. Must be 'Animation' or 'BlendTree'.")

    if state_type == StateKind.ANIMATION.value and not state.animationname:
        errors.append(f"{label} is 'Animation' but missing animationName.")

    if state_type == StateKind.BLEND_TREE.value:
        if state.blendtree is None:
            if not blend_tree_reported:
                errors.append(f"{label} is 'BlendTree' but blendTree data is missing.")
        else:
            _validate_blend_tree(state.blendtree, errors, f"{label} BlendTree")


def _validate_blend_tree(tree: BlendTreeRecord, errors: List[str], label: str) -> None:
    blend_type = normalize_token(tree.blendtype)
    if blend_type not in VALID_BLEND_TYPES:
        errors.append(f"{label} has invalid blendType: {tree.blendtype}. Must be 'OneD' or 'TwoD'.")

    if blend_type == Dimensionality.ONE_D.value:
        if not tree.parametername:
            errors.append(f"{label} is missing parameterName.")
    elif not tree.parameternames:
        errors.append(f"{label} is missing parameterNames (required for TwoD).")

    for index, motion in enumerate(tree.motions or []):
        motion_label = f"{label} Motion[{index}]"
        if motion is None:
            errors.append(f"{motion_label} is missing.")
            continue
        if not motion.animationname:
            errors.append(f"{motion_label} is missing animationName.")
        if blend_type == Dimensionality.TWO_D.value and (
            motion.threshold2d is None or len(motion.threshold2d) != 2
        ):
            errors.append(f"{motion_label} is TwoD but has invalid threshold2D (must have exactly 2 values).")


def _validate_condition(condition: Optional[ConditionRecord], errors: List[str], label: str) -> None:
    if condition is None:
        errors.append(f"{label} is missing.")
        return
    if not condition.name:
        errors.append(f"{label} is missing name.")

    if normalize_token(condition.type) not in VALID_CONDITION_TYPES:
        errors.append(
            f"{label} '{condition.name}' has invalid type: {condition.type}. "
            "Must be 'Bool', 'Float', 'Int', or 'Trigger'."
        )

    if normalize_token(condition.comparison) not in VALID_COMPARISONS:
        errors.append(
            f"{label} '{condition.name}' has invalid comparison: {condition.comparison}. "
            "Must be 'Equals', 'Greater', 'Less', or 'NotEquals'."
        )


def _record(model: Type[RecordT], data: Any, label: str, errors: List[str]) -> Optional[RecordT]:
    """Parse one record, reporting each wrong-typed field as its own diagnostic."""
    try:
        return model.model_validate(data)
    except RecordValidationError as exc:
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "value"
            errors.append(f"{label} has invalid {field}: {error['msg']}.")
        return None


def _check_state(data: Any, errors: List[str], label: str) -> None:
    if data is None:
        _validate_state(None, errors, label)
        return
    if not isinstance(data, dict):
        _record(StateRecord, data, label, errors)
        return
    state = _record(StateRecord, {k: v for k, v in data.items() if k != "blendtree"}, label, errors)
    if state is None:
        return
    tree_data = data.get("blendtree")
    tree_reported = False
    if tree_data is not None:
        state.blendtree = _record(BlendTreeRecord, tree_data, f"{label} BlendTree", errors)
        tree_reported = state.blendtree is None
    _validate_state(state, errors, label, blend_tree_reported=tree_reported)


def _check_transition(data: Dict[str, Any], errors: List[str], label: str) -> None:
    _check_state(data.get("startstate"), errors, f"{label} StartState")
    _check_state(data.get("endstate"), errors, f"{label} EndState")

    conditions = data.get("conditions")
    if conditions is None:
        return
    if not isinstance(conditions, list):
        errors.append(f"{label} has invalid conditions: must be a list.")
        return
    for index, item in enumerate(conditions):
        cond_label = f"{label} Condition[{index}]"
        if item is None:
            _validate_condition(None, errors, cond_label)
            continue
        condition = _record(ConditionRecord, item, cond_label, errors)
        if condition is not None:
            _validate_condition(condition, errors, cond_label)


def validate_document(payload: Dict[str, Any]) -> List[str]:
    """Check a key-normalized document payload.

    Records are parsed one state or condition at a time, so a wrong-typed
    field is reported alongside every other violation instead of hiding them.
    """
    errors: List[str] = []
    _validate_version(payload.get("version"), errors)
    for index, transition in enumerate(payload.get("transitions") or []):
        label = f"Transition[{index}]"
        if transition is None:
            errors.append(f"{label} is missing.")
            continue
        _check_transition(transition, errors, label)
    return errors


def validate(text: str) -> Tuple[bool, List[str]]:
    """Validate a graph document.

    Returns (valid, diagnostics); valid is True iff diagnostics is empty.
    Only text that is not a JSON document yields a "JSON parsing error".
    """
    try:
        payload = load_payload(text)
    except GraphDecodeError as exc:
        return False, [f"JSON parsing error: {exc}"]
    errors = validate_document(payload)
    return (len(errors) == 0), errors
