import json

import pytest

from animgraph.ir.codec import decode, encode
from animgraph.ir.model import ClipRef, Comparison, Condition, Dimensionality, StateKind, ValueKind
from animgraph.runtime import ConditionMode, InMemoryRuntimeGraph, RuntimeGraphError, extract_transitions, materialize
from animgraph.runtime.extract import condition_from_runtime, condition_to_runtime


class FakeResolver:
    def find(self, name, search_scope):
        return ClipRef(name=name, path=f"{search_scope}/{name}.anim")


ROUND_TRIP_DOCUMENT = json.dumps(
    {
        "transitions": [
            {
                "startState": {"type": "Animation", "animationName": "Idle"},
                "endState": {
                    "type": "BlendTree",
                    "animationName": "Locomotion",
                    "blendTree": {
                        "parameterName": "Speed",
                        "blendType": "OneD",
                        "motions": [
                            {"animationName": "Walk", "threshold": 0.0},
                            {"animationName": "Run", "threshold": 1.0},
                        ],
                    },
                },
                "conditions": [
                    {"name": "Grounded", "type": "Bool", "boolValue": True},
                    {"name": "Speed", "type": "Float", "numberValue": 0.5, "comparison": "Greater"},
                ],
            },
            {
                "startState": {"type": "Animation", "animationName": "Idle"},
                "endState": {"type": "Animation", "animationName": "Jump"},
                "conditions": [
                    {"name": "Jump", "type": "Trigger"},
                    {"name": "Weapon", "type": "Int", "numberValue": 3, "comparison": "NotEquals"},
                ],
            },
            {
                "startState": {
                    "type": "BlendTree",
                    "animationName": "Locomotion",
                    "blendTree": {
                        "parameterName": "Speed",
                        "blendType": "OneD",
                        "motions": [
                            {"animationName": "Walk", "threshold": 0.0},
                            {"animationName": "Run", "threshold": 1.0},
                        ],
                    },
                },
                "endState": {"type": "Animation", "animationName": "Idle"},
                "conditions": [
                    {"name": "Speed", "type": "Float", "numberValue": 0.5, "comparison": "Less"},
                ],
            },
        ]
    }
)


def _materialized():
    runtime = InMemoryRuntimeGraph()
    report = materialize(decode(ROUND_TRIP_DOCUMENT), runtime, resolver=FakeResolver(), search_scope="Assets")
    assert report.ok
    return runtime


def test_materialize_then_extract_preserves_graph():
    original = decode(ROUND_TRIP_DOCUMENT)
    extracted = extract_transitions(_materialized())
    assert extracted == original


def test_extracted_graph_encodes_to_equivalent_document():
    extracted = extract_transitions(_materialized())
    assert decode(encode(extracted)) == decode(ROUND_TRIP_DOCUMENT)


def test_extracted_blend_trees_are_shared():
    extracted = extract_transitions(_materialized())
    first = extracted.transitions[0].to_state
    last = extracted.transitions[2].from_state
    assert first.kind == StateKind.BLEND_TREE
    assert first.blend_tree is last.blend_tree


def test_extracted_animation_states_carry_clips():
    extracted = extract_transitions(_materialized())
    idle = extracted.transitions[0].from_state
    assert idle.clip == ClipRef(name="Idle", path="Assets/Idle.anim")


def test_state_without_motion_keeps_its_name():
    runtime = InMemoryRuntimeGraph()
    source = runtime.create_state("Empty")
    runtime.connect(source, runtime.create_state("Other"))
    extracted = extract_transitions(runtime)
    assert extracted.transitions[0].from_state.name == "Empty"
    assert extracted.transitions[0].from_state.clip is None


@pytest.mark.parametrize(
    "condition, expected",
    [
        (Condition("A", ValueKind.BOOL, bool_value=True), (ConditionMode.IF, 0.0, None)),
        (Condition("A", ValueKind.BOOL, bool_value=False), (ConditionMode.IF_NOT, 0.0, None)),
        (Condition("A", ValueKind.TRIGGER), (ConditionMode.IF, 0.0, None)),
        (
            Condition("A", ValueKind.FLOAT, number_value=2.0, comparison=Comparison.LESS),
            (ConditionMode.LESS, 2.0, None),
        ),
        (
            Condition("A", ValueKind.INT, number_value=4.0, comparison=Comparison.EQUALS),
            (ConditionMode.EQUALS, 4.0, None),
        ),
        (
            Condition("A", ValueKind.INT, number_value=4.0, comparison=Comparison.GREATER),
            (ConditionMode.GREATER, 4.0, None),
        ),
    ],
)
def test_condition_to_runtime(condition, expected):
    assert condition_to_runtime(condition) == expected


def test_float_equality_falls_back_to_greater_with_warning():
    condition = Condition("Aim", ValueKind.FLOAT, number_value=1.0, comparison=Comparison.NOT_EQUALS)
    mode, threshold, warning = condition_to_runtime(condition)
    assert mode == ConditionMode.GREATER
    assert threshold == 1.0
    assert "Float condition 'Aim'" in warning


def test_condition_from_runtime_uses_parameter_kind():
    assert condition_from_runtime(ConditionMode.IF, 0.0, "Jump", ValueKind.TRIGGER) == Condition(
        "Jump", ValueKind.TRIGGER
    )
    assert condition_from_runtime(ConditionMode.IF_NOT, 0.0, "Crouch") == Condition(
        "Crouch", ValueKind.BOOL, bool_value=False
    )
    assert condition_from_runtime(ConditionMode.GREATER, 3, "Weapon", ValueKind.INT) == Condition(
        "Weapon", ValueKind.INT, number_value=3.0, comparison=Comparison.GREATER
    )
    assert condition_from_runtime(ConditionMode.LESS, 0.5, "Speed") == Condition(
        "Speed", ValueKind.FLOAT, number_value=0.5, comparison=Comparison.LESS
    )
    assert condition_from_runtime(ConditionMode.NOT_EQUAL, 2, "Weapon") == Condition(
        "Weapon", ValueKind.INT, number_value=2.0, comparison=Comparison.NOT_EQUALS
    )


def test_runtime_graph_rejects_invalid_operations():
    runtime = InMemoryRuntimeGraph()
    state = runtime.create_state("Idle")
    with pytest.raises(RuntimeGraphError):
        runtime.create_state("Idle")
    with pytest.raises(RuntimeGraphError):
        runtime.create_blend_tree(state, "Idle_BlendTree", Dimensionality.TWO_D, "X")
    edge = runtime.connect(state, state)
    with pytest.raises(RuntimeGraphError):
        runtime.add_condition(edge, ConditionMode.IF, 0.0, "Unknown")


def test_summary_lists_transitions():
    summary = _materialized().summary()
    assert summary["states"] == ["Idle", "Locomotion", "Jump"]
    assert summary["parameters"]["Jump"] == "trigger"
    assert summary["transitions"][0] == {
        "from": "Idle",
        "to": "Locomotion",
        "conditions": [
            {"parameter": "Grounded", "mode": "if", "threshold": 0.0},
            {"parameter": "Speed", "mode": "greater", "threshold": 0.5},
        ],
    }
