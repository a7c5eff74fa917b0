"""In-memory runtime graph.

Implements the `GraphBuilder` capability and transition extraction without a
real animation engine, for dry runs and tests.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from animgraph.ir.model import BlendTree, ClipRef, Dimensionality, Graph, Motion, State, StateKind, Transition, ValueKind
from animgraph.runtime.builder import ConditionMode, RuntimeGraphError
from animgraph.runtime.extract import condition_from_runtime


@dataclass
class RuntimeMotion:
    clip: ClipRef
    threshold: float = 0.0
    position: Tuple[float, float] = (0.0, 0.0)


@dataclass
class RuntimeBlendTree:
    name: str
    dimensionality: Dimensionality
    parameter_x: str
    parameter_y: Optional[str] = None
    children: List[RuntimeMotion] = field(default_factory=list)


@dataclass
class RuntimeCondition:
    mode: ConditionMode
    threshold: float
    parameter: str


@dataclass(eq=False)
class RuntimeTransition:
    source: "RuntimeState"
    destination: "RuntimeState"
    conditions: List[RuntimeCondition] = field(default_factory=list)
    has_exit_time: bool = False


@dataclass(eq=False)
class RuntimeState:
    name: str
    motion: Union[ClipRef, RuntimeBlendTree, None] = None
    transitions: List[RuntimeTransition] = field(default_factory=list)


class InMemoryRuntimeGraph:
    """A single-layer state machine held in plain Python objects."""

    def __init__(self) -> None:
        self.states: List[RuntimeState] = []
        self.parameters: Dict[str, ValueKind] = {}

    def find_state(self, name: str) -> Optional[RuntimeState]:
        return next((s for s in self.states if s.name == name), None)

    def create_state(self, name: str) -> RuntimeState:
        if not name:
            raise RuntimeGraphError("State name must not be empty")
        if self.find_state(name) is not None:
            raise RuntimeGraphError(f"State '{name}' already exists")
        state = RuntimeState(name=name)
        self.states.append(state)
        return state

    def set_state_clip(self, state: RuntimeState, clip: ClipRef) -> None:
        state.motion = clip

    def create_blend_tree(
        self,
        state: RuntimeState,
        name: str,
        dimensionality: Dimensionality,
        parameter_x: str,
        parameter_y: Optional[str] = None,
    ) -> RuntimeBlendTree:
        if dimensionality == Dimensionality.TWO_D and not parameter_y:
            raise RuntimeGraphError(f"Blend tree '{name}' needs a Y parameter")
        tree = RuntimeBlendTree(name=name, dimensionality=dimensionality, parameter_x=parameter_x, parameter_y=parameter_y)
        state.motion = tree
        return tree

    def add_motion(
        self,
        tree: RuntimeBlendTree,
        clip: ClipRef,
        threshold: float = 0.0,
        position: Tuple[float, float] = (0.0, 0.0),
    ) -> None:
        tree.children.append(RuntimeMotion(clip=clip, threshold=threshold, position=position))

    def has_parameter(self, name: str) -> bool:
        return name in self.parameters

    def add_parameter(self, name: str, kind: ValueKind) -> None:
        self.parameters[name] = kind

    def connect(self, source: RuntimeState, destination: RuntimeState) -> RuntimeTransition:
        transition = RuntimeTransition(source=source, destination=destination)
        source.transitions.append(transition)
        return transition

    def add_condition(self, transition: RuntimeTransition, mode: ConditionMode, threshold: float, parameter: str) -> None:
        if parameter not in self.parameters:
            raise RuntimeGraphError(f"Unknown parameter '{parameter}'")
        transition.conditions.append(RuntimeCondition(mode=mode, threshold=threshold, parameter=parameter))

    def summary(self) -> Dict[str, Any]:
        return {
            "states": [s.name for s in self.states],
            "transitions": [
                {
                    "from": t.source.name,
                    "to": t.destination.name,
                    "conditions": [
                        {"parameter": c.parameter, "mode": c.mode.value, "threshold": c.threshold}
                        for c in t.conditions
                    ],
                }
                for s in self.states
                for t in s.transitions
            ],
            "parameters": {name: kind.value for name, kind in self.parameters.items()},
        }


def _blend_tree_from_runtime(tree: RuntimeBlendTree) -> BlendTree:
    two_d = tree.dimensionality == Dimensionality.TWO_D
    names = [tree.parameter_x, tree.parameter_y or ""] if two_d else [tree.parameter_x]
    motions = [
        Motion(
            animation_name=child.clip.name,
            threshold=0.0 if two_d else child.threshold,
            threshold_2d=child.position if two_d else (0.0, 0.0),
            clip=child.clip,
        )
        for child in tree.children
    ]
    return BlendTree(dimensionality=tree.dimensionality, parameter_names=names, motions=motions)


def extract_transitions(root: InMemoryRuntimeGraph) -> Graph:
    """Read every state's outgoing transitions back into a `Graph`.

    Runtime blend trees referenced from several transitions come back as one
    shared `BlendTree` instance.
    """
    trees: Dict[int, BlendTree] = {}

    def to_state(runtime_state: RuntimeState) -> State:
        motion = runtime_state.motion
        if isinstance(motion, RuntimeBlendTree):
            if id(motion) not in trees:
                trees[id(motion)] = _blend_tree_from_runtime(motion)
            return State(kind=StateKind.BLEND_TREE, name=runtime_state.name, blend_tree=trees[id(motion)])
        name = motion.name if motion is not None else runtime_state.name
        return State(kind=StateKind.ANIMATION, name=name, clip=motion)

    graph = Graph()
    for runtime_state in root.states:
        for transition in runtime_state.transitions:
            conditions = [
                condition_from_runtime(c.mode, c.threshold, c.parameter, root.parameters.get(c.parameter))
                for c in transition.conditions
            ]
            graph.transitions.append(
                Transition(
                    from_state=to_state(runtime_state),
                    to_state=to_state(transition.destination),
                    conditions=conditions,
                )
            )
    return graph
