"""Text <-> Graph codec.

`decode` never raises on structural defects: unknown enum tokens fall back to
the first enumerant and missing fields get defaults. Run the validator first
when strict behaviour is needed. Only unparseable documents raise
`GraphDecodeError`.
"""
from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from animgraph.ir.model import (
    DEFAULT_2D_PARAMETERS,
    BlendTree,
    Comparison,
    Condition,
    Dimensionality,
    Graph,
    Motion,
    State,
    StateKind,
    Transition,
    ValueKind,
)
from animgraph.ir.records import (
    CURRENT_VERSION,
    BlendTreeRecord,
    ConditionRecord,
    GraphDecodeError,
    MotionRecord,
    StateRecord,
    parse_document,
)
from animgraph.utils.config import settings

if TYPE_CHECKING:
    from animgraph.animation_resolver import AnimationResolver

logger = logging.getLogger(__name__)

__all__ = ["BlendTreeCache", "GraphDecodeError", "decode", "encode", "to_document"]


class BlendTreeCache:
    """Blend trees decoded so far, scoped to a single decode call.

    ``key_policy="state"`` keys a tree by the name of the state that owns it.
    ``key_policy="end_state"`` keys every blend-tree state of a transition by
    that transition's end-state name (legacy behaviour).
    """

    POLICIES = ("state", "end_state")

    def __init__(self, key_policy: str = "state"):
        if key_policy not in self.POLICIES:
            raise ValueError(f"Unknown dedup key policy: {key_policy}")
        self.key_policy = key_policy
        self._trees: Dict[str, BlendTree] = {}

    def key_for(self, state_name: str, end_state_name: str) -> str:
        if self.key_policy == "end_state":
            return end_state_name
        return state_name

    def get(self, key: str) -> Optional[BlendTree]:
        if not key:
            return None
        return self._trees.get(key)

    def put(self, key: str, tree: BlendTree) -> None:
        # Unnamed states never share a tree.
        if key:
            self._trees[key] = tree

    def __contains__(self, key: str) -> bool:
        return bool(key) and key in self._trees

    def __len__(self) -> int:
        return len(self._trees)


class _Decoder:
    def __init__(self, cache: BlendTreeCache, resolver: Optional[AnimationResolver], search_scope: str):
        self.cache = cache
        self.resolver = resolver
        self.search_scope = search_scope

    def state(self, record: Optional[StateRecord], end_state_name: str) -> State:
        if record is None:
            return State(kind=StateKind.ANIMATION, name="")
        state = State(kind=StateKind.parse(record.type), name=record.animationname or "")
        if state.kind != StateKind.BLEND_TREE:
            return state

        key = self.cache.key_for(state.name, end_state_name)
        cached = self.cache.get(key)
        if cached is not None:
            state.blend_tree = cached
        elif record.blendtree is not None:
            state.blend_tree = self.blend_tree(record.blendtree)
            self.cache.put(key, state.blend_tree)
        return state

    def blend_tree(self, record: BlendTreeRecord) -> BlendTree:
        dimensionality = Dimensionality.parse(record.blendtype)
        if dimensionality == Dimensionality.TWO_D:
            if record.parameternames is None:
                names = list(DEFAULT_2D_PARAMETERS)
            else:
                names = [name or "" for name in record.parameternames]
        else:
            names = [record.parametername] if record.parametername else []

        tree = BlendTree(dimensionality=dimensionality, parameter_names=names)
        if not record.motions:
            logger.warning("Blend tree has no motions")
            return tree
        for motion_record in record.motions:
            if motion_record is None:
                continue
            tree.motions.append(self.motion(motion_record, dimensionality))
        return tree

    def motion(self, record: MotionRecord, dimensionality: Dimensionality) -> Motion:
        motion = Motion(animation_name=record.animationname or "")
        if dimensionality == Dimensionality.ONE_D:
            motion.threshold = float(record.threshold or 0.0)
        elif record.threshold2d is not None and len(record.threshold2d) == 2:
            motion.threshold_2d = (float(record.threshold2d[0]), float(record.threshold2d[1]))
        else:
            logger.warning(
                "Invalid threshold2d for animation '%s': expected 2 values, got %s. Using (0, 0).",
                motion.animation_name,
                "null" if record.threshold2d is None else len(record.threshold2d),
            )
        if self.resolver is not None and motion.animation_name:
            motion.clip = self.resolver.find(motion.animation_name, self.search_scope)
        return motion

    @staticmethod
    def condition(record: ConditionRecord) -> Condition:
        return Condition(
            parameter_name=record.name or "",
            value_kind=ValueKind.parse(record.type),
            bool_value=bool(record.boolvalue),
            number_value=float(record.numbervalue or 0.0),
            comparison=Comparison.parse(record.comparison),
        )


def decode(
    text: str,
    resolver: Optional[AnimationResolver] = None,
    search_scope: str = "",
    dedup_key: Optional[str] = None,
) -> Graph:
    """Parse a graph document into a `Graph`.

    Motions are resolved through ``resolver`` by animation name; an
    unresolved name leaves ``Motion.clip`` empty.
    """
    document = parse_document(text)
    if dedup_key is None:
        dedup_key = settings.dedup_key
    decoder = _Decoder(BlendTreeCache(dedup_key), resolver, search_scope)

    graph = Graph()
    for index, record in enumerate(document.transitions or []):
        if record is None:
            logger.warning("Skipping empty transition record at index %d", index)
            continue
        end_state_name = (record.endstate.animationname or "") if record.endstate else ""
        from_state = decoder.state(record.startstate, end_state_name)
        to_state = decoder.state(record.endstate, end_state_name)
        conditions = [decoder.condition(c) for c in (record.conditions or []) if c is not None]
        graph.transitions.append(Transition(from_state=from_state, to_state=to_state, conditions=conditions))
    logger.debug("Decoded %d transitions (%d shared blend trees)", len(graph), len(decoder.cache))
    return graph


def _blend_tree_document(tree: BlendTree) -> Dict[str, Any]:
    two_d = tree.dimensionality == Dimensionality.TWO_D
    return {
        "parametername": None if two_d else tree.parameter_x,
        "parameternames": list(tree.parameter_names) if two_d else None,
        "blendtype": tree.dimensionality.value,
        "motions": [
            {
                "animationname": motion.animation_name,
                "threshold": 0.0 if two_d else motion.threshold,
                "threshold2d": [motion.threshold_2d[0], motion.threshold_2d[1]] if two_d else None,
            }
            for motion in tree.motions
        ],
    }


def _state_document(state: State) -> Dict[str, Any]:
    blend_tree = None
    if state.kind == StateKind.BLEND_TREE and state.blend_tree is not None:
        blend_tree = _blend_tree_document(state.blend_tree)
    return {
        "type": state.kind.value,
        "animationname": state.name,
        "blendtree": blend_tree,
    }


def _condition_document(condition: Condition) -> Dict[str, Any]:
    return {
        "name": condition.parameter_name,
        "type": condition.value_kind.value,
        "boolvalue": condition.bool_value,
        "numbervalue": condition.number_value,
        "comparison": condition.comparison.value,
    }


def to_document(graph: Graph) -> Dict[str, Any]:
    transitions: List[Dict[str, Any]] = []
    for transition in graph.transitions:
        transitions.append({
            "startstate": _state_document(transition.from_state),
            "endstate": _state_document(transition.to_state),
            "conditions": [_condition_document(c) for c in transition.conditions],
        })
    return {"version": CURRENT_VERSION, "transitions": transitions}


def encode(graph: Graph, indent: Optional[int] = 2) -> str:
    return json.dumps(to_document(graph), indent=indent)
