"""Materialize a `Graph` into a runtime graph through a `GraphBuilder`.

Materialization is fail-soft: a malformed state, motion or condition is
reported and skipped, and the rest of the pass proceeds. The name-keyed state
cache lives for one pass only; passes targeting the same builder must be
serialized by the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from animgraph.animation_resolver import AnimationResolver
from animgraph.ir.model import DEFAULT_2D_PARAMETERS, ClipRef, Dimensionality, Graph, State, StateKind, ValueKind
from animgraph.runtime.builder import GraphBuilder, RuntimeGraphError
from animgraph.runtime.extract import condition_to_runtime

logger = logging.getLogger(__name__)


@dataclass
class MaterializeReport:
    states: List[str] = field(default_factory=list)
    reused: List[str] = field(default_factory=list)
    transitions: int = 0
    parameters: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings

    def to_dict(self) -> Dict[str, Any]:
        return {
            "states": list(self.states),
            "reused": list(self.reused),
            "transitions": self.transitions,
            "parameters": list(self.parameters),
            "warnings": list(self.warnings),
        }


class Materializer:
    """One materialization pass against a builder."""

    def __init__(self, builder: GraphBuilder, resolver: Optional[AnimationResolver] = None, search_scope: str = ""):
        self.builder = builder
        self.resolver = resolver
        self.search_scope = search_scope
        self.report = MaterializeReport()
        self._states: Dict[str, Any] = {}

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.report.warnings.append(message)

    def _resolve(self, name: str) -> Optional[ClipRef]:
        if self.resolver is None or not name:
            return None
        return self.resolver.find(name, self.search_scope)

    def _ensure_parameter(self, name: str, kind: ValueKind) -> bool:
        if self.builder.has_parameter(name):
            return True
        try:
            self.builder.add_parameter(name, kind)
        except RuntimeGraphError as exc:
            self._warn(f"Could not register parameter '{name}': {exc}")
            return False
        self.report.parameters.append(name)
        return True

    def state(self, state: State) -> Any:
        """Return the runtime handle for ``state``, creating it on first use.

        Returns None when the state cannot be created.
        """
        if state.name in self._states:
            return self._states[state.name]
        existing = self.builder.find_state(state.name) if state.name else None
        if existing is not None:
            self._states[state.name] = existing
            self.report.reused.append(state.name)
            return existing
        try:
            handle = self.builder.create_state(state.name)
        except RuntimeGraphError as exc:
            self._warn(f"Could not create state '{state.name}': {exc}")
            return None

        if state.kind == StateKind.BLEND_TREE:
            try:
                self._blend_tree(state, handle)
            except RuntimeGraphError as exc:
                self._warn(f"Could not build blend tree for state '{state.name}': {exc}")
        else:
            clip = state.clip or self._resolve(state.name)
            if clip is None:
                self._warn(f"Animation clip '{state.name}' not found; state created without motion.")
            else:
                try:
                    self.builder.set_state_clip(handle, clip)
                except RuntimeGraphError as exc:
                    self._warn(f"Could not assign clip '{clip.name}' to state '{state.name}': {exc}")

        self._states[state.name] = handle
        self.report.states.append(state.name)
        return handle

    def _blend_tree(self, state: State, handle: Any) -> None:
        tree = state.blend_tree
        if tree is None:
            self._warn(f"BlendTree state '{state.name}' has no blend tree data.")
            return

        if tree.dimensionality == Dimensionality.ONE_D:
            parameter_x, parameter_y = tree.parameter_x, None
            if not parameter_x:
                self._warn(f"1D blend tree for state '{state.name}' has no parameter name; blend skipped.")
                return
            parameters = [parameter_x]
        elif tree.dimensionality == Dimensionality.TWO_D:
            parameter_x = tree.parameter_x or DEFAULT_2D_PARAMETERS[0]
            parameter_y = tree.parameter_y or DEFAULT_2D_PARAMETERS[1]
            parameters = [parameter_x, parameter_y]
        else:
            self._warn(f"Unsupported blend type '{tree.dimensionality}' for state '{state.name}'.")
            return

        if not all([self._ensure_parameter(name, ValueKind.FLOAT) for name in parameters]):
            self._warn(f"Blend tree for state '{state.name}' skipped: its parameters could not be registered.")
            return
        blend = self.builder.create_blend_tree(
            handle, f"{state.name}_BlendTree", tree.dimensionality, parameter_x, parameter_y
        )
        label = "1D" if tree.dimensionality == Dimensionality.ONE_D else "2D"
        for motion in tree.motions:
            clip = motion.clip or self._resolve(motion.animation_name)
            if clip is None:
                self._warn(
                    f"Motion animation '{motion.animation_name}' is missing for state '{state.name}' in {label} blend tree."
                )
                continue
            try:
                if tree.dimensionality == Dimensionality.ONE_D:
                    self.builder.add_motion(blend, clip, threshold=motion.threshold)
                else:
                    self.builder.add_motion(blend, clip, position=motion.threshold_2d)
            except RuntimeGraphError as exc:
                self._warn(f"Motion '{motion.animation_name}' skipped for state '{state.name}': {exc}")

    def run(self, graph: Graph) -> MaterializeReport:
        """Materialize every transition of ``graph`` and return the report."""
        for index, transition in enumerate(graph.transitions):
            source = self.state(transition.from_state)
            destination = self.state(transition.to_state)
            if source is None or destination is None:
                self._warn(f"Transition[{index}] skipped: one of its states could not be created.")
                continue
            try:
                edge = self.builder.connect(source, destination)
            except RuntimeGraphError as exc:
                self._warn(f"Transition[{index}] could not be connected: {exc}")
                continue
            self.report.transitions += 1

            for condition in transition.conditions:
                if not condition.parameter_name:
                    self._warn(f"Transition[{index}] has a condition without a parameter name; skipped.")
                    continue
                if not self._ensure_parameter(condition.parameter_name, condition.value_kind):
                    self._warn(f"Transition[{index}] condition '{condition.parameter_name}' skipped.")
                    continue
                mode, threshold, warning = condition_to_runtime(condition)
                if warning:
                    self._warn(warning)
                try:
                    self.builder.add_condition(edge, mode, threshold, condition.parameter_name)
                except RuntimeGraphError as exc:
                    self._warn(f"Transition[{index}] condition '{condition.parameter_name}' skipped: {exc}")

        logger.info(
            "Materialized %d states and %d transitions (%d warnings)",
            len(self.report.states),
            self.report.transitions,
            len(self.report.warnings),
        )
        return self.report


def materialize(
    graph: Graph,
    builder: GraphBuilder,
    resolver: Optional[AnimationResolver] = None,
    search_scope: str = "",
) -> MaterializeReport:
    """Instantiate every state and transition of ``graph`` through ``builder``."""
    return Materializer(builder, resolver, search_scope).run(graph)
