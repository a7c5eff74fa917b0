"""Capabilities the core needs from an animation runtime graph."""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Protocol, Tuple

from animgraph.ir.model import ClipRef, Dimensionality, Graph, ValueKind


class ConditionMode(str, Enum):
    """How a runtime transition condition tests its parameter."""
    IF = "if"
    IF_NOT = "ifnot"
    GREATER = "greater"
    LESS = "less"
    EQUALS = "equals"
    NOT_EQUAL = "notequal"


class RuntimeGraphError(RuntimeError):
    """Raised by a builder when one item cannot be created."""


class GraphBuilder(Protocol):
    """Create/find/connect operations issued by the materializer.

    Handles returned by a builder are opaque to the core.
    """

    def find_state(self, name: str) -> Any:
        """Return the existing state called ``name`` or None."""
        ...

    def create_state(self, name: str) -> Any:
        """Create a new state; raises `RuntimeGraphError` if it cannot."""
        ...

    def set_state_clip(self, state: Any, clip: ClipRef) -> None:
        """Use ``clip`` as the single motion of ``state``."""
        ...

    def create_blend_tree(
        self,
        state: Any,
        name: str,
        dimensionality: Dimensionality,
        parameter_x: str,
        parameter_y: Optional[str] = None,
    ) -> Any:
        """Attach a blend tree to ``state`` and return its handle."""
        ...

    def add_motion(
        self,
        tree: Any,
        clip: ClipRef,
        threshold: float = 0.0,
        position: Tuple[float, float] = (0.0, 0.0),
    ) -> None:
        """Add a child motion at a 1D ``threshold`` or 2D ``position``."""
        ...

    def has_parameter(self, name: str) -> bool:
        """Whether a parameter called ``name`` is registered."""
        ...

    def add_parameter(self, name: str, kind: ValueKind) -> None:
        """Register a parameter of the given kind."""
        ...

    def connect(self, source: Any, destination: Any) -> Any:
        """Create a transition from ``source`` to ``destination`` and return it."""
        ...

    def add_condition(self, transition: Any, mode: ConditionMode, threshold: float, parameter: str) -> None:
        """Add a condition on ``parameter`` to ``transition``."""
        ...


class GraphExtractor(Protocol):
    def __call__(self, root: Any) -> Graph:
        """Read the transitions of ``root`` back into a `Graph`."""
        ...
