"""Canonical in-memory animation graph model.

States reference blend trees by identity, so two transitions may share one
`BlendTree` instance. Clip references are excluded from equality: documents
only carry names.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from animgraph.ir.normalizer import normalize_token


class _TokenEnum(str, Enum):
    """Enum whose values are the canonical lowercase document tokens."""

    @classmethod
    def parse(cls, value) -> "_TokenEnum":
        """Map a document token to a member, falling back to the first member."""
        token = normalize_token(value)
        for member in cls:
            if member.value == token:
                return member
        return next(iter(cls))

    @classmethod
    def tokens(cls) -> Tuple[str, ...]:
        return tuple(member.value for member in cls)


class StateKind(_TokenEnum):
    ANIMATION = "animation"
    BLEND_TREE = "blendtree"


class Dimensionality(_TokenEnum):
    ONE_D = "oned"
    TWO_D = "twod"


class ValueKind(_TokenEnum):
    BOOL = "bool"
    FLOAT = "float"
    INT = "int"
    TRIGGER = "trigger"


class Comparison(_TokenEnum):
    EQUALS = "equals"
    GREATER = "greater"
    LESS = "less"
    NOT_EQUALS = "notequals"


DEFAULT_2D_PARAMETERS = ("Default_X", "Default_Y")


@dataclass(frozen=True)
class ClipRef:
    """Opaque reference to an animation clip returned by a resolver."""
    name: str
    path: str = ""


@dataclass
class Motion:
    animation_name: str = ""
    threshold: float = 0.0
    threshold_2d: Tuple[float, float] = (0.0, 0.0)
    clip: Optional[ClipRef] = field(default=None, compare=False)


@dataclass
class BlendTree:
    dimensionality: Dimensionality = Dimensionality.ONE_D
    parameter_names: List[str] = field(default_factory=list)
    motions: List[Motion] = field(default_factory=list)

    @property
    def expected_parameter_count(self) -> int:
        return 2 if self.dimensionality == Dimensionality.TWO_D else 1

    @property
    def parameter_x(self) -> Optional[str]:
        return self.parameter_names[0] if self.parameter_names else None

    @property
    def parameter_y(self) -> Optional[str]:
        return self.parameter_names[1] if len(self.parameter_names) > 1 else None


@dataclass
class State:
    kind: StateKind = StateKind.ANIMATION
    name: str = ""
    clip: Optional[ClipRef] = field(default=None, compare=False)
    blend_tree: Optional[BlendTree] = None

    @property
    def is_blend_tree(self) -> bool:
        return self.kind == StateKind.BLEND_TREE


@dataclass
class Condition:
    parameter_name: str = ""
    value_kind: ValueKind = ValueKind.BOOL
    bool_value: bool = False
    number_value: float = 0.0
    comparison: Comparison = Comparison.EQUALS

    def __post_init__(self) -> None:
        # Triggers carry no persisted value.
        if self.value_kind == ValueKind.TRIGGER:
            self.bool_value = False
            self.comparison = Comparison.EQUALS


@dataclass
class Transition:
    from_state: State
    to_state: State
    conditions: List[Condition] = field(default_factory=list)


@dataclass
class Graph:
    transitions: List[Transition] = field(default_factory=list)

    def states(self) -> List[State]:
        """Distinct states by name, first occurrence wins."""
        seen = {}
        for transition in self.transitions:
            for state in (transition.from_state, transition.to_state):
                seen.setdefault(state.name, state)
        return list(seen.values())

    def __len__(self) -> int:
        return len(self.transitions)
