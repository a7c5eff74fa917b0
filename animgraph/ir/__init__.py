"""Graph model, document records and the text<->model codec."""
from animgraph.ir.codec import BlendTreeCache, GraphDecodeError, decode, encode, to_document
from animgraph.ir.model import (
    BlendTree,
    ClipRef,
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
from animgraph.ir.normalizer import normalize_keys, normalize_token

__all__ = [
    "BlendTree",
    "BlendTreeCache",
    "ClipRef",
    "Comparison",
    "Condition",
    "Dimensionality",
    "Graph",
    "GraphDecodeError",
    "Motion",
    "State",
    "StateKind",
    "Transition",
    "ValueKind",
    "decode",
    "encode",
    "normalize_keys",
    "normalize_token",
    "to_document",
]
