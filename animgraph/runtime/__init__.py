"""Runtime graph boundary: builder capability, materializer and extraction."""
from animgraph.runtime.builder import ConditionMode, GraphBuilder, GraphExtractor, RuntimeGraphError
from animgraph.runtime.materializer import MaterializeReport, materialize
from animgraph.runtime.memory import InMemoryRuntimeGraph, extract_transitions

__all__ = [
    "ConditionMode",
    "GraphBuilder",
    "GraphExtractor",
    "InMemoryRuntimeGraph",
    "MaterializeReport",
    "RuntimeGraphError",
    "extract_transitions",
    "materialize",
]
