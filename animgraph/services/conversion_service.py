"""Conversion pipelines: import a document, merge it with a live graph,
materialize it, and export a live graph back to text."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Tuple

from animgraph.animation_resolver import AnimationResolver
from animgraph.ir.codec import decode, encode
from animgraph.ir.model import Graph
from animgraph.reconciler import merge
from animgraph.runtime.builder import GraphBuilder, GraphExtractor
from animgraph.runtime.materializer import MaterializeReport, materialize
from animgraph.runtime.memory import extract_transitions
from animgraph.tools.file_storage import AssetStore
from animgraph.tools.graph_validator import validate

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    graph: Graph
    diagnostics: List[str] = field(default_factory=list)
    imported: int = 0
    existing: int = 0

    @property
    def valid(self) -> bool:
        return not self.diagnostics


def import_document(
    text: str,
    resolver: Optional[AnimationResolver] = None,
    search_scope: str = "",
    existing: Optional[Graph] = None,
    validate_first: bool = True,
) -> ImportResult:
    """Decode ``text`` and append ``existing`` transitions after it.

    Validation is informational: diagnostics are logged and returned but do
    not stop the import. `GraphDecodeError` propagates for unparseable text.
    """
    diagnostics: List[str] = []
    if validate_first:
        _, diagnostics = validate(text)
        for diagnostic in diagnostics:
            logger.warning("Validation: %s", diagnostic)

    imported = decode(text, resolver=resolver, search_scope=search_scope)
    graph = imported
    if existing is not None and existing.transitions:
        graph = merge(imported, existing)
    return ImportResult(
        graph=graph,
        diagnostics=diagnostics,
        imported=len(imported),
        existing=len(existing) if existing is not None else 0,
    )


def import_into_runtime(
    text: str,
    root: Any,
    extractor: GraphExtractor = extract_transitions,
    resolver: Optional[AnimationResolver] = None,
    search_scope: str = "",
    validate_first: bool = True,
) -> ImportResult:
    """Import ``text`` and merge it with the transitions already in ``root``."""
    existing = extractor(root)
    return import_document(
        text,
        resolver=resolver,
        search_scope=search_scope,
        existing=existing,
        validate_first=validate_first,
    )


def generate(
    text: str,
    builder: GraphBuilder,
    resolver: Optional[AnimationResolver] = None,
    search_scope: str = "",
    existing: Optional[Graph] = None,
) -> Tuple[ImportResult, MaterializeReport]:
    """Import ``text`` and materialize the result through ``builder``.

    Clips are resolved once, by the materializer; the imported graph is
    decoded without a resolver.
    """
    result = import_document(text, existing=existing)
    if not result.valid:
        logger.warning("Materializing a document with %d validation diagnostics", len(result.diagnostics))
    report = materialize(result.graph, builder, resolver=resolver, search_scope=search_scope)
    return result, report


def export_runtime(root: Any, extractor: GraphExtractor = extract_transitions) -> str:
    """Serialize the transitions of a live graph."""
    graph = extractor(root)
    logger.info("Exported %d transitions", len(graph))
    return encode(graph)


def save_transition_data(graph: Graph, store: AssetStore, location: str) -> Path:
    handle = store.create_persistent_object(graph, location)
    logger.info("Saved transition data to %s", handle)
    return handle
