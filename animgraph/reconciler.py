"""Merge freshly imported transitions with those extracted from a live graph."""
from __future__ import annotations

import logging

from animgraph.ir.model import Graph

logger = logging.getLogger(__name__)


def merge(imported: Graph, existing: Graph) -> Graph:
    """Return imported transitions followed by existing ones.

    Append-only: transitions are neither de-duplicated nor checked for
    conflicts, and states are not reconciled across the two graphs. Both
    inputs are left unmodified; the result shares their transition objects.
    """
    merged = Graph(transitions=list(imported.transitions) + list(existing.transitions))
    logger.info(
        "Merged %d imported and %d existing transitions",
        len(imported.transitions),
        len(existing.transitions),
    )
    return merged
