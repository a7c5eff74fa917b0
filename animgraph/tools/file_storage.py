"""File storage tool: the asset store used to read and persist graph documents."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Protocol

from animgraph.ir.codec import encode
from animgraph.ir.model import Graph
from animgraph.utils.config import settings
from animgraph.utils.file_utils import ensure_dir, read_text_file


class AssetStore(Protocol):
    def read_text(self, location: str) -> str:
        ...

    def write_text(self, location: str, text: str) -> Any:
        ...

    def create_persistent_object(self, graph: Graph, location: str) -> Any:
        ...


class FileAssetStore:
    """Asset store rooted at a directory; locations are relative to it."""

    def __init__(self, base_dir: Optional[str] = None):
        self.base_dir = Path(base_dir or settings.output_dir)

    def _path(self, location: str) -> Path:
        path = Path(location)
        return path if path.is_absolute() else self.base_dir / path

    def read_text(self, location: str) -> str:
        return read_text_file(self._path(location))

    def write_text(self, location: str, text: str) -> str:
        path = self._path(location)
        ensure_dir(path.parent)
        path.write_text(text, encoding="utf-8")
        return str(path)

    def create_persistent_object(self, graph: Graph, location: str) -> Path:
        """Persist ``graph`` as a transition data document and return its path."""
        return Path(self.write_text(location, encode(graph)))

