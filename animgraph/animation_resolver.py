"""Animation resolver: locates animation clips by name inside a search folder.

Assumptions:
- A clip is a file whose extension is listed in `settings.clip_extensions`;
  its name is the file stem.
- Names containing `__preview__` are engine-generated previews and ignored.
- Lookups are case-insensitive. An unresolved name is a soft failure: the
  resolver logs it and returns None.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Sequence

from animgraph.ir.model import ClipRef
from animgraph.utils.config import settings

logger = logging.getLogger(__name__)

PREVIEW_MARKER = "__preview__"
CLIP_SUFFIX = ".anim"


class AnimationResolver(Protocol):
    def find(self, name: str, search_scope: str) -> Optional[ClipRef]:
        ...


def _is_path_like(name: str) -> bool:
    return "/" in name or "\\" in name or name.endswith(CLIP_SUFFIX)


class DirectoryAnimationResolver:
    """Resolve clips against files under a folder on disk."""

    def __init__(self, extensions: Optional[Sequence[str]] = None):
        self.extensions = tuple(e.lower() for e in (extensions or settings.clip_extensions))

    def _clip_files(self, folder: Path) -> List[Path]:
        files = [
            p for p in folder.rglob("*")
            if p.is_file() and p.suffix.lower() in self.extensions and PREVIEW_MARKER not in p.stem
        ]
        return sorted(files)

    def _find_path(self, name: str, folder: Path) -> Optional[ClipRef]:
        relative = name.replace("\\", "/")
        candidate = Path(relative)
        if not candidate.is_absolute() and not relative.startswith(folder.as_posix().rstrip("/") + "/"):
            candidate = folder / candidate
        if not candidate.suffix:
            candidate = candidate.with_suffix(CLIP_SUFFIX)
        if candidate.is_file():
            logger.debug("Found animation at specific path: %s", candidate)
            return ClipRef(name=candidate.stem, path=candidate.as_posix())
        logger.warning("Failed to find animation at path: %s", candidate)
        return None

    def find(self, name: str, search_scope: str) -> Optional[ClipRef]:
        if not search_scope:
            logger.error("find: animation folder path is empty.")
            return None
        if not name:
            logger.error("find: animation name is empty.")
            return None
        folder = Path(search_scope)
        if not folder.is_dir():
            logger.error("find: the specified folder does not exist: %s", search_scope)
            return None

        if _is_path_like(name):
            return self._find_path(name, folder)

        wanted = name.lower()
        matches = [p for p in self._clip_files(folder) if p.stem.lower() == wanted]
        if not matches:
            logger.warning("Animation clip '%s' not found in folder: %s", name, search_scope)
            return None
        if len(matches) > 1:
            logger.warning(
                "Found %d animations named '%s'; using %s. Consider using full paths.",
                len(matches),
                name,
                matches[0].as_posix(),
            )
        return ClipRef(name=matches[0].stem, path=matches[0].as_posix())

    def scan(self, folder: str) -> List[str]:
        """List the clip names available under ``folder``."""
        path = Path(folder)
        if not folder or not path.is_dir():
            logger.error("scan: invalid folder path: %s", folder)
            return []
        names = [p.stem for p in self._clip_files(path)]
        logger.info("Found %d animation(s) in folder: %s", len(names), folder)
        return names


def scan_clips(folder: str, extensions: Optional[Sequence[str]] = None) -> List[str]:
    return DirectoryAnimationResolver(extensions).scan(folder)


def export_catalog(names: Iterable[str]) -> str:
    """Serialize a clip catalog as ``{"animations": [...]}``."""
    return json.dumps({"animations": list(names)}, indent=2)
