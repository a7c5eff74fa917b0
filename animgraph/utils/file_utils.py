"""File utilities."""
from __future__ import annotations

from pathlib import Path


def ensure_dir(path: str | Path) -> Path:
    """Ensure directory exists and return Path."""
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def read_text_file(path: str | Path) -> str:
    """Read a document as UTF-8, dropping a leading BOM.

    Falls back to UTF-8 with errors="ignore" when the strict read fails.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Missing file: {path}")
    try:
        text = p.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        text = p.read_text(encoding="utf-8", errors="ignore")
    return text.lstrip("\ufeff")
