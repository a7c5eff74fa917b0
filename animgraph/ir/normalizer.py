"""Key and enumerant normalization for graph documents."""
from __future__ import annotations

import re
from typing import Any

# A quoted key token directly followed by a colon.
_KEY_TOKEN_RE = re.compile(r'"([A-Za-z0-9_]+)"(?=\s*:)')


def normalize_keys(text: str) -> str:
    """Lowercase every object key in ``text``; values are left untouched.

    Never raises: malformed text passes through and fails later at parse time.
    """
    if not text:
        return text or ""
    return _KEY_TOKEN_RE.sub(lambda m: f'"{m.group(1).lower()}"', text)


def normalize_token(value: Any) -> str:
    """Trim and lowercase an enumerant value so comparisons are case-insensitive."""
    if value is None:
        return ""
    return str(value).strip().lower()
