"""Normalise user-supplied titles into filesystem-safe names."""

from __future__ import annotations

import re
from typing import Optional

from .errors import InvalidNameError

DEFAULT_NOTE_TITLE = "New Note"
DEFAULT_RENAME_TITLE = "Untitled"

# Letters, digits, whitespace, hyphen, underscore and period survive.
_DISALLOWED_RE = re.compile(r"[^a-zA-Z0-9\s\-_.]")
_DOT_RUN_RE = re.compile(r"\.{2,}")


def sanitize_name(raw: Optional[str], fallback: Optional[str] = None) -> str:
    """Return ``raw`` reduced to the allowed character set.

    Runs of periods collapse to one and leading periods are dropped, so
    the result can never be ``..`` or a hidden entry.  An empty result is
    replaced by ``fallback``; with no fallback it raises
    :class:`InvalidNameError`.
    """
    cleaned = _DISALLOWED_RE.sub("", str(raw or ""))
    cleaned = _DOT_RUN_RE.sub(".", cleaned).strip()
    cleaned = cleaned.lstrip(".").strip()
    if cleaned:
        return cleaned
    if fallback is None:
        raise InvalidNameError("Invalid folder name provided.")
    return fallback
