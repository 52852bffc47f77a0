"""Repository naming rules.

Names end up in URLs (``https://{handle}.{domain}/{name}/``) and in hosting
API paths, so every name passes through sanitize_name before use.
"""

from __future__ import annotations

import re
from collections.abc import Collection

__all__ = ["MAX_NAME_LENGTH", "display_url", "is_related", "sanitize_name", "unique_name"]

MAX_NAME_LENGTH = 100

_SEPARATORS = re.compile(r"[\s_]+")
_ILLEGAL = re.compile(r"[^a-z0-9.-]")
_DASH_RUNS = re.compile(r"-{2,}")


def sanitize_name(raw: str) -> str:
    """Return a lowercase, URL-safe repository name.

    Idempotent: sanitize_name(sanitize_name(x)) == sanitize_name(x).
    May return "" when nothing usable remains.
    """
    s = raw.strip().lower()
    s = _SEPARATORS.sub("-", s)
    s = _ILLEGAL.sub("", s)
    s = _DASH_RUNS.sub("-", s)
    s = s.strip("-.")
    s = s[:MAX_NAME_LENGTH]
    return s.strip("-.")


def is_related(base_name: str, repository_name: str) -> bool:
    """True if repository_name looks like a publish of base_name.

    Matches exact names, auto-incremented names (``mygame-2``) and any name
    containing the base (``old-mygame-archive``), case-insensitively.
    """
    base = sanitize_name(base_name)
    if not base:
        return False
    repo = repository_name.lower()

    if repo == base:
        return True
    if repo.startswith(base + "-"):
        return True
    return base in repo


def display_url(creator_handle: str, domain: str, repository_name: str) -> str:
    return f"https://{creator_handle}.{domain}/{repository_name}/"


def unique_name(base_name: str, taken: Collection[str]) -> str:
    """First of base, base-1, base-2, ... not present in taken (case-insensitive)."""
    base = sanitize_name(base_name)
    lowered = {t.lower() for t in taken}
    if base not in lowered:
        return base
    n = 1
    while f"{base}-{n}" in lowered:
        n += 1
    return f"{base}-{n}"
