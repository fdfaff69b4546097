"""URL slug helpers for collection names."""

from __future__ import annotations

import re
from collections.abc import Callable

__all__ = ["generate_slug", "unique_copy_slug"]

_STRIP_RE = re.compile(r"[^\w\s-]")
_SEPARATOR_RE = re.compile(r"[\s_-]+")


def generate_slug(name: str) -> str:
    """Derives a URL slug from a display name.

    Lowercases, drops punctuation, and collapses whitespace, underscores
    and dashes into single dashes.

    Args:
        name: The display name.

    Returns:
        The slug, e.g. ``"Summer Sale 2024!"`` -> ``"summer-sale-2024"``.
    """
    slug = _STRIP_RE.sub("", name.strip().lower())
    slug = _SEPARATOR_RE.sub("-", slug)
    return slug.strip("-")


def unique_copy_slug(base_slug: str, is_taken: Callable[[str], bool]) -> str:
    """Finds the first free slug for a duplicated collection.

    Tries ``<base>-copy``, then ``<base>-copy-2``, ``<base>-copy-3`` and so on.

    Args:
        base_slug: Slug of the collection being copied.
        is_taken: Returns True when a candidate slug is already used.

    Returns:
        The first candidate that is not taken.
    """
    candidate = f"{base_slug}-copy"
    counter = 2
    while is_taken(candidate):
        candidate = f"{base_slug}-copy-{counter}"
        counter += 1
    return candidate
