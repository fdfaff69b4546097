"""Centralized path resolution for application resources.

Locates the bundled resources directory whether running from a source
checkout or from an installed wheel.
"""

from __future__ import annotations

import sys
from pathlib import Path

__all__ = ["get_resources_dir"]

_resources_dir: Path | None = None


def get_resources_dir() -> Path:
    """Get the path to the resources directory.

    Checks, in order:
    1. storecollections/resources/ next to this package (dev + pip install)
    2. sys.prefix/resources (system-wide data install)

    Returns:
        Path to the resources directory.

    Raises:
        FileNotFoundError: If resources directory cannot be found.
    """
    global _resources_dir
    if _resources_dir is not None:
        return _resources_dir

    # paths.py is at storecollections/utils/paths.py -> parent.parent = storecollections/
    candidate = Path(__file__).resolve().parent.parent / "resources"
    if candidate.is_dir():
        _resources_dir = candidate
        return _resources_dir

    candidate = Path(sys.prefix) / "resources"
    if candidate.is_dir():
        _resources_dir = candidate
        return _resources_dir

    raise FileNotFoundError(
        "Could not locate resources directory. Searched: storecollections/resources/, sys.prefix/resources/"
    )
