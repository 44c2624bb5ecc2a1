"""Shared utilities for avalanchemap."""

from .geo import DEFAULT_CENTER, DEFAULT_ZOOM, extent_center
from .io import get_project_root

__all__ = [
    "get_project_root",
    "extent_center",
    "DEFAULT_CENTER",
    "DEFAULT_ZOOM",
]
