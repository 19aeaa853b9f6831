"""Viewport panels for the tree listing and the lens view."""

from __future__ import annotations

from .lens_panel import LensPanel
from .tree_panel import DEAD_CENTER, FLEXIBLE_RANGE, TreePanel
from .viewport import FAST_SCROLL_STEP, SCROLL_STEP, ViewCoords, ViewPanel, compute_boundaries, visible_slice

__all__ = [
    "DEAD_CENTER",
    "FAST_SCROLL_STEP",
    "FLEXIBLE_RANGE",
    "LensPanel",
    "SCROLL_STEP",
    "TreePanel",
    "ViewCoords",
    "ViewPanel",
    "compute_boundaries",
    "visible_slice",
]
