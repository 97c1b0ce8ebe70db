"""
Page layout module.

Computes how many overlays fit vertically on a page and where they go.
"""

from keypad_overlay.layout.tiling import LayoutError, TilingLayout, compute_tiling

__all__ = ["LayoutError", "TilingLayout", "compute_tiling"]
