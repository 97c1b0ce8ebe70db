"""Vertical tiling of overlays on a page.

Given the page height, the top and bottom margins and the height of one
overlay, work out how many overlays stack in the available height with
equal gaps between them, and where each one starts.

Distances here are measured **down from the top of the page** (the way
a sheet is laid out by hand).  The page composer converts them to the
PDF bottom-left origin.

Algorithm::

    available = page_height - top_inset - bottom_inset
    count     = floor(available / overlay_height)
    gap       = (available - count * overlay_height) / (count - 1)
    if count >= 2 and gap < minimum_gap - _COUNT_TOLERANCE: count -= 1 and recompute gap
    offset_i  = i * (overlay_height + gap)

A single overlay needs no gap; it is placed at offset 0 with ``gap == 0``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Absorbs binary rounding in available / overlay_height (6.3 / 2.1 < 3)
# and in the gap left by an exact fit
_COUNT_TOLERANCE = 1e-9


class LayoutError(Exception):
    """Raised when overlays cannot be tiled on the page."""

    pass


@dataclass(frozen=True)
class TilingLayout:
    """Result of a tiling computation.

    Attributes
    ----------
    count : int
        Number of overlays on the page (>= 1).
    gap : float
        Vertical space between neighbouring overlays; 0 for one overlay.
    top : float
        Distance from the page top to the top margin boundary.
    available : float
        Height between the margins.
    overlay_height : float
        Height of one overlay.
    offsets : tuple[float, ...]
        Top of each overlay, relative to the top margin boundary.
    """

    count: int
    gap: float
    top: float
    available: float
    overlay_height: float
    offsets: tuple[float, ...]

    def tops(self) -> tuple[float, ...]:
        """Top of each overlay measured from the page top."""
        return tuple(self.top + offset for offset in self.offsets)

    def bottoms(self) -> tuple[float, ...]:
        """Bottom of each overlay measured from the page top."""
        return tuple(t + self.overlay_height for t in self.tops())


def _gap(available: float, count: int, overlay_height: float) -> float:
    if count < 2:
        return 0.0
    return (available - count * overlay_height) / (count - 1)


def compute_tiling(
    page_height: float,
    top_inset: float,
    bottom_inset: float,
    overlay_height: float,
    minimum_gap: float = 0.1,
) -> TilingLayout:
    """Stack as many overlays as fit with at least *minimum_gap* between them.

    Parameters
    ----------
    page_height : float
        Full page height.
    top_inset, bottom_inset : float
        Margins at the top and bottom of the page.
    overlay_height : float
        Height of one overlay.
    minimum_gap : float
        Smallest acceptable gap between neighbours.

    Returns
    -------
    TilingLayout
        Count, gap and per-overlay offsets.

    Raises
    ------
    LayoutError
        If *overlay_height* is not positive or no overlay fits.
    """
    if overlay_height <= 0:
        raise LayoutError(f"overlay height must be positive, got {overlay_height}")

    available = page_height - top_inset - bottom_inset
    count = math.floor(available / overlay_height + _COUNT_TOLERANCE)
    if count < 1:
        raise LayoutError(
            f"overlay height {overlay_height:g} exceeds available height {available:g}"
        )

    gap = _gap(available, count, overlay_height)
    if count >= 2 and gap < minimum_gap - _COUNT_TOLERANCE:
        logger.debug(
            "Gap %.4g below minimum %.4g with %d overlays, dropping one",
            gap, minimum_gap, count,
        )
        count -= 1
        gap = _gap(available, count, overlay_height)

    offsets = tuple(i * (overlay_height + gap) for i in range(count))

    logger.info(
        "Tiling %d overlay(s): available %.4g, gap %.4g", count, available, gap
    )
    return TilingLayout(
        count=count,
        gap=gap,
        top=top_inset,
        available=available,
        overlay_height=overlay_height,
        offsets=offsets,
    )
