"""
Geometry value types.

Defines points, sizes, colours and the two configuration records as
immutable dataclasses.  All lengths are inches.
"""

from keypad_overlay.geometry.types import (
    BLACK,
    LETTER,
    MM_PER_IN,
    PT_PER_IN,
    WHITE,
    Color,
    Coord,
    Dimensions,
    FillRule,
    HorizontalAlignment,
    OverlayGeometry,
    PageSize,
    RegistrationGeometry,
    mm_to_in,
)

__all__ = [
    "BLACK",
    "LETTER",
    "MM_PER_IN",
    "PT_PER_IN",
    "WHITE",
    "Color",
    "Coord",
    "Dimensions",
    "FillRule",
    "HorizontalAlignment",
    "OverlayGeometry",
    "PageSize",
    "RegistrationGeometry",
    "mm_to_in",
]
