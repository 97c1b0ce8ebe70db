"""Geometry value types -- the vocabulary shared by builders and renderers.

Every value is an immutable dataclass.  All lengths are in **inches**,
page-relative, with the PDF convention of the origin at the bottom-left
and +Y pointing up.  Conversion to points happens once, in the page-level
transform.

Configuration records
---------------------
``RegistrationGeometry`` and ``OverlayGeometry`` check their intrinsic
invariants at construction and raise ``ValueError``.  Invariants that need
the page (the registration interior) are checked by
``RegistrationGeometry.interior_size()``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

MM_PER_IN = 25.4
PT_PER_IN = 72.0


def mm_to_in(mm: float) -> float:
    """Convert millimetres to inches."""
    return mm / MM_PER_IN


# ---------------------------------------------------------------------------
# Primitive values
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Coord:
    """A point in inches."""

    x: float
    y: float

    def offset(self, dx: float = 0.0, dy: float = 0.0) -> Coord:
        return Coord(self.x + dx, self.y + dy)


@dataclass(frozen=True, slots=True)
class Dimensions:
    """Width/height pair in inches."""

    width: float
    height: float


@dataclass(frozen=True, slots=True)
class Color:
    """RGB colour, components conventionally in [0, 1] (not enforced)."""

    r: float
    g: float
    b: float


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)


class FillRule(enum.Enum):
    NONZERO_WINDING = "nonzero"
    EVEN_ODD = "evenodd"


class HorizontalAlignment(enum.Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


# ---------------------------------------------------------------------------
# Configuration records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PageSize:
    """Physical page size."""

    name: str
    width_in: float
    height_in: float

    def __post_init__(self) -> None:
        if self.width_in <= 0 or self.height_in <= 0:
            raise ValueError(
                f"page {self.name!r} must have positive size, got "
                f"{self.width_in} x {self.height_in} in"
            )


LETTER = PageSize("letter", 8.5, 11.0)


@dataclass(frozen=True, slots=True)
class RegistrationGeometry:
    """Cut-area insets and registration mark sizes.

    Parameters
    ----------
    inset_left_in, inset_right_in, inset_top_in, inset_bottom_in : float
        Distance from each page edge to the cut area.
    square_size_in : float
        Side of the filled square at the top-left corner.
    line_length_in : float
        Arm length of the two right-angle marks.
    line_width_in : float
        Stroke width used for all marks.
    """

    inset_left_in: float
    inset_right_in: float
    inset_top_in: float
    inset_bottom_in: float

    square_size_in: float
    line_length_in: float
    line_width_in: float

    def __post_init__(self) -> None:
        for name in ("inset_left_in", "inset_right_in", "inset_top_in", "inset_bottom_in"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        for name in ("square_size_in", "line_length_in", "line_width_in"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0, got {getattr(self, name)}")

    def interior_size(self, page_width_in: float, page_height_in: float) -> Dimensions:
        """Size of the cut area on a page.

        Raises
        ------
        ValueError
            If the insets leave no positive interior.
        """
        width = page_width_in - self.inset_left_in - self.inset_right_in
        height = page_height_in - self.inset_top_in - self.inset_bottom_in
        if width <= 0 or height <= 0:
            raise ValueError(
                f"registration insets leave no interior on a "
                f"{page_width_in} x {page_height_in} in page"
            )
        return Dimensions(width, height)


@dataclass(frozen=True, slots=True)
class OverlayGeometry:
    """Physical layout of one keypad overlay.

    The keypad is a 4 x 10 grid.  ``key_row_1_offset_in`` is the distance
    from the overlay top edge to the top edge of the first key row.
    """

    width_in: float
    height_in: float
    corner_radius_in: float

    key_col_pitch_in: float
    key_row_pitch_in: float
    key_row_1_offset_in: float

    key_width_in: float
    key_height_in: float
    key_corner_radius_in: float

    def __post_init__(self) -> None:
        if self.width_in <= 0 or self.height_in <= 0:
            raise ValueError(
                f"overlay size must be positive, got {self.width_in} x {self.height_in}"
            )
        if self.key_width_in <= 0 or self.key_height_in <= 0:
            raise ValueError(
                f"key size must be positive, got {self.key_width_in} x {self.key_height_in}"
            )
        if not self.key_width_in < self.key_col_pitch_in:
            raise ValueError(
                f"key_width_in ({self.key_width_in}) must be < "
                f"key_col_pitch_in ({self.key_col_pitch_in})"
            )
        if not self.key_height_in < self.key_row_pitch_in:
            raise ValueError(
                f"key_height_in ({self.key_height_in}) must be < "
                f"key_row_pitch_in ({self.key_row_pitch_in})"
            )
        _check_radius(
            "corner_radius_in", self.corner_radius_in, self.width_in, self.height_in
        )
        _check_radius(
            "key_corner_radius_in",
            self.key_corner_radius_in,
            self.key_width_in,
            self.key_height_in,
        )

    @property
    def key_dimensions(self) -> Dimensions:
        return Dimensions(self.key_width_in, self.key_height_in)


def _check_radius(name: str, radius: float, width: float, height: float) -> None:
    if radius < 0:
        raise ValueError(f"{name} must be >= 0, got {radius}")
    if radius > min(width, height) / 2.0:
        raise ValueError(
            f"{name} ({radius}) exceeds half of the shorter side "
            f"({min(width, height) / 2.0})"
        )
