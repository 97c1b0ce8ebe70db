"""Content stream builder -- drawing operations to PDF operator text.

A ``ContentStream`` accumulates PDF graphics operators as text while
tracking the *current point* of the path being built.  Optionally the
stream is wrapped in a save/restore pair (``q`` ... ``Q``); every
emission is then spliced in front of the closing ``Q``, so finished
streams can be nested into one another by plain concatenation without
breaking the outer wrapper::

    page = ContentStream()                 # "q Q\\n"
    page.transform(72, 0, 0, 72, 0, 0)     # "q 72 0 0 72 0 0 cm Q\\n"
    page.append(marks.getvalue())          # nested "q ... Q\\n"

Number format:
    All numbers use the compact general format (``format(v, "g")``), so
    output is deterministic and free of trailing zeros.

Corners:
    Only axis-aligned 90-degree arcs are supported.  Each one becomes a
    single cubic Bezier whose control points sit ``r * 4 * (sqrt(2) - 1) / 3``
    from the endpoints.
"""

from __future__ import annotations

import logging
import math
from io import StringIO
from typing import Callable

from keypad_overlay.geometry.types import (
    Color,
    Coord,
    Dimensions,
    FillRule,
    HorizontalAlignment,
)

logger = logging.getLogger(__name__)

TextMeasure = Callable[[str, str, float], float]
"""``measure(text, font_name, size) -> width`` in the stream's user units."""

# Distance of a Bezier control point from its endpoint, per unit radius
KAPPA = 4.0 * (math.sqrt(2.0) - 1.0) / 3.0

_TRAILER = "Q\n"


class ContentStreamError(Exception):
    """Raised when a drawing operation cannot be emitted."""

    pass


class PathStateError(ContentStreamError):
    """Raised when a path operation needs a current point and there is none."""

    pass


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _g(*values: float) -> str:
    """Format numbers with the compact general format, space separated."""
    return " ".join(format(v, "g") for v in values)


def escape_text(text: str) -> str:
    """Escape a string for use inside a PDF literal ``( ... )``."""
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def quarter_circle_controls(
    p0: Coord,
    p3: Coord,
    clockwise: bool = True,
) -> tuple[Coord, Coord]:
    """Control points of the cubic approximating a 90-degree arc.

    Parameters
    ----------
    p0 : Coord
        Arc start (current point).
    p3 : Coord
        Arc end.  ``|p0.x - p3.x|`` must equal ``|p0.y - p3.y|``; this is
        assumed, not checked.
    clockwise : bool
        Direction of travel from *p0* to *p3*.

    Returns
    -------
    tuple[Coord, Coord]
        ``(p1, p2)``: *p1* is offset from *p0* and *p2* from *p3*, each
        along the axis that keeps the curve tangent to the straight edge
        meeting that endpoint.
    """
    radius = abs(p0.x - p3.x)
    c = radius * KAPPA

    if clockwise:
        if p0.x < p3.x and p0.y > p3.y:
            # first quadrant: top edge into right edge
            return p0.offset(dx=c), p3.offset(dy=c)
        if p0.x < p3.x and p0.y < p3.y:
            # second quadrant: left edge into top edge
            return p0.offset(dy=c), p3.offset(dx=-c)
        if p0.x > p3.x and p0.y < p3.y:
            # third quadrant: bottom edge into left edge
            return p0.offset(dx=-c), p3.offset(dy=-c)
        # fourth quadrant: right edge into bottom edge
        return p0.offset(dy=-c), p3.offset(dx=c)

    if p0.x > p3.x and p0.y < p3.y:
        # first quadrant: right edge into top edge
        return p0.offset(dy=c), p3.offset(dx=c)
    if p0.x > p3.x and p0.y > p3.y:
        # second quadrant: top edge into left edge
        return p0.offset(dx=-c), p3.offset(dy=c)
    if p0.x < p3.x and p0.y > p3.y:
        # third quadrant: left edge into bottom edge
        return p0.offset(dy=-c), p3.offset(dx=-c)
    # fourth quadrant: bottom edge into right edge
    return p0.offset(dx=c), p3.offset(dy=-c)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class ContentStream:
    """Accumulate PDF content stream operators.

    Parameters
    ----------
    push_graphics_state : bool
        Wrap everything in ``q`` ... ``Q``.  Emissions are spliced in
        before the closing ``Q``.
    measure : TextMeasure | None
        Text width function used for CENTER and RIGHT alignment.  Without
        one every string measures zero wide, so CENTER and RIGHT place
        text exactly like LEFT.

    Notes
    -----
    Every emitting method returns ``self`` so calls can be chained.
    The close variants of the path-painting operators forget the current
    point; the plain stroke and fill variants keep it.
    """

    def __init__(
        self,
        push_graphics_state: bool = True,
        measure: TextMeasure | None = None,
    ) -> None:
        self._body = StringIO()
        self._trailer = ""
        if push_graphics_state:
            self._body.write("q ")
            self._trailer = _TRAILER
        self._measure = measure
        self._have_last: bool = False
        self._last: Coord = Coord(0.0, 0.0)

    # ------------------------------------------------------------------
    # Buffer
    # ------------------------------------------------------------------

    def append(self, text: str) -> ContentStream:
        """Splice already formatted operator text before the trailer."""
        self._body.write(text)
        return self

    def getvalue(self) -> str:
        """Finished stream text, including the closing ``Q`` if wrapped."""
        return self._body.getvalue() + self._trailer

    def __str__(self) -> str:
        return self.getvalue()

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    @property
    def current_point(self) -> Coord | None:
        """Current point, or ``None`` when no open path exists."""
        return self._last if self._have_last else None

    def reset_cursor(self) -> ContentStream:
        """Forget the current point."""
        self._have_last = False
        return self

    def _require_current_point(self, op: str) -> Coord:
        if not self._have_last:
            raise PathStateError(f"{op}() origin unknown: no current point")
        return self._last

    def _set_current_point(self, p: Coord) -> None:
        self._last = p
        self._have_last = True

    # ------------------------------------------------------------------
    # Graphics state
    # ------------------------------------------------------------------

    def set_color_space(self, color_space: str, fill: bool, stroke: bool) -> ContentStream:
        if fill:
            self.append(f"/{color_space} cs ")
        if stroke:
            self.append(f"/{color_space} CS ")
        return self

    def set_color(self, color: Color, fill: bool, stroke: bool) -> ContentStream:
        if fill:
            self.append(f"{_g(color.r, color.g, color.b)} sc ")
        if stroke:
            self.append(f"{_g(color.r, color.g, color.b)} SC ")
        return self

    def set_line_width(self, width: float) -> ContentStream:
        return self.append(f"{_g(width)} w ")

    def transform(
        self, a: float, b: float, c: float, d: float, e: float, f: float
    ) -> ContentStream:
        """Concatenate a matrix onto the current transformation (``cm``)."""
        return self.append(f"{_g(a, b, c, d, e, f)} cm ")

    def translate(self, dx: float, dy: float) -> ContentStream:
        return self.transform(1, 0, 0, 1, dx, dy)

    # ------------------------------------------------------------------
    # Path construction
    # ------------------------------------------------------------------

    def move_to(self, dest: Coord) -> ContentStream:
        self.append(f"{_g(dest.x, dest.y)} m ")
        self._set_current_point(dest)
        return self

    def line_to(self, dest: Coord) -> ContentStream:
        self.append(f"{_g(dest.x, dest.y)} l ")
        self._set_current_point(dest)
        return self

    def arc_to(self, dest: Coord, clockwise: bool = True) -> ContentStream:
        """Append a 90-degree arc from the current point to *dest*.

        Raises
        ------
        PathStateError
            If there is no current point.
        """
        origin = self._require_current_point("arc_to")
        p1, p2 = quarter_circle_controls(origin, dest, clockwise)
        self.append(f"{_g(p1.x, p1.y, p2.x, p2.y, dest.x, dest.y)} c\n")
        self._set_current_point(dest)
        return self

    def rect(self, dimensions: Dimensions) -> ContentStream:
        """Trace a rectangle whose top-left corner is the current point.

        Raises
        ------
        PathStateError
            If there is no current point.
        """
        origin = self._require_current_point("rect")
        right = origin.x + dimensions.width
        bottom = origin.y - dimensions.height

        self.line_to(Coord(right, origin.y))      # top
        self.line_to(Coord(right, bottom))        # right
        self.line_to(Coord(origin.x, bottom))     # bottom
        self.line_to(origin)                      # left
        return self

    def rounded_rect(self, dimensions: Dimensions, radius: float) -> ContentStream:
        """Trace a rounded rectangle whose top-left corner is the current point.

        The path runs clockwise from the top end of the left edge.  It ends
        with a move back to the original corner, so the current point is
        the same as before the call, exactly as after ``rect()``.

        Raises
        ------
        PathStateError
            If there is no current point.
        """
        origin = self._require_current_point("rounded_rect")
        if radius == 0.0:
            return self.rect(dimensions)

        left = origin.x
        top = origin.y
        right = origin.x + dimensions.width
        bottom = origin.y - dimensions.height

        self.move_to(Coord(left, top - radius))
        self.arc_to(Coord(left + radius, top))             # top left corner
        self.line_to(Coord(right - radius, top))
        self.arc_to(Coord(right, top - radius))            # top right corner
        self.line_to(Coord(right, bottom + radius))
        self.arc_to(Coord(right - radius, bottom))         # bottom right corner
        self.line_to(Coord(left + radius, bottom))
        self.arc_to(Coord(left, bottom + radius))          # bottom left corner
        self.line_to(Coord(left, top - radius))
        self.move_to(origin)
        return self

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def text_width(self, text: str, font_name: str, size: float) -> float:
        if self._measure is None:
            return 0.0
        return self._measure(text, font_name, size)

    def text(
        self,
        dest: Coord,
        horizontal_alignment: HorizontalAlignment,
        text: str,
        font_name: str,
        font_size: float,
    ) -> ContentStream:
        """Append a self-contained text object.

        Parameters
        ----------
        dest : Coord
            Baseline anchor.
        horizontal_alignment : HorizontalAlignment
            Which part of the string sits on ``dest.x``.
        text : str
            String to show; escaped for a PDF literal.
        font_name : str
            Font resource name (e.g. ``"F1"``).
        font_size : float
            Size in the stream's user units.
        """
        width = self.text_width(text, font_name, font_size)
        if horizontal_alignment is HorizontalAlignment.CENTER:
            x = dest.x - width / 2.0
        elif horizontal_alignment is HorizontalAlignment.RIGHT:
            x = dest.x - width
        else:
            x = dest.x

        self.append("BT ")
        self.append(f"{_g(x, dest.y)} Td ")
        self.append("0 Tr ")
        self.append(f"/{font_name} {_g(font_size)} Tf\n")
        self.append(f"({escape_text(text)}) Tj ")
        self.append("ET\n")
        return self

    # ------------------------------------------------------------------
    # Path painting
    # ------------------------------------------------------------------

    def path_close(self) -> ContentStream:
        self.append("h\n")
        self._have_last = False
        return self

    def path_stroke(self) -> ContentStream:
        return self.append("S\n")

    def path_close_stroke(self) -> ContentStream:
        self.append("s\n")
        self._have_last = False
        return self

    def path_fill(self, fill_rule: FillRule = FillRule.NONZERO_WINDING) -> ContentStream:
        if fill_rule is FillRule.NONZERO_WINDING:
            return self.append("f\n")
        return self.append("f*\n")

    def path_fill_stroke(
        self, fill_rule: FillRule = FillRule.NONZERO_WINDING
    ) -> ContentStream:
        if fill_rule is FillRule.NONZERO_WINDING:
            return self.append("B\n")
        return self.append("B*\n")

    def path_close_fill_stroke(
        self, fill_rule: FillRule = FillRule.NONZERO_WINDING
    ) -> ContentStream:
        if fill_rule is FillRule.NONZERO_WINDING:
            self.append("b\n")
        else:
            self.append("b*\n")
        self._have_last = False
        return self
