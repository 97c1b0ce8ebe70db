"""Registration (crop) marks for aligning a cutter to printed output.

Three marks frame the cut area:

    ■ ─────────────── ┐      filled square at top left
                      │      right angle at top right (arms left, down)
    │
    └───                     right angle at bottom left (arms up, right)

The marks depend only on the registration geometry and the page size;
overlay geometry never enters here.
"""

from __future__ import annotations

from keypad_overlay.content.stream import ContentStream
from keypad_overlay.geometry.types import BLACK, Coord, Dimensions, RegistrationGeometry


def render_registration_marks(
    page_width_in: float,
    page_height_in: float,
    geom: RegistrationGeometry,
) -> str:
    """Content stream text for the three registration marks.

    Parameters
    ----------
    page_width_in, page_height_in : float
        Page size in inches.
    geom : RegistrationGeometry
        Cut-area insets and mark sizes.

    Returns
    -------
    str
        Stream text wrapped in its own ``q`` ... ``Q``.

    Raises
    ------
    ValueError
        If the insets leave no interior on this page.
    """
    geom.interior_size(page_width_in, page_height_in)

    left = geom.inset_left_in
    right = page_width_in - geom.inset_right_in
    top = page_height_in - geom.inset_top_in
    bottom = geom.inset_bottom_in
    arm = geom.line_length_in

    s = ContentStream(push_graphics_state=True)
    s.set_line_width(geom.line_width_in)
    s.set_color_space("DeviceRGB", fill=True, stroke=True)
    s.set_color(BLACK, fill=True, stroke=True)

    # square at top left of cut area
    s.move_to(Coord(left, top))
    s.rect(Dimensions(geom.square_size_in, geom.square_size_in))
    s.path_close_fill_stroke()

    # right angle at bottom left of cut area
    s.move_to(Coord(left, bottom + arm))
    s.line_to(Coord(left, bottom))
    s.line_to(Coord(left + arm, bottom))
    s.path_stroke()

    # right angle at top right of cut area
    s.move_to(Coord(right - arm, top))
    s.line_to(Coord(right, top))
    s.line_to(Coord(right, top - arm))
    s.path_stroke()

    return s.getvalue()
