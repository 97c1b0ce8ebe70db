"""Keypad overlay drawing.

The keypad is a 4 x 10 grid of rounded-rectangle keys inside an optional
rounded outline.  ENTER is a double-height key: the cell at row 2,
column 5 is one row pitch taller and the cell below it (row 3,
column 5) is not drawn.

Coordinates are inches with the origin at the overlay's bottom-left
corner; the page composer translates each overlay into place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Mapping

from keypad_overlay.configs.legends import key_code
from keypad_overlay.content.stream import ContentStream, TextMeasure
from keypad_overlay.geometry.types import (
    BLACK,
    Coord,
    Dimensions,
    HorizontalAlignment,
    OverlayGeometry,
)

logger = logging.getLogger(__name__)

ROWS = 4
COLUMNS = 10

# ENTER occupies (2, 5) and the cell below it
ENTER_ROW = 2
ENTER_COLUMN = 5


@dataclass(frozen=True)
class KeyPosition:
    """One drawn key: grid cell, key code, top-left corner and size."""

    row: int
    col: int
    code: int
    origin: Coord
    dimensions: Dimensions


@dataclass(frozen=True)
class LegendStyle:
    """How legends are set above each key.

    ``nudge_x_in`` shifts the anchor from the key centre when text is not
    measured; with zero-width text, CENTER alignment cannot centre, and
    the nudge stands in for half a typical legend width.
    """

    font_name: str = "F1"
    font_size_in: float = 6.0 / 72.0
    nudge_x_in: float = -0.125
    rise_in: float = 0.03


def iter_key_positions(geom: OverlayGeometry) -> Iterator[KeyPosition]:
    """Yield the 39 drawn keys in row-major order."""
    grid_left = geom.width_in / 2.0 - (COLUMNS / 2) * geom.key_col_pitch_in
    key_inset = (geom.key_col_pitch_in - geom.key_width_in) / 2.0

    for row in range(ROWS):
        y = geom.height_in - (row * geom.key_row_pitch_in + geom.key_row_1_offset_in)
        for col in range(COLUMNS):
            if row == ENTER_ROW + 1 and col == ENTER_COLUMN:
                continue  # lower half of ENTER
            dimensions = geom.key_dimensions
            if row == ENTER_ROW and col == ENTER_COLUMN:
                dimensions = Dimensions(
                    dimensions.width, dimensions.height + geom.key_row_pitch_in
                )

            x = grid_left + key_inset + col * geom.key_col_pitch_in
            yield KeyPosition(
                row=row,
                col=col,
                code=key_code(row, col),
                origin=Coord(x, y),
                dimensions=dimensions,
            )


def render_keypad(
    geom: OverlayGeometry,
    legends: Mapping[int, str] | None = None,
    *,
    show_outlines: bool = True,
    show_legends: bool = False,
    line_width_in: float = 0.1 / 25.4,
    style: LegendStyle | None = None,
    measure: TextMeasure | None = None,
) -> str:
    """Content stream text for one overlay.

    Parameters
    ----------
    geom : OverlayGeometry
        Overlay and key dimensions.
    legends : Mapping[int, str] | None
        Key code → legend.  Codes without an entry, and empty legends,
        get no text.
    show_outlines : bool
        Stroke the overlay outline and the key outlines (cut lines).
    show_legends : bool
        Print the legends.
    line_width_in : float
        Stroke width of the outlines.
    style : LegendStyle | None
        Legend font and placement; defaults to 6 pt ``F1``.
    measure : TextMeasure | None
        Text width function.  When given, legends are truly centred on
        the key and ``style.nudge_x_in`` is not applied.

    Returns
    -------
    str
        Stream text wrapped in its own ``q`` ... ``Q``.
    """
    style = style or LegendStyle()
    legends = legends or {}

    cs = ContentStream(push_graphics_state=True, measure=measure)
    cs.set_line_width(line_width_in)
    cs.set_color(BLACK, fill=False, stroke=True)

    if show_outlines:
        cs.move_to(Coord(0.0, geom.height_in))
        cs.rounded_rect(Dimensions(geom.width_in, geom.height_in), geom.corner_radius_in)
        cs.path_close_stroke()

    nudge = 0.0 if measure is not None else style.nudge_x_in
    keys = 0
    for key in iter_key_positions(geom):
        keys += 1
        if show_outlines:
            cs.move_to(key.origin)
            cs.rounded_rect(key.dimensions, geom.key_corner_radius_in)
            cs.path_close_stroke()

        if show_legends:
            text = legends.get(key.code, "")
            if not text:
                continue
            cs.text(
                Coord(
                    key.origin.x + geom.key_width_in / 2.0 + nudge,
                    key.origin.y + style.rise_in,
                ),
                HorizontalAlignment.CENTER,
                text,
                style.font_name,
                style.font_size_in,
            )

    logger.debug("Rendered keypad with %d keys", keys)
    return cs.getvalue()
