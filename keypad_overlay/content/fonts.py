"""Text measurement backed by the standard PDF font metrics.

Content streams refer to fonts by resource name (``/F1``); the metrics
belong to the base font the resource points at (``Helvetica``).  The
measure functions built here translate one to the other and return
widths in whatever unit the font size is given in, so a 6/72 in font
measures in inches.
"""

from __future__ import annotations

from typing import Mapping

import reportlab.pdfbase.pdfmetrics

from keypad_overlay.content.stream import TextMeasure

STANDARD_FONTS = frozenset({
    "Courier",
    "Courier-Bold",
    "Courier-BoldOblique",
    "Courier-Oblique",
    "Helvetica",
    "Helvetica-Bold",
    "Helvetica-BoldOblique",
    "Helvetica-Oblique",
    "Symbol",
    "Times-Bold",
    "Times-BoldItalic",
    "Times-Italic",
    "Times-Roman",
    "ZapfDingbats",
})


def standard_text_width(text: str, base_font: str, size: float) -> float:
    """Width of *text* set in a standard-14 font at *size*."""
    if base_font not in STANDARD_FONTS:
        raise ValueError(f"{base_font!r} is not one of the standard PDF fonts")
    return reportlab.pdfbase.pdfmetrics.stringWidth(text, base_font, size)


def make_measure(font_resources: Mapping[str, str]) -> TextMeasure:
    """Build a ``ContentStream`` measure function.

    Parameters
    ----------
    font_resources : Mapping[str, str]
        Resource name to base font, e.g. ``{"F1": "Helvetica"}``.

    Raises
    ------
    ValueError
        If a base font is not a standard font.  Unknown resource names
        raise ``KeyError`` when measured.
    """
    resources = dict(font_resources)
    for base_font in resources.values():
        if base_font not in STANDARD_FONTS:
            raise ValueError(f"{base_font!r} is not one of the standard PDF fonts")

    def measure(text: str, font_name: str, size: float) -> float:
        return standard_text_width(text, resources[font_name], size)

    return measure
