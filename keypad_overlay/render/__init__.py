"""
Render module.

Produces content stream text for the registration marks and for one
keypad overlay.
"""

from keypad_overlay.render.keypad import (
    KeyPosition,
    LegendStyle,
    iter_key_positions,
    render_keypad,
)
from keypad_overlay.render.marks import render_registration_marks

__all__ = [
    "KeyPosition",
    "LegendStyle",
    "iter_key_positions",
    "render_keypad",
    "render_registration_marks",
]
