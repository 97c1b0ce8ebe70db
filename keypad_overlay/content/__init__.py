"""
Content stream module.

Builds PDF content stream text from path, text and graphics-state
operations, tracking the current point for corner and rectangle
construction.
"""

from keypad_overlay.content.stream import (
    KAPPA,
    ContentStream,
    ContentStreamError,
    PathStateError,
    TextMeasure,
    escape_text,
    quarter_circle_controls,
)

__all__ = [
    "KAPPA",
    "ContentStream",
    "ContentStreamError",
    "PathStateError",
    "TextMeasure",
    "escape_text",
    "quarter_circle_controls",
]
