"""
Document module.

Composes the page content stream from marks and tiled overlays and
writes it out as a one-page PDF.
"""

from keypad_overlay.document.page import (
    OutputMode,
    RenderOptions,
    compose_page,
    layout_for,
    output_filename,
    select_output_mode,
)
from keypad_overlay.document.pdf import build_pdf, pdf_bytes, write_pdf

__all__ = [
    "OutputMode",
    "RenderOptions",
    "build_pdf",
    "compose_page",
    "layout_for",
    "output_filename",
    "pdf_bytes",
    "select_output_mode",
    "write_pdf",
]
