"""
Keypad Overlay Package.

Generates printable and cuttable overlays for calculator keypads: rounded
key outlines, key legends and cutter registration marks, tiled on a page
and written as a PDF content stream.

Subpackages:
    geometry: Points, sizes, colours and geometry records
    content: PDF content stream builder and text metrics
    render: Registration marks and keypad drawing
    layout: Vertical tiling of overlays on a page
    configs: Overlay configuration and legend tables
    document: Page composition and PDF output
"""

__version__ = "1.0.0"

__all__ = ["geometry", "content", "render", "layout", "configs", "document"]
