"""Single-page PDF output.

Wraps finished content stream text into a one-page PDF with pypdf:
a blank page sized to the configured paper, a ``/Font`` resource per
font name used by the stream (standard Type1 fonts, WinAnsiEncoding),
and the stream itself as the page contents.

The writer is the only place that deals with PDF objects; everything
upstream works with operator text.
"""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Mapping

from pypdf import PdfWriter
from pypdf.generic import ArrayObject, DecodedStreamObject, DictionaryObject, NameObject

from keypad_overlay.geometry.types import PT_PER_IN, PageSize
from src.utils.fs import atomic_write_bytes

logger = logging.getLogger(__name__)

DEFAULT_FONTS: Mapping[str, str] = {"F1": "Helvetica"}

# WinAnsiEncoding is cp1252 apart from a handful of undefined slots
_STREAM_ENCODING = "cp1252"


def _font_resource(base_font: str) -> DictionaryObject:
    return DictionaryObject({
        NameObject("/Type"): NameObject("/Font"),
        NameObject("/Subtype"): NameObject("/Type1"),
        NameObject("/BaseFont"): NameObject(f"/{base_font}"),
        NameObject("/Encoding"): NameObject("/WinAnsiEncoding"),
    })


def build_pdf(
    contents: str,
    page_size: PageSize,
    fonts: Mapping[str, str] | None = None,
) -> PdfWriter:
    """Create a writer holding one page with *contents*.

    Parameters
    ----------
    contents : str
        Content stream text.
    page_size : PageSize
        Paper size; the media box is this size in points.
    fonts : Mapping[str, str] | None
        Resource name → base font; defaults to ``{"F1": "Helvetica"}``.

    Returns
    -------
    PdfWriter
        Writer ready to be written.
    """
    fonts = DEFAULT_FONTS if fonts is None else fonts

    writer = PdfWriter()
    page = writer.add_blank_page(
        width=page_size.width_in * PT_PER_IN,
        height=page_size.height_in * PT_PER_IN,
    )

    font_dict = DictionaryObject({
        NameObject(f"/{name}"): _font_resource(base_font)
        for name, base_font in fonts.items()
    })
    page[NameObject("/Resources")] = DictionaryObject({
        NameObject("/ProcSet"): ArrayObject([NameObject("/PDF"), NameObject("/Text")]),
        NameObject("/Font"): font_dict,
    })

    stream = DecodedStreamObject()
    stream.set_data(contents.encode(_STREAM_ENCODING))
    page.replace_contents(stream)

    return writer


def pdf_bytes(
    contents: str,
    page_size: PageSize,
    fonts: Mapping[str, str] | None = None,
) -> bytes:
    """Serialise a one-page PDF to bytes."""
    buf = BytesIO()
    build_pdf(contents, page_size, fonts).write(buf)
    return buf.getvalue()


def write_pdf(
    path: str | Path,
    contents: str,
    page_size: PageSize,
    fonts: Mapping[str, str] | None = None,
) -> Path:
    """Write a one-page PDF atomically and return its path."""
    path = Path(path)
    data = pdf_bytes(contents, page_size, fonts)
    atomic_write_bytes(path, data)
    logger.info("Wrote %s (%d bytes)", path, len(data))
    return path
