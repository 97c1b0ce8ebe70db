"""Page composition -- marks and tiled overlays in one content stream.

The page stream switches to an inch coordinate system
(``72 0 0 72 0 0 cm``), nests the registration marks, then nests one
translated keypad stream per tile::

    q 72 0 0 72 0 0 cm
      q ...registration marks... Q
      q 1 0 0 1 left y0 cm q ...keypad... Q Q
      q 1 0 0 1 left y1 cm q ...keypad... Q Q
      ...
    Q

Tiles are laid out from the top of the cut area (registration inset
plus an extra margin) downwards.  ``y_i`` is the PDF (bottom-left
origin) position of the bottom edge of tile *i*.

Output modes
------------
``cut``   outlines only (fed to the cutter),
``print`` registration marks and legends (fed to the printer),
``all``   everything, for proofing.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Mapping

from keypad_overlay.configs.loader import ConfigError, OverlayConfig, OverlayModel
from keypad_overlay.content.stream import ContentStream, TextMeasure
from keypad_overlay.geometry.types import PT_PER_IN
from keypad_overlay.layout.tiling import TilingLayout, compute_tiling
from keypad_overlay.render.keypad import LegendStyle, render_keypad
from keypad_overlay.render.marks import render_registration_marks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderOptions:
    """Which layers to draw."""

    show_outlines: bool
    show_registration_marks: bool
    show_legends: bool


class OutputMode(enum.Enum):
    CUT = "cut"
    PRINT = "print"
    ALL = "all"

    @property
    def options(self) -> RenderOptions:
        if self is OutputMode.CUT:
            return RenderOptions(
                show_outlines=True, show_registration_marks=False, show_legends=False
            )
        if self is OutputMode.PRINT:
            return RenderOptions(
                show_outlines=False, show_registration_marks=True, show_legends=True
            )
        return RenderOptions(
            show_outlines=True, show_registration_marks=True, show_legends=True
        )


def select_output_mode(cut: bool = False, print_: bool = False, all_: bool = False) -> OutputMode:
    """Resolve the three mutually exclusive mode switches.

    Raises
    ------
    ConfigError
        If none or more than one switch is set.
    """
    requested = [
        mode
        for mode, flag in ((OutputMode.CUT, cut), (OutputMode.PRINT, print_), (OutputMode.ALL, all_))
        if flag
    ]
    if not requested:
        raise ConfigError("No output mode requested; choose one of cut, print, all")
    if len(requested) > 1:
        names = "' and '".join(m.value for m in requested)
        raise ConfigError(f"Conflicting output modes '{names}'")
    return requested[0]


def output_filename(model_name: str, mode: OutputMode) -> str:
    """Default file name, e.g. ``voyager-overlay-cut.pdf``."""
    return f"{model_name}-overlay-{mode.value}.pdf"


def layout_for(config: OverlayConfig, model: OverlayModel) -> TilingLayout:
    """Tile *model* inside the cut area of the configured page."""
    extra = config.layout.additional_inset_in
    return compute_tiling(
        page_height=config.page.height_in,
        top_inset=config.registration.inset_top_in + extra,
        bottom_inset=config.registration.inset_bottom_in + extra,
        overlay_height=model.geometry.height_in,
        minimum_gap=config.layout.minimum_gap_in,
    )


def compose_page(
    config: OverlayConfig,
    model: OverlayModel,
    options: RenderOptions,
    legends: Mapping[int, str] | None = None,
    measure: TextMeasure | None = None,
) -> str:
    """Content stream text for a full page.

    Parameters
    ----------
    config : OverlayConfig
        Page, registration and layout settings.
    model : OverlayModel
        Keypad geometry to tile.
    options : RenderOptions
        Layers to draw.
    legends : Mapping[int, str] | None
        Legend table, required when ``options.show_legends``.
    measure : TextMeasure | None
        Text width function for centred legends.

    Raises
    ------
    ConfigError
        If legends are requested without a legend table.
    LayoutError
        If the overlay does not fit on the page.
    """
    if options.show_legends and legends is None:
        raise ConfigError("Legends requested but no legend table given")

    page = config.page
    geom = model.geometry
    layout = layout_for(config, model)

    contents = ContentStream(push_graphics_state=True)
    contents.transform(PT_PER_IN, 0, 0, PT_PER_IN, 0, 0)

    if options.show_registration_marks:
        contents.append(
            render_registration_marks(page.width_in, page.height_in, config.registration)
        )

    style = LegendStyle(
        font_name=config.layout.legend_font,
        font_size_in=config.layout.legend_size_in,
        nudge_x_in=config.layout.legend_nudge_x_in,
        rise_in=config.layout.legend_rise_in,
    )

    left = (page.width_in - geom.width_in) / 2.0
    for index, bottom in enumerate(layout.bottoms()):
        y = page.height_in - bottom
        logger.debug("Overlay %d: left %.4g, bottom %.4g", index, left, y)
        tile = ContentStream(push_graphics_state=True)
        tile.translate(left, y)
        tile.append("\n")
        tile.append(
            render_keypad(
                geom,
                legends,
                show_outlines=options.show_outlines,
                show_legends=options.show_legends,
                line_width_in=config.layout.key_line_width_in,
                style=style,
                measure=measure,
            )
        )
        contents.append(tile.getvalue())

    logger.info(
        "Composed %s page (%s): %d x %s, outlines=%s marks=%s legends=%s",
        page.name, config.registration_name, layout.count, model.name,
        options.show_outlines, options.show_registration_marks, options.show_legends,
    )
    return contents.getvalue()
