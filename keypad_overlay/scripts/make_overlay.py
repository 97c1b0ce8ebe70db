#!/usr/bin/env python3
"""
Make Overlay Script.

Generate a one-page PDF of calculator keypad overlays, tiled down a
letter page inside the registration marks of the cutter.

Usage:
    python -m keypad_overlay.scripts.make_overlay --cut
    python -m keypad_overlay.scripts.make_overlay --print --sm
    python -m keypad_overlay.scripts.make_overlay --all --output proof.pdf
    python -m keypad_overlay.scripts.make_overlay --print --legend-set hp16c-bitops

Modes (exactly one):
    --cut    key and overlay outlines only, for the cutter
    --print  registration marks and legends, for the printer
    --all    everything, for proofing

Models:
    --hp     HP Voyager (default)
    --sm     SwissMicros DM1xL

The output file defaults to ``<model>-overlay-<mode>.pdf``.
"""

from __future__ import annotations

import argparse
import sys

from keypad_overlay.configs.legends import load_legends
from keypad_overlay.configs.loader import ConfigError, load_config
from keypad_overlay.content.fonts import make_measure
from keypad_overlay.content.stream import ContentStreamError
from keypad_overlay.document.page import (
    compose_page,
    output_filename,
    select_output_mode,
)
from keypad_overlay.document.pdf import write_pdf
from keypad_overlay.layout.tiling import LayoutError
from src.utils.logging_config import get_logger, push_context, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate calculator keypad overlay PDFs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Output defaults to <model>-overlay-<mode>.pdf",
    )

    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "--cut",
        "-c",
        action="store_true",
        help="cut marks (key and overlay outlines)",
    )
    mode.add_argument(
        "--print",
        "-p",
        action="store_true",
        help="print (registration and legends)",
    )
    mode.add_argument(
        "--all",
        "-a",
        action="store_true",
        help="all (registration, legends, and cut marks)",
    )

    model = parser.add_mutually_exclusive_group()
    model.add_argument(
        "--hp",
        action="store_const",
        const="hp",
        dest="model_flag",
        help="HP calculator (default)",
    )
    model.add_argument(
        "--sm",
        action="store_const",
        const="sm",
        dest="model_flag",
        help="Swiss Micros calculator",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="output PDF file",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Overlay configuration file (YAML)",
    )
    parser.add_argument(
        "--legends",
        type=str,
        help="Legends file (YAML)",
    )
    parser.add_argument(
        "--legend-set",
        type=str,
        help="Legend set name within the legends file",
    )
    parser.add_argument(
        "--measure-text",
        action="store_true",
        help="Centre legends using real font metrics",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ...)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Also log to this file",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(
        log_level=args.log_level,
        log_file=args.log_file,
        quiet_libs=["pypdf"],
        context={"app": "make_overlay"},
    )

    try:
        mode = select_output_mode(cut=args.cut, print_=args.print, all_=args.all)
        config = load_config(args.config)
        model = (
            config.model_for_flag(args.model_flag)
            if args.model_flag
            else config.get_model()
        )
        push_context(model=model.name, mode=mode.value)

        options = mode.options
        legends = (
            load_legends(args.legends, args.legend_set)
            if options.show_legends
            else None
        )
        measure = (
            make_measure({config.layout.legend_font: config.layout.legend_base_font})
            if args.measure_text
            else None
        )

        contents = compose_page(config, model, options, legends, measure)
        path = write_pdf(
            args.output or output_filename(model.name, mode),
            contents,
            config.page,
            fonts={config.layout.legend_font: config.layout.legend_base_font},
        )
    except (ConfigError, LayoutError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.debug("Generation failed", exc_info=True)
        return 1
    except ContentStreamError:
        logger.exception("Drawing failed")
        return 1

    print(f"Overlay written to: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
