"""Command line access to measurement, row layout and quad layout."""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from typing import Any

from textedit.api.editing import TextSpan
from textedit.api.errors import FontLoadError
from textedit.editing.text_control import TextControl, create_text_control
from textedit.runtime.config import TextEditConfig, load_textedit_config
from textedit.runtime.json_codec import dumps_text
from textedit.runtime.logging import configure_textedit_logging, shutdown_textedit_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="textedit", description="Measure and lay out text with a glyph atlas.")
    parser.add_argument("--font", default=None, help="Font file (freetype) or atlas layout JSON (msdf)")
    parser.add_argument("--kind", choices=("freetype", "msdf"), default=None, help="Glyph provider backend")
    parser.add_argument("--pixel-size", type=float, default=None, help="Rendered font size in pixels")
    parser.add_argument("--multiline", action="store_true", help="Treat newlines as row breaks")
    parser.add_argument("--log-level", default=None, help="Override TEXTEDIT_LOG_LEVEL")
    commands = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (
        ("measure", "Print pixel width and height"),
        ("layout", "Print glyph quads"),
        ("rows", "Print row metrics"),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("text")
    layout = commands.choices["layout"]
    layout.add_argument("--origin", type=float, nargs=2, default=(0.0, 0.0), metavar=("X", "Y"))
    return parser


def _apply_overrides(config: TextEditConfig, args: argparse.Namespace) -> TextEditConfig:
    font = config.font
    if args.font:
        font = replace(font, path=args.font)
    if args.kind:
        font = replace(font, kind=args.kind)
    if args.pixel_size is not None:
        font = replace(font, pixel_size=max(1.0, float(args.pixel_size)))
    layout = replace(config.layout, multiline=True) if args.multiline else config.layout
    logging_config = config.logging
    if args.log_level:
        logging_config = replace(logging_config, level_name=args.log_level.strip().upper())
    return replace(config, font=font, layout=layout, logging=logging_config)


def _measure_payload(control: TextControl) -> dict[str, Any]:
    size = control.measure(TextSpan(0, control.buffer_length()))
    return {"width": size.width, "height": size.height, "line_height": control.measurer.line_height_px}


def _rows_payload(control: TextControl) -> dict[str, Any]:
    rows = [
        {
            "start": start,
            "char_count": row.char_count,
            "x0": row.x0,
            "x1": row.x1,
            "y_min": row.y_min,
            "y_max": row.y_max,
            "baseline_delta": row.baseline_delta,
        }
        for start, row in control.rows()
    ]
    return {"multiline": control.multiline, "rows": rows}


def _layout_payload(control: TextControl, origin: tuple[float, float]) -> dict[str, Any]:
    run = control.glyph_run(origin[0], origin[1])
    quads = [
        {
            "codepoint": quad.codepoint,
            "char": chr(quad.codepoint),
            "offset": quad.offset,
            "positions": [list(vertex.position) for vertex in quad.vertices],
            "tex_coords": [list(vertex.tex_coord) for vertex in quad.vertices],
            "px_range": list(quad.vertices[0].px_range),
        }
        for quad in run.quads
    ]
    return {"pen": [run.pen_x, run.pen_y], "extent": run.extent, "quads": quads}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = _apply_overrides(load_textedit_config(), args)
    configure_textedit_logging(config.logging)
    try:
        try:
            control = create_text_control(config=config)
        except FontLoadError as exc:
            print(f"font load failed: {exc}", file=sys.stderr)
            return 2
        data = args.text.encode("utf-8")
        if not control.insert_chars(0, data):
            print("text does not fit the configured buffer capacity", file=sys.stderr)
            return 1
        if args.command == "measure":
            payload = _measure_payload(control)
        elif args.command == "rows":
            payload = _rows_payload(control)
        else:
            payload = _layout_payload(control, tuple(args.origin))
        print(dumps_text(payload, pretty=True))
        return 0
    finally:
        shutdown_textedit_logging()
