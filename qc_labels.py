#!/usr/bin/env python3
"""Export QC product labels as a PNG image or a single-page PDF."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Sequence

from dotenv import load_dotenv

from label_config import ExportSettings
from label_errors import LabelExportError
from label_export import download_image, export_pdf
from label_render import BORDERED, list_layouts
from label_types import (
    DEFAULT_LABEL_RECORD,
    ArtifactKind,
    LabelRecord,
    LayoutOptions,
    suggested_filename,
)

logger = logging.getLogger(__name__)


def _option_name(field_name: str) -> str:
    return "--" + field_name.replace("_", "-")


def load_record(json_path: Optional[str], overrides: Dict[str, Optional[str]]) -> LabelRecord:
    """Start from the JSON file (or the default record) and apply overrides."""

    if json_path:
        try:
            data = json.loads(Path(json_path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise SystemExit(f"Unable to read label JSON '{json_path}': {exc}") from exc
        if not isinstance(data, dict):
            raise SystemExit(f"Label JSON '{json_path}' must contain an object.")
        base = DEFAULT_LABEL_RECORD.to_dict()
        base.update(data)
    else:
        base = DEFAULT_LABEL_RECORD.to_dict()

    for name, value in overrides.items():
        if value is not None:
            base[name] = value

    try:
        return LabelRecord.from_mapping(base)
    except TypeError as exc:
        raise SystemExit(str(exc)) from exc


def build_parser(settings: ExportSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="QC product label -> PNG (3x) or single-page PDF"
    )
    fields = parser.add_argument_group("label fields")
    for name in LabelRecord.field_names():
        fields.add_argument(
            _option_name(name),
            dest=name,
            default=None,
            help=f"Override the {name.replace('_', ' ')} field.",
        )
    parser.add_argument(
        "--json",
        help="Read label fields from a JSON object (keys as in --help, snake_case).",
    )
    parser.add_argument(
        "-f", "--format",
        choices=[kind.value for kind in ArtifactKind],
        default=ArtifactKind.PNG.value,
        help="Output format (default: png).",
    )
    parser.add_argument(
        "-l", "--layout",
        choices=list(list_layouts()),
        default=BORDERED,
        help="Bordered label with cutting guides, or full-bleed (default: bordered).",
    )
    parser.add_argument(
        "-o", "--output",
        help="Output path (default: <product model or 'label'>.<format>).",
    )
    parser.add_argument(
        "--width",
        type=float,
        default=settings.width,
        help=f"Label width in pixel units (default: {settings.width:g}, LABEL_WIDTH).",
    )
    parser.add_argument(
        "--height",
        type=float,
        default=settings.height,
        help=f"Label height in pixel units (default: {settings.height:g}, LABEL_HEIGHT).",
    )
    parser.add_argument(
        "--padding",
        type=float,
        default=settings.padding,
        help=f"Inner padding (default: {settings.padding:g}, LABEL_PADDING).",
    )
    parser.add_argument(
        "--web",
        action="store_true",
        help="Serve the export HTTP API instead of writing a file.",
    )
    parser.add_argument(
        "--web-host",
        default="127.0.0.1",
        help="Host/IP for the HTTP API (default: 127.0.0.1).",
    )
    parser.add_argument(
        "--web-port",
        type=int,
        default=5000,
        help="Port for the HTTP API (default: 5000).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log export state transitions.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point for exporting one label."""

    settings = ExportSettings.from_env()
    args = build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.web:
        from qc_labels_web import run_web_app

        run_web_app(settings, host=args.web_host, port=args.web_port)
        return 0

    overrides = {name: getattr(args, name) for name in LabelRecord.field_names()}
    record = load_record(args.json, overrides)
    options = LayoutOptions(
        width=args.width,
        height=args.height,
        padding=args.padding,
        record=record,
    )
    output = args.output or suggested_filename(record, args.format)

    try:
        if args.format == ArtifactKind.PDF.value:
            path = asyncio.run(
                export_pdf(options, output, layout=args.layout, settings=settings)
            )
        else:
            path = asyncio.run(
                download_image(options, output, layout=args.layout, settings=settings)
            )
    except LabelExportError as exc:
        print(f"Export failed: {exc}", file=sys.stderr)
        return 1

    print(f"Wrote {path}")
    return 0


def run() -> None:
    """Console script entry: load ``.env`` before reading settings."""

    load_dotenv()
    sys.exit(main())


if __name__ == "__main__":
    run()
