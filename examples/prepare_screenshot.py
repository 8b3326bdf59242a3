"""Convert a rendered screenshot into device-ready output.

Usage:
    python examples/prepare_screenshot.py screenshot.png --model og_png
    python examples/prepare_screenshot.py screenshot.png --model v2 --rotation 90 -o out.png
    python examples/prepare_screenshot.py --list
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from trmnl_pipeline import (
    TransformOverrides,
    TransformPipeline,
    TrmnlPipelineError,
    get_default_catalog,
)


def _list_models() -> None:
    catalog = get_default_catalog()
    for name in catalog.profile_names:
        profile = catalog.profile_by_name(name)
        print(
            f"{name:24} {profile.width}x{profile.height} "
            f"colors={profile.colors} bpp={profile.bit_depth} "
            f"rotation={profile.rotation} {profile.mime_type}"
        )


def _build_overrides(args: argparse.Namespace) -> TransformOverrides:
    return TransformOverrides(
        width=args.width,
        height=args.height,
        colors=args.colors,
        bit_depth=args.bit_depth,
        rotation=args.rotation,
        offset_x=args.offset_x,
        offset_y=args.offset_y,
        output_format=args.format,
        palette=args.palette.split(",") if args.palette else None,
        dither=False if args.no_dither else None,
    )


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("source", nargs="?", type=Path, help="Screenshot to convert")
    parser.add_argument("--model", help="Device profile name (e.g. og_png)")
    parser.add_argument("-o", "--output", type=Path, help="Output path (default: <source>.out.<ext>)")
    parser.add_argument("--width", type=int)
    parser.add_argument("--height", type=int)
    parser.add_argument("--colors", type=int)
    parser.add_argument("--bit-depth", type=int)
    parser.add_argument("--rotation", type=int)
    parser.add_argument("--offset-x", type=int)
    parser.add_argument("--offset-y", type=int)
    parser.add_argument("--format", choices=["png", "bmp"])
    parser.add_argument("--palette", help="Comma-separated hex colors, darkest first")
    parser.add_argument("--no-dither", action="store_true", help="Disable error diffusion")
    parser.add_argument("--list", action="store_true", help="List known device profiles")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.list:
        _list_models()
        return 0
    if args.source is None:
        parser.error("source is required unless --list is given")

    pipeline = TransformPipeline(args.model, _build_overrides(args))
    try:
        encoded = pipeline.process(args.source)
    except TrmnlPipelineError as err:
        print(f"error: {err}")
        return 1

    output = args.output or args.source.with_name(f"{args.source.stem}.out.{encoded.extension}")
    output.write_bytes(encoded.data)
    print(
        f"{output}: {encoded.width}x{encoded.height} {encoded.mime_type} "
        f"({encoded.bit_depth} bpp, stored at {encoded.stored_bit_depth}), {len(encoded)} bytes"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
