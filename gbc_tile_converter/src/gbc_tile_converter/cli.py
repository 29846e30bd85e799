"""Command line interface for the GBC tile converter."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

from .converter import ConvertOptions, ConversionError, convert_png
from .output import BINARY_EXTENSIONS, render_preview, to_asm, write_binaries
from .tiles import TILE_HEIGHT, TILE_WIDTH


def parse_int(text: str) -> int:
    try:
        return int(text, 0)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid integer: {text}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Convert an image into Game Boy Color background data.\n"
            "Each 8x8 tile may use at most 4 colours; the whole image may use at most\n"
            "8 palettes and 512 distinct tiles (mirrored tiles are stored once).\n"
            "Images up to 256x256 are supported; the map is always 32x32."
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("input", help="Source image (PNG or any format Pillow reads)")
    parser.add_argument(
        "-o",
        "--output",
        help="Output .asm file (asm format) or directory (bin format); asm defaults to stdout",
    )
    parser.add_argument(
        "--format",
        choices=["asm", "bin"],
        default="asm",
        help="Assembler db tables or raw .pal/.chr/.tilemap/.attrmap files",
    )
    parser.add_argument("--preview", help="Also write a PNG rendered from the converted data")
    parser.add_argument("--label-prefix", default="", help="Prefix added to every asm label")
    parser.add_argument(
        "--tile-offset",
        type=parse_int,
        default=0x80,
        help="Value added to tile indices in the map (default: 0x80)",
    )
    parser.add_argument(
        "--no-flip",
        action="store_true",
        help="Only merge identical tiles, not mirrored ones",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite existing files without prompting",
    )
    return parser


def check_targets(targets: List[Path], force: bool) -> None:
    conflicts = [str(target) for target in targets if target.exists() and not force]
    if conflicts:
        raise ConversionError(
            "Output files already exist (use --force to overwrite):\n" + "\n".join(conflicts)
        )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = ConvertOptions()
        options.tile_index_offset = args.tile_offset
        options.allow_flips = not args.no_flip
        options.label_prefix = args.label_prefix

        src = Path(args.input)
        to_stdout = args.format == "asm" and not args.output
        status = sys.stderr if to_stdout else sys.stdout

        if args.format == "bin" and not args.output:
            raise ConversionError("--format bin requires --output DIRECTORY")

        targets: List[Path] = []
        if args.format == "bin":
            output_dir = Path(args.output)
            targets.extend(output_dir / f"{src.stem}.{ext}" for ext in BINARY_EXTENSIONS)
        elif args.output:
            targets.append(Path(args.output))
        if args.preview:
            targets.append(Path(args.preview))
        check_targets(targets, args.force)

        result = convert_png(src, options)
        print(
            f"{src}: {result.width_in_tiles * TILE_WIDTH}x{result.height_in_tiles * TILE_HEIGHT}",
            file=status,
        )

        if args.format == "bin":
            for target in write_binaries(result, Path(args.output), src.stem):
                print(f"wrote {target}", file=status)
        elif args.output:
            target = Path(args.output)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(to_asm(result), encoding="utf-8")
            print(f"wrote {target}", file=status)
        else:
            sys.stdout.write(to_asm(result))

        if args.preview:
            target = Path(args.preview)
            target.parent.mkdir(parents=True, exist_ok=True)
            render_preview(result).save(target)
            print(f"wrote {target}", file=status)

        print(
            f"Found {len(result.tiles)} tiles, {len(result.palettes)} palettes",
            file=status,
        )
        return 0
    except ConversionError as exc:
        print(exc, file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
