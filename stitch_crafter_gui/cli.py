#!/usr/bin/env python3
"""
Batch front-end: resize an image to a stitch height, optionally reduce it
to the thread catalog and print the pattern as text.

    python cli.py resize <height> <input> [output] [--reduce] [--catalog PATH]
"""
import argparse
import os
import sys
from PIL.Image import DecompressionBombError

# Ensure the root directory is in sys.path for imports to work correctly
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from core.catalog_parser import load_catalog
from core.errors import StitchError
from core.grid import build_name_grid, format_grid
from core.palette import reduce_colors
from core.processor import load_image, resize_to_height, save_image
from core.settings import SETTINGS_FILENAME, AppSettings

APP_DIR = os.path.dirname(os.path.abspath(__file__))


class _Parser(argparse.ArgumentParser):
    # Usage errors exit with 1 like every other failure
    def error(self, message):
        self.print_usage(sys.stderr)
        print(f"Error: {message}")
        sys.exit(1)


def build_parser():
    parser = _Parser(
        prog="stitch-crafter",
        description="Resize an image for a cross-stitch pattern.",
    )
    parser.add_argument('operation', choices=['resize'], help='Operation to run (only "resize")')
    parser.add_argument('height', type=int, help='Target height in stitches')
    parser.add_argument('input', help='Input .jpg/.jpeg/.png image')
    parser.add_argument('output', nargs='?', help='Output image (default: resized_<input name>)')
    parser.add_argument(
        '--reduce', action='store_true',
        help='Also write reduced_<output name> using the full thread catalog and print the pattern grid'
    )
    parser.add_argument(
        '--catalog', default=None,
        help='Thread catalog file (default: the catalog from settings.json)'
    )
    return parser


def default_output_path(input_path):
    return "resized_" + os.path.basename(input_path)


def reduced_output_path(output_path):
    directory, name = os.path.split(output_path)
    return os.path.join(directory, "reduced_" + name)


def main(argv=None):
    args = build_parser().parse_args(argv)
    output_path = args.output or default_output_path(args.input)

    try:
        img = load_image(args.input)
    except (StitchError, OSError, DecompressionBombError) as e:
        print(f"Error loading image: {e}")
        return 1

    try:
        resized = resize_to_height(img, args.height)
    except StitchError as e:
        print(f"Error: Invalid height. {e}")
        return 1

    try:
        save_image(resized, output_path)
    except (StitchError, OSError) as e:
        print(f"Error saving image: {e}")
        return 1
    print(f"Image resized and saved successfully to {output_path}")

    if not args.reduce:
        return 0

    catalog_path = args.catalog or AppSettings.load(os.path.join(APP_DIR, SETTINGS_FILENAME)).catalog_path
    try:
        catalog = load_catalog(catalog_path)
        reduced = reduce_colors(resized, catalog)
        reduced_path = reduced_output_path(output_path)
        save_image(reduced, reduced_path)
    except (StitchError, OSError) as e:
        print(f"Error reducing image: {e}")
        return 1
    print(f"Reduced image saved to {reduced_path}")

    print(format_grid(build_name_grid(reduced, catalog)))
    return 0


if __name__ == '__main__':
    sys.exit(main())
