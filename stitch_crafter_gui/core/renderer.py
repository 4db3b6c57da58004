"""
Draws a cell grid as a stitch pattern raster.
Rendering never touches the grid; every call returns a new image.
"""
from PIL import Image, ImageDraw, ImageFont
import os
from core.errors import InvalidDimensionError
from core.grid import grid_size
from core.processor import save_image

STYLE_SYMBOL = "Filled color and symbol"
STYLE_FILLED = "Filled color"
STYLE_STITCH = "X stitch"
GRID_STYLES = (STYLE_SYMBOL, STYLE_FILLED, STYLE_STITCH)

# style -> (show_symbol, use_stitch)
STYLE_FLAGS = {
    STYLE_SYMBOL: (True, False),
    STYLE_FILLED: (False, False),
    STYLE_STITCH: (False, True),
}

# style -> file written by export_pattern_images
EXPORT_NAMES = {
    STYLE_SYMBOL: "filled_color_and_symbol.jpg",
    STYLE_FILLED: "filled_color.jpg",
    STYLE_STITCH: "x_stitch.jpg",
}

DEFAULT_CELL_SIZE = 20
STITCH_THICKNESS = 3
BORDER_COLOR = (0, 0, 0)
BACKGROUND_COLOR = (255, 255, 255)

FALLBACK_FONTS = ["DejaVuSans.ttf", "Arial.ttf", "arial.ttf"]


def symbol_text_color(color):
    """Black on light cells, white on dark ones."""
    r, g, b = color[:3]
    if r * 0.299 + g * 0.587 + b * 0.114 > 186:
        return (0, 0, 0)
    return (255, 255, 255)


def load_symbol_font(font_path=None, size=DEFAULT_CELL_SIZE):
    """
    Loads the TTF used for pattern symbols.
    Falls back to common system fonts, then to Pillow's default font.
    """
    candidates = ([font_path] if font_path else []) + FALLBACK_FONTS
    for path in candidates:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            continue
    if font_path:
        print(f"Failed to load symbol font {font_path}, using default font")
    return ImageFont.load_default()


def render_grid(grid, cell_size=DEFAULT_CELL_SIZE, show_symbol=False, use_stitch=False, font=None):
    """
    Renders 'grid' with 'cell_size' pixels per cell.

    Cells are filled with their color, or drawn as a 3-pixel X over a white
    background when use_stitch is set. With show_symbol the thread symbol
    is written on top. Every cell gets a 1-pixel black border.
    """
    rows, cols = grid_size(grid)
    if rows == 0 or cols == 0:
        raise InvalidDimensionError("cannot render an empty grid")
    if cell_size <= 0:
        raise InvalidDimensionError(f"cell size must be positive, got {cell_size}")

    img = Image.new("RGB", (cols * cell_size, rows * cell_size), BACKGROUND_COLOR)
    draw = ImageDraw.Draw(img)
    if show_symbol and font is None:
        font = load_symbol_font(size=cell_size)

    for row_idx, row in enumerate(grid):
        for col_idx, cell in enumerate(row):
            x0 = col_idx * cell_size
            y0 = row_idx * cell_size
            x1 = x0 + cell_size - 1
            y1 = y0 + cell_size - 1
            color = tuple(cell.color[:3])

            if use_stitch:
                draw.line([(x0, y0), (x1, y1)], fill=color, width=STITCH_THICKNESS)
                draw.line([(x0, y1), (x1, y0)], fill=color, width=STITCH_THICKNESS)
            else:
                draw.rectangle([x0, y0, x1, y1], fill=color)

            if show_symbol and cell.symbol:
                _draw_symbol(draw, cell, (x0, y0), cell_size, font)

            draw.rectangle([x0, y0, x1, y1], outline=BORDER_COLOR, width=1)

    return img


def _draw_symbol(draw, cell, origin, cell_size, font):
    x0, y0 = origin
    fill = symbol_text_color(cell.color)
    try:
        left, top, right, bottom = draw.textbbox((0, 0), cell.symbol, font=font)
        tx = x0 + (cell_size - (right - left)) // 2 - left
        ty = y0 + (cell_size - (bottom - top)) // 2 - top
        draw.text((tx, ty), cell.symbol, fill=fill, font=font)
    except UnicodeEncodeError:
        # Pillow's bitmap fallback font only covers Latin-1
        print(f"Font cannot draw symbol {cell.symbol!r}")


def render_style(grid, style, cell_size=DEFAULT_CELL_SIZE, font=None):
    if style not in STYLE_FLAGS:
        raise ValueError(f"unknown grid style: {style!r}")
    show_symbol, use_stitch = STYLE_FLAGS[style]
    return render_grid(grid, cell_size, show_symbol=show_symbol, use_stitch=use_stitch, font=font)


def export_pattern_images(grid, output_dir, cell_size=DEFAULT_CELL_SIZE, font=None):
    """
    Writes one JPEG per grid style into 'output_dir' (created if missing).
    Returns the written paths in GRID_STYLES order.
    """
    os.makedirs(output_dir, exist_ok=True)
    if font is None:
        font = load_symbol_font(size=cell_size)

    paths = []
    for style in GRID_STYLES:
        path = os.path.join(output_dir, EXPORT_NAMES[style])
        save_image(render_style(grid, style, cell_size, font), path)
        paths.append(path)
    return paths
