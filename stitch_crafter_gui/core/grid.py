from collections import Counter
from core.color_match import match_pixels
from core.errors import EmptyPaletteError
from core.processor import image_to_rgb_array
from core.thread_color import ThreadColor


def build_grid(img, threads, resolve=True):
    """
    Turns an image into a rows x cols grid of ThreadColor cells, one per pixel.

    resolve=True: each cell is the nearest entry of 'threads'.
    resolve=False: each cell is a placeholder holding the raw pixel color,
    for cheap previews. No resampling happens here.
    """
    threads = list(threads)
    if resolve and not threads:
        raise EmptyPaletteError("cannot resolve grid cells against an empty palette")
    if img.width == 0 or img.height == 0:
        return [[] for _ in range(img.height)]

    rgb = image_to_rgb_array(img)
    if not resolve:
        return [[ThreadColor.placeholder(px) for px in row] for row in rgb.tolist()]

    indices = match_pixels(rgb, threads)
    return [[threads[i] for i in row] for row in indices.tolist()]


def build_name_grid(img, threads):
    """
    Grid of thread names for exact color matches.
    Pixels with no exact match are written as '#rrggbb'.
    """
    names = {}
    for t in threads:
        names.setdefault(t.color, t.name)

    if img.width == 0 or img.height == 0:
        return [[] for _ in range(img.height)]

    rows = []
    for row in image_to_rgb_array(img).tolist():
        rows.append([names.get(tuple(px), "#{:02x}{:02x}{:02x}".format(*px)) for px in row])
    return rows


def format_grid(rows, separator="\t"):
    return "\n".join(separator.join(str(cell) for cell in row) for row in rows)


def grid_size(grid):
    """(rows, cols) of a cell grid."""
    if not grid:
        return 0, 0
    return len(grid), len(grid[0])


def count_stitches(grid):
    return Counter(cell for row in grid for cell in row)


def legend_rows(palette, grid=None):
    """
    One legend row per palette thread, in palette order.
    'stitches' is the number of grid cells using the thread (0 without a grid).
    """
    counts = count_stitches(grid) if grid else Counter()
    rows = []
    for t in palette:
        rows.append({
            "symbol": t.symbol,
            "number": f"DMC {t.id}",
            "name": t.name,
            "hex": t.hex,
            "color": t.color,
            "stitches": counts.get(t, 0),
        })
    return rows
