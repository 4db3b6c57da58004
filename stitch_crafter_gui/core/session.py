"""
Pattern session: the state of one user's work on one image.
Holds what the GUI needs between button presses, so no pipeline stage
reads or writes module-level state.
"""
from dataclasses import dataclass, field
from typing import List
from PIL import Image
from core.errors import NoImageLoadedError
from core.grid import build_grid, legend_rows
from core.palette import reduce_colors, summarize_palette
from core.processor import load_image, resize_to_height, to_rgba
from core.renderer import DEFAULT_CELL_SIZE, export_pattern_images
from core.thread_color import ThreadColor


@dataclass
class PatternResult:
    resized: Image.Image
    palette: List[ThreadColor]
    reduced: Image.Image
    grid: List[List[ThreadColor]] = field(repr=False)


class PatternSession:
    def __init__(self, catalog):
        # Catalog is read-only and may be shared between sessions
        self.catalog = tuple(catalog)
        self.source_path = None
        self.source_image = None
        self.result = None

    def open_image(self, path):
        """Loads an image from disk and drops any previous result."""
        img = load_image(path)
        self.set_image(img)
        self.source_path = path
        return img

    def set_image(self, img):
        self.source_image = to_rgba(img)
        self.source_path = None
        self.result = None

    def has_image(self):
        return self.source_image is not None

    def _require_image(self):
        if self.source_image is None:
            raise NoImageLoadedError("No image loaded")
        return self.source_image

    def preview(self, height):
        """
        Resized grid of raw pixel colors, without thread matching.
        """
        resized = resize_to_height(self._require_image(), height)
        return build_grid(resized, [], resolve=False)

    def generate(self, height, num_colors, strategy="frequency"):
        """
        Runs the whole pipeline: resize, summarize against the catalog,
        reduce to the working palette, resolve the grid.
        Grid cells are resolved against the working palette so every cell
        has a legend entry. num_colors <= 0 leaves an empty palette and
        raises EmptyPaletteError from the reducer; the previous result is kept.
        """
        resized = resize_to_height(self._require_image(), height)
        palette = summarize_palette(resized, self.catalog, num_colors, strategy=strategy)
        reduced = reduce_colors(resized, palette)
        grid = build_grid(reduced, palette, resolve=True)

        self.result = PatternResult(resized=resized, palette=palette, reduced=reduced, grid=grid)
        return self.result

    def _require_result(self):
        if self.result is None:
            raise NoImageLoadedError("No pattern generated yet")
        return self.result

    def legend(self):
        result = self._require_result()
        return legend_rows(result.palette, result.grid)

    def export(self, output_dir, cell_size=DEFAULT_CELL_SIZE, font=None):
        result = self._require_result()
        return export_pattern_images(result.grid, output_dir, cell_size=cell_size, font=font)
