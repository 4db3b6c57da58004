import os
import sys
import numpy as np
import pytest
from PIL import Image

# Add core path
sys.path.append(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'stitch_crafter_gui'))

from core.catalog_parser import CatalogParser
from core.errors import EmptyPaletteError, NoImageLoadedError
from core.grid import grid_size
from core.session import PatternSession

CATALOG = CatalogParser.parse_lines([
    "310\tBlack\t0\t0\t0",
    "1\tRed\t255\t0\t0",
    "2\tGreen\t0\t255\t0",
    "3\tBlue\t0\t0\t255",
    "3865\tWinter White\t249\t247\t241",
])


def quadrant_image():
    arr = np.zeros((40, 80, 3), dtype=np.uint8)
    arr[:20, :40] = (250, 10, 10)
    arr[:20, 40:] = (10, 250, 10)
    arr[20:, :40] = (10, 10, 250)
    arr[20:, 40:] = (245, 245, 240)
    return Image.fromarray(arr)


def test_requires_image():
    session = PatternSession(CATALOG)
    assert not session.has_image()
    with pytest.raises(NoImageLoadedError):
        session.generate(10, 3)
    with pytest.raises(NoImageLoadedError):
        session.preview(10)
    with pytest.raises(NoImageLoadedError):
        session.legend()


def test_preview_is_unresolved():
    session = PatternSession(CATALOG)
    session.set_image(quadrant_image())
    grid = session.preview(10)
    assert grid_size(grid) == (10, 20)
    assert all(cell.is_placeholder for row in grid for cell in row)


def test_generate_pipeline():
    session = PatternSession(CATALOG)
    session.set_image(quadrant_image())
    result = session.generate(10, 4)

    assert result.resized.size == (20, 10)
    assert result.reduced.size == (20, 10)
    assert 0 < len(result.palette) <= 4
    assert set(result.palette) <= set(CATALOG)
    assert grid_size(result.grid) == (10, 20)
    assert all(cell in result.palette for row in result.grid for cell in row)
    assert result.grid[0][0].name == "Red"
    assert result.grid[9][19].name == "Winter White"


def test_generate_with_zero_colors_raises():
    session = PatternSession(CATALOG)
    session.set_image(quadrant_image())
    previous = session.generate(10, 2)
    with pytest.raises(EmptyPaletteError):
        session.generate(10, 0)
    assert session.result is previous


def test_sixteen_bit_image_is_downshifted():
    catalog = CatalogParser.parse_lines([
        "1\tWhite\t255\t255\t255",
        "2\tGrey\t128\t128\t128",
        "3\tBlack\t0\t0\t0",
    ])
    session = PatternSession(catalog)
    session.set_image(Image.fromarray(np.full((4, 4), 32768, dtype=np.uint16)))
    assert session.source_image.getpixel((0, 0)) == (128, 128, 128, 255)

    result = session.generate(4, 3)
    assert [t.name for t in result.palette] == ["Grey"]


def test_legend_counts_every_cell():
    session = PatternSession(CATALOG)
    session.set_image(quadrant_image())
    session.generate(10, 4)
    rows = session.legend()
    assert sum(r["stitches"] for r in rows) == 200
    assert all(r["number"].startswith("DMC ") for r in rows)


def test_new_image_drops_result():
    session = PatternSession(CATALOG)
    session.set_image(quadrant_image())
    session.generate(10, 2)
    session.set_image(Image.new("RGB", (5, 5)))
    assert session.result is None


def test_open_and_export(tmp_path):
    src = tmp_path / "photo.png"
    quadrant_image().save(src)

    session = PatternSession(CATALOG)
    session.open_image(str(src))
    assert session.source_path == str(src)
    assert session.source_image.mode == "RGBA"

    with pytest.raises(NoImageLoadedError):
        session.export(str(tmp_path / "out"))

    session.generate(10, 4)
    paths = session.export(str(tmp_path / "out"), cell_size=5)
    assert len(paths) == 3
    assert all(os.path.exists(p) for p in paths)


if __name__ == "__main__":
    sys.exit(pytest.main([__file__]))
