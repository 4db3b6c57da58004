import os
import sys
import numpy as np
import pytest
from PIL import Image

# Add core path
sys.path.append(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'stitch_crafter_gui'))

from core.errors import EmptyPaletteError
from core.palette import reduce_colors, summarize_palette
from core.thread_color import ThreadColor

RGB_CATALOG = [
    ThreadColor(1, "Red", (255, 0, 0)),
    ThreadColor(2, "Green", (0, 255, 0)),
    ThreadColor(3, "Blue", (0, 0, 255)),
]


def striped_image():
    # 6 red pixels, 3 green, 3 blue
    arr = np.zeros((3, 4, 3), dtype=np.uint8)
    arr[:, :2] = (250, 5, 5)
    arr[:, 2] = (5, 250, 5)
    arr[:, 3] = (5, 5, 250)
    return Image.fromarray(arr)


def test_solid_image_gives_single_entry():
    img = Image.new("RGB", (2, 2), (0, 0, 255))
    palette = summarize_palette(img, RGB_CATALOG, 5)
    assert palette == [RGB_CATALOG[2]]
    assert palette[0].name == "Blue"


def test_frequency_order_and_catalog_tie_break():
    palette = summarize_palette(striped_image(), RGB_CATALOG, 3)
    # Green and Blue both have 3 votes: catalog order decides
    assert [t.name for t in palette] == ["Red", "Green", "Blue"]


def test_k_limits_size():
    img = striped_image()
    assert len(summarize_palette(img, RGB_CATALOG, 2)) == 2
    assert summarize_palette(img, RGB_CATALOG, 1)[0].name == "Red"
    assert summarize_palette(img, RGB_CATALOG, 0) == []
    assert summarize_palette(img, RGB_CATALOG, -3) == []


def test_empty_catalog_raises():
    with pytest.raises(EmptyPaletteError):
        summarize_palette(striped_image(), [], 3)


def test_unknown_strategy_raises():
    with pytest.raises(ValueError):
        summarize_palette(striped_image(), RGB_CATALOG, 3, strategy="kmeans")


def test_median_cut_strategy():
    palette = summarize_palette(striped_image(), RGB_CATALOG, 3, strategy="median_cut")
    assert 0 < len(palette) <= 3
    assert all(t in RGB_CATALOG for t in palette)
    assert len(set(palette)) == len(palette)
    assert palette[0].name == "Red"


def test_median_cut_solid_image():
    img = Image.new("RGB", (4, 4), (0, 0, 255))
    assert summarize_palette(img, RGB_CATALOG, 8, strategy="median_cut") == [RGB_CATALOG[2]]


def test_reduce_keeps_size_and_uses_palette_colors():
    img = striped_image()
    palette = RGB_CATALOG[:2]
    reduced = reduce_colors(img, palette)
    assert reduced.size == img.size
    assert reduced.mode == "RGBA"

    allowed = {t.color for t in palette}
    for r, g, b, a in reduced.getdata():
        assert (r, g, b) in allowed
        assert a == 255


def test_reduce_forces_opacity():
    img = Image.new("RGBA", (3, 3), (240, 10, 10, 0))
    reduced = reduce_colors(img, RGB_CATALOG)
    assert set(reduced.getdata()) == {(255, 0, 0, 255)}


def test_reduce_is_deterministic():
    rng = np.random.default_rng(3)
    img = Image.fromarray(rng.integers(0, 256, size=(16, 12, 3), dtype=np.uint8))
    assert reduce_colors(img, RGB_CATALOG).tobytes() == reduce_colors(img, RGB_CATALOG).tobytes()


def test_reduce_empty_palette_raises():
    with pytest.raises(EmptyPaletteError):
        reduce_colors(striped_image(), [])


if __name__ == "__main__":
    sys.exit(pytest.main([__file__]))
