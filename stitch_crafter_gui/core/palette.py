from PIL import Image
import numpy as np
from core.color_match import match_pixels, nearest_indices, palette_array
from core.errors import EmptyPaletteError
from core.processor import image_to_rgb_array

SUMMARY_STRATEGIES = ("frequency", "median_cut")

# Pillow's quantizer cannot produce more than 256 colors
MAX_QUANTIZE_COLORS = 256


def summarize_palette(img, catalog, k, strategy="frequency"):
    """
    Picks at most k catalog threads that best represent 'img'.

    "frequency" (reference): every pixel votes for its nearest catalog
    thread; threads are ranked by vote count, ties in catalog order.
    "median_cut": Pillow's median-cut quantizer picks up to k
    representative colors, each mapped to its nearest thread and
    deduplicated.
    """
    if strategy not in SUMMARY_STRATEGIES:
        raise ValueError(f"unknown summary strategy: {strategy!r}")

    catalog = list(catalog)
    if k <= 0:
        return []
    if img.width == 0 or img.height == 0:
        return []
    if not catalog:
        raise EmptyPaletteError("cannot summarize an image against an empty catalog")

    if strategy == "median_cut":
        return extract_median_cut_palette(img, catalog, k)
    return extract_frequency_palette(img, catalog, k)


def extract_frequency_palette(img, catalog, k):
    indices = match_pixels(image_to_rgb_array(img), catalog)

    # Votes are tallied per catalog position; positions map 1:1 to thread ids
    counts = np.bincount(indices.ravel(), minlength=len(catalog))

    # Stable sort keeps catalog order among equal counts
    ranked = np.argsort(-counts, kind="stable")
    selected = [catalog[i] for i in ranked if counts[i] > 0]
    return selected[:k]


def extract_median_cut_palette(img, catalog, k):
    rgb = Image.fromarray(image_to_rgb_array(img))
    colors = min(k, MAX_QUANTIZE_COLORS)
    quantized = rgb.quantize(colors=colors, method=Image.Quantize.MEDIANCUT, dither=Image.Dither.NONE)

    raw_pal = quantized.getpalette()
    used = quantized.getcolors(maxcolors=MAX_QUANTIZE_COLORS) or []

    # Larger pixel share first, palette index breaks ties
    used.sort(key=lambda entry: (-entry[0], entry[1]))
    representatives = np.array(
        [raw_pal[i * 3:i * 3 + 3] for _, i in used], dtype=np.int32
    ).reshape(-1, 3)

    picked = {}
    for idx in nearest_indices(representatives, palette_array(catalog)):
        thread = catalog[idx]
        if thread not in picked:
            picked[thread] = None
    return list(picked)[:k]


def reduce_colors(img, palette):
    """
    Replaces every pixel with the color of its nearest palette thread.
    Returns a new, fully opaque RGBA image of the same size.
    """
    palette = list(palette)
    if not palette:
        raise EmptyPaletteError("cannot reduce an image to an empty palette")

    if img.width == 0 or img.height == 0:
        return Image.new("RGBA", img.size)

    rgb = image_to_rgb_array(img)
    h, w = rgb.shape[:2]
    indices = match_pixels(rgb, palette)

    colors = palette_array(palette).astype(np.uint8)
    out = np.empty((h, w, 4), dtype=np.uint8)
    out[..., :3] = colors[indices]
    out[..., 3] = 255
    return Image.fromarray(out)
