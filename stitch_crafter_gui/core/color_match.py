import math
import numpy as np
from core.errors import EmptyPaletteError

# Upper bound on pixel x palette distances held in memory at once
MAX_DISTANCE_CELLS = 4_000_000


def to_rgb8(sample, depth=8):
    """
    Normalizes a pixel sample to an 8-bit (r, g, b) tuple.
    Samples wider than 8 bits per channel are downshifted; alpha is dropped.
    """
    if len(sample) < 3:
        raise ValueError(f"expected an RGB or RGBA sample, got {sample!r}")
    shift = max(0, depth - 8)
    return tuple(int(c) >> shift for c in sample[:3])


def color_distance(c1, c2):
    """Euclidean distance between two colors in raw RGB space."""
    return math.sqrt(sum((int(a) - int(b)) ** 2 for a, b in zip(c1[:3], c2[:3])))


def nearest(sample, palette, depth=8):
    """
    Returns the palette entry closest to 'sample'.
    The first entry reaching the minimum distance wins.
    """
    palette = list(palette)
    if not palette:
        raise EmptyPaletteError("cannot find the nearest color in an empty palette")

    rgb = to_rgb8(sample, depth)
    best = palette[0]
    best_distance = math.inf
    for thread in palette:
        distance = color_distance(rgb, thread.color)
        if distance < best_distance:
            best, best_distance = thread, distance
    return best


def palette_array(palette):
    """[N, 3] int32 array of the palette colors."""
    return np.array([t.color for t in palette], dtype=np.int32).reshape(-1, 3)


def nearest_indices(pixels, palette_colors):
    """
    Vectorized nearest-color search.
    pixels: [P, 3] array of 8-bit RGB, palette_colors: [N, 3] array.
    Returns a [P] array of palette indices. Squared integer distances keep
    the ordering of the Euclidean metric exact, and argmin returns the first
    minimum, which gives the same tie-break as nearest().
    """
    palette_colors = np.asarray(palette_colors, dtype=np.int32).reshape(-1, 3)
    n_palette = palette_colors.shape[0]
    if n_palette == 0:
        raise EmptyPaletteError("cannot find the nearest color in an empty palette")

    pixels = np.asarray(pixels, dtype=np.int32).reshape(-1, 3)
    n_pixels = pixels.shape[0]
    indices = np.zeros(n_pixels, dtype=np.int64)

    chunk_size = max(1, MAX_DISTANCE_CELLS // n_palette)
    for i in range(0, n_pixels, chunk_size):
        end = min(i + chunk_size, n_pixels)
        chunk = pixels[i:end, np.newaxis, :]  # [chunk, 1, 3]
        diffs = chunk - palette_colors[np.newaxis, :, :]  # [chunk, N, 3]
        sq_dists = np.sum(diffs * diffs, axis=2)  # [chunk, N]
        indices[i:end] = np.argmin(sq_dists, axis=1)

    return indices


def match_pixels(rgb_array, palette):
    """
    Maps an [H, W, 3] pixel array to palette indices of shape [H, W].
    """
    h, w = rgb_array.shape[:2]
    indices = nearest_indices(rgb_array.reshape(-1, 3), palette_array(palette))
    return indices.reshape(h, w)
