from PIL import Image
import numpy as np
import os
from core.errors import InvalidDimensionError, UnsupportedFormatError

# Security: Prevent decompression bomb attacks by limiting max pixels (e.g., 100MP)
Image.MAX_IMAGE_PIXELS = 100_000_000

SUPPORTED_FORMATS = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
}

# Pillow modes that carry 16 bits per sample
_WIDE_MODES = ("I", "I;16", "I;16L", "I;16B", "I;16N")


def image_format(path):
    """
    Returns the Pillow format name for a path, based on its extension.
    Raises UnsupportedFormatError for anything but .jpg/.jpeg/.png.
    """
    ext = os.path.splitext(str(path))[1].lower()
    if ext not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(f"unsupported file format: {ext or '(none)'}")
    return SUPPORTED_FORMATS[ext]


def load_image(path):
    """
    Decodes a JPEG or PNG file into an RGBA image.
    Read and decode failures propagate as OSError; oversized images raise
    Pillow's DecompressionBombError.
    """
    image_format(path)
    with Image.open(path) as img:
        return to_rgba(img)


def to_rgba(img):
    """
    Converts any Pillow image to RGBA.
    16-bit samples are downshifted first; a plain convert would clip them to 255.
    """
    if img.mode in _WIDE_MODES:
        return Image.fromarray(image_to_rgb_array(img)).convert("RGBA")
    return img.convert("RGBA")


def save_image(img, path):
    """
    Encodes an image according to the path's extension.
    JPEG has no alpha, so RGBA images are flattened before saving.
    """
    fmt = image_format(path)
    if fmt == "JPEG" and img.mode != "RGB":
        img = img.convert("RGB")
    img.save(path, format=fmt)


def image_to_rgb_array(img):
    """
    Returns the pixels of 'img' as an [H, W, 3] uint8 array.
    16-bit samples are downshifted to 8 bits before anything compares them.
    """
    if img.mode in _WIDE_MODES:
        gray = np.asarray(img, dtype=np.int64)
        gray = np.clip(gray >> 8, 0, 255).astype(np.uint8)
        return np.stack([gray, gray, gray], axis=-1)
    return np.asarray(img.convert("RGB"), dtype=np.uint8)


def resize_to_height(img, new_height):
    """
    Scales 'img' to 'new_height' keeping its aspect ratio.

    new_width = new_height * width / height, truncated and kept at least 1.
    Uses Pillow's bicubic filter (Catmull-Rom). Resizing to the current
    size returns an identical copy.
    """
    width, height = img.size
    if width <= 0 or height <= 0:
        raise InvalidDimensionError(f"cannot resize a {width}x{height} image")
    if new_height <= 0:
        raise InvalidDimensionError(f"target height must be positive, got {new_height}")

    new_height = int(new_height)
    new_width = max(1, (new_height * width) // height)

    if img.mode not in ("RGB", "RGBA"):
        img = to_rgba(img)
    return img.resize((new_width, new_height), resample=Image.BICUBIC)
