# =============================================================================
# lib/images.py - Image Resizing
# =============================================================================
# Shrinks uploaded images to fit a bounding box before they are stored.
# Images already inside the box are returned byte-for-byte unchanged.
# =============================================================================

import io
import logging

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

# Pillow format name -> save options
SAVE_OPTIONS = {
    "JPEG": {"quality": 85, "optimize": True},
    "PNG": {"optimize": True},
    "WEBP": {"quality": 80, "method": 6},
}


class UnsupportedImageError(ValueError):
    """Raised when bytes cannot be decoded as an image."""


def fit_within(content: bytes, max_size: tuple[int, int]) -> bytes:
    """
    Resize an image so it fits inside max_size, keeping its aspect ratio.

    EXIF orientation is applied before measuring, so portrait photos from
    phones are not stored sideways. The image is re-encoded in its own
    format. Animated or unknown formats (e.g. GIF) pass through untouched.

    Args:
        content: Encoded image bytes
        max_size: (width, height) bounding box

    Returns:
        Encoded image bytes, resized if they exceeded the box

    Raises:
        UnsupportedImageError: If the bytes are not a readable image
    """
    try:
        with Image.open(io.BytesIO(content)) as img:
            img.load()
            image_format = img.format or ""

            if image_format not in SAVE_OPTIONS:
                return content

            oriented = ImageOps.exif_transpose(img)
            if oriented.width <= max_size[0] and oriented.height <= max_size[1]:
                return content

            original_size = oriented.size
            oriented.thumbnail(max_size, Image.Resampling.LANCZOS)

            if image_format == "JPEG" and oriented.mode not in ("RGB", "L"):
                oriented = oriented.convert("RGB")

            output = io.BytesIO()
            oriented.save(output, format=image_format, **SAVE_OPTIONS[image_format])
    except (UnidentifiedImageError, OSError) as e:
        raise UnsupportedImageError(f"Not a readable image: {e}") from e

    logger.debug(f"Resized image {original_size} -> {oriented.size}")
    return output.getvalue()
