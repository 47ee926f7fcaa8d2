#!/usr/bin/env python3
"""
Raster image loading
Decodes images with Pillow and returns their embedded palette
"""

import io
from typing import Optional

from PIL import Image, UnidentifiedImageError

from .constants import DDS_EXTENSION, RGB888_MAX_VALUE
from .exceptions import PaletteFormatError
from .models import Color, Palette

INDEXED_MODES = ("P", "PA")


def _alpha_table(transparency, count: int) -> list[int]:
    alphas = [RGB888_MAX_VALUE] * count
    if isinstance(transparency, int) and 0 <= transparency < count:
        alphas[transparency] = 0
    elif isinstance(transparency, (bytes, bytearray)):
        for i, alpha in enumerate(transparency[:count]):
            alphas[i] = alpha
    return alphas


def load_image_palette(data: bytes, extension: Optional[str] = None) -> Palette:
    """
    Decode an image and return its palette.

    Args:
        data: Raw image file bytes
        extension: Lower-cased source extension; DDS files are opened with
            the DDS plugin only

    Returns:
        Palette of an indexed image, or an empty list for true-color images

    Raises:
        PaletteFormatError: If Pillow cannot identify or decode the image
    """
    formats = ["DDS"] if extension == DDS_EXTENSION else None
    try:
        with Image.open(io.BytesIO(data), formats=formats) as img:
            if img.mode not in INDEXED_MODES:
                return []
            raw = img.getpalette() or []
            transparency = img.info.get("transparency")
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise PaletteFormatError(f"Could not decode image: {e}") from e

    count = len(raw) // 3
    alphas = _alpha_table(transparency, count)
    return [
        Color(raw[i * 3], raw[i * 3 + 1], raw[i * 3 + 2], alphas[i])
        for i in range(count)
    ]
