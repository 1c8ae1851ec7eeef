"""Utilities package - Helper functions for image, bbox, and text processing."""

from .image_utils import (
    load_image,
    get_image_size,
    upscale_image,
    preprocess_image,
    to_grayscale_array,
)

from .bbox_utils import (
    normalize_bbox,
    denormalize_bbox,
    draw_analysis,
)

from .text_utils import (
    contains_keyword,
    contains_digit,
)

__all__ = [
    # Image utils
    'load_image',
    'get_image_size',
    'upscale_image',
    'preprocess_image',
    'to_grayscale_array',

    # BBox utils
    'normalize_bbox',
    'denormalize_bbox',
    'draw_analysis',

    # Text utils
    'contains_keyword',
    'contains_digit',
]
