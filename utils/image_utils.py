"""
Image utilities for recipe card analysis.

Handles image loading, upscaling of small images and conversion to the
arrays OpenCV works on.
"""
import logging
from pathlib import Path
from typing import Tuple, Union

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from core.constants import MIN_RECOMMENDED_DIMENSION
from core.exceptions import InvalidImageError
from core.models import ImageSize

logger = logging.getLogger(__name__)

ImageInput = Union[str, Path, Image.Image]


def load_image(image_or_path: ImageInput) -> Image.Image:
    """
    Load an image and normalize it for detection.

    Args:
        image_or_path: PIL Image or path to an image file

    Returns:
        RGB PIL Image with EXIF orientation applied

    Raises:
        InvalidImageError: If the image cannot be opened or decoded
    """
    if image_or_path is None:
        raise InvalidImageError("No image provided")

    if isinstance(image_or_path, Image.Image):
        img = image_or_path
    else:
        try:
            img = Image.open(image_or_path)
            img.load()
        except (FileNotFoundError, UnidentifiedImageError, OSError) as e:
            raise InvalidImageError(f"Could not open image {image_or_path}: {e}") from e

    if img.width <= 0 or img.height <= 0:
        raise InvalidImageError(f"Image has no pixels: {img.size}")

    # Fix EXIF orientation
    img = ImageOps.exif_transpose(img)

    # Convert to RGB
    if img.mode != 'RGB':
        img = img.convert('RGB')

    return img


def get_image_size(image: Image.Image) -> ImageSize:
    """Image dimensions as an ImageSize."""
    width, height = image.size
    return ImageSize(width=width, height=height)


def upscale_image(image: Image.Image, new_size: Tuple[int, int]) -> Image.Image:
    """Resize with high-quality (Lanczos) resampling."""
    return image.resize(new_size, Image.Resampling.LANCZOS)


def preprocess_image(
    image: Image.Image,
    min_dimension: int = MIN_RECOMMENDED_DIMENSION
) -> Tuple[Image.Image, ImageSize, ImageSize]:
    """
    Upscale images that are too small for reliable detection.

    The aspect ratio is preserved; the longest side becomes `min_dimension`.

    Args:
        image: Input image
        min_dimension: Minimum recommended length of the longest side

    Returns:
        Tuple of (processed image, original size, processed size)
    """
    original_size = get_image_size(image)
    max_dimension = original_size.max_dimension

    if max_dimension >= min_dimension:
        return image, original_size, original_size

    scale = min_dimension / max_dimension
    new_size = (
        max(1, int(round(original_size.width * scale))),
        max(1, int(round(original_size.height * scale)))
    )

    logger.info(
        "Image too small (%dpx). Upscaling to %dpx for better detection.",
        max_dimension, max(new_size)
    )

    processed = upscale_image(image, new_size)
    return processed, original_size, get_image_size(processed)


def to_grayscale_array(image: Image.Image) -> np.ndarray:
    """
    Convert a PIL image to a uint8 grayscale array for OpenCV.

    Args:
        image: PIL Image in any mode

    Returns:
        2-D numpy array (height x width)
    """
    return np.asarray(image.convert('L'), dtype=np.uint8)
