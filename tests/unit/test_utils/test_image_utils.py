"""
Unit tests for utils.image_utils module.
"""
import pytest
from PIL import Image
from core.exceptions import InvalidImageError
from core.models import ImageSize
from utils.image_utils import (
    get_image_size,
    load_image,
    preprocess_image,
    to_grayscale_array,
)


class TestLoadImage:
    """Tests for load_image function."""

    def test_load_from_path(self, sample_image_path):
        img = load_image(sample_image_path)

        assert img.size == (800, 600)
        assert img.mode == 'RGB'

    def test_converts_to_rgb(self):
        img = load_image(Image.new('L', (50, 40), color=128))
        assert img.mode == 'RGB'

    def test_missing_file(self, temp_dir):
        with pytest.raises(InvalidImageError):
            load_image(str(temp_dir / "missing.png"))

    def test_not_an_image(self, temp_dir):
        path = temp_dir / "notes.png"
        path.write_text("not an image")

        with pytest.raises(InvalidImageError):
            load_image(str(path))

    def test_none(self):
        with pytest.raises(InvalidImageError):
            load_image(None)


class TestPreprocessImage:
    """Tests for preprocess_image function."""

    def test_large_image_unchanged(self):
        img = Image.new('RGB', (1200, 900), color='white')

        processed, original, size = preprocess_image(img, 1000)

        assert processed is img
        assert original == size == ImageSize(1200, 900)

    def test_small_image_upscaled(self):
        """Test the longest side is raised to the minimum, keeping aspect ratio."""
        img = Image.new('RGB', (400, 300), color='white')

        processed, original, size = preprocess_image(img, 1000)

        assert original == ImageSize(400, 300)
        assert size == ImageSize(1000, 750)
        assert processed.size == (1000, 750)

    def test_exact_minimum_unchanged(self):
        img = Image.new('RGB', (1000, 500), color='white')
        _, original, size = preprocess_image(img, 1000)
        assert original == size


class TestConversions:
    """Tests for size and array helpers."""

    def test_get_image_size(self):
        assert get_image_size(Image.new('RGB', (30, 20))) == ImageSize(30, 20)

    def test_grayscale_array_shape(self):
        arr = to_grayscale_array(Image.new('RGB', (30, 20), color='white'))

        assert arr.shape == (20, 30)
        assert arr.dtype.name == 'uint8'
        assert int(arr[0, 0]) == 255
