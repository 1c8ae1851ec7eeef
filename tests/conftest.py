"""
Pytest configuration and global fixtures.
"""
import sys
import threading
import time
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.models import (
    BoundingBox,
    DetectedLine,
    LineCandidate,
    LineOrientation,
    RecognizedText,
    TextBlock,
)
from services.detectors import (
    HORIZONTAL_CONSTRAINTS,
    BaseRectangleDetector,
    BaseTextDetector,
)


@pytest.fixture
def make_block():
    """Factory for text blocks; (x, y) is the bottom-left corner."""
    def _make(index, x, y, text="text", width=0.1, height=0.02, confidence=0.9):
        return TextBlock(
            index=index,
            bounding_box=BoundingBox(x=x, y=y, width=width, height=height),
            candidates=(RecognizedText(text, confidence),)
        )
    return _make


@pytest.fixture
def make_candidate():
    """Factory for rectangle candidates."""
    def _make(x, y, width, height, confidence=0.8):
        return LineCandidate(
            bounding_box=BoundingBox(x=x, y=y, width=width, height=height),
            confidence=confidence
        )
    return _make


@pytest.fixture
def horizontal_line():
    """Factory for a horizontal rule at a given Y."""
    def _make(y, confidence=0.9, x1=0.05, x2=0.95):
        return DetectedLine(
            start_point=(x1, y),
            end_point=(x2, y),
            orientation=LineOrientation.HORIZONTAL,
            confidence=confidence
        )
    return _make


@pytest.fixture
def vertical_line():
    """Factory for a vertical divider at a given X."""
    def _make(x, confidence=0.9, y1=0.2, y2=0.8):
        return DetectedLine(
            start_point=(x, y1),
            end_point=(x, y2),
            orientation=LineOrientation.VERTICAL,
            confidence=confidence
        )
    return _make


@pytest.fixture
def temp_dir(tmp_path):
    """Provide temporary directory for test files."""
    return tmp_path


@pytest.fixture
def sample_image_path(temp_dir):
    """Create a sample test image."""
    from PIL import Image

    img_path = temp_dir / "test_image.png"
    img = Image.new('RGB', (800, 600), color='white')
    img.save(img_path)

    return str(img_path)


class FakeTextDetector(BaseTextDetector):
    """Text detector returning canned blocks (or raising)."""

    def __init__(self, blocks=None, error=None, delay=0.0):
        self.blocks = list(blocks or [])
        self.error = error
        self.delay = delay
        self.image_sizes = []
        self.started = threading.Event()

    def detect_text(self, image):
        self.image_sizes.append(image.size)
        self.started.set()
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.blocks)


class FakeRectangleDetector(BaseRectangleDetector):
    """Rectangle detector returning canned candidates per orientation pass."""

    def __init__(self, horizontal=None, vertical=None, contours=None, error=None):
        self.horizontal = list(horizontal or [])
        self.vertical = list(vertical or [])
        self.contours = list(contours or [])
        self.error = error
        self.contour_calls = 0

    def detect_rectangles(self, image, constraints):
        if self.error is not None:
            raise self.error
        if constraints is HORIZONTAL_CONSTRAINTS:
            return list(self.horizontal)
        return list(self.vertical)

    def detect_contours(self, image):
        self.contour_calls += 1
        return list(self.contours)


@pytest.fixture
def fake_text_detector():
    """Factory for FakeTextDetector."""
    return FakeTextDetector


@pytest.fixture
def fake_rectangle_detector():
    """Factory for FakeRectangleDetector."""
    return FakeRectangleDetector
