"""
Unit tests for services.opencv_detector module.
"""
import pytest
from PIL import Image, ImageDraw

from config.settings import Settings
from core.models import BoundingBox, LineCandidate
from services.detectors import HORIZONTAL_CONSTRAINTS, VERTICAL_CONSTRAINTS, RectangleConstraints
from services.opencv_detector import OpenCVRectangleDetector, satisfies_constraints
from spatial.line_classifier import (
    detect_horizontal_lines,
    find_vertical_line_in_contours,
    select_vertical_divider,
)


@pytest.fixture
def detector():
    return OpenCVRectangleDetector(Settings())


@pytest.fixture
def ruled_card():
    """White card with a rule at 1/4 height and a centred vertical divider."""
    img = Image.new('RGB', (1000, 800), color='white')
    draw = ImageDraw.Draw(img)
    draw.line([(100, 200), (900, 200)], fill='black', width=4)
    draw.line([(500, 250), (500, 700)], fill='black', width=4)
    return img


class TestDetectRectangles:
    """Tests for OpenCVRectangleDetector.detect_rectangles."""

    def test_horizontal_rule(self, detector, ruled_card):
        candidates = detector.detect_rectangles(ruled_card, HORIZONTAL_CONSTRAINTS)

        lines = detect_horizontal_lines(candidates)

        assert len(lines) == 1
        assert lines[0].position == pytest.approx(0.75, abs=0.01)
        assert lines[0].length == pytest.approx(0.8, abs=0.02)

    def test_vertical_divider(self, detector, ruled_card):
        candidates = detector.detect_rectangles(ruled_card, VERTICAL_CONSTRAINTS)

        divider = select_vertical_divider(candidates)

        assert divider is not None
        assert divider.position == pytest.approx(0.5, abs=0.01)

    def test_blank_image(self, detector):
        blank = Image.new('RGB', (600, 400), color='white')
        assert detector.detect_rectangles(blank, HORIZONTAL_CONSTRAINTS) == []


class TestDetectContours:
    """Tests for OpenCVRectangleDetector.detect_contours."""

    def test_vertical_stroke(self, detector):
        img = Image.new('RGB', (1000, 800), color='white')
        ImageDraw.Draw(img).line([(480, 100), (480, 700)], fill='black', width=4)

        contours = detector.detect_contours(img)
        line = find_vertical_line_in_contours(contours)

        assert line is not None
        assert line.position == pytest.approx(0.48, abs=0.01)
        assert all(0.0 <= c.confidence <= 1.0 for c in contours)


class TestSatisfiesConstraints:
    """Tests for satisfies_constraints function."""

    def test_small_box_rejected(self):
        candidate = LineCandidate(BoundingBox(0.1, 0.1, 0.02, 0.001), 0.9)
        assert not satisfies_constraints(candidate, HORIZONTAL_CONSTRAINTS)

    def test_low_confidence_rejected(self):
        candidate = LineCandidate(BoundingBox(0.1, 0.1, 0.5, 0.005), 0.1)

        assert not satisfies_constraints(candidate, HORIZONTAL_CONSTRAINTS)
        assert not satisfies_constraints(candidate, VERTICAL_CONSTRAINTS)

    def test_vertical_pass_accepts_fainter_lines(self):
        candidate = LineCandidate(BoundingBox(0.5, 0.1, 0.005, 0.6), 0.18)

        assert satisfies_constraints(candidate, VERTICAL_CONSTRAINTS)
        assert not satisfies_constraints(candidate, HORIZONTAL_CONSTRAINTS)

    def test_aspect_ratio_bounds(self):
        candidate = LineCandidate(BoundingBox(0.1, 0.1, 0.3, 0.3), 0.9)
        squares_only = RectangleConstraints(minimum_aspect_ratio=0.9)
        lines_only = RectangleConstraints(maximum_aspect_ratio=0.1)

        assert satisfies_constraints(candidate, squares_only)
        assert not satisfies_constraints(candidate, lines_only)
