"""
Base abstract classes for detection engines.

This defines the interface that text recognition and rectangle detection
engines must follow. Engines are synchronous and may block; the analyzer
runs them in worker threads.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from PIL import Image

from core.constants import HORIZONTAL_RECTANGLE_PARAMS, VERTICAL_RECTANGLE_PARAMS
from core.models import LineCandidate, TextBlock


@dataclass(frozen=True)
class RectangleConstraints:
    """Request parameters for a rectangle detection pass."""
    minimum_aspect_ratio: float = 0.0
    maximum_aspect_ratio: float = 1.0
    minimum_size: float = 0.05
    minimum_confidence: float = 0.2


HORIZONTAL_CONSTRAINTS = RectangleConstraints(**HORIZONTAL_RECTANGLE_PARAMS)
VERTICAL_CONSTRAINTS = RectangleConstraints(**VERTICAL_RECTANGLE_PARAMS)


class BaseTextDetector(ABC):
    """
    Abstract base class for text recognition engines.

    Implementations return one TextBlock per recognized line with at least
    one string candidate, boxes unit-normalized with a bottom-left origin,
    and indices numbered from 0 in output order.
    """

    @abstractmethod
    def detect_text(self, image: Image.Image) -> List[TextBlock]:
        """
        Recognize text in an image.

        Args:
            image: RGB image

        Returns:
            Recognized text blocks (may be empty)

        Raises:
            Exception: If the engine fails
        """
        pass


class BaseRectangleDetector(ABC):
    """
    Abstract base class for rectangle/contour detection engines.

    An empty result is legitimate; callers never require success.
    """

    @abstractmethod
    def detect_rectangles(
        self,
        image: Image.Image,
        constraints: RectangleConstraints
    ) -> List[LineCandidate]:
        """
        Detect rectangle candidates (rules and dividers look like thin rectangles).

        Args:
            image: RGB image
            constraints: Aspect ratio, size and confidence limits

        Returns:
            Candidates with unit-normalized boxes and confidences in [0, 1]
        """
        pass

    def detect_contours(self, image: Image.Image) -> List[LineCandidate]:
        """
        Detect edge contours as boxes with a strength score.

        Engines without contour support return nothing.
        """
        return []
