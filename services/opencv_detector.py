"""
OpenCV rectangle detector.

Finds ruled lines on a recipe card with morphological opening: long
horizontal and vertical kernels keep only strokes that are much longer than
text strokes. Each surviving connected component becomes a thin rectangle
candidate whose confidence is its ink fill ratio.
"""
import logging
from typing import List, Optional

import cv2
import numpy as np
from PIL import Image

from config.settings import Settings, settings as default_settings
from core.models import LineCandidate
from utils.bbox_utils import normalize_bbox
from utils.image_utils import to_grayscale_array
from .detectors import BaseRectangleDetector, RectangleConstraints

logger = logging.getLogger(__name__)

MIN_KERNEL_PX = 15


def binarize(gray: np.ndarray) -> np.ndarray:
    """Otsu threshold with a light blur; ink becomes 255."""
    blur = cv2.GaussianBlur(gray, (3, 3), 0)
    _, bw = cv2.threshold(blur, 0, 255, cv2.THRESH_BINARY_INV + cv2.THRESH_OTSU)
    return bw


def extract_line_masks(binary: np.ndarray, kernel_ratio: int = 30):
    """
    Separate horizontal and vertical strokes.

    Args:
        binary: Binarized image (ink = 255)
        kernel_ratio: Kernel length as a fraction (1/ratio) of the image side

    Returns:
        Tuple of (horizontal mask, vertical mask)
    """
    h, w = binary.shape[:2]

    klen_h = max(MIN_KERNEL_PX, w // kernel_ratio)
    kernel_h = cv2.getStructuringElement(cv2.MORPH_RECT, (klen_h, 1))
    horiz = cv2.morphologyEx(binary, cv2.MORPH_OPEN, kernel_h)

    klen_v = max(MIN_KERNEL_PX, h // kernel_ratio)
    kernel_v = cv2.getStructuringElement(cv2.MORPH_RECT, (1, klen_v))
    vert = cv2.morphologyEx(binary, cv2.MORPH_OPEN, kernel_v)

    return horiz, vert


def components_to_candidates(mask: np.ndarray) -> List[LineCandidate]:
    """
    Convert connected components of a line mask into rectangle candidates.

    Args:
        mask: Binary line mask

    Returns:
        Candidates with normalized boxes; confidence = ink pixels / box area
    """
    h, w = mask.shape[:2]
    num_labels, _, stats, _ = cv2.connectedComponentsWithStats(mask, connectivity=8)
    candidates = []

    for i in range(1, num_labels):
        x, y, kw, kh, area = (int(v) for v in stats[i, :5])
        if kw <= 0 or kh <= 0:
            continue

        box = normalize_bbox({'x1': x, 'y1': y, 'x2': x + kw, 'y2': y + kh}, w, h)
        fill_ratio = area / float(kw * kh)

        candidates.append(LineCandidate(
            bounding_box=box,
            confidence=max(0.0, min(1.0, fill_ratio))
        ))

    return candidates


def satisfies_constraints(candidate: LineCandidate, constraints: RectangleConstraints) -> bool:
    """
    Check a candidate against request constraints.

    Aspect ratio is short side over long side (so 1.0 is a square); size is
    the longer normalized side.
    """
    box = candidate.bounding_box
    long_side = max(box.width, box.height)
    short_side = min(box.width, box.height)

    if long_side <= 0:
        return False

    aspect = short_side / long_side

    return (
        constraints.minimum_aspect_ratio <= aspect <= constraints.maximum_aspect_ratio
        and long_side >= constraints.minimum_size
        and candidate.confidence >= constraints.minimum_confidence
    )


class OpenCVRectangleDetector(BaseRectangleDetector):
    """Rectangle/contour detector backed by OpenCV morphology."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    def detect_rectangles(
        self,
        image: Image.Image,
        constraints: RectangleConstraints
    ) -> List[LineCandidate]:
        gray = to_grayscale_array(image)
        binary = binarize(gray)
        horiz, vert = extract_line_masks(binary, self.config.line_kernel_ratio)

        candidates = components_to_candidates(horiz) + components_to_candidates(vert)
        kept = [c for c in candidates if satisfies_constraints(c, constraints)]

        logger.debug(
            "Rectangle detection kept %d of %d candidates (min confidence %.2f)",
            len(kept), len(candidates), constraints.minimum_confidence
        )
        return kept

    def detect_contours(self, image: Image.Image) -> List[LineCandidate]:
        """
        Edge contours as boxes; strength is how closely the contour's length
        matches a straight stroke along the box's long side.
        """
        gray = to_grayscale_array(image)
        h, w = gray.shape[:2]
        edges = cv2.Canny(gray, 60, 160)
        contours, _ = cv2.findContours(edges, cv2.RETR_LIST, cv2.CHAIN_APPROX_SIMPLE)

        results = []
        for contour in contours:
            x, y, cw, ch = cv2.boundingRect(contour)
            long_side = max(cw, ch)
            if long_side <= 0:
                continue

            # A straight stroke traced on both sides measures ~2x its length
            strength = cv2.arcLength(contour, False) / (2.0 * long_side)

            results.append(LineCandidate(
                bounding_box=normalize_bbox({'x1': x, 'y1': y, 'x2': x + cw, 'y2': y + ch}, w, h),
                confidence=max(0.0, min(1.0, 1.0 / strength if strength > 1.0 else strength))
            ))

        logger.debug("Contour detection found %d contours", len(results))
        return results
