"""
Line Classifier Module

Turns raw rectangle candidates into detected lines:
- Horizontal rules: long, thin boxes spanning a good part of the card
- Vertical divider: tall, thin box near the middle of the card

Orientation is assigned from the box geometry, never detected directly.
"""
import logging
from typing import Iterable, List, Optional, Sequence

from core.constants import (
    CONTOUR_DIVIDER_THRESHOLDS,
    HORIZONTAL_LINE_THRESHOLDS,
    VERTICAL_DIVIDER_THRESHOLDS,
)
from core.models import BoundingBox, DetectedLine, LineCandidate, LineOrientation

logger = logging.getLogger(__name__)


def classify_horizontal_line(candidate: LineCandidate) -> Optional[DetectedLine]:
    """
    Classify a candidate as a horizontal rule.

    Args:
        candidate: Rectangle candidate

    Returns:
        Line along the box's horizontal midline, or None
    """
    box = candidate.bounding_box

    if (box.aspect_ratio > HORIZONTAL_LINE_THRESHOLDS['min_aspect_ratio']
            and box.width > HORIZONTAL_LINE_THRESHOLDS['min_width']):
        return DetectedLine(
            start_point=(box.min_x, box.mid_y),
            end_point=(box.max_x, box.mid_y),
            orientation=LineOrientation.HORIZONTAL,
            confidence=candidate.confidence
        )

    return None


def classify_vertical_line(candidate: LineCandidate) -> Optional[DetectedLine]:
    """
    Classify a candidate as a vertical column divider.

    Margins are excluded: the midpoint must lie strictly between 0.25 and 0.75.

    Args:
        candidate: Rectangle candidate

    Returns:
        Line along the box's vertical midline, or None
    """
    box = candidate.bounding_box
    t = VERTICAL_DIVIDER_THRESHOLDS

    if (box.aspect_ratio < t['max_aspect_ratio']
            and box.height > t['min_height']
            and t['min_mid_x'] < box.mid_x < t['max_mid_x']):
        return DetectedLine(
            start_point=(box.mid_x, box.min_y),
            end_point=(box.mid_x, box.max_y),
            orientation=LineOrientation.VERTICAL,
            confidence=candidate.confidence
        )

    return None


def detect_horizontal_lines(candidates: Iterable[LineCandidate]) -> List[DetectedLine]:
    """
    Filter candidates down to horizontal rules, keeping input order.

    Args:
        candidates: Rectangle candidates (may be empty)

    Returns:
        Horizontal lines
    """
    lines = []

    for candidate in candidates:
        line = classify_horizontal_line(candidate)
        if line is not None:
            lines.append(line)

    logger.debug("Detected %d horizontal lines", len(lines))
    for i, line in enumerate(lines):
        logger.debug(
            "  Line %d: y=%.3f, width=%.3f, confidence=%.2f",
            i + 1, line.position, line.length, line.confidence
        )

    return lines


def detect_vertical_candidates(candidates: Iterable[LineCandidate]) -> List[DetectedLine]:
    """All candidates that qualify as a vertical divider, in input order."""
    lines = []

    for candidate in candidates:
        line = classify_vertical_line(candidate)
        if line is not None:
            lines.append(line)

    return lines


def select_best_line(lines: Sequence[DetectedLine]) -> Optional[DetectedLine]:
    """
    Highest-confidence line; ties keep the first encountered.

    Args:
        lines: Candidate lines

    Returns:
        Best line or None for an empty sequence
    """
    best = None

    for line in lines:
        if best is None or line.confidence > best.confidence:
            best = line

    return best


def select_vertical_divider(candidates: Iterable[LineCandidate]) -> Optional[DetectedLine]:
    """
    Select the vertical divider from rectangle candidates.

    Args:
        candidates: Rectangle candidates (may be empty)

    Returns:
        Most confident vertical divider, or None if no candidate qualifies
    """
    vertical_lines = detect_vertical_candidates(candidates)

    logger.debug("Found %d vertical line candidates", len(vertical_lines))
    for i, line in enumerate(vertical_lines):
        logger.debug(
            "  Candidate %d: x=%.3f, height=%.3f, confidence=%.2f",
            i + 1, line.position, line.length, line.confidence
        )

    best = select_best_line(vertical_lines)

    if best is not None:
        logger.info("Selected vertical divider at x=%.3f", best.position)
    else:
        logger.info("No vertical divider detected")

    return best


def find_vertical_line_in_contours(
    contours: Iterable[LineCandidate]
) -> Optional[DetectedLine]:
    """
    Find a strong vertical stroke among edge contours.

    Contours are stricter than rectangles: a qualifying contour is taller than
    0.3, narrower than 0.05 and centred in (0.3, 0.7). The strongest wins and
    is reported as a fixed-length line from y=0.2 to y=0.8.

    Args:
        contours: Contour bounding boxes with a strength score

    Returns:
        Vertical line or None
    """
    t = CONTOUR_DIVIDER_THRESHOLDS
    best: Optional[LineCandidate] = None

    for contour in contours:
        box: BoundingBox = contour.bounding_box
        if (box.height > t['min_height']
                and box.width < t['max_width']
                and t['min_mid_x'] < box.mid_x < t['max_mid_x']):
            if best is None or contour.confidence > best.confidence:
                best = contour

    if best is None:
        return None

    x = best.bounding_box.mid_x
    return DetectedLine(
        start_point=(x, t['line_start_y']),
        end_point=(x, t['line_end_y']),
        orientation=LineOrientation.VERTICAL,
        confidence=best.confidence
    )
