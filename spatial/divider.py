"""
Divider Resolver Module

Resolves the X position of the column divider. A drawn divider found by the
line classifier always wins; otherwise the whitespace gap between two text
columns is used as evidence of a divider that was never drawn.
"""
import logging
from typing import Optional, Sequence

from core.constants import TEXT_GAP_DIVIDER_PARAMS
from core.models import ColumnLayout, DetectedLine, ImageSize, TextBlock

logger = logging.getLogger(__name__)


def estimate_divider_from_text_gap(
    text_blocks: Sequence[TextBlock],
    min_blocks: int = TEXT_GAP_DIVIDER_PARAMS['min_blocks'],
    min_gap: float = TEXT_GAP_DIVIDER_PARAMS['min_gap']
) -> Optional[float]:
    """
    Guess the divider from the widest gap between text-block midpoints.

    Only gaps centred in (0.3, 0.7) are considered, so margins and ragged
    line ends do not count.

    Args:
        text_blocks: All recognized text blocks
        min_blocks: Minimum number of blocks needed to attempt a guess
        min_gap: Minimum accepted gap width (fraction of image width)

    Returns:
        Midpoint of the widest qualifying gap, or None
    """
    x_positions = sorted(block.bounding_box.mid_x for block in text_blocks)

    if len(x_positions) < min_blocks:
        return None

    low = TEXT_GAP_DIVIDER_PARAMS['min_mid_x']
    high = TEXT_GAP_DIVIDER_PARAMS['max_mid_x']

    max_gap = 0.0
    divider_position = None

    for left, right in zip(x_positions, x_positions[1:]):
        gap = right - left
        midpoint = (left + right) / 2

        if low < midpoint < high and gap > max_gap:
            max_gap = gap
            divider_position = midpoint

    if max_gap > min_gap:
        logger.debug("Text-gap divider at x=%.3f (gap=%.3f)", divider_position, max_gap)
        return divider_position

    return None


def resolve_divider(
    text_blocks: Sequence[TextBlock],
    vertical_divider: Optional[DetectedLine] = None
) -> Optional[float]:
    """
    Resolve the divider X position.

    Args:
        text_blocks: All recognized text blocks
        vertical_divider: Divider selected by the line classifier, if any

    Returns:
        Divider X, or None when neither signal is convincing
    """
    if vertical_divider is not None:
        return vertical_divider.position

    divider_x = estimate_divider_from_text_gap(text_blocks)

    if divider_x is None:
        logger.info("No column divider resolved; using default split")
    else:
        logger.info("Column divider inferred from text gap at x=%.3f", divider_x)

    return divider_x


def create_column_layout(
    divider_x: Optional[float],
    image_size: Optional[ImageSize] = None
) -> ColumnLayout:
    """Build the column layout for a resolved divider (or the default split)."""
    return ColumnLayout.from_divider(divider_x, image_size)
