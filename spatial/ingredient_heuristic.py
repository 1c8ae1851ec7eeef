"""
Ingredient Heuristic Module

Fallback used only when segmentation produced no ingredients section.
Ingredient lines nearly always carry a quantity (digit, fraction glyph or
unit word) and are short, so blocks are picked by pattern and position.
When too few match, the search widens to every block in the usual
ingredient band.
"""
import logging
from typing import List, Optional, Sequence, Set

from core.constants import INGREDIENT_HEURISTIC_PARAMS, INGREDIENT_KEYWORDS
from core.models import TextBlock
from utils.text_utils import contains_digit, contains_keyword
from .segmentation import is_metadata_block

logger = logging.getLogger(__name__)


def looks_like_ingredient(text: str) -> bool:
    """
    Check the text pattern of an ingredient line.

    Args:
        text: Recognized text

    Returns:
        True for short text with a digit or an ingredient keyword
    """
    if len(text) >= INGREDIENT_HEURISTIC_PARAMS['max_text_length']:
        return False
    return contains_digit(text) or contains_keyword(text, INGREDIENT_KEYWORDS)


def find_metadata_floor(text_blocks: Sequence[TextBlock]) -> Optional[float]:
    """
    Lowest box bottom among metadata-like blocks.

    Args:
        text_blocks: All text blocks

    Returns:
        Minimum min_y of metadata blocks, or None if there are none
    """
    floors = [b.bounding_box.min_y for b in text_blocks if is_metadata_block(b)]
    return min(floors) if floors else None


def detect_ingredient_blocks(
    text_blocks: Sequence[TextBlock],
    divider_x: Optional[float] = None
) -> List[TextBlock]:
    """
    Select ingredient-like blocks directly from all text blocks.

    Args:
        text_blocks: All recognized text blocks
        divider_x: Resolved divider (reported for tuning; selection does not depend on it)

    Returns:
        Ingredient blocks: pattern matches first, then widened-pass additions
    """
    params = INGREDIENT_HEURISTIC_PARAMS

    metadata_indices: Set[int] = {b.index for b in text_blocks if is_metadata_block(b)}
    metadata_floor = find_metadata_floor(text_blocks)

    def below_metadata(block: TextBlock) -> bool:
        return metadata_floor is None or block.bounding_box.max_y < metadata_floor

    candidates: List[TextBlock] = []
    selected: Set[int] = set()

    for block in text_blocks:
        if block.index in metadata_indices or not below_metadata(block):
            continue

        y = block.bounding_box.mid_y
        if not params['min_y'] <= y <= params['max_y']:
            continue

        if looks_like_ingredient(block.top_text.lower()):
            candidates.append(block)
            selected.add(block.index)

    if len(candidates) < params['min_candidates']:
        widened = 0

        for block in text_blocks:
            if block.index in metadata_indices or block.index in selected:
                continue
            if not below_metadata(block):
                continue

            y = block.bounding_box.mid_y
            if params['widened_min_y'] <= y <= params['widened_max_y']:
                candidates.append(block)
                selected.add(block.index)
                widened += 1

        logger.debug("Widened ingredient search added %d blocks", widened)

    logger.info(
        "Ingredient heuristic selected %d blocks (metadata floor=%s, divider=%s)",
        len(candidates),
        f"{metadata_floor:.3f}" if metadata_floor is not None else "none",
        f"{divider_x:.3f}" if divider_x is not None else "none"
    )

    return candidates
