"""
Section Segmentation Module

Partitions the text blocks of a recipe card into ordered logical sections:
- Horizontal rules split title / ingredients / instructions
- Without rules, fixed vertical bands are used
- A yield/serving line at the top of the ingredient band becomes metadata

Membership is tracked by block index, never by object identity.
"""
import logging
from typing import List, Sequence, Set, Tuple

from core.constants import (
    METADATA_CLUSTER_TOLERANCE,
    METADATA_KEYWORDS,
    SECTION_BANDS,
)
from core.models import DetectedLine, RecipeSection, SectionType, TextBlock
from utils.text_utils import contains_keyword

logger = logging.getLogger(__name__)


def is_metadata_block(block: TextBlock) -> bool:
    """True if the block reads like yield, serving or timing information."""
    return contains_keyword(block.top_text, METADATA_KEYWORDS)


def extract_metadata_cluster(
    candidates: Sequence[TextBlock],
    tolerance: float = METADATA_CLUSTER_TOLERANCE
) -> Tuple[List[TextBlock], List[TextBlock]]:
    """
    Split the topmost text cluster off the ingredient candidates if it is metadata.

    The cluster is every candidate whose vertical midpoint lies within
    `tolerance` of the highest candidate's midpoint (a single visual line,
    possibly spanning both columns).

    Args:
        candidates: Ingredient candidate blocks
        tolerance: Same-line tolerance in normalized units

    Returns:
        Tuple of (metadata blocks, remaining ingredient blocks); the metadata
        list is empty when no cluster member matches a metadata keyword
    """
    if not candidates:
        return [], list(candidates)

    top_y = max(block.bounding_box.mid_y for block in candidates)
    cluster = [
        block for block in candidates
        if abs(block.bounding_box.mid_y - top_y) < tolerance
    ]

    if not any(is_metadata_block(block) for block in cluster):
        return [], list(candidates)

    # Topmost first, as read
    cluster.sort(key=lambda b: -b.bounding_box.mid_y)
    cluster_indices: Set[int] = {block.index for block in cluster}
    remaining = [block for block in candidates if block.index not in cluster_indices]

    logger.debug(
        "Metadata line at y=%.3f: %s",
        top_y, " | ".join(block.top_text for block in cluster)
    )

    return cluster, remaining


def _ingredient_sections(candidates: Sequence[TextBlock]) -> List[RecipeSection]:
    """Metadata (if any) followed by ingredients for a candidate band."""
    sections = []
    metadata, ingredients = extract_metadata_cluster(candidates)

    if metadata:
        sections.append(RecipeSection.from_blocks(SectionType.METADATA, metadata))
    if ingredients:
        sections.append(RecipeSection.from_blocks(SectionType.INGREDIENTS, ingredients))

    return sections


def segment_by_bands(text_blocks: Sequence[TextBlock]) -> List[RecipeSection]:
    """
    Segment a card with no horizontal rules using fixed vertical bands.

    Args:
        text_blocks: All text blocks

    Returns:
        Title (mid_y > 0.85), ingredients (0.3 - 0.85) and instructions
        (mid_y < 0.3) sections, skipping empty bands
    """
    title_min_y = SECTION_BANDS['title_min_y']
    instructions_max_y = SECTION_BANDS['instructions_max_y']

    # Top to bottom
    ordered = sorted(text_blocks, key=lambda b: -b.bounding_box.mid_y)

    title = [b for b in ordered if b.bounding_box.mid_y > title_min_y]
    ingredients = [
        b for b in ordered
        if instructions_max_y <= b.bounding_box.mid_y <= title_min_y
    ]
    instructions = [b for b in ordered if b.bounding_box.mid_y < instructions_max_y]

    sections = []
    if title:
        sections.append(RecipeSection.from_blocks(SectionType.TITLE, title))
    if ingredients:
        sections.append(RecipeSection.from_blocks(SectionType.INGREDIENTS, ingredients))
    if instructions:
        sections.append(RecipeSection.from_blocks(SectionType.INSTRUCTIONS, instructions))

    return sections


def segment_by_single_line(
    text_blocks: Sequence[TextBlock],
    line: DetectedLine
) -> List[RecipeSection]:
    """
    Segment a card with exactly one horizontal rule.

    A lone rule cannot tell a title rule from an instructions rule, so no
    title is produced and every block is an ingredient candidate; the
    topmost cluster is split off as metadata when it matches.

    Args:
        text_blocks: All text blocks
        line: The single horizontal rule

    Returns:
        Optional metadata section followed by the ingredients section
    """
    logger.debug("Single horizontal rule at y=%.3f", line.position)
    return _ingredient_sections(list(text_blocks))


def segment_by_lines(
    text_blocks: Sequence[TextBlock],
    top_line: DetectedLine,
    bottom_line: DetectedLine
) -> List[RecipeSection]:
    """
    Segment a card using its two topmost horizontal rules.

    Args:
        text_blocks: All text blocks
        top_line: Highest rule (Y0)
        bottom_line: Second-highest rule (Y1 < Y0)

    Returns:
        Title, metadata, ingredients and instructions sections (non-empty only)
    """
    top_y = top_line.position
    bottom_y = bottom_line.position
    sections = []

    title = [b for b in text_blocks if b.bounding_box.min_y > top_y]
    if title:
        sections.append(RecipeSection.from_blocks(SectionType.TITLE, title))

    candidates = [
        b for b in text_blocks
        if bottom_y < b.bounding_box.mid_y < top_y
    ]
    sections.extend(_ingredient_sections(candidates))

    instructions = [b for b in text_blocks if b.bounding_box.max_y < bottom_y]
    if instructions:
        sections.append(RecipeSection.from_blocks(SectionType.INSTRUCTIONS, instructions))

    return sections


def segment_sections(
    text_blocks: Sequence[TextBlock],
    horizontal_lines: Sequence[DetectedLine]
) -> List[RecipeSection]:
    """
    Partition text blocks into ordered recipe sections.

    Args:
        text_blocks: All recognized text blocks
        horizontal_lines: Horizontal rules in any order

    Returns:
        Ordered sections; a block belongs to at most one section
    """
    # Bottom-left origin: highest Y is the top of the card
    sorted_lines = sorted(horizontal_lines, key=lambda line: -line.position)

    if not sorted_lines:
        sections = segment_by_bands(text_blocks)
    elif len(sorted_lines) == 1:
        sections = segment_by_single_line(text_blocks, sorted_lines[0])
    else:
        # Rules beyond the first two are not used
        sections = segment_by_lines(text_blocks, sorted_lines[0], sorted_lines[1])

    logger.info(
        "Segmented %d blocks into sections: %s",
        len(text_blocks),
        ", ".join(f"{s.type.value}({len(s.text_blocks)})" for s in sections) or "none"
    )

    return sections
