"""
Grouping Module

Groups ingredient text blocks into rows:
- Row clustering: blocks whose vertical midpoints are close share a row,
  regardless of column (rows span both columns)
- Column assignment: each row is split into left/right content at the divider
"""
from typing import Iterable, List, Optional, Sequence, Set, Tuple
import logging
import statistics

from core.constants import ROW_GROUPING_PARAMS
from core.models import Column, ColumnLayout, IngredientRow, TextBlock

logger = logging.getLogger(__name__)


def estimate_average_height(blocks: Sequence[TextBlock]) -> float:
    """
    Mean height of the given blocks.

    Args:
        blocks: Text blocks (non-empty)

    Returns:
        Average box height in normalized units
    """
    return statistics.fmean(b.bounding_box.height for b in blocks)


def calculate_row_threshold(
    blocks: Sequence[TextBlock],
    height_multiplier: float = ROW_GROUPING_PARAMS['height_multiplier'],
    min_threshold: float = ROW_GROUPING_PARAMS['min_threshold']
) -> float:
    """
    Adaptive same-row tolerance: 1.5x the average text height, at least 1.5%.

    Args:
        blocks: Blocks being grouped
        height_multiplier: Multiple of the average height
        min_threshold: Lower bound for small or tightly set text

    Returns:
        Maximum midpoint distance for two blocks to share a row
    """
    if not blocks:
        return min_threshold
    return max(estimate_average_height(blocks) * height_multiplier, min_threshold)


def split_columns(
    blocks: Iterable[TextBlock],
    column_layout: ColumnLayout
) -> Tuple[Tuple[TextBlock, ...], Tuple[TextBlock, ...]]:
    """
    Partition row members into left and right columns, each in reading order.

    Args:
        blocks: Row members
        column_layout: Resolved column layout

    Returns:
        Tuple of (left blocks, right blocks), each sorted by ascending X
    """
    left = []
    right = []

    for block in blocks:
        if column_layout.column_for_block(block) is Column.LEFT:
            left.append(block)
        else:
            right.append(block)

    left.sort(key=lambda b: b.bounding_box.min_x)
    right.sort(key=lambda b: b.bounding_box.min_x)

    return tuple(left), tuple(right)


def create_row(blocks: Sequence[TextBlock], column_layout: ColumnLayout) -> IngredientRow:
    """Create an IngredientRow spanning the given blocks."""
    min_y = min(b.bounding_box.min_y for b in blocks)
    max_y = max(b.bounding_box.max_y for b in blocks)

    left, right = split_columns(blocks, column_layout)

    return IngredientRow(
        y_position=min_y,
        height=max_y - min_y,
        left_column_blocks=left,
        right_column_blocks=right
    )


def group_into_rows(
    text_blocks: Sequence[TextBlock],
    column_layout: ColumnLayout,
    row_threshold: Optional[float] = None
) -> List[IngredientRow]:
    """
    Group ingredient blocks into rows spanning both columns.

    Each unassigned block (top to bottom) seeds a row and absorbs every other
    unassigned block whose vertical midpoint is within the row threshold of
    the seed's midpoint.

    Args:
        text_blocks: Ingredient text blocks
        column_layout: Resolved column layout
        row_threshold: Optional pre-computed tolerance

    Returns:
        Rows ordered top to bottom (descending Y)
    """
    if not text_blocks:
        return []

    if row_threshold is None:
        row_threshold = calculate_row_threshold(text_blocks)

    # Bottom-left origin: highest midpoint first
    sorted_blocks = sorted(text_blocks, key=lambda b: -b.bounding_box.mid_y)

    rows = []
    assigned: Set[int] = set()

    for block in sorted_blocks:
        if block.index in assigned:
            continue

        reference_y = block.bounding_box.mid_y
        row_blocks = [block]
        assigned.add(block.index)

        for other in sorted_blocks:
            if other.index in assigned:
                continue

            if abs(other.bounding_box.mid_y - reference_y) < row_threshold:
                row_blocks.append(other)
                assigned.add(other.index)

        rows.append(create_row(row_blocks, column_layout))

    rows.sort(key=lambda r: -r.y_position)

    logger.info(
        "Grouped %d ingredient blocks into %d rows (threshold=%.4f)",
        len(text_blocks), len(rows), row_threshold
    )

    return rows
