"""Spatial analysis package - Layout inference for recipe cards."""

from .line_classifier import (
    classify_horizontal_line,
    classify_vertical_line,
    detect_horizontal_lines,
    detect_vertical_candidates,
    select_best_line,
    select_vertical_divider,
    find_vertical_line_in_contours,
)

from .divider import (
    estimate_divider_from_text_gap,
    resolve_divider,
    create_column_layout,
)

from .segmentation import (
    is_metadata_block,
    extract_metadata_cluster,
    segment_by_bands,
    segment_by_single_line,
    segment_by_lines,
    segment_sections,
)

from .ingredient_heuristic import (
    looks_like_ingredient,
    find_metadata_floor,
    detect_ingredient_blocks,
)

from .grouping import (
    calculate_row_threshold,
    split_columns,
    create_row,
    group_into_rows,
)

__all__ = [
    # Line classification
    'classify_horizontal_line',
    'classify_vertical_line',
    'detect_horizontal_lines',
    'detect_vertical_candidates',
    'select_best_line',
    'select_vertical_divider',
    'find_vertical_line_in_contours',

    # Divider resolution
    'estimate_divider_from_text_gap',
    'resolve_divider',
    'create_column_layout',

    # Segmentation
    'is_metadata_block',
    'extract_metadata_cluster',
    'segment_by_bands',
    'segment_by_single_line',
    'segment_by_lines',
    'segment_sections',

    # Ingredient heuristic
    'looks_like_ingredient',
    'find_metadata_floor',
    'detect_ingredient_blocks',

    # Row grouping
    'calculate_row_threshold',
    'split_columns',
    'create_row',
    'group_into_rows',
]
