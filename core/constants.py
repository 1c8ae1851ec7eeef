"""
Constants and configuration values for recipe card layout inference.

All coordinates are unit-normalized (0.0 - 1.0) with the origin at the
bottom-left corner of the image and Y increasing upward.
"""

# Line classification thresholds
HORIZONTAL_LINE_THRESHOLDS = {
    'min_aspect_ratio': 8.0,   # width / height
    'min_width': 0.4,
}

VERTICAL_DIVIDER_THRESHOLDS = {
    'max_aspect_ratio': 0.15,  # width / height
    'min_height': 0.2,
    'min_mid_x': 0.25,         # exclusive
    'max_mid_x': 0.75,         # exclusive
}

# Edge/contour divider detection (secondary geometric signal)
CONTOUR_DIVIDER_THRESHOLDS = {
    'min_height': 0.3,
    'max_width': 0.05,
    'min_mid_x': 0.3,
    'max_mid_x': 0.7,
    'line_start_y': 0.2,
    'line_end_y': 0.8,
}

# Text-gap divider heuristic
TEXT_GAP_DIVIDER_PARAMS = {
    'min_blocks': 6,
    'min_mid_x': 0.3,          # exclusive
    'max_mid_x': 0.7,          # exclusive
    'min_gap': 0.05,           # 5% of image width
}

# Default split when no divider is found
DEFAULT_COLUMN_SPLIT = 0.6

# Section bands used when no horizontal rules are detected
SECTION_BANDS = {
    'title_min_y': 0.85,       # mid_y > 0.85
    'instructions_max_y': 0.3,  # mid_y < 0.3
}

# Same-line tolerance for the metadata cluster at the top of the ingredient band
METADATA_CLUSTER_TOLERANCE = 0.015

# Ingredient heuristic bands
INGREDIENT_HEURISTIC_PARAMS = {
    'min_y': 0.3,
    'max_y': 0.9,
    'max_text_length': 30,
    'min_candidates': 5,
    'widened_min_y': 0.4,
    'widened_max_y': 0.85,
}

# Row grouping
ROW_GROUPING_PARAMS = {
    'height_multiplier': 1.5,
    'min_threshold': 0.015,
}

# Preprocessing
MIN_RECOMMENDED_DIMENSION = 1000

# Lines that describe the recipe rather than list an ingredient
METADATA_KEYWORDS = (
    'makes',
    'yield',
    'serves',
    'serving',
    'preparation time',
    'prep time',
    'cook time',
    'total time',
    'difficulty',
)

# Units, vulgar fractions and size/prep adjectives
INGREDIENT_KEYWORDS = (
    'tsp', 'tbsp', 'cup', 'ml', 'oz', 'lb', 'kg', 'g',
    '½', '¼', '⅓', '⅔', '¾', '⅛',
    'medium', 'large', 'small', 'chopped', 'sliced', 'diced',
)

# Rectangle detection request parameters (per orientation)
HORIZONTAL_RECTANGLE_PARAMS = {
    'minimum_aspect_ratio': 0.0,
    'maximum_aspect_ratio': 1.0,
    'minimum_size': 0.05,
    'minimum_confidence': 0.2,
}

VERTICAL_RECTANGLE_PARAMS = {
    'minimum_aspect_ratio': 0.0,
    'maximum_aspect_ratio': 1.0,
    'minimum_size': 0.05,
    'minimum_confidence': 0.15,
}
