"""Core package - Domain models, constants and errors."""

from .models import (
    BoundingBox,
    ImageSize,
    RecognizedText,
    TextBlock,
    LineCandidate,
    LineOrientation,
    DetectedLine,
    SectionType,
    RecipeSection,
    Column,
    ColumnLayout,
    IngredientRow,
    RecipeAnalysis,
    DetectionResult,
)
from .constants import (
    METADATA_KEYWORDS,
    INGREDIENT_KEYWORDS,
    DEFAULT_COLUMN_SPLIT,
    MIN_RECOMMENDED_DIMENSION,
)
from .exceptions import (
    RecipeAnalysisError,
    InvalidImageError,
    NoTextDetectedError,
)

__all__ = [
    'BoundingBox',
    'ImageSize',
    'RecognizedText',
    'TextBlock',
    'LineCandidate',
    'LineOrientation',
    'DetectedLine',
    'SectionType',
    'RecipeSection',
    'Column',
    'ColumnLayout',
    'IngredientRow',
    'RecipeAnalysis',
    'DetectionResult',
    'METADATA_KEYWORDS',
    'INGREDIENT_KEYWORDS',
    'DEFAULT_COLUMN_SPLIT',
    'MIN_RECOMMENDED_DIMENSION',
    'RecipeAnalysisError',
    'InvalidImageError',
    'NoTextDetectedError',
]
