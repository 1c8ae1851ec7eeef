"""Services package - Detection engines and the recipe analyzer."""

from .detectors import (
    RectangleConstraints,
    HORIZONTAL_CONSTRAINTS,
    VERTICAL_CONSTRAINTS,
    BaseTextDetector,
    BaseRectangleDetector,
)
from .recipe_analyzer import RecipeAnalyzer, assemble_analysis

__all__ = [
    'RectangleConstraints',
    'HORIZONTAL_CONSTRAINTS',
    'VERTICAL_CONSTRAINTS',
    'BaseTextDetector',
    'BaseRectangleDetector',
    'RecipeAnalyzer',
    'assemble_analysis',
]
