"""
Core domain models for recipe card analysis.

These are pure data structures without business logic. Every model is
immutable once constructed and owned by the RecipeAnalysis it ends up in.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .constants import DEFAULT_COLUMN_SPLIT


Point = Tuple[float, float]


@dataclass(frozen=True)
class BoundingBox:
    """Unit-normalized box, origin bottom-left, Y increasing upward."""
    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def min_y(self) -> float:
        """Box bottom."""
        return self.y

    @property
    def max_y(self) -> float:
        """Box top."""
        return self.y + self.height

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2

    @property
    def aspect_ratio(self) -> float:
        """Width over height (infinite for zero-height boxes)."""
        if self.height <= 0:
            return float('inf')
        return self.width / self.height

    @classmethod
    def union(cls, boxes: Iterable['BoundingBox']) -> 'BoundingBox':
        """
        Smallest box containing all given boxes.

        Args:
            boxes: Boxes to combine

        Returns:
            Combined box, or a zero box when no boxes are given
        """
        boxes = list(boxes)
        if not boxes:
            return cls(0.0, 0.0, 0.0, 0.0)

        min_x = min(b.min_x for b in boxes)
        max_x = max(b.max_x for b in boxes)
        min_y = min(b.min_y for b in boxes)
        max_y = max(b.max_y for b in boxes)

        return cls(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height
        }


@dataclass(frozen=True)
class ImageSize:
    """Image dimensions in pixels."""
    width: int
    height: int

    @property
    def max_dimension(self) -> int:
        return max(self.width, self.height)

    def to_dict(self) -> dict:
        return {'width': self.width, 'height': self.height}


@dataclass(frozen=True)
class RecognizedText:
    """One ranked recognition candidate for a text block."""
    string: str
    confidence: float = 1.0


@dataclass(frozen=True)
class TextBlock:
    """
    A recognized text block.

    `index` is assigned at ingestion and is the block's identity: two blocks
    may carry identical text, so membership is always tracked by index.
    """
    index: int
    bounding_box: BoundingBox
    candidates: Tuple[RecognizedText, ...] = ()

    @property
    def top_text(self) -> str:
        """Highest-ranked recognized string ('' if there is none)."""
        if not self.candidates:
            return ""
        return self.candidates[0].string

    @property
    def confidence(self) -> float:
        if not self.candidates:
            return 0.0
        return self.candidates[0].confidence

    def to_dict(self) -> dict:
        return {
            'index': self.index,
            'text': self.top_text,
            'confidence': self.confidence,
            'bbox': self.bounding_box.to_dict()
        }


@dataclass(frozen=True)
class LineCandidate:
    """Rectangle/contour candidate reported by the line source."""
    bounding_box: BoundingBox
    confidence: float


class LineOrientation(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class DetectedLine:
    """A line segment derived from a LineCandidate."""
    start_point: Point
    end_point: Point
    orientation: LineOrientation
    confidence: float

    @property
    def position(self) -> float:
        """Y for horizontal lines, X for vertical lines."""
        if self.orientation is LineOrientation.HORIZONTAL:
            return self.start_point[1]
        return self.start_point[0]

    @property
    def length(self) -> float:
        if self.orientation is LineOrientation.HORIZONTAL:
            return self.end_point[0] - self.start_point[0]
        return self.end_point[1] - self.start_point[1]

    def to_dict(self) -> dict:
        return {
            'start': list(self.start_point),
            'end': list(self.end_point),
            'orientation': self.orientation.value,
            'confidence': self.confidence
        }


class SectionType(Enum):
    """Logical zones of a recipe card."""
    TITLE = "title"
    METADATA = "metadata"          # yield, serving info
    INGREDIENTS = "ingredients"
    INSTRUCTIONS = "instructions"
    VARIATIONS = "variations"      # reserved, never produced


@dataclass(frozen=True)
class RecipeSection:
    """A section of the card and the text blocks assigned to it."""
    type: SectionType
    bounding_box: BoundingBox
    text_blocks: Tuple[TextBlock, ...]

    @classmethod
    def from_blocks(cls, section_type: SectionType, blocks: Iterable[TextBlock]) -> 'RecipeSection':
        blocks = tuple(blocks)
        return cls(
            type=section_type,
            bounding_box=BoundingBox.union(b.bounding_box for b in blocks),
            text_blocks=blocks
        )

    @property
    def text(self) -> str:
        return "\n".join(b.top_text for b in self.text_blocks)

    def to_dict(self) -> dict:
        return {
            'type': self.type.value,
            'bbox': self.bounding_box.to_dict(),
            'blocks': [b.to_dict() for b in self.text_blocks]
        }


class Column(Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class ColumnLayout:
    """Resolved column geometry of the card."""
    vertical_divider_x: Optional[float]
    left_column_bounds: BoundingBox
    right_column_bounds: Optional[BoundingBox]
    image_size: Optional[ImageSize] = None

    @classmethod
    def from_divider(
        cls,
        divider_x: Optional[float],
        image_size: Optional[ImageSize] = None
    ) -> 'ColumnLayout':
        """
        Build a layout from an optional divider position.

        Without a divider the card is assumed to split at 0.6 (wide left
        column, narrow right column).
        """
        split = divider_x if divider_x is not None else DEFAULT_COLUMN_SPLIT

        return cls(
            vertical_divider_x=divider_x,
            left_column_bounds=BoundingBox(0.0, 0.0, split, 1.0),
            right_column_bounds=BoundingBox(split, 0.0, 1.0 - split, 1.0),
            image_size=image_size
        )

    @property
    def split_x(self) -> float:
        if self.vertical_divider_x is not None:
            return self.vertical_divider_x
        return DEFAULT_COLUMN_SPLIT

    def column_for_block(self, block: TextBlock) -> Column:
        """Left iff the block's horizontal midpoint lies left of the split."""
        return Column.LEFT if block.bounding_box.mid_x < self.split_x else Column.RIGHT

    def to_dict(self) -> dict:
        return {
            'vertical_divider_x': self.vertical_divider_x,
            'left_column_bounds': self.left_column_bounds.to_dict(),
            'right_column_bounds': (
                self.right_column_bounds.to_dict() if self.right_column_bounds else None
            ),
            'image_size': self.image_size.to_dict() if self.image_size else None
        }


@dataclass(frozen=True)
class IngredientRow:
    """One horizontal line of ingredient text spanning both columns."""
    y_position: float
    height: float
    left_column_blocks: Tuple[TextBlock, ...] = ()
    right_column_blocks: Tuple[TextBlock, ...] = ()

    @property
    def bounding_box(self) -> BoundingBox:
        return BoundingBox(0.0, self.y_position, 1.0, self.height)

    @property
    def left_text(self) -> str:
        return " ".join(b.top_text for b in self.left_column_blocks)

    @property
    def right_text(self) -> str:
        return " ".join(b.top_text for b in self.right_column_blocks)

    def to_dict(self) -> dict:
        return {
            'y_position': self.y_position,
            'height': self.height,
            'left': [b.to_dict() for b in self.left_column_blocks],
            'right': [b.to_dict() for b in self.right_column_blocks]
        }


@dataclass(frozen=True)
class RecipeAnalysis:
    """Aggregate result of analyzing one recipe card image."""
    sections: Tuple[RecipeSection, ...]
    column_layout: ColumnLayout
    ingredient_rows: Tuple[IngredientRow, ...]
    image_size: ImageSize
    original_image_size: Optional[ImageSize] = None

    @property
    def was_upscaled(self) -> bool:
        return (
            self.original_image_size is not None
            and self.original_image_size != self.image_size
        )

    def section(self, section_type: SectionType) -> Optional[RecipeSection]:
        """First section of the given type, if any."""
        for section in self.sections:
            if section.type is section_type:
                return section
        return None

    def to_dict(self) -> dict:
        """Convert to a JSON-ready dictionary."""
        return {
            'sections': [s.to_dict() for s in self.sections],
            'column_layout': self.column_layout.to_dict(),
            'ingredient_rows': [r.to_dict() for r in self.ingredient_rows],
            'image_size': self.image_size.to_dict(),
            'original_image_size': (
                self.original_image_size.to_dict() if self.original_image_size else None
            ),
            'was_upscaled': self.was_upscaled
        }


@dataclass(frozen=True)
class DetectionResult:
    """
    Outcome of an optional detection.

    Distinguishes "ran and found nothing" from "failed"; the analysis stages
    only ever see `items_or_empty()`.
    """
    items: Tuple = ()
    error: Optional[BaseException] = field(default=None, compare=False)

    @classmethod
    def ok(cls, items: Iterable) -> 'DetectionResult':
        return cls(items=tuple(items))

    @classmethod
    def failed(cls, error: BaseException) -> 'DetectionResult':
        return cls(items=(), error=error)

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def items_or_empty(self) -> List:
        return list(self.items)
