"""
Unit tests for core.models module.
"""
import dataclasses
import math

import pytest
from core.models import (
    BoundingBox,
    Column,
    ColumnLayout,
    DetectedLine,
    DetectionResult,
    ImageSize,
    IngredientRow,
    LineOrientation,
    RecipeAnalysis,
    RecipeSection,
    SectionType,
    TextBlock,
)


class TestBoundingBox:
    """Tests for BoundingBox dataclass."""

    def test_derived_edges(self):
        """Test min/max/mid values for a bottom-left origin box."""
        box = BoundingBox(x=0.1, y=0.2, width=0.4, height=0.2)

        assert box.min_x == pytest.approx(0.1)
        assert box.max_x == pytest.approx(0.5)
        assert box.min_y == pytest.approx(0.2)
        assert box.max_y == pytest.approx(0.4)
        assert box.mid_x == pytest.approx(0.3)
        assert box.mid_y == pytest.approx(0.3)

    def test_aspect_ratio(self):
        """Test aspect ratio is width over height."""
        box = BoundingBox(0.0, 0.0, 0.8, 0.01)
        assert box.aspect_ratio == pytest.approx(80.0)

    def test_aspect_ratio_zero_height(self):
        """Test zero-height boxes have infinite aspect ratio."""
        box = BoundingBox(0.0, 0.5, 0.5, 0.0)
        assert math.isinf(box.aspect_ratio)

    def test_union(self):
        """Test union covers all boxes."""
        union = BoundingBox.union([
            BoundingBox(0.1, 0.1, 0.1, 0.1),
            BoundingBox(0.5, 0.6, 0.2, 0.1),
        ])

        assert union.min_x == pytest.approx(0.1)
        assert union.min_y == pytest.approx(0.1)
        assert union.max_x == pytest.approx(0.7)
        assert union.max_y == pytest.approx(0.7)

    def test_union_empty(self):
        """Test union of nothing is a zero box."""
        assert BoundingBox.union([]) == BoundingBox(0.0, 0.0, 0.0, 0.0)

    def test_frozen(self):
        """Test boxes are immutable."""
        box = BoundingBox(0.0, 0.0, 1.0, 1.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            box.x = 0.5


class TestTextBlock:
    """Tests for TextBlock dataclass."""

    def test_top_text(self, make_block):
        """Test top_text returns the first candidate."""
        block = make_block(0, 0.1, 0.5, text="2 cups flour")
        assert block.top_text == "2 cups flour"
        assert block.confidence == pytest.approx(0.9)

    def test_no_candidates(self):
        """Test block without candidates has empty text."""
        block = TextBlock(index=3, bounding_box=BoundingBox(0, 0, 0.1, 0.1))
        assert block.top_text == ""
        assert block.confidence == 0.0

    def test_identical_text_distinct_index(self, make_block):
        """Test blocks with the same text and box differ by index."""
        a = make_block(0, 0.1, 0.5, text="salt")
        b = make_block(1, 0.1, 0.5, text="salt")
        assert a != b

    def test_to_dict(self, make_block):
        """Test dictionary conversion."""
        data = make_block(7, 0.1, 0.5, text="1 egg").to_dict()

        assert data['index'] == 7
        assert data['text'] == "1 egg"
        assert set(data['bbox']) == {'x', 'y', 'width', 'height'}


class TestDetectedLine:
    """Tests for DetectedLine dataclass."""

    def test_horizontal_position_and_length(self):
        line = DetectedLine((0.1, 0.7), (0.9, 0.7), LineOrientation.HORIZONTAL, 0.8)
        assert line.position == pytest.approx(0.7)
        assert line.length == pytest.approx(0.8)

    def test_vertical_position_and_length(self):
        line = DetectedLine((0.5, 0.2), (0.5, 0.8), LineOrientation.VERTICAL, 0.8)
        assert line.position == pytest.approx(0.5)
        assert line.length == pytest.approx(0.6)


class TestColumnLayout:
    """Tests for ColumnLayout dataclass."""

    def test_with_divider(self):
        """Test bounds split at the divider."""
        layout = ColumnLayout.from_divider(0.45)

        assert layout.left_column_bounds.x == 0.0
        assert layout.left_column_bounds.width == pytest.approx(0.45)
        assert layout.right_column_bounds.x == pytest.approx(0.45)
        assert layout.right_column_bounds.width == pytest.approx(0.55)
        assert layout.split_x == pytest.approx(0.45)

    def test_without_divider(self):
        """Test default 0.6 / 0.4 split when no divider exists."""
        layout = ColumnLayout.from_divider(None)

        assert layout.vertical_divider_x is None
        assert layout.left_column_bounds.x == 0.0
        assert layout.left_column_bounds.width == pytest.approx(0.6)
        assert layout.right_column_bounds.width == pytest.approx(0.4)
        assert layout.split_x == pytest.approx(0.6)

    def test_column_for_block(self, make_block):
        """Test column assignment uses the block midpoint."""
        layout = ColumnLayout.from_divider(0.5)

        assert layout.column_for_block(make_block(0, 0.35, 0.5, width=0.1)) is Column.LEFT
        assert layout.column_for_block(make_block(1, 0.5, 0.5, width=0.1)) is Column.RIGHT

    def test_to_dict_includes_image_size(self):
        layout = ColumnLayout.from_divider(None, ImageSize(1000, 800))
        data = layout.to_dict()

        assert data['vertical_divider_x'] is None
        assert data['image_size'] == {'width': 1000, 'height': 800}


class TestIngredientRow:
    """Tests for IngredientRow dataclass."""

    def test_texts_and_bbox(self, make_block):
        row = IngredientRow(
            y_position=0.5,
            height=0.03,
            left_column_blocks=(make_block(0, 0.1, 0.5, "2 cups"), make_block(1, 0.25, 0.5, "flour")),
            right_column_blocks=(make_block(2, 0.7, 0.5, "sifted"),)
        )

        assert row.left_text == "2 cups flour"
        assert row.right_text == "sifted"
        assert len(row.left_column_blocks + row.right_column_blocks) == 3
        assert row.bounding_box.x == 0.0
        assert row.bounding_box.width == 1.0
        assert row.bounding_box.y == pytest.approx(0.5)


class TestRecipeAnalysis:
    """Tests for RecipeAnalysis dataclass."""

    def _analysis(self, make_block, original=None):
        title = RecipeSection.from_blocks(SectionType.TITLE, [make_block(0, 0.3, 0.9, "Cookies")])
        return RecipeAnalysis(
            sections=(title,),
            column_layout=ColumnLayout.from_divider(None),
            ingredient_rows=(),
            image_size=ImageSize(1000, 750),
            original_image_size=original
        )

    def test_section_lookup(self, make_block):
        analysis = self._analysis(make_block)

        assert analysis.section(SectionType.TITLE).text == "Cookies"
        assert analysis.section(SectionType.INGREDIENTS) is None

    def test_was_upscaled(self, make_block):
        assert not self._analysis(make_block).was_upscaled
        assert not self._analysis(make_block, ImageSize(1000, 750)).was_upscaled
        assert self._analysis(make_block, ImageSize(400, 300)).was_upscaled

    def test_to_dict(self, make_block):
        data = self._analysis(make_block, ImageSize(400, 300)).to_dict()

        assert data['sections'][0]['type'] == 'title'
        assert data['ingredient_rows'] == []
        assert data['original_image_size'] == {'width': 400, 'height': 300}
        assert data['was_upscaled'] is True


class TestDetectionResult:
    """Tests for DetectionResult dataclass."""

    def test_ok(self):
        result = DetectionResult.ok([1, 2])
        assert result.succeeded
        assert result.items_or_empty() == [1, 2]

    def test_ok_empty_is_success(self):
        result = DetectionResult.ok([])
        assert result.succeeded
        assert result.items_or_empty() == []

    def test_failed(self):
        error = RuntimeError("engine down")
        result = DetectionResult.failed(error)

        assert not result.succeeded
        assert result.error is error
        assert result.items_or_empty() == []
