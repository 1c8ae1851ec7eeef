"""
Bounding box utilities for recipe card analysis.

Detectors report pixel boxes with a top-left origin; the layout engine works
in unit-normalized boxes with a bottom-left origin. These helpers convert
between the two and draw analysis overlays for debugging.
"""
from typing import Dict, Tuple

from PIL import Image, ImageDraw, ImageFont

from core.models import BoundingBox, RecipeAnalysis, SectionType


SECTION_COLORS = {
    SectionType.TITLE: (220, 60, 60),
    SectionType.METADATA: (230, 160, 30),
    SectionType.INGREDIENTS: (40, 160, 70),
    SectionType.INSTRUCTIONS: (50, 100, 210),
    SectionType.VARIATIONS: (150, 70, 190),
}


def normalize_bbox(bbox: Dict, img_width: int, img_height: int) -> BoundingBox:
    """
    Convert a pixel box (top-left origin) to a unit-normalized box.

    Args:
        bbox: Dict with x1, y1, x2, y2 in pixels, y measured downward
        img_width: Image width
        img_height: Image height

    Returns:
        BoundingBox with bottom-left origin, clamped to [0, 1]
    """
    if img_width <= 0 or img_height <= 0:
        raise ValueError(f"Invalid image size: {img_width}x{img_height}")

    x1 = _clamp(bbox['x1'] / img_width)
    x2 = _clamp(bbox['x2'] / img_width)
    # Flip the vertical axis: pixel row 0 is the top of the image
    top = _clamp(1.0 - bbox['y1'] / img_height)
    bottom = _clamp(1.0 - bbox['y2'] / img_height)

    return BoundingBox(
        x=min(x1, x2),
        y=min(top, bottom),
        width=abs(x2 - x1),
        height=abs(top - bottom)
    )


def denormalize_bbox(box: BoundingBox, img_width: int, img_height: int) -> Dict:
    """
    Convert a unit-normalized box back to pixel coordinates (top-left origin).

    Args:
        box: Normalized bounding box
        img_width: Image width
        img_height: Image height

    Returns:
        Dict with pixel x1, y1, x2, y2
    """
    return {
        'x1': int(round(box.min_x * img_width)),
        'y1': int(round((1.0 - box.max_y) * img_height)),
        'x2': int(round(box.max_x * img_width)),
        'y2': int(round((1.0 - box.min_y) * img_height))
    }


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _load_font(size: int = 16):
    try:
        return ImageFont.truetype("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", size)
    except OSError:
        return ImageFont.load_default()


def draw_analysis(
    image: Image.Image,
    analysis: RecipeAnalysis,
    draw_rows: bool = True
) -> Image.Image:
    """
    Draw sections, the column divider and ingredient rows on a copy of the image.

    Args:
        image: Image the analysis was computed on
        analysis: Result to visualize
        draw_rows: Whether to outline ingredient rows

    Returns:
        Annotated RGB image
    """
    img_draw = image.convert('RGB')
    width, height = img_draw.size
    overlay = Image.new('RGBA', img_draw.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(img_draw)
    draw2 = ImageDraw.Draw(overlay)
    font = _load_font()

    for section in analysis.sections:
        color = SECTION_COLORS.get(section.type, (128, 128, 128))
        box = denormalize_bbox(section.bounding_box, width, height)
        rect = [box['x1'], box['y1'], box['x2'], box['y2']]

        draw.rectangle(rect, outline=color, width=3)
        draw2.rectangle(rect, fill=color + (50,))
        _draw_label(draw, section.type.value, (box['x1'], box['y1']), color, font)

    if draw_rows:
        for row in analysis.ingredient_rows:
            box = denormalize_bbox(row.bounding_box, width, height)
            draw.rectangle(
                [box['x1'], box['y1'], box['x2'] - 1, box['y2']],
                outline=(90, 90, 90),
                width=1
            )

    divider_x = analysis.column_layout.vertical_divider_x
    if divider_x is not None:
        px = int(round(divider_x * width))
        draw.line([(px, 0), (px, height)], fill=(200, 0, 200), width=3)

    img_draw.paste(overlay, (0, 0), overlay)
    return img_draw


def _draw_label(
    draw: ImageDraw.ImageDraw,
    label: str,
    origin: Tuple[int, int],
    color: Tuple[int, int, int],
    font,
    padding: int = 2
) -> None:
    x1, y1 = origin
    text_bbox = draw.textbbox((0, 0), label, font=font)
    tw = text_bbox[2] - text_bbox[0]
    th = text_bbox[3] - text_bbox[1]

    ty = max(0, y1 - th - 2 * padding)
    draw.rectangle([x1, ty, x1 + tw + 2 * padding, ty + th + 2 * padding], fill=color)
    draw.text((x1 + padding, ty + padding), label, font=font, fill=(255, 255, 255))
