"""
Tesseract text detector.

Runs pytesseract word-level recognition and merges words into line-level
text blocks, the unit the layout engine works on.
"""
import logging
from typing import Dict, List, Optional, Tuple

import pytesseract
from PIL import Image

from config.settings import Settings, settings as default_settings
from core.models import RecognizedText, TextBlock
from utils.bbox_utils import normalize_bbox
from .detectors import BaseTextDetector

logger = logging.getLogger(__name__)

LineKey = Tuple[int, int, int]


def _parse_confidence(raw) -> float:
    """Tesseract reports 0-100 (or -1 for non-word rows) as str, int or float."""
    try:
        return float(raw)
    except (TypeError, ValueError):
        return -1.0


def group_words_into_lines(
    data: Dict[str, List],
    min_confidence: float = 0.0
) -> List[Dict]:
    """
    Group pytesseract `image_to_data` rows into text lines.

    Args:
        data: Output of `image_to_data(..., output_type=Output.DICT)`
        min_confidence: Minimum word confidence in [0, 1]

    Returns:
        Lines in first-seen order, each a dict with text, confidence and a
        pixel bbox (x1, y1, x2, y2; top-left origin)
    """
    lines: Dict[LineKey, Dict] = {}

    for i, raw_text in enumerate(data.get('text', [])):
        text = (raw_text or "").strip()
        if not text:
            continue

        conf = _parse_confidence(data['conf'][i])
        if conf < 0 or conf / 100.0 < min_confidence:
            continue

        left = int(data['left'][i])
        top = int(data['top'][i])
        right = left + int(data['width'][i])
        bottom = top + int(data['height'][i])

        key = (data['block_num'][i], data['par_num'][i], data['line_num'][i])
        line = lines.get(key)

        if line is None:
            lines[key] = {
                'words': [text],
                'confs': [conf],
                'x1': left, 'y1': top, 'x2': right, 'y2': bottom,
            }
        else:
            line['words'].append(text)
            line['confs'].append(conf)
            line['x1'] = min(line['x1'], left)
            line['y1'] = min(line['y1'], top)
            line['x2'] = max(line['x2'], right)
            line['y2'] = max(line['y2'], bottom)

    result = []
    for line in lines.values():
        result.append({
            'text': " ".join(line['words']),
            'confidence': sum(line['confs']) / len(line['confs']) / 100.0,
            'x1': line['x1'], 'y1': line['y1'],
            'x2': line['x2'], 'y2': line['y2'],
        })

    return result


class TesseractTextDetector(BaseTextDetector):
    """Text detector backed by the Tesseract OCR engine."""

    def __init__(self, config: Optional[Settings] = None):
        """
        Initialize the detector.

        Args:
            config: Settings (default: global settings)
        """
        self.config = config or default_settings

        if self.config.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.config.tesseract_cmd

    def detect_text(self, image: Image.Image) -> List[TextBlock]:
        width, height = image.size

        data = pytesseract.image_to_data(
            image,
            lang=self.config.tesseract_lang,
            config=self.config.get_tesseract_config(),
            output_type=pytesseract.Output.DICT
        )

        lines = group_words_into_lines(data, self.config.ocr_min_word_confidence)

        blocks = [
            TextBlock(
                index=i,
                bounding_box=normalize_bbox(line, width, height),
                candidates=(RecognizedText(line['text'], line['confidence']),)
            )
            for i, line in enumerate(lines)
        ]

        logger.info("Recognized %d text blocks", len(blocks))
        return blocks
