"""
Recipe Analyzer Service - Reconstructs the layout of a recipe card image.

This service orchestrates the analysis workflow: preprocessing, the three
independent detections (text, horizontal rules, vertical divider) and the
layout inference stages that turn them into a RecipeAnalysis.
"""
import asyncio
import concurrent.futures
import logging
import threading
from typing import Callable, List, Optional, Sequence, Tuple, Union

from PIL import Image

from config.settings import Settings, settings as default_settings
from core.exceptions import NoTextDetectedError
from core.models import (
    DetectedLine,
    DetectionResult,
    ImageSize,
    RecipeAnalysis,
    SectionType,
    TextBlock,
)
from spatial.divider import create_column_layout, resolve_divider
from spatial.grouping import group_into_rows
from spatial.ingredient_heuristic import detect_ingredient_blocks
from spatial.line_classifier import (
    detect_horizontal_lines,
    find_vertical_line_in_contours,
    select_vertical_divider,
)
from spatial.segmentation import segment_sections
from utils.image_utils import ImageInput, get_image_size, load_image, preprocess_image
from .detectors import (
    HORIZONTAL_CONSTRAINTS,
    VERTICAL_CONSTRAINTS,
    BaseRectangleDetector,
    BaseTextDetector,
)

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[Optional[RecipeAnalysis], Optional[BaseException]], None]
AnalysisFuture = Union[asyncio.Task, concurrent.futures.Future]


def assemble_analysis(
    text_blocks: Sequence[TextBlock],
    horizontal_lines: Sequence[DetectedLine],
    vertical_divider: Optional[DetectedLine],
    image_size: ImageSize,
    original_image_size: Optional[ImageSize] = None
) -> RecipeAnalysis:
    """
    Run the layout inference stages over collected detections.

    Args:
        text_blocks: Recognized text blocks
        horizontal_lines: Horizontal rules from the line classifier
        vertical_divider: Divider from the line classifier, if any
        image_size: Size of the (possibly upscaled) analyzed image
        original_image_size: Size before preprocessing

    Returns:
        RecipeAnalysis
    """
    # Step 1: Segment sections using horizontal lines
    sections = segment_sections(text_blocks, horizontal_lines)

    # Step 2: Resolve the divider (drawn line, else text gap)
    divider_x = resolve_divider(text_blocks, vertical_divider)

    # Step 3: Column layout
    column_layout = create_column_layout(divider_x, image_size)

    # Step 4: Ingredient blocks; the heuristic only runs without an ingredients section
    ingredient_section = next(
        (s for s in sections if s.type is SectionType.INGREDIENTS),
        None
    )

    if ingredient_section is not None:
        ingredient_blocks: List[TextBlock] = list(ingredient_section.text_blocks)
    else:
        logger.info("No ingredients section found; falling back to ingredient heuristic")
        ingredient_blocks = detect_ingredient_blocks(text_blocks, divider_x)

    # Step 5: Rows
    ingredient_rows = group_into_rows(ingredient_blocks, column_layout)

    return RecipeAnalysis(
        sections=tuple(sections),
        column_layout=column_layout,
        ingredient_rows=tuple(ingredient_rows),
        image_size=image_size,
        original_image_size=original_image_size
    )


class RecipeAnalyzer:
    """Service for recipe card layout analysis."""

    def __init__(
        self,
        text_detector: Optional[BaseTextDetector] = None,
        rectangle_detector: Optional[BaseRectangleDetector] = None,
        config: Optional[Settings] = None
    ):
        """
        Initialize the analyzer.

        Args:
            text_detector: Text recognition engine (default: Tesseract)
            rectangle_detector: Rectangle detection engine (default: OpenCV)
            config: Settings (default: global settings)
        """
        self.config = config or default_settings

        if text_detector is None:
            from .tesseract_detector import TesseractTextDetector
            text_detector = TesseractTextDetector(self.config)

        if rectangle_detector is None:
            from .opencv_detector import OpenCVRectangleDetector
            rectangle_detector = OpenCVRectangleDetector(self.config)

        self.text_detector = text_detector
        self.rectangle_detector = rectangle_detector

    async def analyze(self, image: ImageInput) -> RecipeAnalysis:
        """
        Analyze a recipe card image.

        Args:
            image: PIL Image or path to an image file

        Returns:
            RecipeAnalysis

        Raises:
            InvalidImageError: If the image cannot be decoded
            NoTextDetectedError: If no text is recognized
        """
        source = load_image(image)

        processed, original_size, processed_size = self.preprocess(source)

        # Independent detections on the same resolved image
        results = await asyncio.gather(
            self._detect_text(processed),
            self._detect_horizontal_lines(processed),
            self._detect_vertical_divider(processed),
            return_exceptions=True
        )

        for result in results:
            if isinstance(result, BaseException):
                raise result

        text_blocks, horizontal_result, vertical_result = results

        if not horizontal_result.succeeded:
            logger.warning("Horizontal line detection failed: %s", horizontal_result.error)
        if not vertical_result.succeeded:
            logger.warning("Vertical divider detection failed: %s", vertical_result.error)

        horizontal_lines = horizontal_result.items_or_empty()
        vertical_items = vertical_result.items_or_empty()
        vertical_divider = vertical_items[0] if vertical_items else None

        return assemble_analysis(
            text_blocks=text_blocks,
            horizontal_lines=horizontal_lines,
            vertical_divider=vertical_divider,
            image_size=processed_size,
            original_image_size=original_size
        )

    def analyze_sync(self, image: ImageInput) -> RecipeAnalysis:
        """Blocking wrapper around `analyze` for callers without an event loop."""
        return asyncio.run(self.analyze(image))

    def analyze_with_callback(
        self,
        image: ImageInput,
        completion: CompletionCallback
    ) -> AnalysisFuture:
        """
        Analyze in the background and report through a callback.

        `completion(analysis, error)` is called exactly once: with the result
        and None on success, or None and the exception on failure or
        cancellation.

        Args:
            image: PIL Image or path to an image file
            completion: Callback receiving (analysis, error)

        Returns:
            The asyncio Task (inside a running loop) or a concurrent Future,
            either of which can be cancelled. Without a running loop the
            analysis runs on a private loop in a worker thread, and cancelling
            the Future cancels the task on that loop.
        """
        try:
            running_loop = asyncio.get_running_loop()
        except RuntimeError:
            running_loop = None

        if running_loop is not None:
            task = running_loop.create_task(self.analyze(image))
            task.add_done_callback(lambda t: _deliver(t, completion))
            return task

        loop = asyncio.new_event_loop()
        task = loop.create_task(self.analyze(image))
        future: concurrent.futures.Future = concurrent.futures.Future()

        def cancel_task(f: concurrent.futures.Future) -> None:
            if not f.cancelled():
                return
            try:
                loop.call_soon_threadsafe(task.cancel)
            except RuntimeError:
                # Loop already closed; the task has finished
                pass

        def run() -> None:
            asyncio.set_event_loop(loop)
            try:
                result = loop.run_until_complete(task)
            except asyncio.CancelledError:
                future.cancel()
            except Exception as e:
                _settle(future, error=e)
            else:
                _settle(future, result=result)
            finally:
                loop.run_until_complete(loop.shutdown_default_executor())
                asyncio.set_event_loop(None)
                loop.close()

        future.add_done_callback(cancel_task)
        future.add_done_callback(lambda f: _deliver(f, completion))
        threading.Thread(target=run, name="recipe-analyzer", daemon=True).start()
        return future

    def preprocess(self, image: Image.Image) -> Tuple[Image.Image, ImageSize, ImageSize]:
        """
        Upscale small images; failures fall back to the original image.

        Returns:
            Tuple of (image, original size, processed size)
        """
        try:
            return preprocess_image(image, self.config.min_image_dimension)
        except Exception as e:
            logger.warning("Preprocessing failed, using original image: %s", e)
            size = get_image_size(image)
            return image, size, size

    async def _detect_text(self, image: Image.Image) -> List[TextBlock]:
        try:
            blocks = await asyncio.to_thread(self.text_detector.detect_text, image)
        except Exception as e:
            raise NoTextDetectedError(f"Text recognition failed: {e}") from e

        if not blocks:
            raise NoTextDetectedError()

        return list(blocks)

    async def _detect_horizontal_lines(self, image: Image.Image) -> DetectionResult:
        try:
            candidates = await asyncio.to_thread(
                self.rectangle_detector.detect_rectangles, image, HORIZONTAL_CONSTRAINTS
            )
        except Exception as e:
            return DetectionResult.failed(e)

        return DetectionResult.ok(detect_horizontal_lines(candidates))

    async def _detect_vertical_divider(self, image: Image.Image) -> DetectionResult:
        try:
            candidates = await asyncio.to_thread(
                self.rectangle_detector.detect_rectangles, image, VERTICAL_CONSTRAINTS
            )
            divider = select_vertical_divider(candidates)

            if divider is None and self.config.edge_divider_fallback:
                contours = await asyncio.to_thread(self.rectangle_detector.detect_contours, image)
                divider = find_vertical_line_in_contours(contours)
                if divider is not None:
                    logger.info("Vertical divider found from edge contours at x=%.3f", divider.position)
        except Exception as e:
            return DetectionResult.failed(e)

        return DetectionResult.ok([divider] if divider is not None else [])


def _settle(
    future: concurrent.futures.Future,
    result: Optional[RecipeAnalysis] = None,
    error: Optional[BaseException] = None
) -> None:
    """Complete a Future unless it was cancelled first."""
    try:
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(result)
    except concurrent.futures.InvalidStateError:
        pass


def _deliver(future: AnalysisFuture, completion: CompletionCallback) -> None:
    """Forward a finished future's outcome to a completion callback."""
    if future.cancelled():
        completion(None, asyncio.CancelledError())
        return

    error = future.exception()
    if error is not None:
        completion(None, error)
    else:
        completion(future.result(), None)
