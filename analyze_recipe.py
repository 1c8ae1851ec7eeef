#!/usr/bin/env python3
"""
CLI for recipe card layout analysis.

Runs the analyzer on an image and prints the reconstructed sections and
ingredient rows, exports them as JSON, or writes an annotated overlay.
"""
import argparse
import json
import logging
import sys
import textwrap
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import settings
from core.exceptions import RecipeAnalysisError
from core.models import RecipeAnalysis, SectionType
from services.recipe_analyzer import RecipeAnalyzer
from utils.bbox_utils import draw_analysis
from utils.image_utils import load_image


def configure_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )


def print_analysis(analysis: RecipeAnalysis):
    """Print a human-readable summary of an analysis."""
    print("=" * 60)
    title = analysis.section(SectionType.TITLE)
    if title is not None:
        print("Title: " + " ".join(title.text.splitlines()))

    size = analysis.image_size
    print(f"Image: {size.width}x{size.height}", end="")
    if analysis.was_upscaled:
        original = analysis.original_image_size
        print(f" (upscaled from {original.width}x{original.height})", end="")
    print()

    divider_x = analysis.column_layout.vertical_divider_x
    if divider_x is not None:
        print(f"Column divider: x={divider_x:.3f}")
    else:
        print(f"Column divider: none (default split at {analysis.column_layout.split_x:.2f})")
    print("=" * 60)

    for section in analysis.sections:
        print(f"\n[{section.type.value.upper()}] ({len(section.text_blocks)} blocks)")
        print(textwrap.indent(section.text, "  "))

    print(f"\nIngredient rows: {len(analysis.ingredient_rows)}")
    for i, row in enumerate(analysis.ingredient_rows, 1):
        print(f"  {i:2d}. {row.left_text:<40} | {row.right_text}")
    print("=" * 60)


def analyze_cli(image_path: str, as_json: bool = False, output_path: str = None) -> int:
    """Analyze an image and print or export the result."""
    analyzer = RecipeAnalyzer()

    try:
        analysis = analyzer.analyze_sync(image_path)
    except RecipeAnalysisError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    if as_json or output_path:
        payload = json.dumps(analysis.to_dict(), indent=2, ensure_ascii=False)
        if output_path:
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(payload)
            print(f"✓ Analysis exported to: {output_path}")
        else:
            print(payload)
    else:
        print_analysis(analysis)

    return 0


def annotate_cli(image_path: str, output_path: str = None) -> int:
    """Analyze an image and save an annotated overlay."""
    analyzer = RecipeAnalyzer()

    try:
        image = load_image(image_path)
        analysis = analyzer.analyze_sync(image)
    except RecipeAnalysisError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    # Draw on the image the analysis was computed on
    processed, _, _ = analyzer.preprocess(image)
    annotated = draw_analysis(processed, analysis)

    if output_path is None:
        source = Path(image_path)
        output_path = str(source.with_name(f"{source.stem}_annotated.png"))

    annotated.save(output_path)
    print(f"✓ Annotated image saved to: {output_path}")
    print(f"  Sections: {len(analysis.sections)}")
    print(f"  Ingredient rows: {len(analysis.ingredient_rows)}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='Recipe card layout analysis CLI'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Analyze command
    analyze_parser = subparsers.add_parser('analyze', help='Analyze a recipe card image')
    analyze_parser.add_argument('image', type=str, help='Image file to analyze')
    analyze_parser.add_argument('--json', action='store_true', help='Print the analysis as JSON')
    analyze_parser.add_argument('-o', '--output', type=str, help='Write JSON to this file')

    # Annotate command
    annotate_parser = subparsers.add_parser('annotate', help='Save an annotated overlay image')
    annotate_parser.add_argument('image', type=str, help='Image file to analyze')
    annotate_parser.add_argument('-o', '--output', type=str, help='Output image path')

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command == 'analyze':
        return analyze_cli(args.image, as_json=args.json, output_path=args.output)
    elif args.command == 'annotate':
        return annotate_cli(args.image, args.output)

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
