#!/usr/bin/env python3
"""
Recipe Box command line tool.

Runs the Recipe Box extraction pipeline outside Home Assistant: extracts a
recipe from a URL or free-text request and prints or stores it as JSON,
or lists the Gemini models available to the configured key.
"""
import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from custom_components.recipe_box.const import AVAILABLE_MODELS, DEFAULT_MODEL
from custom_components.recipe_box.exceptions import RecipeBoxError
from custom_components.recipe_box.extractors import GeminiClient, RecipeExtractor

logger = logging.getLogger(__name__)

API_KEY_ENV = "GEMINI_API_KEY"


def safe_filename(name: str) -> str:
    """Turn a recipe name into a lowercase file stem."""
    stem = "".join(c for c in name if c.isalnum() or c in (" ", "-", "_")).strip()
    stem = stem.replace(" ", "_").lower()
    return stem or "recipe"


def extract_command(args: argparse.Namespace, api_key: str) -> int:
    """Extract one recipe and print it or write it to the output directory."""
    extractor = RecipeExtractor(
        api_key=api_key,
        model=args.model,
        prefer_structured_data=not args.no_structured,
    )

    try:
        recipe = extractor.extract(args.query)
    except (RecipeBoxError, ValueError) as e:
        logger.error("Error extracting recipe: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    payload = json.dumps(recipe.model_dump(), indent=2, ensure_ascii=False)

    if args.output_dir is None:
        print(payload)
        return 0

    args.output_dir.mkdir(parents=True, exist_ok=True)
    json_file = args.output_dir / f"{safe_filename(recipe.name)}.json"
    logger.info("Saving structured recipe to: %s", json_file)
    json_file.write_text(payload, encoding="utf-8")

    print(f"Recipe: {recipe.name}")
    print(f"Ingredients: {len(recipe.ingredients)} | Steps: {len(recipe.instructions)}")
    for source in recipe.sources:
        print(f"Source: {source.title} <{source.uri}>")
    print(f"Saved to: {json_file}")
    return 0


def models_command(args: argparse.Namespace, api_key: str) -> int:
    """Print the models that support content generation."""
    try:
        names = GeminiClient(api_key=api_key).list_models()
    except RecipeBoxError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for name in names:
        print(name)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract recipes into structured JSON with Gemini"
    )
    parser.add_argument(
        "--api-key",
        help=f"Gemini API key (can also be set via {API_KEY_ENV} env var)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract = subparsers.add_parser(
        "extract", help="Extract a recipe from a URL or free-text request")
    extract.add_argument(
        "query",
        help="Recipe page URL, dish name or list of ingredients"
    )
    extract.add_argument(
        "--model",
        default=DEFAULT_MODEL,
        help=f"Model to use for extraction (default: {DEFAULT_MODEL}; known: {', '.join(AVAILABLE_MODELS)})"
    )
    extract.add_argument(
        "--no-structured",
        action="store_true",
        help="Skip embedded JSON-LD data and always ask the AI"
    )
    extract.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory to save the recipe JSON (default: print to stdout)"
    )
    extract.set_defaults(func=extract_command)

    models = subparsers.add_parser(
        "models", help="List Gemini models that support content generation")
    models.set_defaults(func=models_command)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the recipe command line tool."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    api_key = args.api_key or os.getenv(API_KEY_ENV)
    if not api_key:
        logger.error("API key not provided. Set %s env var or use --api-key", API_KEY_ENV)
        return 1

    return args.func(args, api_key)


if __name__ == "__main__":
    sys.exit(main())
