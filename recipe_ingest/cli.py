"""
Command line entry point.

Extracts a recipe from a URL and prints it (or writes it) as JSON.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import voluptuous as vol
from dotenv import load_dotenv

from .config import load_config
from .const import AVAILABLE_MODELS, USER_FACING_ERROR
from .exceptions import RecipeIngestError
from .extractors.recipe_extractor import RecipeExtractor

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recipe-ingest",
        description="Extract recipes from websites into structured JSON format"
    )
    parser.add_argument(
        "url",
        type=str,
        help="URL of the recipe website"
    )
    parser.add_argument(
        "--force-ai",
        action="store_true",
        help="Skip structured and heuristic extraction and ask the model directly"
    )
    parser.add_argument(
        "--model",
        help=f"Model to use for AI extraction (e.g. {', '.join(AVAILABLE_MODELS)})"
    )
    parser.add_argument(
        "--api-key",
        help="API key for the language model (can also be set via GOOGLE_API_KEY env var)"
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write the recipe JSON to this file instead of stdout"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the recipe extractor."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    load_dotenv()

    try:
        config = load_config(api_key=args.api_key, model=args.model)
    except vol.Invalid as err:
        logger.error("Invalid configuration: %s", err)
        return 2

    try:
        recipe, tier = RecipeExtractor(config).extract_with_outcome(args.url, force_ai=args.force_ai)
    except RecipeIngestError as err:
        logger.error("Extraction failed for %s: %s", args.url, err)
        print(err.user_message, file=sys.stderr)
        return 1

    logger.info("Recipe extracted via %s tier", tier.value)
    output = json.dumps(recipe.model_dump(), indent=2, ensure_ascii=False)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output + "\n", encoding="utf-8")
        logger.info("Saved recipe to %s", args.output)
    else:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
