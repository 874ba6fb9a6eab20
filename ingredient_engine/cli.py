"""CLI entry point for ingredient extraction."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ingredient_engine.data_layer.engine_config import load_engine_config
from ingredient_engine.data_layer.exceptions import ConfigurationError
from ingredient_engine.data_layer.lexicon import LANGUAGE_HINTS
from ingredient_engine.ingestion.ingredient_parser import IngredientParser
from ingredient_engine.logging_config import setup_logging
from ingredient_engine.output.formatters import (
    format_category_summary,
    format_list_json_string,
    format_list_markdown,
)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract ingredients, quantities and units from OCR recipe text"
    )
    parser.add_argument(
        "input",
        nargs="?",
        type=str,
        help="Path to a UTF-8 text file (default: read from stdin)"
    )
    parser.add_argument(
        "--language",
        type=str,
        choices=list(LANGUAGE_HINTS),
        default=None,
        help="Language hint: auto, en or fr (default: from config, else auto)"
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to engine configuration YAML file"
    )
    parser.add_argument(
        "--output",
        type=str,
        choices=["markdown", "json", "both"],
        default="markdown",
        help="Output format: markdown (default), json, or both"
    )
    parser.add_argument(
        "--output-file",
        type=str,
        help="Optional file path to save output (default: print to stdout)"
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Append ingredients grouped by measurement to the Markdown output"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-line extraction details to stderr"
    )
    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    args = build_arg_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    # Read input
    if args.input:
        input_path = Path(args.input)
        if not input_path.exists():
            print(f"Error: Input file not found: {input_path}", file=sys.stderr)
            sys.exit(1)
        text = input_path.read_bytes().decode("utf-8", errors="replace")
    else:
        text = sys.stdin.read()

    try:
        config = load_engine_config(args.config)
        parser = IngredientParser(config=config)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.config:
            print("Hint: See config/engine.yaml.example for the expected layout", file=sys.stderr)
        sys.exit(1)

    result = parser.parse(text, args.language)

    # Format output
    if args.output in ["markdown", "both"]:
        markdown_output = format_list_markdown(result)
        if args.summary:
            markdown_output += "\n" + format_category_summary(result)
        if args.output_file:
            output_path = Path(args.output_file)
            if args.output == "both":
                output_path = output_path.with_suffix(".md")
            output_path.write_text(markdown_output, encoding="utf-8")
            print(f"Markdown output saved to {output_path}", file=sys.stderr)
        else:
            print(markdown_output)

    if args.output in ["json", "both"]:
        json_output = format_list_json_string(result, indent=2)
        if args.output_file:
            output_path = Path(args.output_file)
            if args.output == "both":
                output_path = output_path.with_suffix(".json")
            output_path.write_text(json_output, encoding="utf-8")
            print(f"JSON output saved to {output_path}", file=sys.stderr)
        else:
            if args.output == "both":
                print("\n" + "=" * 80 + "\n", file=sys.stdout)
            print(json_output)

    # Print summary to stderr
    print(
        f"\nParsed {result.parsed_count} ingredients "
        f"(confidence {result.overall_confidence * 100:.0f}%)",
        file=sys.stderr
    )


if __name__ == "__main__":
    main()
