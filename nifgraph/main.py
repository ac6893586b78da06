#!/usr/bin/env python3
"""
nifgraph CLI - Command-line interface for the NIF conversion pipeline.

Usage:
    python -m nifgraph.main --help
    python -m nifgraph.main records.json --format nt --stdout
    python -m nifgraph.main records.yaml --format xml --output ./output
"""

import argparse
import logging
import sys
from pathlib import Path

import pyfiglet
from dotenv import load_dotenv
from pydantic import ValidationError

from nifgraph.config.settings import get_settings
from nifgraph.loaders import load_records
from nifgraph.pipeline import Pipeline
from nifgraph.triples import NIFDocument
from nifgraph.utils.logging import setup_colored_logging

__version__ = "0.1.0"


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    setup_colored_logging(level=level)


def print_banner() -> None:
    """Print the application banner."""
    print(pyfiglet.figlet_format("nifgraph", font="slant"))
    print("Annotation records to NIF RDF".center(60, "*"))


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="nifgraph",
        description="nifgraph - Convert annotation records to NIF RDF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print Turtle for a record file
  nifgraph records.json --stdout

  # Run the pipeline with N-Triples output into ./my_output
  nifgraph records.yaml --format nt --output ./my_output

  # Skip validation, verbose logging
  nifgraph records.json --skip-validation --verbose
        """,
    )

    parser.add_argument(
        "input",
        type=str,
        help="JSON or YAML file with annotation records",
    )

    # Output options
    parser.add_argument(
        "--format",
        "-f",
        type=str,
        choices=["turtle", "nt", "xml"],
        default=None,
        help="Output format (default: from config)",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default=None,
        help="Output directory for generated files (default: ./output)",
    )

    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the rendered document instead of writing a run directory",
    )

    parser.add_argument(
        "--skip-validation",
        action="store_true",
        help="Skip graph validation step",
    )

    # Logging
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output (very verbose)",
    )

    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress all output except errors",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def render_to_stdout(input_path: str, output_format: str) -> int:
    """Render a record file directly to stdout."""
    document = NIFDocument(load_records(input_path))
    sys.stdout.write(document.render(output_format))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    load_dotenv()

    parser = create_parser()
    args = parser.parse_args(argv)

    # Setup logging
    if args.quiet:
        setup_logging(verbose=False, debug=False)
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=args.verbose, debug=args.debug)

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"❌ Configuration error: {e}", file=sys.stderr)
        return 1

    output_format = args.format or settings.output.format

    if not Path(args.input).exists():
        print(f"❌ Input file not found: {args.input}", file=sys.stderr)
        return 1

    try:
        if args.stdout:
            return render_to_stdout(args.input, output_format)

        if not args.quiet:
            print_banner()

        pipeline = Pipeline(settings=settings, output_dir=args.output)
        result = pipeline.execute(
            args.input,
            output_format=output_format,
            skip_validation=args.skip_validation,
        )

        if not args.quiet:
            result.print_summary()

        if result.validation_errors:
            return 2  # Validation errors

        return 0

    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user")
        return 130

    except (ValueError, OSError) as e:
        logging.debug("Conversion failed", exc_info=True)
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
