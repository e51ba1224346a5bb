"""
Command Line Interface Module

Parses command-line arguments for shape extraction.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .features.parser import OverpassResponseError
from .settings import SettingsError


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the pipeline."""
    parser = argparse.ArgumentParser(
        prog="overpass-shapes",
        description="Convert Overpass API results into map markers, areas and paths",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m overpass_shapes.cli -i response.json -o ./output
  python -m overpass_shapes.cli -i response.json -o ./output --no-relations
  python -m overpass_shapes.cli -i response.json -o ./output --settings my.yaml -v
        """
    )

    # Required arguments
    parser.add_argument(
        "-i", "--input",
        required=True,
        help="Saved Overpass JSON response"
    )

    parser.add_argument(
        "-o", "--output",
        required=True,
        help="Output directory path"
    )

    # Optional arguments
    parser.add_argument(
        "--settings",
        help="Settings YAML file (default: config/settings.yaml)"
    )

    parser.add_argument(
        "--very-small-span",
        type=float,
        help="Span in degrees below which shapes get a centroid marker"
    )

    parser.add_argument(
        "--no-relations",
        action="store_true",
        help="Skip relations (only nodes and ways)"
    )

    parser.add_argument(
        "--infer-closed",
        action="store_true",
        help="Treat geometry-only ways that end where they start as closed"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    return parser


def validate_args(args: argparse.Namespace) -> Tuple[bool, str]:
    """
    Validate parsed arguments.

    Args:
        args: Parsed arguments

    Returns:
        Tuple of (is_valid, error_message)
    """
    input_path = Path(args.input)
    if not input_path.exists():
        return False, f"Input file not found: {args.input}"

    if input_path.suffix.lower() not in (".json", ".geojson"):
        return False, f"Input file must be JSON: {args.input}"

    if args.settings and not Path(args.settings).exists():
        return False, f"Settings file not found: {args.settings}"

    output_path = Path(args.output)
    try:
        output_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return False, f"Cannot create output directory: {e}"

    if args.very_small_span is not None and args.very_small_span < 0:
        return False, f"Very small span must not be negative: {args.very_small_span}"

    return True, ""


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse and validate command-line arguments.

    Args:
        args: Optional list of arguments (uses sys.argv if None)

    Returns:
        Parsed and validated arguments
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    is_valid, error_msg = validate_args(parsed)
    if not is_valid:
        parser.error(error_msg)

    return parsed


def main():
    """Main entry point for CLI."""
    args = parse_args()

    from .pipeline import run_pipeline

    try:
        run_pipeline(args)
    except KeyboardInterrupt:
        print("\nProcessing cancelled by user")
        sys.exit(1)
    except OverpassResponseError as e:
        print(f"\nInvalid Overpass response: {e}")
        sys.exit(1)
    except SettingsError as e:
        print(f"\nSettings error: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
