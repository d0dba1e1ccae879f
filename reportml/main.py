"""Command-line entry point for reportml.

Example:
    ```bash
    reportml --template report.xml --data data.json --output report.pdf
    reportml --template report.xml --validate
    python -m reportml.main --version
    ```
"""

import argparse
import logging
import sys

from reportml import __version__
from reportml.config import get_config
from reportml.exceptions import DataParseError, GenerationError, ReportError, TemplateParseError
from reportml.generator import ReportGenerator

logger = logging.getLogger(__name__)


def build_parser(default_output: str) -> argparse.ArgumentParser:
    """Create the argument parser for the reportml command."""
    parser = argparse.ArgumentParser(
        prog="reportml",
        description="reportml - PDF report generator for XML templates and JSON data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  reportml --template report.xml --data data.json --output report.pdf
  reportml --template report.xml --validate
        """,
    )

    parser.add_argument(
        "--template",
        type=str,
        default="",
        help="Path to the XML template file",
    )

    parser.add_argument(
        "--data",
        type=str,
        default="",
        help="Path to the JSON data file",
    )

    parser.add_argument(
        "--output",
        type=str,
        default=default_output,
        help=f"Path for the output PDF file (default: {default_output})",
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Only validate the template without generating a PDF",
    )

    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for command-line usage.

    Args:
        argv: Arguments to parse (default: sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        config = get_config()
    except ValueError as e:
        print(f"Error in configuration: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = build_parser(str(config.default_output))
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")

    if args.version:
        print(f"reportml version {__version__}")
        return 0

    if not args.template:
        print("Error: --template is required", file=sys.stderr)
        return 1

    generator = ReportGenerator(config)

    try:
        generator.load_template(args.template)
    except TemplateParseError as e:
        print(f"Error loading template: {e}", file=sys.stderr)
        return 1

    if args.validate:
        print("Template validation successful")
        return 0

    try:
        if args.data:
            generator.load_data_from_file(args.data)
        output = generator.generate(args.output)
    except DataParseError as e:
        print(f"Error loading data: {e}", file=sys.stderr)
        return 1
    except GenerationError as e:
        print(f"Error generating PDF: {e}", file=sys.stderr)
        return 1
    except ReportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"PDF generated successfully: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
