"""Command-line interface for md-converter."""

import argparse
import logging
import sys
from pathlib import Path

import uvicorn

from .config import settings


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="md-converter - Convert Markdown tables to Excel with live formulas"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Convert command
    convert_parser = subparsers.add_parser("convert", help="Convert a Markdown file to XLSX")
    convert_parser.add_argument("input", help="Markdown file to convert")
    convert_parser.add_argument("--output", "-o", help="Output .xlsx path")
    convert_parser.add_argument("--no-freeze", action="store_true", help="Do not freeze the header row")
    convert_parser.add_argument("--no-auto-width", action="store_true", help="Do not size columns to content")
    convert_parser.add_argument("--no-borders", action="store_true", help="Do not draw cell borders")
    convert_parser.add_argument("--no-validate", action="store_true", help="Skip formula validation")

    # Preview command
    preview_parser = subparsers.add_parser("preview", help="Show detected cell types for each table")
    preview_parser.add_argument("input", help="Markdown file to inspect")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate table formulas")
    validate_parser.add_argument("input", help="Markdown file to validate")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default=settings.host, help=f"Host to bind to (default: {settings.host})"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Port to bind to (default: {settings.port})"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose or settings.debug else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "convert":
        sys.exit(run_convert(args))
    elif args.command == "preview":
        sys.exit(run_preview(Path(args.input)))
    elif args.command == "validate":
        sys.exit(run_validate(Path(args.input)))
    elif args.command == "serve":
        run_server(args.host, args.port, args.reload)
    else:
        parser.print_help()
        sys.exit(1)


def run_convert(args) -> int:
    """Convert a file and report the outcome."""
    from .converters import XlsxConversionOptions, XlsxConverter
    from .errors import ConverterError

    options = XlsxConversionOptions(
        freeze_headers=False if args.no_freeze else None,
        auto_width=False if args.no_auto_width else None,
        add_borders=False if args.no_borders else None,
        validate_formulas=False if args.no_validate else None,
    )

    try:
        result = XlsxConverter().convert(args.input, args.output, options)
    except ConverterError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Created {result.output_path}")
    print(f"  Worksheets: {', '.join(result.worksheet_names)}")
    print(f"  Formulas:   {result.formula_count}")
    if result.warnings:
        print(f"  Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"    - {warning}")
    return 0


def run_preview(input_path: Path) -> int:
    """Print each table with the type detected for every cell."""
    from .errors import FrontMatterError
    from .metadata import MetadataNormalizer, parse_front_matter
    from .pipeline import normalize_line_endings
    from .tables import CellClassifier, MarkdownTableReader

    try:
        markdown = input_path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    front_matter = parse_front_matter(normalize_line_endings(markdown))
    if front_matter.errors:
        print(f"Error: {front_matter.errors[0]}", file=sys.stderr)
        return 1

    date_format = None
    if front_matter.metadata:
        try:
            metadata, _ = MetadataNormalizer().normalize(front_matter.metadata)
        except FrontMatterError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        date_format = metadata.date_format
    classifier = CellClassifier(date_format or settings.default_date_format)

    tables = MarkdownTableReader().read(front_matter.content)
    if not tables:
        print("No tables found.")
        return 0

    print(f"Date format: {classifier.date_format.value}")
    for index, table in enumerate(tables):
        processed = classifier.process_table(table)
        print(f"\nTable {index + 1}: {' | '.join(processed.headers)}")
        for row_number, row in enumerate(processed.rows, start=1):
            cells = ", ".join(f"{c.display_value or '<empty>'} [{c.data_type.value}]" for c in row.cells)
            print(f"  {row_number}: {cells}")
    return 0


def run_validate(input_path: Path) -> int:
    """Validate every table formula. Returns 1 when any formula is invalid."""
    from .errors import ConverterError
    from .formulas import FormulaValidator
    from .pipeline import PreProcessor

    try:
        markdown = input_path.read_text(encoding="utf-8")
        result = PreProcessor().process(markdown, validate_formulas=False)
    except (OSError, ConverterError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    validator = FormulaValidator()
    invalid = 0
    for location in result.formulas:
        validation = validator.validate(location.formula)
        status = "OK" if validation.is_valid else "INVALID"
        print(f"[{status}] {location.label}: {location.formula}")
        for error in validation.errors:
            print(f"    error: {error}")
        for warning in validation.warnings:
            print(f"    warning: {warning}")
        if not validation.is_valid:
            invalid += 1

    print(f"\n{len(result.formulas)} formula(s), {invalid} invalid")
    return 1 if invalid else 0


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "mdconverter.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


if __name__ == "__main__":
    main()
