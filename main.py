#!/usr/bin/env python3
"""
OCR Invoice Parser - Main Entry Point.

This is the main entry point for the invoice parser. It reads OCR text
dumps of scanned invoices, turns each into a structured InvoiceRecord
and writes the records as JSON files and an Excel workbook.

Usage:
    Command Line:
        python main.py --input scan_001.txt --output results/
        python main.py --input ./ocr_texts/ --no-excel
        python main.py --input scan_001.txt --stdout

    Python:
        from main import run_extraction
        records = run_extraction("ocr_texts/")

Author: ML Engineering Team
Version: 1.0.0
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

# Import project modules
from config import ConfigurationManager
from invoice_parser.extraction import InvoiceTextExtractor
from invoice_parser.models import InvoiceRecord
from invoice_parser.output_handler import OutputHandler
from invoice_parser.utils.exceptions import ConfigurationError, InputError
from invoice_parser.utils.helpers import collect_input_files, read_text_file
from invoice_parser.utils.logger import get_logger, setup_logger_from_config


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="OCR Invoice Parser: structure OCR text of scanned invoices",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Parse a single OCR text file:
        python main.py --input scan_001.txt --output results/

    Parse a directory, JSON only:
        python main.py --input ./ocr_texts/ --no-excel

    Print the records instead of writing files:
        python main.py --input scan_001.txt --stdout
        """
    )

    # Input/Output arguments
    parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="OCR text file (.txt) or directory of text files"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output directory (default: paths.output_dir from the configuration)"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    # Output options
    parser.add_argument(
        "--no-excel",
        action="store_true",
        help="Disable Excel output"
    )

    parser.add_argument(
        "--no-json",
        action="store_true",
        help="Disable JSON output"
    )

    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the records as a JSON array instead of writing files"
    )

    # Logging options
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize the parser with configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    config = ConfigurationManager(args.config)

    # Keep stdout clean for the JSON array
    logger = setup_logger_from_config(stream=sys.stderr if args.stdout else None)

    if args.debug:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = None

    if level is not None:
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

    logger.info("=" * 60)
    logger.info("OCR INVOICE PARSER")
    logger.info("=" * 60)
    logger.info(f"Version: {config.get('project.version', '1.0.0')}")
    logger.info(f"Input: {args.input}")

    return config


def run_extraction(
    input_path: str,
    extractor: Optional[InvoiceTextExtractor] = None
) -> List[Tuple[Path, InvoiceRecord]]:
    """
    Parse every OCR text file under input_path.

    This is the main programmatic entry point. A file that cannot be
    read is logged and skipped; the remaining files are still parsed.

    Args:
        input_path: OCR text file or directory of text files.
        extractor: Extractor to use. A default one is created if None.

    Returns:
        List of (source file, record) pairs in file name order.

    Raises:
        InputError: If the input path is missing or not a text file.

    Example:
        >>> for source, record in run_extraction("ocr_texts/"):
        ...     print(source.name, record.invoice_number)
    """
    logger = get_logger(__name__)
    extractor = extractor or InvoiceTextExtractor()

    files = collect_input_files(input_path)
    if not files:
        logger.warning(f"No OCR text files found in: {input_path}")
        return []

    logger.info(f"Processing {len(files)} file(s)...")

    results = []
    for file_path in files:
        try:
            text = read_text_file(file_path)
        except OSError as e:
            logger.error(f"Could not read {file_path.name}: {e}")
            continue

        record = extractor.extract(text, source_file=file_path.name)
        results.append((file_path, record))

        logger.info(
            f"  {file_path.name}: invoice #{record.invoice_number or 'N/A'}, "
            f"vendor: {record.vendor.company_name or 'N/A'}"
        )

    return results


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code (0 for success, 1 for errors, 130 when interrupted).
    """
    try:
        args = parse_arguments(argv)
        initialize_system(args)
        logger = get_logger(__name__)

        results = run_extraction(args.input)
        if not results:
            logger.error("No files to process")
            return 1

        records = [record for _, record in results]
        sources = [path.name for path, _ in results]

        if args.stdout:
            print(json.dumps(
                [record.to_dict() for record in records],
                indent=2,
                ensure_ascii=False
            ))
            return 0

        output_handler = OutputHandler(
            json_enabled=False if args.no_json else None,
            excel_enabled=False if args.no_excel else None,
            output_dir=args.output
        )
        output_info = output_handler.save(records, source_files=sources)

        if output_info['json_paths']:
            logger.info(f"JSON output: {len(output_info['json_paths'])} file(s)")
        if output_info['excel_path']:
            logger.info(f"Excel output: {output_info['excel_path']}")

        logger.info("=" * 60)
        logger.info(f"Parsing complete. Processed {len(results)} file(s).")
        logger.info("=" * 60)

        return 1 if output_info['errors'] else 0

    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except (FileNotFoundError, ConfigurationError) as e:
        # Missing or incomplete configuration file
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
