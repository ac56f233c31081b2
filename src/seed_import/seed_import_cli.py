#!/usr/bin/env python3
"""
Seed Import CLI.

Validates a 'token,pubkey' seed file and imports it into the ft_tokeninfo
table of an existing SQLite token datastore.

Usage:
    seed-import --seed-file seeds.txt --database otp.db
    seed-import --seed-file seeds.txt --dry-run
    seed-import --database otp.db --test-connection
    seed-import --database otp.db --list-specs
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from .config import ImportConfig
from .core.exceptions import ImportConfigError
from .core.logging import setup_logging
from .core.models import ImportResult, ParseResult
from .seeds import SeedImporter, SeedParser


logger = logging.getLogger(__name__)

DEFAULT_MAX_ERRORS = 3


def format_errors(errors: Sequence[str], max_errors: int = DEFAULT_MAX_ERRORS) -> list[str]:
    """
    Limit an error list for display.

    Returns:
        The first max_errors errors, followed by an 'and N more...' line
        when some were left out.
    """
    shown = list(errors[:max_errors])
    hidden = len(errors) - len(shown)
    if hidden > 0:
        shown.append(f"and {hidden} more...")
    return shown


def summarize_parse(seed_file: Path, result: ParseResult) -> str:
    """Describe a parse result in one line."""
    summary = f"Parsed {seed_file.name}: {len(result.entries)} valid entries"
    if result.errors:
        summary += f", {len(result.errors)} invalid lines"
    return summary


def summarize_import(result: ImportResult) -> str:
    """Describe an import result in one line."""
    if result.errors:
        return (
            f"Import completed with errors. "
            f"{result.success_count} entries inserted."
        )
    return (
        f"Import successful! {result.success_count} entries inserted "
        "into database."
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="seed-import",
        description="Import 'token,pubkey' seed files into an OTP token database.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Validate and import a seed file
    seed-import --seed-file seeds.txt --database otp.db

    # Validate only, without touching the database
    seed-import --seed-file seeds.txt --dry-run

    # Check that a database has the token tables
    seed-import --database otp.db --test-connection

    # Show the token specs available in a database
    seed-import --database otp.db --list-specs
        """,
    )

    parser.add_argument(
        "--seed-file",
        type=Path,
        help="Path to the seed file (one 'token,pubkey' per line)",
    )

    parser.add_argument(
        "--database",
        type=Path,
        help="Path to the SQLite database (default: database.path from config "
             "or SEED_IMPORT_DB_PATH)",
    )

    parser.add_argument(
        "--test-connection",
        action="store_true",
        help="Check that the database opens and has the required tables",
    )

    parser.add_argument(
        "--list-specs",
        action="store_true",
        help="List token specs in the database",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and validate the seed file without writing to the database",
    )

    parser.add_argument(
        "--max-errors",
        type=int,
        default=DEFAULT_MAX_ERRORS,
        help=f"Maximum number of errors to print (default: {DEFAULT_MAX_ERRORS})",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a YAML config file",
    )

    parser.add_argument(
        "--log-dir",
        type=Path,
        help="Directory for a timestamped log file",
    )

    parser.add_argument(
        "--structured-logs",
        action="store_true",
        help="Emit JSON log lines",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose/debug logging",
    )

    args = parser.parse_args(argv)

    if not (args.seed_file or args.test_connection or args.list_specs):
        parser.error("nothing to do: give --seed-file, --test-connection or --list-specs")
    if args.max_errors < 0:
        parser.error("--max-errors must not be negative")

    return args


def run(args: argparse.Namespace, config: ImportConfig) -> int:
    """
    Run the requested operations.

    Returns:
        Process exit code.
    """
    database = args.database or config.database_path
    importer: Optional[SeedImporter] = None
    exit_code = 0

    if args.test_connection or args.list_specs:
        if database is None:
            print("Please select a database file first.")
            return 1
        importer = SeedImporter(config=config)

    if args.test_connection:
        if importer.test_connection(database):
            print(f"Database selected: {database.name} - Connection successful!")
        else:
            print(f"Database selected: {database.name} - Warning: Cannot connect to database!")
            exit_code = 1

    if args.list_specs:
        specs = importer.list_specs(database)
        if specs:
            for label in specs:
                print(label)
        else:
            print("No token specs found.")

    if not args.seed_file:
        return exit_code

    parse_result = SeedParser(encoding=config.encoding).parse(args.seed_file)
    print(summarize_parse(args.seed_file, parse_result))
    for line in format_errors(parse_result.errors, args.max_errors):
        print(f"  {line}")

    if args.dry_run:
        logger.info("[DRY RUN] Skipping database import")
        return exit_code if parse_result.entries else 1

    if database is None:
        print("Please select a database file first.")
        return 1

    if not parse_result.entries:
        print("No valid entries to import. Please check your seed file.")
        return 1

    importer = importer or SeedImporter(config=config)
    logger.info(f"Importing {len(parse_result.entries)} entries into {database}")
    result = importer.insert_all(database, parse_result.entries)

    print(summarize_import(result))
    for line in format_errors(result.errors, args.max_errors):
        print(f"  {line}")

    return 0 if result.ok and exit_code == 0 else 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    load_dotenv()
    args = parse_args(argv)

    try:
        config = ImportConfig(args.config)
    except ImportConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    log_config = config.get_logging_config()
    setup_logging(
        verbose=args.verbose,
        level=log_config.get("level", "INFO"),
        log_dir=args.log_dir or log_config.get("log_dir"),
        structured=args.structured_logs or bool(log_config.get("structured")),
    )

    try:
        return run(args, config)
    except ImportConfigError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
