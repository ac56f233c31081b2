"""
Seed file I/O and validation utilities.

A seed file holds one 'token,pubkey' record per line. Lines are validated
independently: a bad line is reported and skipped, the rest still load.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional, Union

from ..core.exceptions import SeedFileError
from ..core.models import ParseResult, SeedEntry

logger = logging.getLogger(__name__)


# ASCII digits only; \d would also accept other Unicode digit characters
TOKEN_PATTERN = re.compile(r"[0-9]{12}|[0-9]{13}|[0-9]{16}")
PUBKEY_PATTERN = re.compile(r"[0-9A-Fa-f]{40}")
# Only CR, LF and CRLF end a line; form feeds and NEL stay inside it
LINE_BREAK = re.compile(r"\r\n|\r|\n")

DEFAULT_ENCODING = "utf-8-sig"


class SeedLineError(ValueError):
    """Raised when a single seed line fails validation."""

    def __init__(self, line_number: int, message: str):
        super().__init__(f"Line {line_number}: {message}")
        self.line_number = line_number


def read_seed_lines(file_path: Path, encoding: str = DEFAULT_ENCODING) -> list[str]:
    """
    Read a seed file into a list of lines.

    Args:
        file_path: Path to the seed file.
        encoding: Text encoding of the file.

    Returns:
        Lines without their terminators (CRLF and LF both accepted).

    Raises:
        SeedFileError: If the file is missing or unreadable.
    """
    try:
        exists = file_path.exists()
        is_file = file_path.is_file()
    except OSError as e:
        raise SeedFileError(f"Error reading file: {e}")

    if not exists:
        raise SeedFileError(f"File not found: {file_path}")
    if not is_file:
        raise SeedFileError(f"Error reading file: {file_path} is not a file")

    try:
        with open(file_path, "r", encoding=encoding, newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError, LookupError) as e:
        raise SeedFileError(f"Error reading file: {e}")

    lines = LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_seed_line(line: str, line_number: int) -> Optional[SeedEntry]:
    """
    Validate one line of a seed file.

    Args:
        line: Raw line text.
        line_number: 1-based line number used in error messages.

    Returns:
        The parsed SeedEntry, or None for a blank line.

    Raises:
        SeedLineError: If the line is malformed.
    """
    line = line.strip()
    if not line:
        return None

    parts = line.split(",")
    if len(parts) != 2:
        raise SeedLineError(line_number, "Invalid format. Expected 'token,pubkey'")

    token = parts[0].strip()
    pubkey = parts[1].strip()

    if not TOKEN_PATTERN.fullmatch(token):
        raise SeedLineError(
            line_number,
            f"Invalid token format '{token}'. Must be 12, 13, or 16 digits.",
        )

    if not PUBKEY_PATTERN.fullmatch(pubkey):
        raise SeedLineError(
            line_number,
            f"Invalid pubkey format '{pubkey}'. Must be 40 hex characters.",
        )

    return SeedEntry(token=token, pubkey=pubkey)


class SeedParser:
    """
    Parses seed files into validated entries.

    Never raises: unreadable files and bad lines are both reported through
    the returned ParseResult.
    """

    def __init__(self, encoding: str = DEFAULT_ENCODING):
        self.encoding = encoding

    def parse(self, file_path: Union[str, Path]) -> ParseResult:
        """
        Parse a seed file.

        Args:
            file_path: Path to the seed file.

        Returns:
            ParseResult with valid entries and errors, both in file order.
        """
        file_path = Path(file_path)

        try:
            lines = read_seed_lines(file_path, self.encoding)
        except SeedFileError as e:
            logger.error(str(e))
            return ParseResult(entries=(), errors=(str(e),))

        entries: list[SeedEntry] = []
        errors: list[str] = []

        for line_number, line in enumerate(lines, start=1):
            try:
                entry = parse_seed_line(line, line_number)
            except SeedLineError as e:
                logger.debug(str(e))
                errors.append(str(e))
                continue

            if entry is not None:
                entries.append(entry)

        logger.info(
            f"Parsed {file_path.name}: {len(entries)} valid entries, "
            f"{len(errors)} errors"
        )
        return ParseResult(entries=tuple(entries), errors=tuple(errors))


def parse_seed_file(
    file_path: Union[str, Path], encoding: str = DEFAULT_ENCODING
) -> ParseResult:
    """Parse a seed file with a one-off SeedParser."""
    return SeedParser(encoding=encoding).parse(file_path)
