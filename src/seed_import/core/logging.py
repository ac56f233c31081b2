"""
Logging utilities for the seed import tool.

Console output is human readable by default; JSON lines are available for
log collectors. Import runs tag their records with a run_id so that one
run's lines can be picked out of a shared log file.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


CONTEXT_FIELDS = ("run_id", "database", "seed_file")


class StructuredFormatter(logging.Formatter):
    """Formatter that outputs one JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_entry[name] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class HumanReadableFormatter(logging.Formatter):
    """
    Formatter that outputs human-readable log lines with run context.

    Format: TIMESTAMP [LEVEL] MESSAGE [run_id=X]
    """

    def __init__(self, fmt: Optional[str] = None):
        super().__init__(
            fmt or "%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)

        run_id = getattr(record, "run_id", None)
        if run_id is not None:
            return f"{base} [run_id={run_id}]"
        return base


def setup_logging(
    verbose: bool = False,
    log_dir: Optional[Path] = None,
    structured: bool = False,
    level: str = "INFO",
) -> Optional[Path]:
    """
    Configure logging to console and optionally to a file.

    Args:
        verbose: Enable DEBUG output on the console
        log_dir: Directory for a timestamped log file (optional)
        structured: Emit JSON lines instead of plain text
        level: Console level name; unknown names fall back to INFO

    Returns:
        Path of the log file, or None when logging to console only
    """
    if verbose:
        log_level = logging.DEBUG
    else:
        log_level = logging.getLevelName(str(level).upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if log_dir else log_level)

    # Replace handlers from an earlier call instead of stacking them
    for handler in list(root_logger.handlers):
        if getattr(handler, "_seed_import", False):
            root_logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        StructuredFormatter() if structured else HumanReadableFormatter()
    )
    console_handler._seed_import = True
    root_logger.addHandler(console_handler)

    if not log_dir:
        return None

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"seed_import_{timestamp}.log"

    # File handler records DEBUG regardless of --verbose
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        StructuredFormatter() if structured
        else HumanReadableFormatter("%(asctime)s [%(levelname)s] %(name)s - %(message)s")
    )
    file_handler._seed_import = True
    root_logger.addHandler(file_handler)

    logging.info(f"Logging to file: {log_file}")
    return log_file
