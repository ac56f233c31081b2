"""
Database introspection utilities for seed importing.

Provides the scoped SQLite connection and the read-only queries used to
check that a datastore has the expected token tables.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from ..core.exceptions import SchemaValidationError
from ..core.models import TokenSpec

logger = logging.getLogger(__name__)


TOKEN_INFO_TABLE = "ft_tokeninfo"
TOKEN_SPEC_TABLE = "ft_tokenspec"
REQUIRED_TABLES = (TOKEN_INFO_TABLE, TOKEN_SPEC_TABLE)


@contextmanager
def open_connection(
    database_path: Union[str, Path], timeout: float = 5.0
) -> Iterator[sqlite3.Connection]:
    """
    Open an existing SQLite database for the duration of a with-block.

    The database is opened read-write without being created, in autocommit
    mode so every statement is committed on its own. The connection is
    closed on every exit path.

    Args:
        database_path: Path to the SQLite file.
        timeout: Seconds to wait on a locked database.

    Raises:
        sqlite3.Error: If the file cannot be opened.
    """
    uri = Path(database_path).resolve().as_uri() + "?mode=rw"
    conn = sqlite3.connect(uri, uri=True, timeout=timeout, isolation_level=None)
    logger.debug(f"Connected to SQLite datastore: {database_path}")
    try:
        yield conn
    finally:
        conn.close()
        logger.debug(f"Closed SQLite datastore: {database_path}")


def count_required_tables(conn: sqlite3.Connection) -> int:
    """
    Count how many of the required tables exist, in a single query.

    Args:
        conn: Active database connection.

    Returns:
        Number of required tables found (0 to 2).
    """
    placeholders = ", ".join("?" for _ in REQUIRED_TABLES)
    cursor = conn.execute(
        f"""
        SELECT COUNT(*) FROM sqlite_master
        WHERE type = 'table' AND name IN ({placeholders})
        """,
        REQUIRED_TABLES,
    )
    (count,) = cursor.fetchone()
    return int(count)


def find_missing_tables(conn: sqlite3.Connection) -> list[str]:
    """Return the required tables that do not exist, in declaration order."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table'"
    )
    existing = {row[0] for row in cursor.fetchall()}
    return [name for name in REQUIRED_TABLES if name not in existing]


def check_required_tables(conn: sqlite3.Connection) -> None:
    """
    Verify that both token tables exist.

    Raises:
        SchemaValidationError: If either table is missing.
    """
    if count_required_tables(conn) >= len(REQUIRED_TABLES):
        return

    missing = find_missing_tables(conn)
    logger.debug(f"Missing required tables: {missing}")
    raise SchemaValidationError(
        f"Required tables '{TOKEN_INFO_TABLE}' and/or '{TOKEN_SPEC_TABLE}' "
        "do not exist in the database.",
        missing_tables=missing,
    )


def fetch_specs(conn: sqlite3.Connection) -> list[TokenSpec]:
    """
    Read every spec row, ordered by name.

    Args:
        conn: Active database connection.

    Returns:
        List of TokenSpec rows.
    """
    cursor = conn.execute(
        f"""
        SELECT specid, name, sn_length, token_interval, checksum, algorithm
        FROM {TOKEN_SPEC_TABLE}
        ORDER BY name
        """
    )
    return [
        TokenSpec(
            spec_id=row[0],
            name=row[1],
            sn_length=row[2],
            token_interval=row[3],
            checksum=row[4],
            algorithm=row[5],
        )
        for row in cursor.fetchall()
    ]
