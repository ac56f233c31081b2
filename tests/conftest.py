"""
Shared test fixtures and configuration for pytest.
"""

import sqlite3
import sys
from pathlib import Path
from typing import Callable, Optional

import pytest

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Schema
# ============================================================================

TOKEN_SPEC_DDL = """
    CREATE TABLE ft_tokenspec (
        specid INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        sn_length INTEGER NOT NULL,
        token_interval INTEGER NOT NULL,
        checksum TEXT NOT NULL,
        algorithm TEXT NOT NULL
    )
"""

TOKEN_INFO_DDL = """
    CREATE TABLE ft_tokeninfo (
        token TEXT NOT NULL UNIQUE,
        pubkey TEXT NOT NULL,
        authnum TEXT,
        physicaltype INTEGER,
        producttype INTEGER,
        specid INTEGER REFERENCES ft_tokenspec (specid),
        importtime INTEGER,
        pubkeystate INTEGER,
        tknifmid INTEGER,
        tknofmid INTEGER,
        tkntype INTEGER,
        tknstate INTEGER
    )
"""


def create_datastore(
    path: Path, token_info: bool = True, token_spec: bool = True
) -> Path:
    """Create a SQLite file with the requested token tables."""
    conn = sqlite3.connect(str(path))
    try:
        if token_spec:
            conn.execute(TOKEN_SPEC_DDL)
        if token_info:
            conn.execute(TOKEN_INFO_DDL)
        # Guarantees a valid SQLite header even with no tables
        conn.execute("PRAGMA user_version = 1")
        conn.commit()
    finally:
        conn.close()
    return path


def query_all(path: Path, sql: str, params: tuple = ()) -> list:
    """Run a read query against a datastore in a fresh connection."""
    conn = sqlite3.connect(str(path))
    try:
        return conn.execute(sql, params).fetchall()
    finally:
        conn.close()


# ============================================================================
# Pytest hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def datastore(tmp_path: Path) -> Path:
    """Empty datastore with both token tables."""
    return create_datastore(tmp_path / "otp.db")


@pytest.fixture
def datastore_without_tokeninfo(tmp_path: Path) -> Path:
    """Datastore that only has the spec table."""
    return create_datastore(tmp_path / "partial.db", token_info=False)


@pytest.fixture
def seed_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing seed file content to a temporary path."""

    def _write(content: str, name: str = "seeds.txt", encoding: Optional[str] = "utf-8") -> Path:
        path = tmp_path / name
        with open(path, "w", encoding=encoding, newline="") as f:
            f.write(content)
        return path

    return _write


@pytest.fixture
def make_datastore(tmp_path: Path) -> Callable[..., Path]:
    """Factory creating datastores with a chosen subset of tables."""

    def _make(name: str = "custom.db", token_info: bool = True, token_spec: bool = True) -> Path:
        return create_datastore(tmp_path / name, token_info=token_info, token_spec=token_spec)

    return _make


@pytest.fixture
def query_db() -> Callable[..., list]:
    """Run read queries against a datastore file."""
    return query_all
