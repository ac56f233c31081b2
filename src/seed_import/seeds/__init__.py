"""
Seed parsing and importing for OTP token datastores.

This package provides utilities for reading and validating
'token,pubkey' seed files and loading them into SQLite token tables.
"""

from .seed_io import SeedParser, parse_seed_file
from .db_introspection import REQUIRED_TABLES, open_connection
from .db_loader import SeedImporter

__all__ = [
    "SeedParser",
    "parse_seed_file",
    "REQUIRED_TABLES",
    "open_connection",
    "SeedImporter",
]
