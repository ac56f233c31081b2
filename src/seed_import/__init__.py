"""
Seed import for OTP token datastores.

Validates 'token,pubkey' seed files and imports them into the
ft_tokeninfo table of an existing SQLite datastore.
"""

from .core.models import ImportResult, ParseResult, SeedEntry
from .seeds import SeedImporter, SeedParser, parse_seed_file

__version__ = "0.1.0"

__all__ = [
    "ImportResult",
    "ParseResult",
    "SeedEntry",
    "SeedImporter",
    "SeedParser",
    "parse_seed_file",
]
