"""
Core models, exceptions and logging for the seed import pipeline.
"""

from .models import (
    DEFAULT_SPEC,
    ImportPhase,
    ImportResult,
    ParseResult,
    SeedEntry,
    TokenRowDefaults,
    TokenSpec,
)
from .exceptions import (
    ImportConfigError,
    SchemaValidationError,
    SeedFileError,
    SeedImportError,
    SpecResolutionError,
)

__all__ = [
    "DEFAULT_SPEC",
    "ImportPhase",
    "ImportResult",
    "ParseResult",
    "SeedEntry",
    "TokenRowDefaults",
    "TokenSpec",
    "ImportConfigError",
    "SchemaValidationError",
    "SeedFileError",
    "SeedImportError",
    "SpecResolutionError",
]
