"""
Custom exceptions for the seed import pipeline.

These are raised by internal helpers. The public operations (parse,
insert_all, test_connection, list_specs) convert them into error strings
instead of letting them reach the caller.
"""


class SeedImportError(Exception):
    """Base exception for all seed import errors."""
    pass


class SeedFileError(SeedImportError):
    """
    Seed file could not be read.

    Raised when:
    - The file does not exist
    - The file cannot be opened or decoded
    """
    pass


class SchemaValidationError(SeedImportError):
    """
    The datastore is missing a required table.
    """

    def __init__(self, message: str, missing_tables: list = None):
        super().__init__(message)
        self.missing_tables = missing_tables or []


class SpecResolutionError(SeedImportError):
    """
    No spec row could be read or created.

    Raised when:
    - The spec table cannot be queried
    - Inserting the default spec fails
    """
    pass


class ImportConfigError(SeedImportError):
    """
    Error in import configuration.

    Raised when:
    - Configuration file is missing or not valid YAML
    - A configuration value has the wrong type
    """
    pass
