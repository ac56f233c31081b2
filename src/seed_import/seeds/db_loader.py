"""
Database loading utilities for seed entries.

Provides the SeedImporter class, which checks the datastore schema,
resolves the spec every token row must reference, and inserts seed
entries one statement at a time.
"""

from __future__ import annotations

import logging
import sqlite3
import time
import uuid
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from ..config import ImportConfig
from ..core.exceptions import SchemaValidationError, SpecResolutionError
from ..core.models import (
    ImportPhase,
    ImportResult,
    SeedEntry,
    TokenRowDefaults,
    TokenSpec,
)
from .db_introspection import (
    TOKEN_INFO_TABLE,
    TOKEN_SPEC_TABLE,
    check_required_tables,
    fetch_specs,
    open_connection,
)

logger = logging.getLogger(__name__)


INSERT_TOKEN_SQL = f"""
    INSERT INTO {TOKEN_INFO_TABLE} (
        token, pubkey, authnum, physicaltype, producttype, specid,
        importtime, pubkeystate, tknifmid, tknofmid, tkntype, tknstate
    ) VALUES (
        :token, :pubkey, :authnum, :physicaltype, :producttype, :specid,
        :importtime, :pubkeystate, :tknifmid, :tknofmid, :tkntype, :tknstate
    )
"""

SELECT_ANY_SPEC_SQL = f"SELECT specid FROM {TOKEN_SPEC_TABLE} LIMIT 1"

INSERT_SPEC_SQL = f"""
    INSERT INTO {TOKEN_SPEC_TABLE} (name, sn_length, token_interval, checksum, algorithm)
    VALUES (?, ?, ?, ?, ?)
"""


class _RunAborted(Exception):
    """Internal signal that a setup phase failed and the run must stop."""

    def __init__(self, message: str, phase: ImportPhase):
        super().__init__(message)
        self.phase = phase


class SeedImporter:
    """
    Imports seed entries into an OTP token datastore.

    Each public operation opens its own connection and closes it before
    returning. None of them raise: failures come back as error strings,
    False, or an empty list.
    """

    def __init__(
        self,
        config: Optional[ImportConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the importer.

        Args:
            config: Import configuration; defaults are used when omitted.
            clock: Source of the import timestamp (seconds since epoch).
        """
        self.config = config or ImportConfig()
        self.clock = clock
        self.timeout = self.config.timeout
        self.default_spec: TokenSpec = self.config.get_default_spec()
        self.token_defaults: TokenRowDefaults = self.config.get_token_defaults()

    def get_or_create_default_spec(self, conn: sqlite3.Connection) -> int:
        """
        Return the id of an existing spec row, creating one if there is none.

        Any existing row will do; no ordering is applied. At most one
        default row is created per call, and a second call finds it.

        Args:
            conn: Active autocommit connection.

        Returns:
            The spec id.

        Raises:
            SpecResolutionError: If the spec table cannot be read or written.
        """
        try:
            row = conn.execute(SELECT_ANY_SPEC_SQL).fetchone()
            if row is not None:
                spec_id = int(row[0])
                logger.debug(f"Using existing spec id {spec_id}")
                return spec_id

            spec = self.default_spec
            cursor = conn.execute(
                INSERT_SPEC_SQL,
                (
                    spec.name,
                    spec.sn_length,
                    spec.token_interval,
                    spec.checksum,
                    spec.algorithm,
                ),
            )
            spec_id = cursor.lastrowid
            logger.info(f"Created default spec '{spec.name}' with id {spec_id}")
            return spec_id

        except sqlite3.Error as e:
            raise SpecResolutionError(f"Could not read or create spec: {e}") from e
        except (TypeError, ValueError) as e:
            raise SpecResolutionError(f"Existing spec id is not an integer: {e}") from e

    def _token_params(self, spec_id: int, import_time: int) -> dict:
        """Build the parameter set shared by every row of a run."""
        defaults = self.token_defaults
        return {
            "token": None,
            "pubkey": None,
            "authnum": defaults.authnum,
            "physicaltype": defaults.physicaltype,
            "producttype": defaults.producttype,
            "specid": spec_id,
            "importtime": import_time,
            "pubkeystate": defaults.pubkeystate,
            "tknifmid": defaults.tknifmid,
            "tknofmid": defaults.tknofmid,
            "tkntype": defaults.tkntype,
            "tknstate": defaults.tknstate,
        }

    def insert_all(
        self,
        database_path: Union[str, Path],
        entries: Iterable[SeedEntry],
    ) -> ImportResult:
        """
        Insert seed entries into the datastore.

        Args:
            database_path: Path to an existing SQLite datastore.
            entries: Entries to insert, in order.

        Returns:
            ImportResult with the number of inserted rows and all errors.
        """
        database_path = Path(database_path)
        run_id = uuid.uuid4().hex[:8]
        log_extra = {"run_id": run_id, "database": str(database_path)}

        errors: list[str] = []
        success_count = 0
        attempted = 0
        spec_id: Optional[int] = None
        phase = ImportPhase.NOT_STARTED

        try:
            found = database_path.is_file()
            message = f"Database file not found: {database_path}"
        except OSError as e:
            found = False
            message = f"Database error: {e}"

        if not found:
            logger.error(message, extra=log_extra)
            return ImportResult(
                errors=(message,), aborted_in=ImportPhase.VALIDATING_SCHEMA
            )

        phase = ImportPhase.VALIDATING_SCHEMA
        logger.debug(f"Phase: {phase.value}", extra=log_extra)
        try:
            with open_connection(database_path, self.timeout) as conn:
                try:
                    check_required_tables(conn)
                except SchemaValidationError as e:
                    raise _RunAborted(str(e), phase) from e

                phase = ImportPhase.RESOLVING_SPEC
                logger.debug(f"Phase: {phase.value}", extra=log_extra)
                try:
                    spec_id = self.get_or_create_default_spec(conn)
                except SpecResolutionError as e:
                    raise _RunAborted(
                        f"Could not find or create a valid specid in "
                        f"{TOKEN_SPEC_TABLE} table: {e}",
                        phase,
                    ) from e

                phase = ImportPhase.INSERTING
                logger.debug(f"Phase: {phase.value}", extra=log_extra)
                params = self._token_params(spec_id, int(self.clock()))
                cursor = conn.cursor()

                for entry in entries:
                    params["token"] = entry.token
                    params["pubkey"] = entry.pubkey
                    attempted += 1
                    try:
                        cursor.execute(INSERT_TOKEN_SQL, params)
                    except sqlite3.IntegrityError:
                        errors.append(
                            f"Token {entry.token} already exists in database "
                            "or violates constraints."
                        )
                        logger.debug(f"Constraint violation for token {entry.token}", extra=log_extra)
                        continue
                    except (sqlite3.ProgrammingError, sqlite3.InterfaceError):
                        # Connection is unusable; no later entry can succeed
                        raise
                    except sqlite3.Error as e:
                        errors.append(f"Failed to insert token {entry.token}: {e}")
                        logger.warning(f"Insert failed for token {entry.token}: {e}", extra=log_extra)
                        continue
                    success_count += 1

                phase = ImportPhase.DONE
                logger.debug(f"Phase: {phase.value}", extra=log_extra)

        except _RunAborted as e:
            logger.error(str(e), extra=log_extra)
            errors.append(str(e))
            return ImportResult(
                success_count=0,
                errors=tuple(errors),
                attempted=0,
                spec_id=spec_id,
                aborted_in=e.phase,
            )
        except Exception as e:
            logger.exception(f"Database error during {phase.value}: {e}", extra=log_extra)
            errors.append(f"Database error: {e}")
            return ImportResult(
                success_count=success_count,
                errors=tuple(errors),
                attempted=attempted,
                spec_id=spec_id,
                aborted_in=phase,
            )

        logger.info(
            f"Imported {success_count} of {attempted} entries into "
            f"{database_path.name} ({len(errors)} errors)",
            extra=log_extra,
        )
        return ImportResult(
            success_count=success_count,
            errors=tuple(errors),
            attempted=attempted,
            spec_id=spec_id,
        )

    def test_connection(self, database_path: Union[str, Path]) -> bool:
        """
        Check whether a datastore is usable for importing.

        Returns:
            True if the file exists, opens as SQLite and has both token
            tables; False otherwise. Failure details are only logged.
        """
        database_path = Path(database_path)
        try:
            if not database_path.is_file():
                return False
            with open_connection(database_path, self.timeout) as conn:
                check_required_tables(conn)
        except (OSError, sqlite3.Error, SchemaValidationError) as e:
            logger.debug(f"Connection test failed for {database_path}: {e}")
            return False

        return True

    def list_specs(self, database_path: Union[str, Path]) -> list[str]:
        """
        List the datastore's specs as 'id: name' labels, ordered by name.

        Returns:
            Spec labels, or an empty list if the datastore cannot be read.
        """
        database_path = Path(database_path)
        try:
            if not database_path.is_file():
                return []
            with open_connection(database_path, self.timeout) as conn:
                specs = fetch_specs(conn)
        except (OSError, sqlite3.Error) as e:
            logger.debug(f"Could not list specs in {database_path}: {e}")
            return []

        return [spec.label() for spec in specs]
