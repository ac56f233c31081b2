"""
Core data models for the seed import pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ImportPhase(str, Enum):
    """Phase of a single import run."""
    NOT_STARTED = "not_started"
    VALIDATING_SCHEMA = "validating_schema"
    RESOLVING_SPEC = "resolving_spec"
    INSERTING = "inserting"
    DONE = "done"


@dataclass(frozen=True)
class SeedEntry:
    """
    One validated (token, pubkey) pair parsed from a seed file.

    Attributes:
        token: Token serial, 12, 13 or 16 decimal digits
        pubkey: 40 hex characters, case preserved as read
    """
    token: str
    pubkey: str


@dataclass(frozen=True)
class TokenSpec:
    """
    A token specification row (ft_tokenspec).

    Every imported token row references one of these through its specid.
    """
    name: str
    sn_length: int
    token_interval: int
    checksum: str
    algorithm: str
    spec_id: Optional[int] = None

    def label(self) -> str:
        """Return the 'id: name' label shown when listing specs."""
        return f"{self.spec_id}: {self.name}"


DEFAULT_SPEC = TokenSpec(
    name="Default Import Spec",
    sn_length=12,
    token_interval=30,
    checksum="sha256",
    algorithm="totp",
)


@dataclass(frozen=True)
class TokenRowDefaults:
    """Fixed ft_tokeninfo values shared by every row of an import run."""
    authnum: str = "0"
    physicaltype: int = 0
    producttype: int = 0
    pubkeystate: int = 0
    tknifmid: int = 1
    tknofmid: int = 1
    tkntype: int = 1
    tknstate: int = 1


@dataclass(frozen=True)
class ParseResult:
    """Valid entries and per-line errors from a single parse pass."""
    entries: tuple[SeedEntry, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class ImportResult:
    """
    Outcome of an import run.

    Attributes:
        success_count: Rows inserted
        errors: Human-readable errors in the order they occurred
        attempted: Number of INSERT statements executed
        spec_id: Resolved ft_tokenspec id, None if the run aborted first
        aborted_in: Phase in which a run-level failure stopped the run
    """
    success_count: int = 0
    errors: tuple[str, ...] = field(default_factory=tuple)
    attempted: int = 0
    spec_id: Optional[int] = None
    aborted_in: Optional[ImportPhase] = None

    @property
    def ok(self) -> bool:
        return not self.errors
