"""
Unit tests for core models.

These tests verify the data models without external dependencies.
"""

import dataclasses

import pytest

from seed_import.core.models import (
    DEFAULT_SPEC,
    ImportPhase,
    ImportResult,
    ParseResult,
    SeedEntry,
    TokenRowDefaults,
    TokenSpec,
)


class TestSeedEntry:
    """Tests for SeedEntry model."""

    def test_entry_is_immutable(self):
        entry = SeedEntry(token="123456789012", pubkey="ab" * 20)
        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.token = "999999999999"

    def test_entries_compare_by_value(self):
        assert SeedEntry("123456789012", "ab" * 20) == SeedEntry("123456789012", "ab" * 20)


class TestTokenSpec:
    """Tests for TokenSpec model."""

    def test_default_spec_values(self):
        assert DEFAULT_SPEC.name == "Default Import Spec"
        assert DEFAULT_SPEC.sn_length == 12
        assert DEFAULT_SPEC.token_interval == 30
        assert DEFAULT_SPEC.checksum == "sha256"
        assert DEFAULT_SPEC.algorithm == "totp"
        assert DEFAULT_SPEC.spec_id is None

    def test_label(self):
        spec = TokenSpec("Hardware", 16, 60, "crc", "hotp", spec_id=5)
        assert spec.label() == "5: Hardware"


class TestTokenRowDefaults:

    def test_defaults(self):
        defaults = TokenRowDefaults()
        assert defaults.authnum == "0"
        assert (defaults.physicaltype, defaults.producttype, defaults.pubkeystate) == (0, 0, 0)
        assert (defaults.tknifmid, defaults.tknofmid, defaults.tkntype, defaults.tknstate) == (1, 1, 1, 1)


class TestResults:

    def test_parse_result_ok(self):
        assert ParseResult().ok
        assert not ParseResult(errors=("Line 1: bad",)).ok

    def test_import_result_defaults(self):
        result = ImportResult()
        assert result.success_count == 0
        assert result.errors == ()
        assert result.attempted == 0
        assert result.spec_id is None
        assert result.aborted_in is None
        assert result.ok

    def test_import_result_is_immutable(self):
        result = ImportResult(success_count=1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.success_count = 2

    def test_phase_values(self):
        assert [p.value for p in ImportPhase] == [
            "not_started",
            "validating_schema",
            "resolving_spec",
            "inserting",
            "done",
        ]
