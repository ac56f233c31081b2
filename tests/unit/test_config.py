"""
Unit tests for ImportConfig.
"""

from pathlib import Path

import pytest

from seed_import.config import ImportConfig
from seed_import.core.exceptions import ImportConfigError
from seed_import.core.models import DEFAULT_SPEC, TokenRowDefaults


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Make sure host environment overrides don't leak into tests."""
    for name in (
        "SEED_IMPORT_DB_PATH",
        "SEED_IMPORT_DB_TIMEOUT",
        "SEED_IMPORT_ENCODING",
        "SEED_IMPORT_LOG_DIR",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.unit
class TestDefaults:

    def test_default_values(self):
        config = ImportConfig()

        assert config.database_path is None
        assert config.timeout == 5.0
        assert config.encoding == "utf-8-sig"
        assert config.get_default_spec() == DEFAULT_SPEC
        assert config.get_token_defaults() == TokenRowDefaults()
        assert config.get_logging_config()["level"] == "INFO"

    def test_dotted_get(self):
        config = ImportConfig()
        assert config.get("default_spec.algorithm") == "totp"
        assert config.get("database.missing", "fallback") == "fallback"
        assert config.get("parser.encoding.deeper", "x") == "x"


@pytest.mark.unit
class TestYamlLoading:

    def test_partial_file_merges_with_defaults(self, tmp_path):
        path = tmp_path / "import.yaml"
        path.write_text(
            "database:\n"
            "  path: /data/otp.db\n"
            "token_defaults:\n"
            "  tknstate: 2\n"
        )
        config = ImportConfig(path)

        assert config.database_path == Path("/data/otp.db")
        assert config.timeout == 5.0
        defaults = config.get_token_defaults()
        assert defaults.tknstate == 2
        assert defaults.authnum == "0"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert ImportConfig(path).get_default_spec() == DEFAULT_SPEC

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImportConfigError, match="Config file not found"):
            ImportConfig(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("database: [unclosed\n")
        with pytest.raises(ImportConfigError, match="Invalid YAML"):
            ImportConfig(path)

    def test_non_mapping_root(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ImportConfigError, match="mapping"):
            ImportConfig(path)

    def test_unknown_token_default(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("token_defaults:\n  colour: blue\n")
        with pytest.raises(ImportConfigError, match="colour"):
            ImportConfig(path).get_token_defaults()

    def test_bad_default_spec_value(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("default_spec:\n  sn_length: twelve\n")
        with pytest.raises(ImportConfigError, match="default_spec"):
            ImportConfig(path).get_default_spec()

    def test_bad_timeout(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("database:\n  timeout: soon\n")
        with pytest.raises(ImportConfigError, match="timeout"):
            ImportConfig(path).timeout


@pytest.mark.unit
class TestEnvOverrides:

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "cfg.yaml"
        path.write_text("database:\n  path: from_file.db\n")
        monkeypatch.setenv("SEED_IMPORT_DB_PATH", "from_env.db")
        monkeypatch.setenv("SEED_IMPORT_DB_TIMEOUT", "1.5")
        monkeypatch.setenv("SEED_IMPORT_ENCODING", "latin-1")

        config = ImportConfig(path)

        assert config.database_path == Path("from_env.db")
        assert config.timeout == 1.5
        assert config.encoding == "latin-1"

    def test_invalid_env_value(self, monkeypatch):
        monkeypatch.setenv("SEED_IMPORT_DB_TIMEOUT", "not-a-number")
        with pytest.raises(ImportConfigError, match="SEED_IMPORT_DB_TIMEOUT"):
            ImportConfig()
