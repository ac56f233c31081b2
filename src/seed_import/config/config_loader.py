"""
Configuration loader for the seed import tool.
"""

import copy
import logging
import os
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..core.exceptions import ImportConfigError
from ..core.models import DEFAULT_SPEC, TokenRowDefaults, TokenSpec


logger = logging.getLogger(__name__)


ENV_OVERRIDES = {
    "SEED_IMPORT_DB_PATH": ("database", "path", str),
    "SEED_IMPORT_DB_TIMEOUT": ("database", "timeout", float),
    "SEED_IMPORT_ENCODING": ("parser", "encoding", str),
    "SEED_IMPORT_LOG_DIR": ("logging", "log_dir", str),
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ImportConfig:
    """
    Configuration for the seed import tool.

    Built-in defaults are overlaid with an optional YAML file and then with
    SEED_IMPORT_* environment variables.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML config file (optional)
        """
        self.config_path = Path(config_path) if config_path else None
        self.config = self._default_config()
        if self.config_path:
            self.config = _merge(self.config, self._load_config())
        self._apply_env_overrides()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise ImportConfigError(f"Config file not found: {self.config_path}")

        logger.info(f"Loading config from: {self.config_path}")

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ImportConfigError(f"Invalid YAML in {self.config_path}: {e}")

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ImportConfigError(
                f"Config root must be a mapping in {self.config_path}"
            )
        return config

    def _default_config(self) -> Dict[str, Any]:
        """Return default configuration."""
        default_spec = asdict(DEFAULT_SPEC)
        default_spec.pop("spec_id")
        return {
            "database": {
                "path": None,
                "timeout": 5.0,
            },
            "parser": {
                "encoding": "utf-8-sig",
            },
            "default_spec": default_spec,
            "token_defaults": asdict(TokenRowDefaults()),
            "logging": {
                "level": "INFO",
                "log_dir": None,
                "structured": False,
            },
        }

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides to loaded config."""
        for env_var, (section, key, cast) in ENV_OVERRIDES.items():
            raw = os.environ.get(env_var)
            if not raw:
                continue
            try:
                value = cast(raw)
            except ValueError:
                raise ImportConfigError(f"Invalid value for {env_var}: {raw!r}")
            self.config.setdefault(section, {})[key] = value
            logger.debug(f"Config override from {env_var}: {section}.{key}")

    @property
    def database_path(self) -> Optional[Path]:
        path = self.get("database.path")
        return Path(path) if path else None

    @property
    def timeout(self) -> float:
        try:
            return float(self.get("database.timeout", 5.0))
        except (TypeError, ValueError):
            raise ImportConfigError(
                f"database.timeout must be a number, got {self.get('database.timeout')!r}"
            )

    @property
    def encoding(self) -> str:
        return self.get("parser.encoding", "utf-8-sig")

    def get_default_spec(self) -> TokenSpec:
        """Build the spec inserted when the datastore has none."""
        values = self.config.get("default_spec", {})
        try:
            return TokenSpec(
                name=str(values["name"]),
                sn_length=int(values["sn_length"]),
                token_interval=int(values["token_interval"]),
                checksum=str(values["checksum"]),
                algorithm=str(values["algorithm"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ImportConfigError(f"Invalid default_spec configuration: {e}")

    def get_token_defaults(self) -> TokenRowDefaults:
        """Build the fixed token-row values used for every inserted row."""
        values = self.config.get("token_defaults", {})
        unknown = set(values) - set(TokenRowDefaults.__dataclass_fields__)
        if unknown:
            raise ImportConfigError(
                f"Unknown token_defaults keys: {', '.join(sorted(unknown))}"
            )
        try:
            defaults = TokenRowDefaults(**values)
            return TokenRowDefaults(
                authnum=str(defaults.authnum),
                physicaltype=int(defaults.physicaltype),
                producttype=int(defaults.producttype),
                pubkeystate=int(defaults.pubkeystate),
                tknifmid=int(defaults.tknifmid),
                tknofmid=int(defaults.tknofmid),
                tkntype=int(defaults.tkntype),
                tknstate=int(defaults.tknstate),
            )
        except (TypeError, ValueError) as e:
            raise ImportConfigError(f"Invalid token_defaults configuration: {e}")

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration."""
        return self.config.get("logging", {})

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dotted key."""
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

        return value if value is not None else default
