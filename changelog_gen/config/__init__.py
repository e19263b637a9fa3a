"""Configuration Management Package"""

import json
import os
import sys
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from changelog_gen import DEFAULT_CHANGELOG, DEFAULT_COMMIT_LIMIT
from changelog_gen.changelog.renderer import MIN_ENTRY_LENGTH

TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class Config:
    """User configuration with sensible defaults."""
    changelog_path: str = DEFAULT_CHANGELOG
    fallback_commit_limit: int = DEFAULT_COMMIT_LIMIT  # Commits read when no watermark exists
    min_entry_length: int = MIN_ENTRY_LENGTH  # Shorter entries are dropped after cleanup
    verbose: bool = False

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults after warning.
        """
        warnings = []
        defaults = Config()

        if not isinstance(self.changelog_path, str) or not self.changelog_path.strip():
            warnings.append(f"Invalid changelog_path '{self.changelog_path}', using '{defaults.changelog_path}'")
            self.changelog_path = defaults.changelog_path

        if not isinstance(self.fallback_commit_limit, int) or self.fallback_commit_limit <= 0:
            warnings.append(f"Invalid fallback_commit_limit '{self.fallback_commit_limit}', using {defaults.fallback_commit_limit}")
            self.fallback_commit_limit = defaults.fallback_commit_limit

        if not isinstance(self.min_entry_length, int) or self.min_entry_length < 0:
            warnings.append(f"Invalid min_entry_length '{self.min_entry_length}', using {defaults.min_entry_length}")
            self.min_entry_length = defaults.min_entry_length

        if not isinstance(self.verbose, bool):
            warnings.append(f"Invalid verbose '{self.verbose}', using {str(defaults.verbose).lower()}")
            self.verbose = defaults.verbose

        return warnings

    def apply_env(self, environ=None) -> 'Config':
        """Apply CL_CHANGELOG / CL_VERBOSE overrides."""
        environ = os.environ if environ is None else environ
        if environ.get('CL_CHANGELOG'):
            self.changelog_path = environ['CL_CHANGELOG']
        if environ.get('CL_VERBOSE'):
            self.verbose = environ['CL_VERBOSE'].strip().lower() in TRUE_VALUES
        return self

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        config = cls(**filtered)
        for warning in config.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return config


class ConfigManager:
    """Manages loading and saving configuration."""

    CONFIG_FILENAME = ".clrc"

    def __init__(self):
        self._config: Optional[Config] = None
        self._config_path: Optional[Path] = None

    def load(self) -> Config:
        if self._config is not None:
            return self._config

        local_path = Path.cwd() / self.CONFIG_FILENAME
        if local_path.exists():
            self._config = self._load_from_file(local_path)
            self._config_path = local_path
            return self._config

        home_path = Path.home() / self.CONFIG_FILENAME
        if home_path.exists():
            self._config = self._load_from_file(home_path)
            self._config_path = home_path
            return self._config

        self._config = Config()
        return self._config

    def _load_from_file(self, path: Path) -> Config:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            return Config.from_dict(data)
        except (json.JSONDecodeError, ValueError, OSError) as e:
            print(f"Warning: Could not load {path}: {e}", file=sys.stderr)
            return Config()

    def save(self, config: Config, global_config: bool = True) -> Path:
        path = Path.home() / self.CONFIG_FILENAME if global_config else Path.cwd() / self.CONFIG_FILENAME
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(config.to_dict(), f, indent=2)
        return path

    def get_config_path(self) -> Optional[Path]:
        return self._config_path


_manager = ConfigManager()


def load_config() -> Config:
    return _manager.load()


def save_config(config: Config, global_config: bool = True) -> Path:
    return _manager.save(config, global_config)


def get_config_path() -> Optional[Path]:
    return _manager.get_config_path()


__all__ = [
    "Config",
    "ConfigManager",
    "load_config",
    "save_config",
    "get_config_path",
]
