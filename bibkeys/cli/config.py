"""Configuration management for key pattern settings."""

import os
from collections.abc import Hashable
from pathlib import Path
from typing import Any

import msgspec
import yaml

from bibkeys.core.fields import parse_entry_type
from bibkeys.patterns.table import DEFAULT_MAX_DEPTH, DEFAULT_PATTERN


class KeyPatternSettings(msgspec.Struct, frozen=True, kw_only=True):
    """Settings for the global key pattern table.

    Example ``config.yaml``::

        default_pattern: "[auth][year]"
        patterns:
          inproceedings: "[auth][year][venue]"
        max_depth: 32
    """

    default_pattern: str = DEFAULT_PATTERN
    patterns: dict[str, str] = msgspec.field(default_factory=dict)
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self):
        if self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")

    def entry_patterns(self) -> dict[Hashable, str]:
        """Return the overrides keyed by entry type."""
        return {parse_entry_type(name): pattern for name, pattern in self.patterns.items()}


class Config:
    """Configuration loading for the CLI application."""

    @staticmethod
    def from_file(path: Path) -> dict[str, Any]:
        """Load configuration from a YAML file.

        Settings may sit at the top level or under a ``bibkeys`` section,
        so the file can be shared with other tools.
        """
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}")
        except OSError as e:
            raise ValueError(f"Error reading config file: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")

        section = data.get("bibkeys")
        if isinstance(section, dict):
            data = section
        return data

    @staticmethod
    def get_config_paths() -> list[Path]:
        """Get the configuration file paths to check, lowest precedence first."""
        xdg_config_home = Path(
            os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        )
        paths = [xdg_config_home / "bibkeys" / "config.yaml"]

        if env_path := os.environ.get("BIBKEYS_CONFIG"):
            paths.append(Path(env_path))

        paths.append(Path(".bibkeys.yaml"))
        paths.append(Path("bibkeys.yaml"))
        return paths

    @staticmethod
    def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
        """Merge configuration layers, later layers winning.

        Scalars are replaced. ``patterns`` are merged per entry type, with
        type names compared case-insensitively; a ``null`` pattern in a
        later layer removes the override inherited from earlier ones.
        """
        result: dict[str, Any] = {}
        for config in configs:
            for key, value in config.items():
                if key == "patterns" and isinstance(value, dict):
                    result[key] = _merge_patterns(result.get(key), value)
                else:
                    result[key] = value
        return result


def get_config_paths() -> list[Path]:
    """Get configuration paths in precedence order."""
    return Config.get_config_paths()


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from files and environment variables.

    Args:
        path: Explicit config file, read after the default locations

    Returns:
        Merged configuration dictionary
    """
    config: dict[str, Any] = {}

    # Later files win for conflicting keys
    for candidate in get_config_paths():
        if candidate.exists():
            config = Config.merge_configs(config, Config.from_file(candidate))

    if path is not None:
        config = Config.merge_configs(config, Config.from_file(path))

    env_overrides: dict[str, Any] = {}
    if pattern := os.environ.get("BIBKEYS_DEFAULT_PATTERN"):
        env_overrides["default_pattern"] = pattern
    if max_depth := os.environ.get("BIBKEYS_MAX_DEPTH"):
        try:
            env_overrides["max_depth"] = int(max_depth)
        except ValueError:
            raise ValueError(f"BIBKEYS_MAX_DEPTH must be an integer, got {max_depth!r}")

    return Config.merge_configs(config, env_overrides)


def load_settings(path: Path | None = None) -> KeyPatternSettings:
    """Load and validate key pattern settings.

    Raises:
        ValueError: If the configuration has the wrong shape
    """
    config = load_config(path)
    try:
        return msgspec.convert(config, KeyPatternSettings)
    except msgspec.ValidationError as e:
        raise ValueError(f"Invalid key pattern configuration: {e}")


def _merge_patterns(base: Any, override: dict[Any, Any]) -> dict[str, Any]:
    """Merge per-type pattern mappings keyed by normalized type name."""
    result = dict(base) if isinstance(base, dict) else {}

    for name, pattern in override.items():
        key = str(name).strip().lower()
        if pattern is None:
            result.pop(key, None)
        else:
            result[key] = pattern

    return result
