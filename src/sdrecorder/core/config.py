"""Configuration resolver with 4-level priority.

Priority (highest to lowest):
1. CLI arguments
2. Environment variables (SDRECORDER_*)
3. Config files (user > system)
4. Defaults
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from sdrecorder.core.errors import ConfigError

ALLOWED_LOGGING_LEVELS = frozenset({"quiet", "normal", "verbose", "debug"})
DEFAULT_LOGGING_LEVEL = "normal"

_LABEL_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class RecorderSettings:
    """Resolved, immutable settings for one recording run."""

    extensions: tuple[str, ...] = ("wav", "mp3")
    identifier_prefix: str = "SND_"
    folder_fallback: str = "DIR"
    header_name: str = "9999.H"
    chunk_size: int = 65536
    index_width: int = 4
    clear_target: bool = True
    protected_targets: tuple[str, ...] = ("C", "D", "/")
    format_command: str | None = None
    logging_level: str = DEFAULT_LOGGING_LEVEL
    color: bool = True


class ConfigResolver:
    """Resolve configuration with strict 4-level priority.

    Example:
        resolver = ConfigResolver(
            cli_args={'identifier': {'prefix': 'SFX_'}},
            user_config_path=Path('~/.config/sdrecorder/config.yaml')
        )

        prefix, source = resolver.resolve('identifier.prefix')
        # prefix = 'SFX_', source = 'cli'
    """

    def __init__(
        self,
        cli_args: dict[str, Any] | None = None,
        user_config_path: Path | None = None,
        system_config_path: Path | None = None,
        defaults: dict[str, Any] | None = None,
    ) -> None:
        """Initialize config resolver.

        Args:
            cli_args: Arguments from CLI (highest priority)
            user_config_path: Path to user config file
            system_config_path: Path to system config file
            defaults: Default values (lowest priority)
        """
        self.cli_args = cli_args or {}
        self.user_config_path = user_config_path or Path.home() / ".config/sdrecorder/config.yaml"
        self.system_config_path = system_config_path or Path("/etc/sdrecorder/config.yaml")
        self.defaults = defaults or self._default_config()

        # Cache loaded configs
        self._user_config: dict[str, Any] | None = None
        self._system_config: dict[str, Any] | None = None

    def resolve(self, key: str) -> tuple[Any, str]:
        """Resolve config value with priority.

        Args:
            key: Config key (supports dot notation: 'logging.level')

        Returns:
            (value, source) tuple

        Raises:
            ConfigError: If key not found in any source
        """
        value = self._from_cli(key)
        if value is not None:
            return value, "cli"

        value = self._from_env(key)
        if value is not None:
            return value, "env"

        value = self._from_user_config(key)
        if value is not None:
            return value, "user_config"

        value = self._from_system_config(key)
        if value is not None:
            return value, "system_config"

        value = self._from_defaults(key)
        if value is not None:
            return value, "default"

        raise ConfigError(f"Config key '{key}' not found in any source")

    # Typed accessors

    def resolve_logging_level(self) -> str:
        """Resolve and validate logging.level (quiet | normal | verbose | debug)."""
        key = "logging.level"
        found = self._try_resolve_value(key)
        if found is None:
            return DEFAULT_LOGGING_LEVEL

        value = found[0]
        if not isinstance(value, str):
            raise ConfigError(f"Config key '{key}' must be a string, got {type(value).__name__}")

        norm = value.strip().lower()
        if norm not in ALLOWED_LOGGING_LEVELS:
            allowed = ", ".join(sorted(ALLOWED_LOGGING_LEVELS))
            raise ConfigError(f"Invalid '{key}': {value!r}. Allowed values: {allowed}")
        return norm

    def resolve_extensions(self) -> tuple[str, ...]:
        """Resolve the eligible file extensions, lower-cased and without dots."""
        key = "extensions"
        items = self._as_str_list(key, self.resolve(key)[0])
        exts = tuple(dict.fromkeys(item.strip().lstrip(".").lower() for item in items))
        if not exts or any(not ext for ext in exts):
            raise ConfigError(f"Config key '{key}' must list at least one non-empty extension")
        return exts

    def resolve_identifier_prefix(self) -> str:
        return self._resolve_label("identifier.prefix")

    def resolve_folder_fallback(self) -> str:
        return self._resolve_label("identifier.folder_fallback")

    def resolve_header_name(self) -> str:
        key = "header.name"
        value = self._as_str(key, self.resolve(key)[0])
        if not value or "/" in value or "\\" in value:
            raise ConfigError(f"Config key '{key}' must be a plain file name, got {value!r}")
        return value

    def resolve_chunk_size(self) -> int:
        key = "copy.chunk_size"
        value = self._as_int(key, self.resolve(key)[0])
        if value <= 0:
            raise ConfigError(f"Config key '{key}' must be > 0")
        return value

    def resolve_index_width(self) -> int:
        key = "copy.index_width"
        value = self._as_int(key, self.resolve(key)[0])
        if not 1 <= value <= 9:
            raise ConfigError(f"Config key '{key}' must be between 1 and 9")
        return value

    def resolve_clear_target(self) -> bool:
        key = "target.clear"
        return self._as_bool(key, self.resolve(key)[0])

    def resolve_protected_targets(self) -> tuple[str, ...]:
        key = "target.protected"
        found = self._try_resolve_value(key)
        if found is None:
            return ()
        return tuple(item.strip() for item in self._as_str_list(key, found[0]) if item.strip())

    def resolve_format_command(self) -> str | None:
        key = "target.format_command"
        found = self._try_resolve_value(key)
        if found is None:
            return None
        value = self._as_str(key, found[0]).strip()
        return value or None

    def resolve_color(self) -> bool:
        key = "logging.color"
        return self._as_bool(key, self.resolve(key)[0])

    def build_settings(self) -> RecorderSettings:
        """Resolve every recorder setting at once."""
        return RecorderSettings(
            extensions=self.resolve_extensions(),
            identifier_prefix=self.resolve_identifier_prefix(),
            folder_fallback=self.resolve_folder_fallback(),
            header_name=self.resolve_header_name(),
            chunk_size=self.resolve_chunk_size(),
            index_width=self.resolve_index_width(),
            clear_target=self.resolve_clear_target(),
            protected_targets=self.resolve_protected_targets(),
            format_command=self.resolve_format_command(),
            logging_level=self.resolve_logging_level(),
            color=self.resolve_color(),
        )

    # Coercion helpers. Environment values always arrive as strings.

    def _resolve_label(self, key: str) -> str:
        value = self._as_str(key, self.resolve(key)[0])
        if not _LABEL_RE.match(value):
            raise ConfigError(
                f"Invalid '{key}': {value!r}",
                "Use letters, digits and underscores, starting with a letter",
            )
        return value

    def _as_str(self, key: str, value: Any) -> str:
        if not isinstance(value, str):
            raise ConfigError(f"Config key '{key}' must be a string, got {type(value).__name__}")
        return value

    def _as_int(self, key: str, value: Any) -> int:
        if isinstance(value, bool):
            raise ConfigError(f"Config key '{key}' must be an int")
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
        raise ConfigError(f"Config key '{key}' must be an int")

    def _as_bool(self, key: str, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            norm = value.strip().lower()
            if norm in _TRUE_STRINGS:
                return True
            if norm in _FALSE_STRINGS:
                return False
        raise ConfigError(f"Config key '{key}' must be a bool")

    def _as_str_list(self, key: str, value: Any) -> list[str]:
        if isinstance(value, str):
            return value.split(",")
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return list(value)
        raise ConfigError(f"Config key '{key}' must be a list of strings")

    def _try_resolve_value(self, key: str) -> tuple[Any, str] | None:
        try:
            return self.resolve(key)
        except ConfigError as e:
            if "not found in any source" in str(e):
                return None
            raise

    def _from_cli(self, key: str) -> Any | None:
        return self._get_nested(self.cli_args, key)

    def _from_env(self, key: str) -> Any | None:
        """Get value from environment variables.

        Environment variable format: SDRECORDER_KEY_NAME
        Example: SDRECORDER_IDENTIFIER_PREFIX, SDRECORDER_TARGET_CLEAR
        """
        env_key = f"SDRECORDER_{key.upper().replace('.', '_')}"
        return os.environ.get(env_key)

    def _from_user_config(self, key: str) -> Any | None:
        return self._get_nested(self._get_user_config(), key)

    def _from_system_config(self, key: str) -> Any | None:
        return self._get_nested(self._get_system_config(), key)

    def _from_defaults(self, key: str) -> Any | None:
        return self._get_nested(self.defaults, key)

    def _get_user_config(self) -> dict[str, Any]:
        """Load user config file (cached)."""
        if self._user_config is None:
            self._user_config = self._load_yaml(self.user_config_path)
        return self._user_config

    def _get_system_config(self) -> dict[str, Any]:
        """Load system config file (cached)."""
        if self._system_config is None:
            self._system_config = self._load_yaml(self.system_config_path)
        return self._system_config

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
                return data if isinstance(data, dict) else {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

    def _get_nested(self, data: dict[str, Any], key: str) -> Any | None:
        """Get nested value using dot notation.

        Example:
            data = {'logging': {'level': 'debug'}}
            _get_nested(data, 'logging.level') -> 'debug'
        """
        current: Any = data

        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
            if current is None:
                return None

        return current

    @staticmethod
    def _default_config() -> dict[str, Any]:
        """Default configuration."""
        return {
            "extensions": ["wav", "mp3"],
            "identifier": {
                "prefix": "SND_",
                "folder_fallback": "DIR",
            },
            "header": {
                "name": "9999.H",
            },
            "copy": {
                "chunk_size": 65536,
                "index_width": 4,
            },
            "target": {
                "clear": True,
                "protected": ["C", "D", "/"],
                "format_command": None,
            },
            "logging": {
                "level": DEFAULT_LOGGING_LEVEL,
                "color": True,
            },
        }
