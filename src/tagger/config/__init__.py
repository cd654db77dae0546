"""Configuration management for Tagger."""

from __future__ import annotations

import glob
import logging
import os
import textwrap
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from .exceptions import ConfigError
from .models import TaggerConfig
from .resolver import resolve_with_precedence

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/tagger/settings.yaml")
ENV_PREFIX = "TAGGER__"
_CONFIG_HEADER = textwrap.dedent(
    """\
    # Tagger settings
    # `dirs` lists the default search roots (globs and ~ are expanded).
    # Manage with `tagger config set KEY --value VALUE`.
    """
)


class ConfigManager:
    """Load and persist settings, applying precedence rules."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        """Return the resolved settings path."""
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        include_file: bool = True,
        ensure_file: bool = False,
        env_overrides: Mapping[str, str] | None = None,
    ) -> TaggerConfig:
        """Load settings from disk, layering environment and CLI overrides on top."""
        if ensure_file:
            self.ensure_exists()

        env_data: Mapping[str, str] | None = None
        if include_env:
            env_data = env_overrides if env_overrides is not None else self._env

        return resolve_with_precedence(
            defaults=TaggerConfig(),
            file_overrides=self._read_file() if include_file else None,
            env_overrides=self._extract_env(env_data) if env_data else None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return raw overrides stored on disk."""
        return self._read_file()

    def save(self, config: TaggerConfig | Mapping[str, Any]) -> None:
        """Persist settings to disk."""
        data = config.to_mapping() if isinstance(config, TaggerConfig) else dict(config)
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        serialized = yaml.safe_dump(data, sort_keys=False)
        self._config_path.write_text(_CONFIG_HEADER + serialized, encoding="utf-8")

    def ensure_exists(self) -> Path:
        """Create a settings file with defaults if one does not exist."""
        if not self._config_path.exists():
            self.save(TaggerConfig())
        return self._config_path

    def read_text(self) -> str:
        """Return the current settings file contents."""
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    def _read_file(self) -> dict[str, Any]:
        if not self._config_path.exists():
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse settings file: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError("Settings file must contain a mapping at the top level.")

        return raw

    def _extract_env(self, env: Mapping[str, str]) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        for key, raw_value in env.items():
            if not key.startswith(ENV_PREFIX):
                continue
            path = [segment.lower() for segment in key[len(ENV_PREFIX) :].split("__") if segment]
            if not path:
                continue
            try:
                parsed_value = yaml.safe_load(raw_value)
            except yaml.YAMLError:
                parsed_value = raw_value
            overrides[".".join(path)] = parsed_value
        return overrides


def expand_search_dirs(patterns: Iterable[str]) -> list[Path]:
    """Expand ``~`` and glob patterns from the settings file into directories.

    Args:
        patterns: Entries of the ``dirs`` setting.

    Returns:
        list[Path]: Matching directories in pattern order, each pattern's
        matches sorted. Patterns matching no directory are logged and skipped.
    """
    expanded: list[Path] = []
    for pattern in patterns:
        matches = sorted(glob.glob(os.path.expanduser(pattern)))
        directories = [Path(match) for match in matches if os.path.isdir(match)]
        if not directories:
            LOGGER.warning("Configured directory %r matched nothing.", pattern)
        expanded.extend(directories)
    return expanded


__all__ = [
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "TaggerConfig",
    "resolve_with_precedence",
    "expand_search_dirs",
    "ConfigError",
]
