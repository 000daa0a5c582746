"""Load SiteConfig from config files and keep it current.

Config files are YAML (``.yml`` / ``.yaml``) or TOML (``.toml``).  Files that
do not exist contribute nothing; files that fail to parse raise ConfigError.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from prowl import console
from prowl._errors import ConfigError
from prowl.config import ENGINE_DEFAULTS, SiteConfig, WatchOptions, merge_settings

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


def load_config(options: WatchOptions, cwd: str | None = None) -> SiteConfig:
    """Build a SiteConfig from *options* and the config files they name.

    When ``options.config_hash`` is set it replaces the caller overrides, and
    its own ``config`` key (if any) names the files to read.
    """
    cwd = cwd or os.getcwd()
    overrides: Mapping[str, Any] = options.config_hash or {}
    config_files = _config_files(options)

    file_values: dict[str, Any] = {}
    for name in config_files:
        file_values.update(read_config_file(Path(cwd) / name))

    settings = merge_settings(ENGINE_DEFAULTS, file_values, overrides)
    return SiteConfig.from_settings(
        settings, options, cwd=cwd, config_files=config_files,
    )


def _config_files(options: WatchOptions) -> tuple[str, ...]:
    if options.config_hash and "config" in options.config_hash:
        files = options.config_hash["config"]
        if isinstance(files, str):
            return (files,)
        return tuple(files)
    return options.config


def read_config_file(path: Path) -> dict[str, Any]:
    """Read one config file.  Returns an empty dict if it does not exist."""
    if not path.is_file():
        return {}
    if path.suffix == ".toml":
        return _parse_toml(path)
    return _parse_yaml(path)


def _parse_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Failed to read configuration {path}: {exc}"
        raise ConfigError(msg) from exc
    return _require_mapping(data, path)


def _parse_toml(path: Path) -> dict[str, Any]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Failed to read configuration {path}: {exc}"
        raise ConfigError(msg) from exc
    return _require_mapping(data, path)


def _require_mapping(data: object, path: Path) -> dict[str, Any]:
    if not isinstance(data, dict):
        msg = f"Configuration {path} must be a mapping, got {type(data).__name__}"
        raise ConfigError(msg)
    return data


class ConfigManager:
    """Owns the current SiteConfig and swaps it on reload.

    Args:
        options: Caller options, kept for every reload.
        cwd: Working directory paths are resolved against (defaults to the
            process working directory at each load).

    """

    def __init__(self, options: WatchOptions, cwd: str | None = None) -> None:
        self._options = options
        self._cwd = cwd
        self._config = load_config(options, cwd)

    @property
    def options(self) -> WatchOptions:
        return self._options

    @property
    def current(self) -> SiteConfig:
        """The active configuration snapshot."""
        return self._config

    def reload(self) -> SiteConfig:
        """Re-read config files and replace the snapshot."""
        console.info(f"Reloading {self._options.msg_prefix} configuration!")
        self._config = load_config(self._options, self._cwd)
        return self._config

    def touches_config(self, paths: Iterable[str]) -> bool:
        """Whether any of *paths* is one of the configured config files."""
        changed = set(paths)
        return any(name in changed for name in self._config.config_files)
