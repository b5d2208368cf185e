from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml

from daykit_core.errors import ConfigError, IoError

_CONFIG_VERSION = 1
CONFIG_ENV_VAR = "DAYKIT_CONFIG"

PathKind = Literal["input_files", "implementation", "day_template"]
PATH_KINDS: tuple[PathKind, ...] = ("input_files", "implementation", "day_template")


def config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME", "").strip()
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "daykit"


def config_path() -> Path:
    explicit = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if explicit:
        return Path(explicit)
    return config_dir() / "config.yaml"


@dataclass
class ScopePaths:
    input_files: Path | None = None
    implementation: Path | None = None
    day_template: Path | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, kind) is None for kind in PATH_KINDS)


@dataclass
class Config:
    """Settings persisted between invocations.

    Loaded once per command, passed down explicitly, and saved at the end of
    commands that change it.
    """

    session: str = ""
    paths: dict[int, ScopePaths] = field(default_factory=dict)

    def scope(self, year: int) -> ScopePaths:
        return self.paths.setdefault(year, ScopePaths())

    def _configured(self, year: int, kind: PathKind) -> Path | None:
        scope = self.paths.get(year)
        if scope is None:
            return None
        return getattr(scope, kind)

    def implementation(self, year: int) -> Path:
        return self._configured(year, "implementation") or Path.cwd()

    def input_files(self, year: int) -> Path:
        return self._configured(year, "input_files") or Path.cwd() / "inputs"

    def day_template(self, year: int) -> Path:
        return self._configured(year, "day_template") or config_dir() / "day-template"

    def input_for(self, year: int, day: int) -> Path:
        return self.input_files(year) / f"input-{day:02}.txt"

    def set_path(self, year: int, kind: PathKind, path: Path) -> None:
        setattr(self.scope(year), kind, path)

    def clear_path(self, year: int, kind: PathKind) -> None:
        scope = self.paths.get(year)
        if scope is None:
            return
        setattr(scope, kind, None)
        if scope.is_empty():
            del self.paths[year]


def _parse_scope(raw: Any, *, year: int, path: Path) -> ScopePaths:
    if raw is None:
        return ScopePaths()
    if not isinstance(raw, dict):
        raise ConfigError(f"Expected a mapping for paths.{year} in {path}.")
    unknown = set(raw) - set(PATH_KINDS)
    if unknown:
        unknown_list = ", ".join(sorted(str(k) for k in unknown))
        raise ConfigError(f"Unknown keys in paths.{year} of {path}: {unknown_list}.")

    scope = ScopePaths()
    for kind in PATH_KINDS:
        value = raw.get(kind)
        if value is None:
            continue
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"Expected non-empty string for paths.{year}.{kind} in {path}.")
        setattr(scope, kind, Path(value))
    return scope


def load_config(path: Path | None = None) -> Config:
    """Load the configuration, or return defaults when the file does not exist.

    A file that exists but cannot be read or parsed is an error, never a
    silent fallback to defaults.
    """

    path = path or config_path()
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Config()
    except OSError as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML in {path}: {e}") from e

    if raw is None:
        return Config()
    if not isinstance(raw, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(raw).__name__}.")

    version = raw.get("version", _CONFIG_VERSION)
    if version != _CONFIG_VERSION:
        raise ConfigError(f"Unsupported config version in {path} (expected {_CONFIG_VERSION}): {version!r}")

    session = raw.get("session") or ""
    if not isinstance(session, str):
        raise ConfigError(f"Expected a string for session in {path}.")

    paths_raw = raw.get("paths") or {}
    if not isinstance(paths_raw, dict):
        raise ConfigError(f"Expected a mapping for paths in {path}.")

    paths: dict[int, ScopePaths] = {}
    for key, value in paths_raw.items():
        try:
            year = int(key)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid year key in paths of {path}: {key!r}") from e
        scope = _parse_scope(value, year=year, path=path)
        if not scope.is_empty():
            paths[year] = scope

    return Config(session=session, paths=paths)


def _dump_scope(scope: ScopePaths) -> dict[str, str]:
    return {kind: str(getattr(scope, kind)) for kind in PATH_KINDS if getattr(scope, kind) is not None}


def save_config(config: Config, path: Path | None = None) -> Path:
    path = path or config_path()
    payload: dict[str, Any] = {
        "version": _CONFIG_VERSION,
        "session": config.session,
        "paths": {
            year: _dump_scope(scope) for year, scope in sorted(config.paths.items()) if not scope.is_empty()
        },
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    except OSError as e:
        raise IoError(f"writing config file {path}", e) from e
    return path
