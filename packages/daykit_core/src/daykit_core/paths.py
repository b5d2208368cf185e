from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from daykit_core.config import Config, PathKind
from daykit_core.errors import ConfigConflictError, IoError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathOptions:
    """Directories requested on the command line for one scope."""

    input_files: Path | None = None
    implementation: Path | None = None
    day_templates: Path | None = None

    def by_kind(self) -> dict[PathKind, Path | None]:
        return {
            "input_files": self.input_files,
            "implementation": self.implementation,
            "day_template": self.day_templates,
        }


def absolutize(path: Path) -> Path:
    """Make ``path`` absolute and collapse ``.``/``..`` without touching the filesystem."""

    return Path(os.path.abspath(path))


def reconcile(desired: Path | None, configured: Path | None) -> Path | None:
    """Return the value to store for one path kind.

    - nothing desired: keep ``configured``
    - desired, nothing configured: create the directory and store its canonical path
    - desired equals configured (after absolutizing both): keep ``configured``
    - otherwise: :class:`ConfigConflictError`
    """

    if desired is None:
        return configured

    if configured is not None:
        if absolutize(desired) != absolutize(configured):
            raise ConfigConflictError(desired, configured)
        return configured

    existed = desired.exists()
    try:
        # Raises FileExistsError when `desired` is a regular file.
        desired.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IoError(f"ensuring path dir {desired}", e) from e
    if not existed:
        logger.info("Created directory %s", desired)
    try:
        return desired.resolve(strict=True)
    except OSError as e:
        raise IoError(f"canonicalizing path destination {desired}", e) from e


def reconcile_scope(config: Config, year: int, options: PathOptions) -> None:
    """Reconcile every requested path for ``year`` against ``config``.

    All kinds are checked before any is stored, so a conflict leaves
    ``config`` as it was. Directories created along the way are kept.
    """

    current = config.paths.get(year)
    resolved: dict[PathKind, Path | None] = {}
    for kind, desired in options.by_kind().items():
        configured = getattr(current, kind) if current is not None else None
        resolved[kind] = reconcile(desired, configured)

    if all(desired is None for desired in options.by_kind().values()):
        return

    scope = config.scope(year)
    for kind, value in resolved.items():
        setattr(scope, kind, value)
