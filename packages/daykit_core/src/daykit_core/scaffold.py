from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable
from pathlib import Path
from types import MappingProxyType

from daykit_core import website
from daykit_core.config import Config
from daykit_core.errors import DaykitError, IoError
from daykit_core.manifest import DEFAULT_MANIFEST_TEXT, MANIFEST_NAME, add_member, load_manifest
from daykit_core.paths import PathOptions, absolutize, reconcile_scope
from daykit_core.templates import TEMPLATE_FILES, Fetch, TemplateFetcher, ensure_templates, render
from daykit_core.writes import append_if_absent, write_new

logger = logging.getLogger(__name__)

GITIGNORE_NAME = ".gitignore"
GetInput = Callable[[Config, int, int], object]


def unit_name(day: int) -> str:
    return f"day{day:02}"


def initialize(
    config: Config,
    year: int,
    day: int,
    *,
    skip_create_crate: bool = False,
    skip_get_input: bool = False,
    fetch_template: Fetch | None = None,
    get_input: GetInput | None = None,
) -> Path:
    """Initialize a new day.

    This entails:

    - checking that the implementation directory holds a workspace manifest
    - creating the day's sub-crate and registering it as a workspace member
    - rendering the day templates into it
    - downloading the puzzle input

    Returns the day directory (which may not exist when crate creation is skipped).
    """

    implementation_dir = config.implementation(year)
    # Fails early when we are not in a workspace.
    manifest = load_manifest(implementation_dir / MANIFEST_NAME)

    day_name = unit_name(day)
    day_dir = implementation_dir / day_name

    if not skip_create_crate:
        try:
            (day_dir / "src").mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IoError(f"creating day dir {day_dir}", e) from e

        add_member(manifest, day_name)

        try:
            template_dir = ensure_templates(
                config.day_template(year), TEMPLATE_FILES, fetch_template or TemplateFetcher()
            )
            context = MappingProxyType({"year": year, "day": day, "package_name": day_name})
            render(template_dir, day_dir, TEMPLATE_FILES, context)
        except DaykitError as e:
            # The member stays registered; the caller has to undo it by hand.
            e.details.setdefault("member_added", day_name)
            e.details.setdefault("manifest", str(manifest.path))
            raise

    if not skip_get_input:
        (get_input or website.get_input)(config, year, day)

    return day_dir


def _is_missing_or_empty_dir(path: Path) -> bool:
    if not path.exists():
        return True
    if not path.is_dir():
        return False
    try:
        return next(path.iterdir(), None) is None
    except OSError:
        return False


def initialize_scope(config: Config, year: int, options: PathOptions) -> Path:
    """Initialize a new year.

    Configures the requested paths, creates a workspace in the implementation
    directory when it is missing or empty, and ignores the inputs directory
    when it lives inside the implementation directory.
    """

    # Judged before reconciling: creating the inputs directory would make a
    # fresh implementation directory look non-empty.
    fresh = _is_missing_or_empty_dir(options.implementation or config.implementation(year))

    reconcile_scope(config, year, options)

    impl_path = config.implementation(year)
    gitignore = impl_path / GITIGNORE_NAME

    if fresh:
        try:
            impl_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IoError(f"creating implementation dir {impl_path}", e) from e

        append_if_absent(gitignore, b"/target/")
        if write_new(impl_path / MANIFEST_NAME, DEFAULT_MANIFEST_TEXT.encode("utf-8"), if_exists="skip"):
            logger.info("Created workspace manifest in %s", impl_path)

    input_files = absolutize(config.input_files(year))
    impl_abs = absolutize(impl_path)
    if input_files != impl_abs and input_files.is_relative_to(impl_abs):
        relative = input_files.relative_to(impl_abs)
        # Trailing slash limits the ignore rule to directories.
        append_if_absent(gitignore, os.fsencode(relative.as_posix()) + b"/")

    return impl_path


def clear_templates(config: Config, year: int) -> Path:
    """Remove the template directory so the next `initialize` fetches fresh copies."""

    template_dir = config.day_template(year)
    try:
        shutil.rmtree(template_dir)
    except OSError as e:
        raise IoError(f"clearing templates in {template_dir}", e) from e
    logger.info("Removed templates in %s", template_dir)
    return template_dir
