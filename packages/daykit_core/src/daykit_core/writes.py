"""Create-if-absent and append-if-absent file writes.

Nothing in this module truncates or rewrites an existing file. Each helper
differs only in what it does when the target is already there.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Literal

from daykit_core.errors import DestinationExistsError, IoError

logger = logging.getLogger(__name__)

ExistsPolicy = Literal["error", "skip"]


def write_new(path: Path, data: bytes, *, if_exists: ExistsPolicy = "error") -> bool:
    """Write ``data`` to a file that must not exist yet.

    Parameters
    ----------
    path:
        Destination file. Its parent directory must already exist.
    data:
        Bytes to write.
    if_exists:
        ``"error"`` raises :class:`DestinationExistsError` when ``path`` exists;
        ``"skip"`` leaves the existing file untouched.

    Returns
    -------
    bool
        ``True`` when the file was created, ``False`` when it was skipped.
    """

    try:
        fh = path.open("xb")
    except FileExistsError as e:
        if if_exists == "skip":
            logger.debug("Keeping existing file %s", path)
            return False
        raise DestinationExistsError(path) from e
    except OSError as e:
        raise IoError(f"creating {path}", e) from e

    with fh:
        try:
            fh.write(data)
        except OSError as e:
            raise IoError(f"writing {path}", e) from e
    return True


def ensure_file(path: Path, produce: Callable[[], bytes]) -> bool:
    """Create ``path`` from ``produce()`` unless it already exists.

    ``produce`` is only called for missing files, so an expensive source (a
    download) is never consulted for a file the user already has.
    """

    if path.exists():
        logger.debug("Keeping existing file %s", path)
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IoError(f"creating parent directory of {path}", e) from e
    return write_new(path, produce(), if_exists="error")


def _contains_line(path: Path, line: bytes) -> tuple[bool, bool]:
    """Return ``(found, needs_separator)`` for ``line`` in ``path``.

    An unreadable or missing file counts as not containing the line. A final
    line without a terminator still matches.
    """

    candidate = line + b"\n"
    try:
        fh = path.open("rb")
    except OSError:
        return False, False

    last = b""
    with fh:
        try:
            for existing in fh:
                if existing == candidate:
                    return True, False
                last = existing
        except OSError:
            return False, False
    if last and not last.endswith(b"\n"):
        return last == line, last != line
    return False, False


def append_if_absent(path: Path, line: bytes | str) -> bool:
    """Append ``line`` plus a newline to ``path`` unless that exact line is present.

    The file is treated as opaque bytes; it need not be valid text. A missing
    file is created. Returns ``True`` when something was appended.
    """

    if isinstance(line, str):
        line = line.encode("utf-8")
    candidate = line + b"\n"

    found, needs_separator = _contains_line(path, line)
    if found:
        logger.debug("%s already contains %r", path, line)
        return False

    payload = (b"\n" + candidate) if needs_separator else candidate
    try:
        with path.open("ab") as fh:
            fh.write(payload)
    except OSError as e:
        raise IoError(f"appending to {path}", e) from e
    logger.info("Appended %r to %s", line, path)
    return True
