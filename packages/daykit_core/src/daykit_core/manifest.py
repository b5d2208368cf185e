from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import tomlkit
from tomlkit import TOMLDocument
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import AoT

from daykit_core.errors import (
    DuplicateMemberError,
    IoError,
    MalformedManifestError,
    ManifestNotFoundError,
    ManifestParseError,
)

logger = logging.getLogger(__name__)

MANIFEST_NAME = "Cargo.toml"
DEFAULT_MANIFEST_TEXT = "[workspace]\nmembers = []\n"


@dataclass
class Manifest:
    """A parsed workspace manifest and the file it was read from."""

    path: Path
    document: TOMLDocument

    def members(self) -> list[str]:
        """Listed member names; raises when the workspace section has an unexpected shape."""
        workspace = self.document.get("workspace")
        if workspace is None:
            return []
        if not isinstance(workspace, dict):
            raise MalformedManifestError(f"[workspace] is not a table: {self.path}")
        members = workspace.get("members")
        if members is None:
            return []
        if not isinstance(members, list) or isinstance(members, AoT):
            raise MalformedManifestError(f"workspace.members is not an array: {self.path}")
        return [str(item) for item in members if isinstance(item, str)]


def load_manifest(path: Path) -> Manifest:
    # Read bytes so CRLF line endings survive the round trip.
    try:
        raw = path.read_bytes()
    except FileNotFoundError as e:
        raise ManifestNotFoundError(f"{path.name} not found: {path}") from e
    except OSError as e:
        raise IoError(f"reading {path}", e) from e

    try:
        document = tomlkit.parse(raw.decode("utf-8"))
    except (UnicodeDecodeError, TOMLKitError) as e:
        raise ManifestParseError(f"Failed to parse {path}: {e}") from e
    return Manifest(path=path, document=document)


def save_manifest(manifest: Manifest) -> None:
    # No temp-file swap: a crash mid-write can leave a truncated manifest.
    try:
        manifest.path.write_bytes(tomlkit.dumps(manifest.document).encode("utf-8"))
    except OSError as e:
        raise IoError(f"writing updated {manifest.path.name}", e) from e


def add_member(manifest: Manifest, member_name: str) -> None:
    """Append ``member_name`` to ``workspace.members`` and rewrite the manifest.

    The ``[workspace]`` table and its ``members`` array are created when
    missing. Everything outside that array is written back exactly as it was
    read. The file is left untouched when the member is already listed.
    """

    if member_name in manifest.members():
        raise DuplicateMemberError(member_name)

    document = manifest.document
    workspace = document.get("workspace")
    if workspace is None:
        workspace = tomlkit.table()
        document["workspace"] = workspace
    members = workspace.get("members")
    if members is None:
        members = tomlkit.array()
        workspace["members"] = members

    members.append(member_name)
    save_manifest(manifest)
    logger.info("Added %s to workspace members in %s", member_name, manifest.path)
