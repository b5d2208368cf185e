from __future__ import annotations

from pathlib import Path
from typing import Any


class DaykitError(RuntimeError):
    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class NotFoundError(DaykitError):
    pass


class ManifestNotFoundError(NotFoundError):
    pass


class ManifestParseError(DaykitError):
    pass


class MalformedManifestError(DaykitError):
    pass


class DuplicateMemberError(DaykitError):
    def __init__(self, member: str) -> None:
        super().__init__(f"Member already exists in workspace: {member}")
        self.member = member


class DestinationExistsError(DaykitError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"Destination already exists: {path}")
        self.path = path


class ConfigConflictError(DaykitError):
    def __init__(self, desired: Path, configured: Path) -> None:
        super().__init__(f"CLI requested '{desired}' but config file specified '{configured}'")
        self.desired = desired
        self.configured = configured


class ConfigError(DaykitError):
    pass


class TemplateError(DaykitError):
    pass


class TransportError(DaykitError):
    pass


class IoError(DaykitError):
    """Filesystem failure, tagged with the operation that was being attempted."""

    def __init__(self, operation: str, cause: OSError) -> None:
        super().__init__(f"{operation}: {cause}")
        self.operation = operation
