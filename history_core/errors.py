"""
Error types raised by the version tree and the patch layer.

Every error carries a ``kind`` so host applications can decide how to react
(e.g. mark a branch as corrupted) without comparing messages.
"""

from enum import Enum
from typing import Optional


class VersionErrorKind(Enum):
    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    APPLY_FAILURE = "apply_failure"
    CYCLE_DETECTED = "cycle_detected"


class VersionError(Exception):
    """Base exception for version history errors."""

    kind: VersionErrorKind

    def __init__(self, message: str, version_id: Optional[str] = None):
        super().__init__(message)
        self.version_id = version_id


class VersionAlreadyExistsError(VersionError):
    """Raised when a version with the same ID is already registered."""

    kind = VersionErrorKind.ALREADY_EXISTS

    def __init__(self, version_id: str):
        super().__init__(f"Version with ID {version_id} already exists", version_id)


class VersionNotFoundError(VersionError):
    """Raised when a branch walk reaches an ID that is not registered."""

    kind = VersionErrorKind.NOT_FOUND

    def __init__(self, version_id: str):
        super().__init__(f"Version not found: {version_id}", version_id)


class VersionCycleError(VersionError):
    """Raised when following parent links leads back to an already visited version."""

    kind = VersionErrorKind.CYCLE_DETECTED

    def __init__(self, version_id: str):
        super().__init__(f"Parent cycle detected at version {version_id}", version_id)


class PatchApplyError(VersionError):
    """Raised when a patch segment cannot be matched against the evolving text."""

    kind = VersionErrorKind.APPLY_FAILURE

    def __init__(self, patch_index: int, version_id: Optional[str] = None):
        message = f"Failed to apply patch at index {patch_index}"
        if version_id is not None:
            message += f" (version {version_id})"
        super().__init__(message, version_id)
        self.patch_index = patch_index
