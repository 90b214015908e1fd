"""
Article History - wiki-style revision history for a single text document.

Versions are immutable patches linked to their parent, forming a forest; the
VersionManager selects the main branch and rebuilds the text of any version.
"""

from history_core.errors import (
    VersionError,
    VersionErrorKind,
    VersionAlreadyExistsError,
    VersionNotFoundError,
    VersionCycleError,
    PatchApplyError,
)
from history_core.model.version import Version, VersionID, new_version
from history_core.patching.compile import compile_text_from_versions
from history_core.versioning.version_manager import VersionManager

__version__ = "0.1.0"

__all__ = [
    "VersionManager",
    "Version",
    "VersionID",
    "new_version",
    "compile_text_from_versions",
    "VersionError",
    "VersionErrorKind",
    "VersionAlreadyExistsError",
    "VersionNotFoundError",
    "VersionCycleError",
    "PatchApplyError",
]
