"""
Versioning package for tracking the revision history of a document.

This package provides the version tree manager: it stores versions, selects
the main branch and rebuilds the branch of any version.
"""

from history_core.versioning.version_manager import VersionManager

__all__ = ["VersionManager"]
