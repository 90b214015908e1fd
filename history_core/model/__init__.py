from history_core.model.version import Version, VersionID, new_version

__all__ = ["Version", "VersionID", "new_version"]
