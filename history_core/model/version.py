"""
Version module for storing one immutable revision of a document.

A version holds the patch that turns its parent's text into its own text, so
the text of any version is rebuilt by applying the patches of its branch in
order, starting from the empty string.
"""

import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from diff_match_patch import patch_obj

from history_core.config.config_manager import PatchConfig
from history_core.patching.patch import make_patch, patch_from_text, patch_to_text

VersionID = str


@dataclass(frozen=True, eq=False)
class Version:
    """
    Represents a node in the revision forest.

    Attributes:
        id: Unique identifier of the version
        date: Creation time in milliseconds since the Unix epoch
        patch: Patch from the parent's text (or the empty string) to this text
        parent: ID of the preceding version, None for a root
    """

    id: VersionID
    date: int
    patch: Tuple[patch_obj, ...]
    parent: Optional[VersionID] = None

    def __post_init__(self):
        # Frozen only guards the fields, so keep the patch list immutable too
        object.__setattr__(self, "patch", tuple(self.patch))

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the Version to a dictionary representation.

        The patch is stored in the diff-match-patch textual format so the
        result can be written as JSON or YAML.

        Returns:
            Dictionary containing all version attributes
        """
        return {
            "id": self.id,
            "date": self.date,
            "patch": patch_to_text(self.patch),
            "parent": self.parent,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Version":
        """
        Create a Version from a dictionary representation.

        Args:
            data: Dictionary as produced by to_dict

        Returns:
            A new Version instance
        """
        return cls(
            id=data["id"],
            date=int(data["date"]),
            patch=patch_from_text(data.get("patch") or ""),
            parent=data.get("parent"),
        )

    def __eq__(self, other):
        # patch_obj has no value equality, compare the serialized patch instead
        if not isinstance(other, Version):
            return NotImplemented

        return (
            self.id == other.id
            and self.date == other.date
            and self.parent == other.parent
            and patch_to_text(self.patch) == patch_to_text(other.patch)
        )

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        parent_str = f"'{self.parent}'" if self.parent else "None"
        return (
            f"Version(id='{self.id}', date={self.date}, "
            f"parent={parent_str}, patches={len(self.patch)})"
        )


def new_version(
    old_text: str,
    new_text: str,
    parent: Optional[VersionID] = None,
    config: Optional[PatchConfig] = None,
) -> Version:
    """
    Create a new version from comparing old and new text.

    Args:
        old_text: Text of the parent version ("" for a root)
        new_text: Text of the new version
        parent: ID of the parent version, None to start a new root
        config: Patch tunables (defaults to the global configuration)

    Returns:
        A new Version with a fresh ID and the current time as its date
    """
    return Version(
        id=str(uuid.uuid4()),
        date=int(time.time() * 1000),
        patch=make_patch(old_text, new_text, config),
        parent=parent,
    )
