"""
VersionManager for the revision forest of a single document.

This module provides functionality for:
1. Registering immutable versions keyed by ID and linked to their parent
2. Selecting the canonical main branch among divergent leaves
3. Rebuilding the root-to-version branch of any version
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

from history_core.config.config_manager import PatchConfig
from history_core.errors import (
    VersionAlreadyExistsError,
    VersionCycleError,
    VersionNotFoundError,
)
from history_core.model.version import Version, VersionID
from history_core.patching.compile import compile_text_from_versions


class VersionManager:
    """
    Manages the versions of a document and its main branch.

    The main branch ends at the leaf with the greatest root distance; among
    equally deep leaves the one with the oldest date wins. The tip is
    recomputed on every insertion and the main branch itself is memoized until
    the next insertion.

    Not thread-safe: callers must serialize add_version against every other call.
    """

    def __init__(self, versions: Optional[Iterable[Version]] = None):
        """
        Initialize the VersionManager.

        Args:
            versions: Unordered collection of versions to load, e.g. from a
                persisted document. Parents may appear after their children.

        Raises:
            VersionAlreadyExistsError: If two versions share an ID
            VersionNotFoundError: If a version's ancestry is dangling
        """
        self.logger = logging.getLogger(__name__)
        self._versions: Dict[VersionID, Version] = {}
        self._last_version: Optional[VersionID] = None
        # None means not computed since the last mutation
        self._cached_main_branch: Optional[List[Version]] = None

        if versions:
            for version in versions:
                self._add_version_raw(version)
            if self._versions:
                self._last_version = self._select_main_tip()

        self.logger.debug(f"Loaded {len(self._versions)} versions")

    @property
    def last_version(self) -> Optional[VersionID]:
        """ID of the main branch tip, None if there are no versions."""
        return self._last_version

    def __len__(self) -> int:
        return len(self._versions)

    def __contains__(self, version_id) -> bool:
        return version_id in self._versions

    def add_version(self, version: Version) -> None:
        """
        Register a new version.

        Args:
            version: The version to add

        Raises:
            VersionAlreadyExistsError: If a version with the same ID exists
            VersionNotFoundError: If the version's ancestry is dangling; the
                version is not kept in that case
            VersionCycleError: If the version's ancestry loops; the version is
                not kept in that case either
        """
        self._add_version_raw(version)
        try:
            last_version = self._select_main_tip()
        except (VersionNotFoundError, VersionCycleError) as e:
            del self._versions[version.id]
            self.logger.error(f"Rejected version {version.id}: {e}")
            raise

        self._last_version = last_version
        self._cached_main_branch = None
        self.logger.debug(f"Added version {version.id}, main branch tip is {last_version}")

    def get_version(self, version_id: VersionID) -> Version:
        """
        Get a single version by ID.

        Raises:
            VersionNotFoundError: If the version does not exist
        """
        version = self._versions.get(version_id)
        if version is None:
            raise VersionNotFoundError(version_id)
        return version

    def get_all_versions(self) -> List[Version]:
        """
        Get every stored version, in no particular order.

        Returns:
            A new list; later insertions do not affect it
        """
        return list(self._versions.values())

    def get_main_branch(self) -> List[Version]:
        """
        Get the main branch of the document.

        Returns:
            Versions from the root to the main branch tip, empty if there are
            no versions
        """
        if self._cached_main_branch is None:
            if self._last_version is None:
                self._cached_main_branch = []
            else:
                self._cached_main_branch = self.get_branch(self._last_version)
        return list(self._cached_main_branch)

    def get_branch(self, version_id: VersionID) -> List[Version]:
        """
        Get the complete branch ending at a given version.

        Args:
            version_id: ID of the last version of the branch

        Returns:
            Versions ordered from the root to the given version

        Raises:
            VersionNotFoundError: If the version or one of its ancestors is missing
            VersionCycleError: If the parent links loop
        """
        branch: List[Version] = []
        seen: Set[VersionID] = set()
        current: Optional[VersionID] = version_id
        while current is not None:
            if current in seen:
                raise VersionCycleError(current)
            seen.add(current)
            version = self._versions.get(current)
            if version is None:
                self.logger.warning(f"Missing version {current} while walking branch of {version_id}")
                raise VersionNotFoundError(current)
            branch.append(version)
            current = version.parent
        branch.reverse()
        return branch

    def get_leaves(self) -> List[VersionID]:
        """
        Get the IDs of all versions no other version descends from.

        Returns:
            Leaf IDs, one per divergent lineage
        """
        parents = {version.parent for version in self._versions.values() if version.parent}
        return [version_id for version_id in self._versions if version_id not in parents]

    def compile_text(
        self, version_id: Optional[VersionID] = None, config: Optional[PatchConfig] = None
    ) -> str:
        """
        Rebuild the document text at a version.

        Args:
            version_id: Version to rebuild, defaults to the main branch tip
            config: Patch tunables (defaults to the global configuration)

        Returns:
            The document text, "" if there are no versions

        Raises:
            VersionNotFoundError: If the branch cannot be walked
            PatchApplyError: If a patch of the branch fails to apply
        """
        if version_id is None:
            branch = self.get_main_branch()
        else:
            branch = self.get_branch(version_id)
        return compile_text_from_versions(branch, config)

    def _add_version_raw(self, version: Version) -> None:
        if version.id in self._versions:
            raise VersionAlreadyExistsError(version.id)
        self._versions[version.id] = version

    def _select_main_tip(self) -> VersionID:
        """
        Pick the tip of the main branch.

        Longest branch first, then the oldest date. Exact ties on both fall
        back to the smallest ID.
        """
        leaves = self.get_leaves()
        if not leaves:
            # every version is someone's parent, so the links must loop
            raise VersionCycleError(next(iter(self._versions)))

        distances: Dict[VersionID, int] = {}
        leaf_distances = {leaf: self._get_root_distance(leaf, distances) for leaf in leaves}
        max_distance = max(leaf_distances.values())
        longest = [leaf for leaf, distance in leaf_distances.items() if distance == max_distance]

        tip = min(longest, key=lambda leaf: (self._versions[leaf].date, leaf))
        tip_date = self._versions[tip].date
        if sum(1 for leaf in longest if self._versions[leaf].date == tip_date) > 1:
            self.logger.warning(
                f"Leaves at distance {max_distance} share date {tip_date}, picked {tip} by ID"
            )
        return tip

    def _get_root_distance(self, version_id: VersionID, distances: Dict[VersionID, int]) -> int:
        """
        Number of edges between a version and its root.

        Ascends iteratively and records every distance found along the way in
        ``distances``, which is shared across calls.
        """
        path: List[VersionID] = []
        on_path: Set[VersionID] = set()
        current = version_id
        while current not in distances:
            if current in on_path:
                raise VersionCycleError(current)
            version = self._versions.get(current)
            if version is None:
                raise VersionNotFoundError(current)
            if version.parent is None:
                distances[current] = 0
                break
            path.append(current)
            on_path.add(current)
            current = version.parent

        distance = distances[current]
        for ancestor_id in reversed(path):
            distance += 1
            distances[ancestor_id] = distance
        return distances[version_id]
