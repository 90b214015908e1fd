"""
Text compilation from a branch of versions.
"""

from typing import TYPE_CHECKING, List, Optional, Sequence

from diff_match_patch import patch_obj

from history_core.config.config_manager import PatchConfig
from history_core.errors import PatchApplyError
from history_core.monitoring.structured_logger import OperationLogger, get_logger
from history_core.patching.patch import apply_patches

if TYPE_CHECKING:
    from history_core.model.version import Version

logger = get_logger(__name__, "PatchLayer")


def compile_text_from_versions(
    versions: Sequence["Version"], config: Optional[PatchConfig] = None
) -> str:
    """
    Compile a document's text from a branch of versions.

    Args:
        versions: Versions ordered from oldest (root) to newest
        config: Patch tunables (defaults to the global configuration)

    Returns:
        The text of the last version in the sequence

    Raises:
        PatchApplyError: If a patch segment fails to apply. The error carries
            the index in the flattened patch list and the owning version's ID.
    """
    patches: List[patch_obj] = []
    owners: List[str] = []
    for version in versions:
        patches.extend(version.patch)
        owners.extend([version.id] * len(version.patch))

    operation = OperationLogger(logger, "compile_text")
    operation.start(version_count=len(versions), patch_count=len(patches))
    with operation:
        try:
            text, _ = apply_patches(patches, "", config)
        except PatchApplyError as e:
            raise PatchApplyError(e.patch_index, owners[e.patch_index]) from e

    return text
