"""
Patch layer built on diff-match-patch.

Produces patches between two texts and applies ordered patch lists to a base
text. Knows nothing about versions or trees.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from diff_match_patch import diff_match_patch, patch_obj

from history_core.config.config_manager import PatchConfig, get_config
from history_core.errors import PatchApplyError

Patch = Sequence[patch_obj]

logger = logging.getLogger(__name__)


def _resolve_config(config: Optional[PatchConfig]) -> PatchConfig:
    if config is not None:
        return config
    return get_config().config.patching


def create_engine(config: Optional[PatchConfig] = None) -> diff_match_patch:
    """
    Create a diff-match-patch engine tuned by the given configuration.

    Args:
        config: Patch tunables (defaults to the global configuration)

    Returns:
        A configured diff_match_patch instance
    """
    config = _resolve_config(config)
    dmp = diff_match_patch()
    dmp.Diff_Timeout = config.diff_timeout
    dmp.Diff_EditCost = config.diff_edit_cost
    dmp.Match_Threshold = config.match_threshold
    dmp.Match_Distance = config.match_distance
    dmp.Patch_DeleteThreshold = config.patch_delete_threshold
    dmp.Patch_Margin = config.patch_margin
    return dmp


def make_patch(old_text: str, new_text: str, config: Optional[PatchConfig] = None) -> Patch:
    """
    Compute the patch that turns old_text into new_text.

    Args:
        old_text: Text before the edit
        new_text: Text after the edit
        config: Patch tunables (defaults to the global configuration)

    Returns:
        List of patch objects; empty when both texts are equal
    """
    return create_engine(config).patch_make(old_text, new_text)


def apply_patches(
    patches: Patch, base_text: str = "", config: Optional[PatchConfig] = None
) -> Tuple[str, List[bool]]:
    """
    Apply an ordered list of patches to a base text.

    Args:
        patches: Patches to apply, in order
        base_text: Text the first patch applies to
        config: Patch tunables (defaults to the global configuration)

    Returns:
        Tuple of the resulting text and one success flag per patch

    Raises:
        PatchApplyError: If any patch could not be matched against the text;
            the error names the index of the first failing patch
    """
    text, results = create_engine(config).patch_apply(patches, base_text)
    for index, applied in enumerate(results):
        if not applied:
            logger.error(f"Patch {index} of {len(results)} failed to apply")
            raise PatchApplyError(index)
    return text, results


def patch_to_text(patches: Patch) -> str:
    """Serialize a patch list to the diff-match-patch textual format."""
    return diff_match_patch().patch_toText(patches)


def patch_from_text(text: str) -> Patch:
    """Parse a patch list from the diff-match-patch textual format."""
    if not text:
        return []
    return diff_match_patch().patch_fromText(text)
