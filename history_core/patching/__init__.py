"""
Patch layer: diff two texts into a patch, and rebuild text from ordered patches.
"""

from history_core.patching.patch import (
    Patch,
    create_engine,
    make_patch,
    apply_patches,
    patch_to_text,
    patch_from_text,
)
from history_core.patching.compile import compile_text_from_versions

__all__ = [
    "Patch",
    "create_engine",
    "make_patch",
    "apply_patches",
    "patch_to_text",
    "patch_from_text",
    "compile_text_from_versions",
]
