"""
Patch Application for VendorPatch.

Handles:
- Applying stored patches to the vendored tree
- Fail-fast apply sessions
- Staging, diffing, capturing and resetting the tree
"""

from vendorpatch.patching.apply import GnuPatchApplier, PatchApplier
from vendorpatch.patching.errors import (
    ExternalToolFailure,
    PatchApplicationFailure,
    VendorPatchError,
)
from vendorpatch.patching.lifecycle import GitTree, TreeLifecycle
from vendorpatch.patching.session import ApplySession, SessionResult
from vendorpatch.patching.stats import (
    FileStats,
    PatchStats,
    read_patch_file_stats,
    read_patch_stats,
)

__all__ = [
    "ApplySession",
    "ExternalToolFailure",
    "FileStats",
    "GitTree",
    "GnuPatchApplier",
    "PatchApplicationFailure",
    "PatchApplier",
    "PatchStats",
    "SessionResult",
    "TreeLifecycle",
    "VendorPatchError",
    "read_patch_file_stats",
    "read_patch_stats",
]
