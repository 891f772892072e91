"""
VendorPatch

Apply, inspect, capture and revert local patches on a vendored source tree.
"""

__version__ = "0.1.0"

from vendorpatch.registry import DEFAULT_REGISTRY, Registry
from vendorpatch.selection import resolve_selection
from vendorpatch.patching import ApplySession, GitTree, GnuPatchApplier

__all__ = [
    "ApplySession",
    "DEFAULT_REGISTRY",
    "GitTree",
    "GnuPatchApplier",
    "Registry",
    "resolve_selection",
    "__version__",
]
