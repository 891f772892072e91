"""
Patch Registry for VendorPatch.

Static declaration of patch categories:
- hotfix: upstream bug fixes
- msvc: MSVC compiler compatibility
- exports: module export introspection
"""

from vendorpatch.registry.categories import (
    DEFAULT_REGISTRY,
    WILDCARD,
    PatchEntry,
    Registry,
)

__all__ = [
    "DEFAULT_REGISTRY",
    "WILDCARD",
    "PatchEntry",
    "Registry",
]
