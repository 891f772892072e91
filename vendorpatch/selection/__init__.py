"""
Patch Selection for VendorPatch.

Resolves requested category tokens into an ordered patch list.
"""

from vendorpatch.selection.resolver import (
    DEFAULT_PATCH_SET,
    active_categories,
    effective_patch_set,
    parse_tokens,
    resolve_selection,
    strip_comment,
    unknown_tokens,
)

__all__ = [
    "DEFAULT_PATCH_SET",
    "active_categories",
    "effective_patch_set",
    "parse_tokens",
    "resolve_selection",
    "strip_comment",
    "unknown_tokens",
]
