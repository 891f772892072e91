"""
Selection Resolver for VendorPatch.

Turns a requested patch set such as ``"hotfix msvc"`` into the ordered list
of patches to apply. This is the only place that decides what gets applied.

Rules:
- Everything after ``#`` is a comment
- Blank input falls back to the configured default
- Unknown tokens are ignored, never rejected
- Output order follows the registry, not the input
"""

from typing import Optional

from vendorpatch.registry.categories import DEFAULT_REGISTRY, WILDCARD, Registry


# Patch set used when nothing is requested
DEFAULT_PATCH_SET = WILDCARD

COMMENT_MARKER = "#"


def strip_comment(raw: Optional[str]) -> str:
    """
    Drop an inline trailing comment.

    Args:
        raw: Raw token string, possibly None

    Returns:
        Text before the first comment marker
    """
    if not raw:
        return ""
    return raw.split(COMMENT_MARKER, 1)[0]


def effective_patch_set(
    raw: Optional[str],
    default: str = DEFAULT_PATCH_SET,
) -> str:
    """
    The patch set actually in force, without comments.

    Args:
        raw: Whitespace-separated token string
        default: Token string used when ``raw`` is blank

    Returns:
        Normalized token string, never blank
    """
    for candidate in (raw, default, DEFAULT_PATCH_SET):
        text = " ".join(strip_comment(candidate).split())
        if text:
            return text
    return DEFAULT_PATCH_SET


def parse_tokens(
    raw: Optional[str],
    default: str = DEFAULT_PATCH_SET,
) -> frozenset[str]:
    """
    Parse a requested patch set into tokens.

    Args:
        raw: Whitespace-separated token string
        default: Token string used when ``raw`` is blank

    Returns:
        Set of requested tokens
    """
    return frozenset(effective_patch_set(raw, default).split())


def active_categories(
    raw: Optional[str],
    registry: Registry = DEFAULT_REGISTRY,
    default: str = DEFAULT_PATCH_SET,
) -> tuple[str, ...]:
    """
    Categories switched on by a requested patch set.

    Args:
        raw: Whitespace-separated token string
        registry: Registry to resolve against
        default: Token string used when ``raw`` is blank

    Returns:
        Active category names in declaration order
    """
    tokens = parse_tokens(raw, default)
    wildcard = WILDCARD in tokens
    return tuple(
        category
        for category in registry.categories
        if wildcard or category in tokens
    )


def resolve_selection(
    raw: Optional[str],
    registry: Registry = DEFAULT_REGISTRY,
    default: str = DEFAULT_PATCH_SET,
) -> tuple[str, ...]:
    """
    Resolve a requested patch set into the patches to apply.

    Args:
        raw: Whitespace-separated token string
        registry: Registry to resolve against
        default: Token string used when ``raw`` is blank

    Returns:
        Ordered, duplicate-free patch identifiers (may be empty)
    """
    selection: list[str] = []
    seen: set[str] = set()

    for category in active_categories(raw, registry, default):
        for identifier in registry.patches(category):
            if identifier in seen:
                continue
            seen.add(identifier)
            selection.append(identifier)

    return tuple(selection)


def unknown_tokens(
    raw: Optional[str],
    registry: Registry = DEFAULT_REGISTRY,
    default: str = DEFAULT_PATCH_SET,
) -> list[str]:
    """
    Requested tokens that match no category.

    Args:
        raw: Whitespace-separated token string
        registry: Registry to resolve against
        default: Token string used when ``raw`` is blank

    Returns:
        Sorted list of ignored tokens
    """
    tokens = parse_tokens(raw, default)
    return sorted(
        token for token in tokens
        if token != WILDCARD and token not in registry
    )
