"""
Patch Registry for VendorPatch.

Declares which patches each category contributes:
- Categories are applied in declaration order
- Patches keep their authoring order inside a category
- "all" is a wildcard, never a category of its own

The registry is built once and never mutated.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping, Sequence


# Token that activates every concrete category
WILDCARD = "all"

# Canonical patch set for the vendored QuickJS tree
HOTFIX_PATCHES = (
    "get_function_proto",
    "check_stack_overflow",
    "infinity_handling",
    "atomic_new_class_id",
)

MSVC_PATCHES = (
    "basic_msvc_compat",
)

EXPORTS_PATCHES = (
    "read_module_exports",
)


@dataclass(frozen=True)
class PatchEntry:
    """A declared patch and where it sits in its category."""

    identifier: str
    category: str
    position: int


class Registry:
    """
    Read-only, ordered mapping of category to patch identifiers.
    """

    def __init__(self, groups: Mapping[str, Sequence[str]]):
        if WILDCARD in groups:
            raise ValueError(
                f"'{WILDCARD}' is the wildcard token and cannot declare patches"
            )
        self._groups = MappingProxyType(
            {name: tuple(patches) for name, patches in groups.items()}
        )

    @classmethod
    def from_mapping(cls, groups: Mapping[str, Sequence[str]]) -> "Registry":
        """
        Build a registry from an ordered mapping.

        Args:
            groups: Category name to ordered patch identifiers

        Returns:
            Registry instance
        """
        return cls(groups)

    @property
    def categories(self) -> tuple[str, ...]:
        """Concrete category names in declaration order."""
        return tuple(self._groups)

    def patches(self, category: str) -> tuple[str, ...]:
        """Ordered patch identifiers declared by ``category``."""
        return self._groups[category]

    def entries(self) -> Iterator[PatchEntry]:
        """Yield every declared patch in declaration order."""
        for category, patches in self._groups.items():
            for position, identifier in enumerate(patches):
                yield PatchEntry(identifier, category, position)

    def identifiers(self) -> tuple[str, ...]:
        """Every declared identifier, first declaration wins."""
        seen: dict[str, None] = {}
        for entry in self.entries():
            seen.setdefault(entry.identifier, None)
        return tuple(seen)

    def categories_of(self, identifier: str) -> tuple[str, ...]:
        """Categories that declare ``identifier`` (empty if none)."""
        return tuple(
            category
            for category, patches in self._groups.items()
            if identifier in patches
        )

    def __contains__(self, category: object) -> bool:
        return category in self._groups

    def __len__(self) -> int:
        return len(self._groups)

    def __repr__(self) -> str:
        return f"Registry({dict(self._groups)!r})"


# Default registry instance
DEFAULT_REGISTRY = Registry({
    "hotfix": HOTFIX_PATCHES,
    "msvc": MSVC_PATCHES,
    "exports": EXPORTS_PATCHES,
})
