"""
Apply Session for VendorPatch.

Applies a resolved selection to the vendored tree:
- Strictly in order, one patch at a time
- A progress marker before every patch
- Stops at the first failure, without rolling back

Recovery from a partial session is a manual ``reset``.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from vendorpatch.patching.apply import PatchApplier
from vendorpatch.patching.errors import ExternalToolFailure, PatchApplicationFailure

console = Console()

ProgressCallback = Callable[[int, int, str], None]


def print_progress(index: int, total: int, identifier: str) -> None:
    """Default progress marker: ``[i/N] *** identifier ***``."""
    console.print(f"[dim]\\[{index}/{total}][/dim] *** {escape(identifier)} ***")


@dataclass
class SessionResult:
    """Outcome of one apply session."""

    selection: tuple[str, ...]
    applied: list[str] = field(default_factory=list)
    failed: Optional[str] = None
    diagnostic: str = ""

    @property
    def success(self) -> bool:
        return self.failed is None

    @property
    def total(self) -> int:
        return len(self.selection)

    def summary(self) -> str:
        """Human readable ``N of M`` line."""
        return f"{len(self.applied)} of {self.total} patches applied"


class ApplySession:
    """
    Drive a PatchApplier over a selection, fail-fast.

    ``ExternalToolFailure`` is fatal to the command and propagates once the
    session has stopped; ``result`` still describes how far it got.
    """

    def __init__(
        self,
        applier: PatchApplier,
        on_progress: Optional[ProgressCallback] = None,
    ):
        self.applier = applier
        self.on_progress = on_progress or print_progress
        self.result: Optional[SessionResult] = None

    def run(self, selection: Sequence[str]) -> SessionResult:
        """
        Apply every patch in ``selection``.

        Args:
            selection: Ordered patch identifiers

        Returns:
            SessionResult describing how far the session got
        """
        result = SessionResult(selection=tuple(selection))
        self.result = result
        total = result.total

        for index, identifier in enumerate(result.selection, start=1):
            self.on_progress(index, total, identifier)

            try:
                self.applier.apply(identifier)
            except PatchApplicationFailure as e:
                result.failed = identifier
                result.diagnostic = e.diagnostic
                break
            except ExternalToolFailure as e:
                result.failed = identifier
                result.diagnostic = e.diagnostic
                raise

            result.applied.append(identifier)

        return result
