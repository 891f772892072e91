"""
Patch Statistics for VendorPatch.

Read-only inspection of stored patch files, for reporting.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from unidiff import PatchSet, UnidiffParseError


@dataclass(frozen=True)
class FileStats:
    """Changes one patch makes to one file."""

    path: str
    additions: int
    deletions: int
    hunks: int


@dataclass
class PatchStats:
    """Summary of a stored patch; ``error`` is set when it does not parse."""

    files: list[FileStats] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def files_changed(self) -> int:
        return len(self.files)

    @property
    def additions(self) -> int:
        return sum(f.additions for f in self.files)

    @property
    def deletions(self) -> int:
        return sum(f.deletions for f in self.files)


def read_patch_stats(diff_text: str) -> PatchStats:
    """
    Parse a unified diff into per-file statistics.

    Args:
        diff_text: Unified diff string

    Returns:
        PatchStats (empty for an empty diff)
    """
    try:
        patch = PatchSet(diff_text)
    except UnidiffParseError as e:
        return PatchStats(error=f"Invalid diff format: {e}")

    return PatchStats(files=[
        FileStats(
            path=patched_file.path,
            additions=patched_file.added,
            deletions=patched_file.removed,
            hunks=len(patched_file),
        )
        for patched_file in patch
    ])


def read_patch_file_stats(path: Path) -> PatchStats:
    """Statistics for a patch file; undecodable bytes are replaced."""
    return read_patch_stats(path.read_text(encoding="utf-8", errors="replace"))
