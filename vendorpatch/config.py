"""
Settings for VendorPatch.

Values come from the environment (a ``.env`` file is loaded first) and can
be overridden per command from the CLI.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# The trailing comment lists the concrete categories "all" stands for
DEFAULT_PATCH_SET = "all #hotfix msvc exports"
DEFAULT_TREE = "quickjs"
DEFAULT_PATCHES_DIR = "patches"
DEFAULT_DIFF_EXT = "patch"
DEFAULT_STRIP_LEVEL = 1
DEFAULT_PATCH_TOOL = "patch"
DEFAULT_METRICS_PATH = "vendorpatch_metrics.jsonl"


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one invocation."""

    patch_set: str = DEFAULT_PATCH_SET
    tree_path: Path = Path(DEFAULT_TREE)
    patches_dir: Path = Path(DEFAULT_PATCHES_DIR)
    diff_extension: str = DEFAULT_DIFF_EXT
    strip_level: int = DEFAULT_STRIP_LEVEL
    patch_tool: str = DEFAULT_PATCH_TOOL
    metrics_path: Optional[Path] = Path(DEFAULT_METRICS_PATH)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from ``VENDORPATCH_*`` environment variables.

        Returns:
            Settings instance

        Raises:
            ValueError: If VENDORPATCH_STRIP is not a non-negative integer
        """
        strip_raw = os.getenv("VENDORPATCH_STRIP", str(DEFAULT_STRIP_LEVEL))
        try:
            strip_level = int(strip_raw)
        except ValueError:
            raise ValueError(
                f"VENDORPATCH_STRIP must be an integer, got {strip_raw!r}"
            )
        if strip_level < 0:
            raise ValueError(
                f"VENDORPATCH_STRIP must not be negative, got {strip_level}"
            )

        metrics = os.getenv("VENDORPATCH_METRICS", DEFAULT_METRICS_PATH)

        return cls(
            patch_set=os.getenv("VENDORPATCH_PATCH", DEFAULT_PATCH_SET),
            tree_path=Path(os.getenv("VENDORPATCH_TREE", DEFAULT_TREE)),
            patches_dir=Path(
                os.getenv("VENDORPATCH_PATCHES_DIR", DEFAULT_PATCHES_DIR)
            ),
            diff_extension=os.getenv("VENDORPATCH_DIFF_EXT", DEFAULT_DIFF_EXT),
            strip_level=strip_level,
            patch_tool=os.getenv("VENDORPATCH_PATCH_TOOL", DEFAULT_PATCH_TOOL),
            metrics_path=Path(metrics) if metrics.strip() else None,
        )

    def override(self, **changes) -> "Settings":
        """Copy with CLI overrides applied; ``None`` values are ignored."""
        return replace(
            self,
            **{key: value for key, value in changes.items() if value is not None},
        )
