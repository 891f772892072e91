"""
Patch Application for VendorPatch.

Applies stored patch files to the vendored tree with GNU patch.
"""

import subprocess
from pathlib import Path
from typing import Protocol

from rich.console import Console

from vendorpatch.patching.errors import ExternalToolFailure, PatchApplicationFailure

console = Console()

# patch(1) exit status when some hunks could not be applied
PATCH_HUNKS_FAILED = 1


class PatchApplier(Protocol):
    """Applies one patch identifier to the vendored tree."""

    def apply(self, identifier: str) -> None:
        ...


class GnuPatchApplier:
    """
    Apply ``<patches_dir>/<identifier>.<extension>`` from the tree root.

    Diffs are generated one directory above the tree, so the default strip
    level drops one leading path component. ``--forward`` makes an already
    applied patch fail instead of being silently reversed.
    """

    def __init__(
        self,
        tree_path: str,
        patches_dir: str,
        extension: str = "patch",
        strip_level: int = 1,
        patch_command: str = "patch",
        verbose: bool = False,
    ):
        self.tree_path = Path(tree_path)
        self.patches_dir = Path(patches_dir)
        self.extension = extension
        self.strip_level = strip_level
        self.patch_command = patch_command
        self.verbose = verbose

    def patch_file(self, identifier: str) -> Path:
        """Path of the stored diff for ``identifier``."""
        return self.patches_dir / f"{identifier}.{self.extension}"

    def apply(self, identifier: str) -> None:
        """
        Apply a single patch.

        Args:
            identifier: Patch identifier

        Raises:
            PatchApplicationFailure: If the diff does not apply cleanly
            ExternalToolFailure: If patch cannot run or fails otherwise
        """
        patch_file = self.patch_file(identifier).resolve()

        if not patch_file.is_file():
            raise PatchApplicationFailure(
                identifier, f"Patch file not found: {patch_file}"
            )

        command = [
            self.patch_command,
            f"-p{self.strip_level}",
            "--forward",
            "-i", str(patch_file),
        ]

        try:
            result = subprocess.run(
                command,
                cwd=self.tree_path,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise ExternalToolFailure(self.patch_command, str(e), identifier)

        output = (result.stdout or "") + (result.stderr or "")

        if result.returncode == 0:
            if self.verbose and output.strip():
                console.print(output.rstrip(), style="dim", markup=False)
            return

        if result.returncode == PATCH_HUNKS_FAILED:
            raise PatchApplicationFailure(identifier, output)

        raise ExternalToolFailure(self.patch_command, output, identifier)
