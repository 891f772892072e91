"""
Vendored Tree Lifecycle for VendorPatch.

Thin wrappers over git for managing the vendored tree:
- Stage working-tree changes
- Show the whitespace-insensitive diff
- Capture that diff as a stored patch
- Hard reset back to the committed state

Each operation is independent of apply sessions.
"""

from pathlib import Path
from typing import Protocol

from git import Git
from git.exc import CommandError
from rich.console import Console

from vendorpatch.patching.errors import ExternalToolFailure

console = Console()


class TreeLifecycle(Protocol):
    """Version-control operations on the vendored tree."""

    def stage(self) -> None:
        ...

    def diff(self) -> str:
        ...

    def capture(self, name: str) -> Path:
        ...

    def reset(self, clean: bool = False) -> None:
        ...


class GitTree:
    """
    TreeLifecycle backed by git, run from the vendored tree's root.
    """

    def __init__(
        self,
        tree_path: str,
        patches_dir: str,
        extension: str = "patch",
        verbose: bool = False,
    ):
        self.tree_path = Path(tree_path)
        self.patches_dir = Path(patches_dir)
        self.extension = extension
        self.verbose = verbose

        if not self.tree_path.is_dir():
            raise ExternalToolFailure(
                "git", f"Vendored tree does not exist: {self.tree_path}"
            )

        self.git = Git(str(self.tree_path))

    def _run(self, command: str, *args: str, **kwargs):
        try:
            return getattr(self.git, command)(*args, **kwargs)
        except CommandError as e:
            raise ExternalToolFailure("git", str(e))

    def patch_file(self, name: str) -> Path:
        """Path of the stored diff for ``name``."""
        return self.patches_dir / f"{name}.{self.extension}"

    def stage(self) -> None:
        """Mark all working-tree changes for the next capture."""
        self._run("add", "--all", ".")

        if self.verbose:
            console.print("[blue]Staged working-tree changes[/blue]")

    def diff(self) -> str:
        """
        Unstaged changes, ignoring whitespace.

        Returns:
            Unified diff text (empty when the tree is clean)
        """
        return self.diff_bytes().decode("utf-8", errors="replace")

    def diff_bytes(self) -> bytes:
        """Unstaged, whitespace-insensitive diff exactly as git wrote it."""
        return self._run("diff", "-w", stdout_as_string=False)

    def is_clean(self) -> bool:
        """True when ``diff`` reports no changes."""
        return not self.diff_bytes().strip()

    def capture(self, name: str) -> Path:
        """
        Write the current unstaged diff to the patch store.

        Overwrites any earlier content for ``name``.

        Args:
            name: Patch identifier

        Returns:
            Path of the written patch file
        """
        diff = self.diff_bytes()
        # git output comes back without its final newline
        if diff and not diff.endswith(b"\n"):
            diff += b"\n"

        patch_file = self.patch_file(name)
        try:
            self.patches_dir.mkdir(parents=True, exist_ok=True)
            patch_file.write_bytes(diff)
        except OSError as e:
            raise ExternalToolFailure("git", f"Failed to write {patch_file}: {e}")

        if self.verbose:
            console.print(f"[blue]Captured diff into {patch_file}[/blue]")

        return patch_file

    def reset(self, clean: bool = False) -> None:
        """
        Discard working-tree changes (``git reset --hard HEAD``).

        Args:
            clean: Also remove untracked files and directories
        """
        self._run("reset", "--hard", "HEAD")

        if clean:
            self._run("clean", "-fd")

        if self.verbose:
            console.print("[blue]Vendored tree reset to HEAD[/blue]")
