"""
Tests for managing the vendored tree with git.

These tests verify that:
- diff reflects unstaged, non-whitespace changes only
- capture writes an applicable patch and overwrites old content
- reset restores the committed state
- a captured patch re-applies to reproduce the same diff
"""

import pytest

from tests.conftest import UPSTREAM_SOURCE, requires_git, requires_patch
from vendorpatch.patching import (
    ApplySession,
    ExternalToolFailure,
    GitTree,
    GnuPatchApplier,
)
from vendorpatch.registry import Registry
from vendorpatch.selection import resolve_selection


def edit_source(tree):
    source = tree / "quickjs.c"
    source.write_text(
        UPSTREAM_SOURCE.replace("return 0;", "return js_check_stack_overflow(ctx);"),
        encoding="utf-8",
    )


class TestGitTreeSetup:

    def test_missing_tree_is_an_external_failure(self, tmp_path):
        with pytest.raises(ExternalToolFailure):
            GitTree(str(tmp_path / "missing"), str(tmp_path / "patches"))


@requires_git
class TestGitTree:
    """Lifecycle operations against a real repository."""

    def test_clean_tree_has_no_diff(self, vendored_tree, patches_dir):
        tree = GitTree(str(vendored_tree), str(patches_dir))
        assert tree.diff() == ""
        assert tree.is_clean()

    def test_diff_shows_unstaged_changes(self, vendored_tree, patches_dir):
        edit_source(vendored_tree)
        diff = GitTree(str(vendored_tree), str(patches_dir)).diff()

        assert "diff --git a/quickjs.c b/quickjs.c" in diff
        assert "+    return js_check_stack_overflow(ctx);" in diff

    def test_stage_moves_changes_out_of_the_diff(self, vendored_tree, patches_dir):
        edit_source(vendored_tree)
        tree = GitTree(str(vendored_tree), str(patches_dir))

        tree.stage()

        assert tree.is_clean()

    def test_capture_writes_patch_file(self, vendored_tree, patches_dir):
        edit_source(vendored_tree)
        tree = GitTree(str(vendored_tree), str(patches_dir))

        path = tree.capture("check_stack_overflow")

        assert path == patches_dir / "check_stack_overflow.patch"
        assert path.read_text(encoding="utf-8") == tree.diff() + "\n"

    def test_capture_overwrites_previous_content(self, vendored_tree, patches_dir):
        stale = patches_dir / "check_stack_overflow.patch"
        stale.write_text("stale content\n", encoding="utf-8")
        edit_source(vendored_tree)

        GitTree(str(vendored_tree), str(patches_dir)).capture("check_stack_overflow")

        assert "stale content" not in stale.read_text(encoding="utf-8")

    def test_capture_creates_patch_directory(self, vendored_tree, tmp_path):
        edit_source(vendored_tree)
        store = tmp_path / "new" / "patches"

        path = GitTree(str(vendored_tree), str(store), extension="diff").capture("fix")

        assert path == store / "fix.diff"
        assert path.is_file()

    def test_capture_of_clean_tree_is_empty(self, vendored_tree, patches_dir):
        path = GitTree(str(vendored_tree), str(patches_dir)).capture("nothing")
        assert path.read_text(encoding="utf-8") == ""

    def test_reset_discards_changes(self, vendored_tree, patches_dir):
        edit_source(vendored_tree)
        tree = GitTree(str(vendored_tree), str(patches_dir))

        tree.reset()

        assert tree.is_clean()
        assert (vendored_tree / "quickjs.c").read_text(encoding="utf-8") == UPSTREAM_SOURCE

    def test_reset_clean_removes_untracked_files(self, vendored_tree, patches_dir):
        untracked = vendored_tree / "quickjs.c.orig"
        untracked.write_text("leftover\n", encoding="utf-8")
        tree = GitTree(str(vendored_tree), str(patches_dir))

        tree.reset()
        assert untracked.exists()

        tree.reset(clean=True)
        assert not untracked.exists()


@requires_git
@requires_patch
class TestCaptureRoundTrip:
    """Captured patches reproduce the captured diff when re-applied."""

    def test_capture_reset_apply_reproduces_diff(self, vendored_tree, patches_dir):
        edit_source(vendored_tree)
        tree = GitTree(str(vendored_tree), str(patches_dir))
        captured = tree.capture("check_stack_overflow")
        tree.reset()
        assert tree.is_clean()

        registry = Registry({"hotfix": ["check_stack_overflow"], "msvc": ["other"]})
        applier = GnuPatchApplier(str(vendored_tree), str(patches_dir))
        result = ApplySession(applier, on_progress=lambda *a: None).run(
            resolve_selection("hotfix", registry)
        )

        assert result.success
        assert tree.diff() + "\n" == captured.read_text(encoding="utf-8")

    def test_non_utf8_source_round_trips_byte_for_byte(self, vendored_tree, patches_dir):
        source = vendored_tree / "quickjs.c"
        edited = UPSTREAM_SOURCE.encode("utf-8").replace(b"return 0;", b"return 0; /* caf\xe9 */")
        source.write_bytes(edited)
        tree = GitTree(str(vendored_tree), str(patches_dir))

        captured = tree.capture("check_stack_overflow")
        content = captured.read_bytes()
        assert b"caf\xe9" in content
        assert content.endswith(b"\n")

        tree.reset()
        applier = GnuPatchApplier(str(vendored_tree), str(patches_dir))
        result = ApplySession(applier, on_progress=lambda *a: None).run(["check_stack_overflow"])

        assert result.success
        assert source.read_bytes() == edited
        assert tree.diff_bytes() + b"\n" == content

    def test_reset_after_failed_session_leaves_clean_tree(self, vendored_tree, patches_dir):
        edit_source(vendored_tree)
        tree = GitTree(str(vendored_tree), str(patches_dir))
        tree.capture("first")
        tree.reset()

        registry = Registry({"hotfix": ["first", "missing", "never"]})
        applier = GnuPatchApplier(str(vendored_tree), str(patches_dir))
        result = ApplySession(applier, on_progress=lambda *a: None).run(
            resolve_selection("all", registry)
        )

        assert result.failed == "missing"
        assert result.applied == ["first"]
        assert not tree.is_clean()

        tree.reset()
        assert tree.is_clean()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
