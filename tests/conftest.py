"""
Shared fixtures for VendorPatch tests.
"""

import shutil
from pathlib import Path

import pytest
from git import Actor, Repo


requires_git = pytest.mark.skipif(
    shutil.which("git") is None, reason="git is not installed"
)
requires_patch = pytest.mark.skipif(
    shutil.which("patch") is None, reason="GNU patch is not installed"
)

UPSTREAM_SOURCE = """\
static int check_stack_overflow(JSContext *ctx)
{
    return 0;
}

static double to_number(JSValue v)
{
    return v.u.float64;
}
"""

CLEAN_PATCH = """\
diff --git a/quickjs.c b/quickjs.c
--- a/quickjs.c
+++ b/quickjs.c
@@ -1,4 +1,5 @@
 static int check_stack_overflow(JSContext *ctx)
 {
+    /* patched */
     return 0;
 }
"""


@pytest.fixture
def vendored_tree(tmp_path: Path) -> Path:
    """A committed git checkout standing in for the vendored source tree."""
    tree = tmp_path / "quickjs"
    tree.mkdir()
    (tree / "quickjs.c").write_text(UPSTREAM_SOURCE, encoding="utf-8")

    repo = Repo.init(tree)
    repo.index.add(["quickjs.c"])
    author = Actor("VendorPatch Tests", "tests@example.com")
    repo.index.commit("Import upstream", author=author, committer=author)
    repo.close()

    return tree


@pytest.fixture
def patches_dir(tmp_path: Path) -> Path:
    path = tmp_path / "patches"
    path.mkdir()
    return path
