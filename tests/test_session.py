"""
Tests for VendorPatch apply sessions.

These tests verify that a session:
- Applies patches strictly in order
- Emits a progress marker before each patch
- Stops at the first failure without touching later patches
- Lets external tool failures propagate
"""

import pytest

from vendorpatch.patching import (
    ApplySession,
    ExternalToolFailure,
    PatchApplicationFailure,
)


class FakeApplier:
    """Records applied patches and fails on request."""

    def __init__(self, failing=(), broken=()):
        self.failing = set(failing)
        self.broken = set(broken)
        self.calls = []

    def apply(self, identifier):
        self.calls.append(identifier)
        if identifier in self.failing:
            raise PatchApplicationFailure(identifier, f"Hunk #1 FAILED in {identifier}")
        if identifier in self.broken:
            raise ExternalToolFailure("patch", "Permission denied", identifier)


def collect_progress(markers):
    def on_progress(index, total, identifier):
        markers.append((index, total, identifier))
    return on_progress


class TestApplySession:
    """Sequential, fail-fast application."""

    def test_all_patches_applied_in_order(self):
        applier = FakeApplier()
        result = ApplySession(applier, on_progress=lambda *a: None).run(["p1", "p2", "p3"])

        assert result.success
        assert applier.calls == ["p1", "p2", "p3"]
        assert result.applied == ["p1", "p2", "p3"]
        assert result.summary() == "3 of 3 patches applied"

    def test_stops_at_first_failure(self):
        applier = FakeApplier(failing={"p2"})
        result = ApplySession(applier, on_progress=lambda *a: None).run(["p1", "p2", "p3"])

        assert not result.success
        assert result.failed == "p2"
        assert "Hunk #1 FAILED" in result.diagnostic
        assert result.applied == ["p1"]
        assert "p3" not in applier.calls
        assert result.summary() == "1 of 3 patches applied"

    def test_progress_marker_precedes_each_attempt(self):
        markers = []
        applier = FakeApplier(failing={"p2"})
        ApplySession(applier, on_progress=collect_progress(markers)).run(["p1", "p2", "p3"])

        assert markers == [(1, 3, "p1"), (2, 3, "p2")]

    def test_empty_selection_is_a_successful_no_op(self):
        markers = []
        applier = FakeApplier()
        result = ApplySession(applier, on_progress=collect_progress(markers)).run(())

        assert result.success
        assert result.total == 0
        assert applier.calls == []
        assert markers == []

    def test_external_tool_failure_propagates(self):
        applier = FakeApplier(broken={"p2"})
        session = ApplySession(applier, on_progress=lambda *a: None)

        with pytest.raises(ExternalToolFailure) as excinfo:
            session.run(["p1", "p2", "p3"])

        assert excinfo.value.identifier == "p2"
        assert applier.calls == ["p1", "p2"]

    def test_partial_result_survives_external_failure(self):
        """The session keeps what it managed before the tool broke."""
        session = ApplySession(FakeApplier(broken={"p2"}), on_progress=lambda *a: None)

        with pytest.raises(ExternalToolFailure):
            session.run(["p1", "p2", "p3"])

        assert session.result.applied == ["p1"]
        assert session.result.failed == "p2"
        assert session.result.diagnostic == "Permission denied"
        assert not session.result.success

    def test_default_progress_marker_is_printed(self, capsys):
        ApplySession(FakeApplier()).run(["get_function_proto"])

        out = capsys.readouterr().out
        assert "[1/1]" in out
        assert "*** get_function_proto ***" in out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
