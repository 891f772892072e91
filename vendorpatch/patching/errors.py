"""
Error types for VendorPatch.

Every failure is terminal for the current command.
"""

from typing import Optional


class VendorPatchError(RuntimeError):
    """Base class for all VendorPatch failures."""


class PatchApplicationFailure(VendorPatchError):
    """A patch did not apply cleanly to the current tree."""

    def __init__(self, identifier: str, diagnostic: str = ""):
        self.identifier = identifier
        self.diagnostic = diagnostic
        super().__init__(f"Patch '{identifier}' failed to apply")


class ExternalToolFailure(VendorPatchError):
    """
    git or patch could not run, or refused for a reason other than a
    hunk mismatch.
    """

    def __init__(
        self,
        tool: str,
        diagnostic: str = "",
        identifier: Optional[str] = None,
    ):
        self.tool = tool
        self.diagnostic = diagnostic
        self.identifier = identifier
        message = f"{tool} failed"
        if identifier:
            message += f" while applying '{identifier}'"
        if diagnostic:
            message += f": {diagnostic.strip()}"
        super().__init__(message)
