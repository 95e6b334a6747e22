"""Package-specific exception types."""

from __future__ import annotations


class SyncError(ValueError):
    """Base class for synchronization errors."""


class MarkerError(SyncError):
    """Raised when the README markers are missing or ambiguous.

    Args:
        reason: Human-readable description of the marker problem.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return f"Cannot synchronize README: {self.reason}"


class ManifestError(SyncError):
    """Raised when the Cargo manifest cannot be found or interpreted."""
