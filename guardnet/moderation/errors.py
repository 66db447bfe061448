from __future__ import annotations


class GuardnetError(Exception):
    """Base class for all GuardianNet errors."""


class EmptyInputError(GuardnetError):
    """Raised when a blank or whitespace-only submission is rejected."""


class ClassificationError(GuardnetError):
    """Raised when the remote classifier fails or returns unusable data."""


class InvalidScheduleError(GuardnetError):
    """Raised when a proposed block window is malformed (end <= start)."""


class UninstallLockedError(GuardnetError):
    """Raised when a reset is attempted while a block schedule is still running."""

    def __init__(self, locked_until) -> None:
        super().__init__(f"Uninstall is locked until {locked_until.isoformat()}")
        self.locked_until = locked_until
