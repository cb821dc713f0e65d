"""
Exceptions raised by the wheel engine
"""


class WheelError(Exception):
    """Base class for wheel engine errors"""


class InvalidSpinRequest(WheelError):
    """A spin was requested that cannot run; no state was changed."""

    ALREADY_SPINNING = "already_spinning"
    ALL_LOCKED = "all_locked"
    NOTHING_TO_SPIN = "nothing_to_spin"

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


class SpinInProgressError(WheelError):
    """State that a running spin depends on was about to change."""
