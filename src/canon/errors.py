"""Exception types raised by canon."""

from typing import Any


class CanonError(Exception):
    """Base exception for all canon errors.

    Args:
        message: Human readable description.
        details: Optional structured context, e.g. for JSON output.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class CapacityExceededError(CanonError):
    """Raised when an independent value arrives but the basis is already full.

    The pass is aborted; the offending value is never silently dropped.
    """

    def __init__(self, value: int, position: int, capacity: int):
        super().__init__(
            f"Value {value:#x} at position {position} is independent but the "
            f"basis is already at its capacity of {capacity}",
            {"value": value, "position": position, "capacity": capacity},
        )
        self.value = value
        self.position = position
        self.capacity = capacity


class InvalidInputError(CanonError):
    """Raised when the input stream or archive cannot be read."""


class ArchiveError(InvalidInputError):
    """Raised when an archive is malformed."""


class PassCancelledError(CanonError):
    """Raised when the caller requests cancellation between insertion attempts."""

    def __init__(self, consumed: int):
        super().__init__(
            f"Pass cancelled after {consumed} values", {"consumed": consumed}
        )
        self.consumed = consumed
