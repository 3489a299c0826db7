"""Errors raised by the registration and spin flow.

Every error is reported to the visitor through the notification surface
before it is raised, so callers only need to catch :class:`PrizeWheelError`
to keep the session alive.
"""

from __future__ import annotations


class PrizeWheelError(Exception):
    """Base class for all recoverable spin-flow errors."""

    title = "Error"


class ValidationError(PrizeWheelError, ValueError):
    """A form field is empty or malformed."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class DuplicateRegistration(PrizeWheelError):
    """The national ID already has a beneficiary on record."""

    def __init__(self, national_id: str) -> None:
        super().__init__("This national ID has already been registered")
        self.national_id = national_id


class PersistenceError(PrizeWheelError):
    """The record store could not durably save an outcome."""


class CountdownExpired(PrizeWheelError):
    """The redemption window closed before the win was confirmed."""

    title = "Time is up"


class InvalidTransition(PrizeWheelError):
    """An operation was invoked in a phase that does not allow it."""


__all__ = [
    "CountdownExpired",
    "DuplicateRegistration",
    "InvalidTransition",
    "PersistenceError",
    "PrizeWheelError",
    "ValidationError",
]
