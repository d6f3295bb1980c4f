"""
Custom exceptions for the availability engine and booking workflow.
Raised in the engine/workflow and translated to HTTP statuses in views.py.
"""


class BookingEngineError(Exception):
    """Base exception for all availability / booking errors."""
    pass


class InvalidRequestError(BookingEngineError):
    """Malformed date/time, non-positive duration or unknown enum value."""
    pass


class InvalidTransitionError(InvalidRequestError):
    """Raised when a booking status change is not allowed (terminal states)."""
    pass


class NotFoundError(BookingEngineError):
    """Unknown salon, service, employee or booking id."""
    pass


class SlotConflictError(BookingEngineError):
    """The slot is no longer free at commit time (race lost or stale listing)."""
    pass


class NoEmployeeAvailableError(SlotConflictError):
    """Raised when auto-assignment finds no eligible employee free for the slot."""
    pass


class LedgerError(BookingEngineError):
    """Booking ledger could not be read. Never reported as 'slot unavailable'."""
    pass
