"""Domain errors for the booking ledger and ticket catalog.

Every failure is scoped to a single request. The API layer maps `code`
to an HTTP status; nothing here knows about HTTP.
"""

from enum import Enum


class ErrorCode(str, Enum):
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    NOT_BOOKABLE = "NOT_BOOKABLE"
    INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    ALREADY_IN_STATE = "ALREADY_IN_STATE"
    DEPARTURE_ELAPSED = "DEPARTURE_ELAPSED"
    PERMISSION_DENIED = "PERMISSION_DENIED"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode = ErrorCode.INVALID_ARGUMENT

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidArgumentError(DomainError):
    """Malformed input. Caller's fault, not retryable."""

    code = ErrorCode.INVALID_ARGUMENT


class NotFoundError(DomainError):
    code = ErrorCode.NOT_FOUND


class TicketNotFoundError(NotFoundError):
    def __init__(self, ticket_id: str) -> None:
        super().__init__(f"Ticket {ticket_id} not found")
        self.ticket_id = ticket_id


class BookingNotFoundError(NotFoundError):
    def __init__(self, booking_id: str) -> None:
        super().__init__(f"Booking {booking_id} not found")
        self.booking_id = booking_id


class NotBookableError(DomainError):
    """The ticket exists but is not approved for sale."""

    code = ErrorCode.NOT_BOOKABLE

    def __init__(self, ticket_id: str, status: str) -> None:
        super().__init__(f"Ticket {ticket_id} is {status} and cannot be booked")
        self.ticket_id = ticket_id
        self.status = status


class InsufficientInventoryError(DomainError):
    """Sold out, or a concurrent reservation took the remaining units."""

    code = ErrorCode.INSUFFICIENT_INVENTORY

    def __init__(self, ticket_id: str, requested: int, available: int) -> None:
        super().__init__(
            f"Not enough tickets available. Requested: {requested}, Available: {available}"
        )
        self.ticket_id = ticket_id
        self.requested = requested
        self.available = available


class InvalidStateTransitionError(DomainError):
    """Raised when an illegal status transition is attempted."""

    code = ErrorCode.INVALID_STATE_TRANSITION

    def __init__(self, from_state: str, to_state: str, message: str | None = None) -> None:
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            message or f"Illegal state transition attempted: {from_state} -> {to_state}"
        )


class AlreadyInStateError(InvalidStateTransitionError):
    """The target state has already been reached; the call had no effect."""

    code = ErrorCode.ALREADY_IN_STATE

    def __init__(self, state: str) -> None:
        super().__init__(state, state, message=f"Already in state {state}")


class DepartureElapsedError(DomainError):
    code = ErrorCode.DEPARTURE_ELAPSED

    def __init__(self, ticket_id: str) -> None:
        super().__init__(f"Departure for ticket {ticket_id} has already passed")
        self.ticket_id = ticket_id


class PermissionDeniedError(DomainError):
    code = ErrorCode.PERMISSION_DENIED
