"""
Status lifecycles for bookings and tickets.

Only the transition tables live here; persistence and inventory effects
belong to the ledger and catalog services.
"""

from enum import Enum
from typing import ClassVar, Dict, FrozenSet, Set

from bookmyseat.domain.errors import AlreadyInStateError, InvalidStateTransitionError


class BookingStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: str) -> "BookingStatus":
        """Accepts the legacy "accepted" spelling for APPROVED."""
        normalized = value.strip().lower()
        if normalized == "accepted":
            return cls.APPROVED
        return cls(normalized)


class _TransitionTable:
    _ALLOWED_TRANSITIONS: ClassVar[Dict[Enum, Set[Enum]]] = {}

    @classmethod
    def can_transition(cls, from_status: Enum, to_status: Enum) -> bool:
        return to_status in cls._ALLOWED_TRANSITIONS.get(from_status, set())

    @classmethod
    def validate_transition(cls, from_status: Enum, to_status: Enum) -> None:
        """
        Raises AlreadyInStateError when nothing would change and
        InvalidStateTransitionError for any move not in the table.
        """
        if from_status == to_status:
            raise AlreadyInStateError(from_status.value)
        if not cls.can_transition(from_status, to_status):
            raise InvalidStateTransitionError(
                from_state=from_status.value,
                to_state=to_status.value,
            )

    @classmethod
    def is_terminal(cls, status: Enum) -> bool:
        return not cls._ALLOWED_TRANSITIONS.get(status)

    @classmethod
    def get_allowed_transitions(cls, status: Enum) -> Set[Enum]:
        return set(cls._ALLOWED_TRANSITIONS.get(status, set()))


class BookingStateMachine(_TransitionTable):
    """
    pending -> approved | rejected | cancelled
    approved -> paid | rejected | cancelled
    paid, rejected and cancelled are terminal.
    """

    _ALLOWED_TRANSITIONS = {
        BookingStatus.PENDING: {
            BookingStatus.APPROVED,
            BookingStatus.REJECTED,
            BookingStatus.CANCELLED,
        },
        BookingStatus.APPROVED: {
            BookingStatus.PAID,
            BookingStatus.REJECTED,
            BookingStatus.CANCELLED,
        },
        BookingStatus.PAID: set(),
        BookingStatus.REJECTED: set(),
        BookingStatus.CANCELLED: set(),
    }

    # Statuses whose quantity still counts against the ticket
    ACTIVE: ClassVar[FrozenSet[BookingStatus]] = frozenset(
        {BookingStatus.PENDING, BookingStatus.APPROVED, BookingStatus.PAID}
    )

    # Entering one of these hands the reserved units back to the ticket
    RELEASING: ClassVar[FrozenSet[BookingStatus]] = frozenset(
        {BookingStatus.REJECTED, BookingStatus.CANCELLED}
    )

    @classmethod
    def releases_inventory(cls, to_status: BookingStatus) -> bool:
        return to_status in cls.RELEASING


class TicketStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    HIDDEN = "hidden"


class TicketStateMachine(_TransitionTable):
    """Moderation lifecycle for a vendor's listing."""

    _ALLOWED_TRANSITIONS = {
        TicketStatus.PENDING: {TicketStatus.APPROVED, TicketStatus.REJECTED},
        TicketStatus.APPROVED: {TicketStatus.HIDDEN, TicketStatus.REJECTED},
        TicketStatus.HIDDEN: {TicketStatus.APPROVED},
        TicketStatus.REJECTED: set(),
    }
