"""Store interfaces (repository pattern).

The ledger depends on these, never on a session or a global handle, so a
store is constructed explicitly and handed to whoever needs it.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from bookmyseat.domain.state_machine import BookingStatus, TicketStatus
from bookmyseat.models.booking import Booking
from bookmyseat.models.ticket import Ticket


class TicketStore(ABC):
    """Catalog persistence. `quantity` only moves through conditional_adjust_quantity."""

    @abstractmethod
    async def find_ticket(self, ticket_id: str) -> Optional[Ticket]:
        """Return a fresh copy of the ticket, or None."""
        ...

    @abstractmethod
    async def conditional_adjust_quantity(
        self,
        ticket_id: str,
        delta: int,
        min_resulting_quantity: int = 0,
        required_status: Optional[TicketStatus] = None,
    ) -> bool:
        """
        Atomically apply `quantity += delta` only if the result stays at or
        above `min_resulting_quantity` (and the ticket has
        `required_status`, when given). True when a row was changed.
        """
        ...

    @abstractmethod
    async def insert_ticket(self, ticket: Ticket) -> Ticket:
        ...

    @abstractmethod
    async def update_ticket_status(
        self,
        ticket_id: str,
        expected_status: TicketStatus,
        status: TicketStatus,
        **extra_fields: Any,
    ) -> bool:
        """Compare-and-set the status. True when the row was still in `expected_status`."""
        ...

    @abstractmethod
    async def rebaseline(self, ticket_id: str, reserved_quantity: int) -> None:
        """Set approved_quantity = quantity + reserved_quantity in one statement."""
        ...

    @abstractmethod
    async def delete_ticket(self, ticket_id: str) -> bool:
        """Delete the ticket unless a booking references it. False when it is missing or booked."""
        ...


class BookingStore(ABC):
    """Booking persistence. Bookings are inserted and status-updated, never deleted."""

    @abstractmethod
    async def insert_booking(self, booking: Booking) -> Booking:
        ...

    @abstractmethod
    async def find_booking(self, booking_id: str) -> Optional[Booking]:
        ...

    @abstractmethod
    async def update_booking_status(
        self,
        booking_id: str,
        expected_status: BookingStatus,
        status: BookingStatus,
        **extra_fields: Any,
    ) -> bool:
        """Compare-and-set the status. True when this call made the change."""
        ...

    @abstractmethod
    async def list_for_customer(self, customer_email: str) -> list[Booking]:
        """Customer's bookings, newest first."""
        ...

    @abstractmethod
    async def count_for_ticket(self, ticket_id: str) -> int:
        """Number of bookings of any status that reference the ticket."""
        ...

    @abstractmethod
    async def active_quantity_for_ticket(self, ticket_id: str) -> int:
        """Units held by pending, approved and paid bookings of the ticket."""
        ...
