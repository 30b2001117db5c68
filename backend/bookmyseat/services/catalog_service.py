"""
Ticket catalog: vendor listings and admin moderation.
"""

from typing import Optional

from bookmyseat.core.logging import get_logger
from bookmyseat.db.base import as_utc, utcnow
from bookmyseat.domain.errors import (
    InvalidArgumentError,
    InvalidStateTransitionError,
    TicketNotFoundError,
)
from bookmyseat.domain.state_machine import TicketStateMachine, TicketStatus
from bookmyseat.models.ticket import Ticket
from bookmyseat.schemas.ticket import TicketCreate
from bookmyseat.services.interfaces.admission import AdmissionStrategy
from bookmyseat.services.interfaces.optimistic_admission import OptimisticAdmission
from bookmyseat.stores.interfaces import BookingStore, TicketStore

logger = get_logger(__name__)


class CatalogService:

    def __init__(
        self,
        tickets: TicketStore,
        bookings: BookingStore,
        admission: Optional[AdmissionStrategy] = None,
    ):
        self.tickets = tickets
        self.bookings = bookings
        self.admission = admission or OptimisticAdmission()

    async def create_ticket(self, data: TicketCreate, vendor_email: str) -> Ticket:
        """New listings start pending with their full quantity as baseline."""
        if as_utc(data.departure) <= utcnow():
            raise InvalidArgumentError("Departure must be in the future")

        ticket = await self.tickets.insert_ticket(
            Ticket(
                title=data.title,
                from_location=data.from_location,
                to_location=data.to_location,
                transport_type=data.transport_type,
                vendor_email=vendor_email,
                price=data.price,
                quantity=data.quantity,
                approved_quantity=data.quantity,
                status=TicketStatus.PENDING.value,
                departure=as_utc(data.departure),
            )
        )
        logger.info("ticket_created", ticket_id=ticket.id, vendor=vendor_email, quantity=ticket.quantity)
        return ticket

    async def get_ticket(self, ticket_id: str) -> Ticket:
        ticket = await self.tickets.find_ticket(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)
        return ticket

    async def set_ticket_status(self, ticket_id: str, target: TicketStatus) -> Ticket:
        """
        Moderate a listing. Approval re-baselines approved_quantity against
        the units still held by active bookings and syncs the admission gate.
        """
        ticket = await self.get_ticket(ticket_id)
        current = TicketStatus(ticket.status)
        TicketStateMachine.validate_transition(current, target)

        if not await self.tickets.update_ticket_status(ticket_id, current, target):
            latest = await self.get_ticket(ticket_id)
            TicketStateMachine.validate_transition(TicketStatus(latest.status), target)
            raise InvalidStateTransitionError(latest.status, target.value)

        if target is TicketStatus.APPROVED:
            reserved = await self.bookings.active_quantity_for_ticket(ticket_id)
            await self.tickets.rebaseline(ticket_id, reserved)

        ticket = await self.get_ticket(ticket_id)
        if target is TicketStatus.APPROVED:
            await self.admission.sync(ticket_id, ticket.quantity)
        elif current is TicketStatus.APPROVED:
            await self.admission.sync(ticket_id, 0)

        logger.info(
            "ticket_status_changed",
            ticket_id=ticket_id,
            from_status=current.value,
            to_status=target.value,
        )
        return ticket

    async def delete_ticket(self, ticket_id: str) -> None:
        """Refused once any booking references the ticket; hide it instead."""
        if await self.tickets.delete_ticket(ticket_id):
            await self.admission.sync(ticket_id, 0)
            logger.info("ticket_deleted", ticket_id=ticket_id)
            return

        ticket = await self.get_ticket(ticket_id)
        booked = await self.bookings.count_for_ticket(ticket_id)
        raise InvalidStateTransitionError(
            ticket.status,
            "deleted",
            message=f"Ticket {ticket_id} has {booked} bookings and can only be hidden",
        )
