"""
SQLAlchemy implementations of the stores.

CONCURRENCY STRATEGY: single-statement conditional updates
===========================================================

Problem:
  Two customers try to book the last ticket at the same time.
  Both read quantity=1, both decrement, both get a booking.
  Result: oversell.

Solution:
  The guard and the write are one statement:

    UPDATE tickets SET quantity = quantity - :n
    WHERE id = :id AND status = 'approved' AND quantity >= :n

  The database serializes writers on the row, so the second statement sees
  the first one's result and matches nothing. rowcount == 0 is the only
  signal that the reservation lost; it is never approximated by reading
  first.

  Booking status changes use the same idea (compare-and-set on the current
  status) so that two concurrent rejections restore inventory once.

  No version column and no retry loop: the guard is expressed on the
  quantity itself, so a lost race is a definitive answer.
"""

from typing import Any, Optional

from sqlalchemy import delete, exists, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bookmyseat.core.logging import get_logger
from bookmyseat.domain.state_machine import BookingStateMachine, BookingStatus, TicketStatus
from bookmyseat.models.booking import Booking
from bookmyseat.models.ticket import Ticket
from bookmyseat.stores.interfaces import BookingStore, TicketStore

logger = get_logger(__name__)


class SqlTicketStore(TicketStore):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_ticket(self, ticket_id: str) -> Optional[Ticket]:
        result = await self.db.execute(
            select(Ticket)
            .where(Ticket.id == ticket_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def conditional_adjust_quantity(
        self,
        ticket_id: str,
        delta: int,
        min_resulting_quantity: int = 0,
        required_status: Optional[TicketStatus] = None,
    ) -> bool:
        conditions = [
            Ticket.id == ticket_id,
            Ticket.quantity >= min_resulting_quantity - delta,
        ]
        if required_status is not None:
            conditions.append(Ticket.status == required_status.value)

        result = await self.db.execute(
            update(Ticket)
            .where(*conditions)
            .values(quantity=Ticket.quantity + delta)
            .execution_options(synchronize_session=False)
        )
        matched = result.rowcount == 1
        logger.debug(
            "ticket_quantity_adjust",
            ticket_id=ticket_id,
            delta=delta,
            applied=matched,
        )
        return matched

    async def insert_ticket(self, ticket: Ticket) -> Ticket:
        self.db.add(ticket)
        await self.db.flush()
        await self.db.refresh(ticket)
        return ticket

    async def update_ticket_status(
        self,
        ticket_id: str,
        expected_status: TicketStatus,
        status: TicketStatus,
        **extra_fields: Any,
    ) -> bool:
        result = await self.db.execute(
            update(Ticket)
            .where(Ticket.id == ticket_id, Ticket.status == expected_status.value)
            .values(status=status.value, **extra_fields)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def rebaseline(self, ticket_id: str, reserved_quantity: int) -> None:
        await self.db.execute(
            update(Ticket)
            .where(Ticket.id == ticket_id)
            .values(approved_quantity=Ticket.quantity + reserved_quantity)
            .execution_options(synchronize_session=False)
        )

    async def delete_ticket(self, ticket_id: str) -> bool:
        # Row lock first: a reservation in flight holds it until its booking
        # is committed, so the NOT EXISTS below sees that booking.
        await self.db.execute(
            select(Ticket.id).where(Ticket.id == ticket_id).with_for_update()
        )
        result = await self.db.execute(
            delete(Ticket)
            .where(Ticket.id == ticket_id, ~exists().where(Booking.ticket_id == ticket_id))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


class SqlBookingStore(BookingStore):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert_booking(self, booking: Booking) -> Booking:
        self.db.add(booking)
        await self.db.flush()
        await self.db.refresh(booking)
        return booking

    async def find_booking(self, booking_id: str) -> Optional[Booking]:
        result = await self.db.execute(
            select(Booking)
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def update_booking_status(
        self,
        booking_id: str,
        expected_status: BookingStatus,
        status: BookingStatus,
        **extra_fields: Any,
    ) -> bool:
        result = await self.db.execute(
            update(Booking)
            .where(Booking.id == booking_id, Booking.status == expected_status.value)
            .values(status=status.value, **extra_fields)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def list_for_customer(self, customer_email: str) -> list[Booking]:
        result = await self.db.execute(
            select(Booking)
            .where(Booking.customer_email == customer_email)
            .order_by(Booking.created_at.desc())
        )
        return list(result.scalars().all())

    async def count_for_ticket(self, ticket_id: str) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Booking).where(Booking.ticket_id == ticket_id)
        )
        return int(result.scalar_one())

    async def active_quantity_for_ticket(self, ticket_id: str) -> int:
        active = [s.value for s in BookingStateMachine.ACTIVE]
        result = await self.db.execute(
            select(func.coalesce(func.sum(Booking.quantity), 0))
            .where(Booking.ticket_id == ticket_id, Booking.status.in_(active))
        )
        return int(result.scalar_one())
