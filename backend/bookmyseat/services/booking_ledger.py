"""
Booking ledger: reservations and the booking status machine.

Inventory is decremented exactly once per booking, at reservation time,
and handed back exactly once when a booking is rejected or cancelled.
Payment never touches ticket quantity.

Both directions go through TicketStore.conditional_adjust_quantity, and
every status change is a compare-and-set on the booking row, so the
ledger needs no locks of its own and can run in any number of processes.
All writes of one call share the caller's transaction: on any exception
the session is rolled back and nothing is left half-done.
"""

import time
from datetime import datetime
from typing import Callable, Optional, Union

from bookmyseat.core.logging import get_logger
from bookmyseat.core.metrics import booking_latency, record_booking_attempt, record_transition
from bookmyseat.db.base import as_utc, utcnow
from bookmyseat.domain.errors import (
    BookingNotFoundError,
    DomainError,
    ErrorCode,
    InsufficientInventoryError,
    InvalidArgumentError,
    InvalidStateTransitionError,
    NotBookableError,
    PermissionDeniedError,
    TicketNotFoundError,
    DepartureElapsedError,
)
from bookmyseat.domain.state_machine import BookingStateMachine, BookingStatus, TicketStatus
from bookmyseat.models.booking import Booking
from bookmyseat.services.interfaces.admission import AdmissionStrategy
from bookmyseat.services.interfaces.optimistic_admission import OptimisticAdmission
from bookmyseat.stores.interfaces import BookingStore, TicketStore

logger = get_logger(__name__)

_ATTEMPT_LABELS = {
    ErrorCode.INVALID_ARGUMENT: "invalid",
    ErrorCode.NOT_FOUND: "not_found",
    ErrorCode.NOT_BOOKABLE: "not_bookable",
    ErrorCode.INSUFFICIENT_INVENTORY: "insufficient",
}


class BookingLedger:
    """Application service owning every Booking write."""

    def __init__(
        self,
        tickets: TicketStore,
        bookings: BookingStore,
        admission: Optional[AdmissionStrategy] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.tickets = tickets
        self.bookings = bookings
        self.admission = admission or OptimisticAdmission()
        self._clock = clock
        self._admitted: list[tuple[str, int]] = []

    # ------------------------------------------------------------------
    # Reservation
    # ------------------------------------------------------------------

    async def reserve(self, ticket_id: str, quantity: int, customer_email: str) -> Booking:
        """
        Take `quantity` units of the ticket for the customer and record a
        pending booking, or raise and change nothing.

        Raises:
            InvalidArgumentError: quantity is not a positive integer or the email is blank.
            TicketNotFoundError: no such ticket.
            NotBookableError: the ticket is not approved.
            InsufficientInventoryError: fewer than `quantity` units remain.
        """
        start = time.perf_counter()
        try:
            booking = await self._reserve(ticket_id, quantity, customer_email)
        except DomainError as e:
            record_booking_attempt(_ATTEMPT_LABELS.get(e.code, "error"))
            raise
        finally:
            booking_latency.observe(time.perf_counter() - start)

        record_booking_attempt("success")
        return booking

    async def _reserve(self, ticket_id: str, quantity: int, customer_email: str) -> Booking:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidArgumentError("quantity must be a positive integer")
        customer_email = (customer_email or "").strip()
        if not customer_email:
            raise InvalidArgumentError("customerEmail is required")
        if not ticket_id:
            raise InvalidArgumentError("ticketId is required")

        if not await self.admission.admit(ticket_id, quantity):
            await self._raise_reservation_failure(ticket_id, quantity)

        try:
            reserved = await self.tickets.conditional_adjust_quantity(
                ticket_id,
                -quantity,
                min_resulting_quantity=0,
                required_status=TicketStatus.APPROVED,
            )
            if not reserved:
                await self._raise_reservation_failure(ticket_id, quantity)

            ticket = await self.tickets.find_ticket(ticket_id)
            booking = await self.bookings.insert_booking(
                Booking(
                    ticket_id=ticket_id,
                    customer_email=customer_email,
                    quantity=quantity,
                    unit_price=ticket.price,
                    status=BookingStatus.PENDING.value,
                    created_at=self._clock(),
                )
            )
        except BaseException:
            await self.admission.release(ticket_id, quantity)
            raise
        self._admitted.append((ticket_id, quantity))

        logger.info(
            "booking_reserved",
            booking_id=booking.id,
            ticket_id=ticket_id,
            customer_email=customer_email,
            quantity=quantity,
            remaining=ticket.quantity,
        )
        return booking

    async def _raise_reservation_failure(self, ticket_id: str, quantity: int) -> None:
        """
        Explain a reservation that did not happen. The read only classifies
        the failure; it never decides whether a reservation may proceed.
        """
        ticket = await self.tickets.find_ticket(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)
        if ticket.status != TicketStatus.APPROVED.value:
            raise NotBookableError(ticket_id, ticket.status)
        logger.warning(
            "booking_failed_insufficient",
            ticket_id=ticket_id,
            requested=quantity,
            available=ticket.quantity,
        )
        raise InsufficientInventoryError(ticket_id, quantity, ticket.quantity)

    async def release_admitted(self) -> None:
        """
        Hand back gate units taken by reservations of this unit of work.
        Called when its transaction fails to commit.
        """
        admitted, self._admitted = self._admitted, []
        for ticket_id, quantity in admitted:
            await self.admission.release(ticket_id, quantity)
        if admitted:
            logger.warning("admission_released_uncommitted", reservations=len(admitted))

    # ------------------------------------------------------------------
    # Status machine
    # ------------------------------------------------------------------

    async def transition_status(
        self,
        booking_id: str,
        target: Union[BookingStatus, str],
    ) -> Booking:
        """
        Move a booking to `target`. Rejection and cancellation return the
        reserved units to the ticket; moving to paid is a payment
        confirmation.

        Raises:
            InvalidArgumentError: unknown target status.
            BookingNotFoundError: no such booking.
            AlreadyInStateError: the booking is already in `target`.
            InvalidStateTransitionError: the move is not allowed.
        """
        target = self._parse_status(target)
        if target is BookingStatus.PAID:
            return await self.confirm_payment(booking_id)

        booking = await self._get_booking(booking_id)
        current = BookingStatus(booking.status)
        BookingStateMachine.validate_transition(current, target)

        await self._compare_and_set(booking_id, current, target)

        restored = 0
        if BookingStateMachine.releases_inventory(target):
            restored = booking.quantity
            applied = await self.tickets.conditional_adjust_quantity(booking.ticket_id, restored)
            if not applied:
                raise TicketNotFoundError(booking.ticket_id)
            await self.admission.release(booking.ticket_id, restored)

        record_transition(target.value, restored)
        logger.info(
            "booking_transitioned",
            booking_id=booking_id,
            ticket_id=booking.ticket_id,
            from_status=current.value,
            to_status=target.value,
            restored=restored,
        )
        return await self._get_booking(booking_id)

    async def confirm_payment(self, booking_id: str) -> Booking:
        """
        React to "payment succeeded for booking X".

        Raises:
            BookingNotFoundError: no such booking.
            AlreadyInStateError: the booking is already paid.
            InvalidStateTransitionError: the booking is not approved.
            DepartureElapsedError: the ticket's departure has passed.
        """
        booking = await self._get_booking(booking_id)
        current = BookingStatus(booking.status)
        BookingStateMachine.validate_transition(current, BookingStatus.PAID)

        ticket = await self.tickets.find_ticket(booking.ticket_id)
        if ticket is None:
            raise TicketNotFoundError(booking.ticket_id)
        now = self._clock()
        if as_utc(ticket.departure) <= now:
            logger.warning("payment_after_departure", booking_id=booking_id, ticket_id=ticket.id)
            raise DepartureElapsedError(ticket.id)

        await self._compare_and_set(booking_id, current, BookingStatus.PAID, paid_at=now)

        record_transition(BookingStatus.PAID.value)
        logger.info(
            "booking_paid",
            booking_id=booking_id,
            ticket_id=booking.ticket_id,
            amount=str(booking.total_price),
        )
        return await self._get_booking(booking_id)

    async def cancel(self, booking_id: str, customer_email: Optional[str] = None) -> Booking:
        """
        Cancel a booking and restore its units. When `customer_email` is
        given, only that customer's booking may be cancelled.
        """
        if customer_email is not None:
            booking = await self._get_booking(booking_id)
            if booking.customer_email != customer_email:
                raise PermissionDeniedError("Booking belongs to another customer")
        return await self.transition_status(booking_id, BookingStatus.CANCELLED)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_booking(self, booking_id: str) -> Booking:
        return await self._get_booking(booking_id)

    async def list_customer_bookings(self, customer_email: str) -> list[Booking]:
        return await self.bookings.list_for_customer(customer_email)

    # ------------------------------------------------------------------

    async def _get_booking(self, booking_id: str) -> Booking:
        booking = await self.bookings.find_booking(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    async def _compare_and_set(
        self,
        booking_id: str,
        current: BookingStatus,
        target: BookingStatus,
        **extra_fields,
    ) -> None:
        changed = await self.bookings.update_booking_status(
            booking_id, current, target, **extra_fields
        )
        if changed:
            return

        # A concurrent call moved the booking first; report against its new state
        latest = await self._get_booking(booking_id)
        logger.info(
            "booking_transition_lost",
            booking_id=booking_id,
            observed=current.value,
            latest=latest.status,
            target=target.value,
        )
        BookingStateMachine.validate_transition(BookingStatus(latest.status), target)
        raise InvalidStateTransitionError(latest.status, target.value)

    @staticmethod
    def _parse_status(value: Union[BookingStatus, str]) -> BookingStatus:
        if isinstance(value, BookingStatus):
            return value
        try:
            return BookingStatus.parse(value)
        except (ValueError, AttributeError):
            raise InvalidArgumentError(f"Unknown booking status: {value!r}")
