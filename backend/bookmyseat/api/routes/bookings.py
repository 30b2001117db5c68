"""
Booking endpoints: reserve, moderate, pay, cancel.
"""

from fastapi import APIRouter, Depends, status

from bookmyseat.api.deps import get_booking_ledger
from bookmyseat.core.security import CurrentUser, get_current_user, require_roles
from bookmyseat.domain.errors import PermissionDeniedError
from bookmyseat.models.user import UserRole
from bookmyseat.schemas.booking import (
    BookingCancelResponse,
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
)
from bookmyseat.services.booking_ledger import BookingLedger

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    user: CurrentUser = Depends(get_current_user),
    ledger: BookingLedger = Depends(get_booking_ledger),
):
    """
    Reserve tickets for the caller.

    The check for remaining quantity and the decrement are one conditional
    UPDATE, so concurrent requests can never oversell. Returns 409 when the
    ticket is not approved or too few units remain.
    """
    return await ledger.reserve(booking_data.ticket_id, booking_data.quantity, user.email)


@router.get("/", response_model=list[BookingResponse])
async def list_my_bookings(
    user: CurrentUser = Depends(get_current_user),
    ledger: BookingLedger = Depends(get_booking_ledger),
):
    """Bookings of the authenticated customer, newest first."""
    return await ledger.list_customer_bookings(user.email)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    user: CurrentUser = Depends(get_current_user),
    ledger: BookingLedger = Depends(get_booking_ledger),
):
    booking = await ledger.get_booking(booking_id)
    if not user.is_staff and booking.customer_email != user.email:
        raise PermissionDeniedError("Booking belongs to another customer")
    return booking


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: str,
    update: BookingStatusUpdate,
    user: CurrentUser = Depends(require_roles(UserRole.VENDOR, UserRole.ADMIN)),
    ledger: BookingLedger = Depends(get_booking_ledger),
):
    """Vendor/admin moderation. Rejecting returns the units to the ticket."""
    return await ledger.transition_status(booking_id, update.status)


@router.post("/{booking_id}/payment", response_model=BookingResponse)
async def confirm_payment(
    booking_id: str,
    user: CurrentUser = Depends(require_roles(UserRole.PAYMENTS, UserRole.ADMIN)),
    ledger: BookingLedger = Depends(get_booking_ledger),
):
    """
    Payment succeeded for an approved booking; refused after departure.
    Sent by the payment provider, never by the paying customer.
    """
    return await ledger.confirm_payment(booking_id)


@router.delete("/{booking_id}", response_model=BookingCancelResponse)
async def cancel_booking(
    booking_id: str,
    user: CurrentUser = Depends(get_current_user),
    ledger: BookingLedger = Depends(get_booking_ledger),
):
    """Cancel a booking and release its units back to the ticket."""
    owner = None if user.role is UserRole.ADMIN else user.email
    booking = await ledger.cancel(booking_id, customer_email=owner)
    return BookingCancelResponse(
        message="Booking cancelled successfully",
        booking_id=booking.id,
        status=booking.status,
    )
