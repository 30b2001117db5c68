from bookmyseat.schemas.user import UserRoleResponse
from bookmyseat.schemas.ticket import TicketCreate, TicketResponse, TicketStatusUpdate
from bookmyseat.schemas.booking import (
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
    BookingCancelResponse,
)

__all__ = [
    "UserRoleResponse",
    "TicketCreate", "TicketResponse", "TicketStatusUpdate",
    "BookingCreate", "BookingResponse", "BookingStatusUpdate", "BookingCancelResponse",
]
