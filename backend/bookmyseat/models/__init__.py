from bookmyseat.models.user import User, UserRole
from bookmyseat.models.ticket import Ticket, TicketStatus
from bookmyseat.models.booking import Booking

__all__ = ["User", "UserRole", "Ticket", "TicketStatus", "Booking"]
