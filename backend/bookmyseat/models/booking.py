"""
Booking: a customer's reservation against a ticket.

Key design decisions:
- Created only by BookingLedger.reserve, never deleted by it; cancellation
  and rejection are status changes
- `unit_price` is copied from the ticket at reservation time
- No uniqueness on (customer, ticket): a customer may hold several bookings
"""

from decimal import Decimal

from sqlalchemy import Column, String, Integer, Numeric, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from bookmyseat.db.base import Base, TimestampMixin, new_id
from bookmyseat.domain.state_machine import BookingStatus


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=new_id)
    ticket_id = Column(String(36), ForeignKey("tickets.id"), nullable=False, index=True)
    customer_email = Column(String(255), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    ticket = relationship("Ticket", back_populates="bookings", lazy="raise")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_booking_quantity_positive"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'paid', 'cancelled')",
            name="check_booking_status",
        ),
    )

    @property
    def total_price(self) -> Decimal:
        return Decimal(self.unit_price) * self.quantity

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, ticket={self.ticket_id}, qty={self.quantity}, status={self.status})>"
