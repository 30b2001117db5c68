"""
Ticket offering with remaining inventory.

Key design decisions:
- `quantity` is the remaining bookable count and the only contended column;
  it is changed exclusively through conditional UPDATEs in TicketStore
- `approved_quantity` is the baseline at last approval, so
  active booked quantity + quantity == approved_quantity
- CHECK constraint keeps quantity >= 0 even if a caller bypasses the store
"""

from sqlalchemy import Column, String, Numeric, Integer, DateTime, Index, CheckConstraint
from sqlalchemy.orm import relationship

from bookmyseat.db.base import Base, TimestampMixin, new_id
from bookmyseat.domain.state_machine import TicketStatus


class Ticket(Base, TimestampMixin):
    __tablename__ = "tickets"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    from_location = Column(String(255), nullable=True)
    to_location = Column(String(255), nullable=True)
    transport_type = Column(String(50), nullable=True)
    vendor_email = Column(String(255), nullable=False, index=True)
    price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    approved_quantity = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=TicketStatus.PENDING.value)
    departure = Column(DateTime(timezone=True), nullable=False)

    bookings = relationship("Booking", back_populates="ticket", lazy="raise")

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="check_ticket_quantity_non_negative"),
        CheckConstraint("price >= 0", name="check_ticket_price_non_negative"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'hidden')",
            name="check_ticket_status",
        ),
        Index("ix_tickets_status_departure", "status", "departure"),
    )

    def __repr__(self) -> str:
        return f"<Ticket(id={self.id}, title={self.title}, quantity={self.quantity}, status={self.status})>"
