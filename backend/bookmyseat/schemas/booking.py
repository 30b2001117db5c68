"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookmyseat.domain.state_machine import BookingStatus


class BookingCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ticket_id: str = Field(..., min_length=1, alias="ticketId")
    quantity: int = Field(..., gt=0)


class BookingStatusUpdate(BaseModel):
    status: BookingStatus

    @field_validator("status", mode="before")
    @classmethod
    def accept_legacy_spelling(cls, value):
        if isinstance(value, str):
            return BookingStatus.parse(value)
        return value


class BookingResponse(BaseModel):
    id: str
    ticket_id: str
    customer_email: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    status: BookingStatus
    created_at: datetime
    paid_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BookingCancelResponse(BaseModel):
    message: str
    booking_id: str
    status: BookingStatus
