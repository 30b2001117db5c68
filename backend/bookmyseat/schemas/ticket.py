"""
Pydantic schemas for ticket-related request/response validation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from bookmyseat.domain.state_machine import TicketStatus


class TicketCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    from_location: Optional[str] = Field(None, max_length=255)
    to_location: Optional[str] = Field(None, max_length=255)
    transport_type: Optional[str] = Field(None, max_length=50)
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    quantity: int = Field(..., gt=0, le=100000)
    departure: datetime


class TicketStatusUpdate(BaseModel):
    status: TicketStatus


class TicketResponse(BaseModel):
    id: str
    title: str
    from_location: Optional[str]
    to_location: Optional[str]
    transport_type: Optional[str]
    vendor_email: str
    price: Decimal
    quantity: int
    approved_quantity: int
    status: TicketStatus
    departure: datetime
    created_at: datetime

    model_config = {"from_attributes": True}
