"""
Ticket endpoints: vendor listings and admin moderation.
"""

from fastapi import APIRouter, Depends, status

from bookmyseat.api.deps import get_catalog
from bookmyseat.core.security import CurrentUser, require_roles
from bookmyseat.models.user import UserRole
from bookmyseat.schemas.ticket import TicketCreate, TicketResponse, TicketStatusUpdate
from bookmyseat.services.catalog_service import CatalogService

router = APIRouter(prefix="/tickets", tags=["Tickets"])


@router.post("/", response_model=TicketResponse, status_code=status.HTTP_201_CREATED)
async def create_ticket(
    ticket_data: TicketCreate,
    user: CurrentUser = Depends(require_roles(UserRole.VENDOR, UserRole.ADMIN)),
    catalog: CatalogService = Depends(get_catalog),
):
    """List a new ticket. It stays pending until an admin approves it."""
    return await catalog.create_ticket(ticket_data, user.email)


@router.get("/{ticket_id}", response_model=TicketResponse)
async def get_ticket(
    ticket_id: str,
    catalog: CatalogService = Depends(get_catalog),
):
    """Single ticket with its live remaining quantity."""
    return await catalog.get_ticket(ticket_id)


@router.patch("/{ticket_id}/status", response_model=TicketResponse)
async def update_ticket_status(
    ticket_id: str,
    update: TicketStatusUpdate,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    catalog: CatalogService = Depends(get_catalog),
):
    return await catalog.set_ticket_status(ticket_id, update.status)


@router.delete("/{ticket_id}")
async def delete_ticket(
    ticket_id: str,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    catalog: CatalogService = Depends(get_catalog),
):
    await catalog.delete_ticket(ticket_id)
    return {"message": "Ticket deleted successfully"}
