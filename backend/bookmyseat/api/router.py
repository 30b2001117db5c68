"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from bookmyseat.api.routes import tickets, bookings, users

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(tickets.router)
api_router.include_router(bookings.router)
api_router.include_router(users.router)
