"""
User directory endpoints.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from bookmyseat.db.session import get_db
from bookmyseat.schemas.user import UserRoleResponse
from bookmyseat.services.user_service import get_user_role

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/role", response_model=UserRoleResponse)
async def user_role(
    email: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
):
    """Role for an email; unknown users are customers."""
    role = await get_user_role(db, email)
    return UserRoleResponse(email=email, role=role)
