"""
Role lookups against the user directory.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bookmyseat.models.user import User, UserRole


async def get_user_role(db: AsyncSession, email: str) -> UserRole:
    """Role of a known user; unknown emails are treated as customers."""
    result = await db.execute(select(User.role).where(User.email == email))
    role = result.scalar_one_or_none()
    return UserRole(role) if role else UserRole.CUSTOMER
