"""
Pydantic schemas for user-related responses.
"""

from pydantic import BaseModel

from bookmyseat.models.user import UserRole


class UserRoleResponse(BaseModel):
    email: str
    role: UserRole
