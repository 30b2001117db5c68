"""
User directory kept for role lookups. Credentials live with the identity
provider, not here.
"""

import enum

from sqlalchemy import Column, Integer, String

from bookmyseat.db.base import Base, TimestampMixin


class UserRole(str, enum.Enum):
    CUSTOMER = "customer"
    VENDOR = "vendor"
    ADMIN = "admin"
    PAYMENTS = "payments"  # payment provider callback, not a person


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.CUSTOMER.value)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
