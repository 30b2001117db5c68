"""
Bearer-token identity.

Tokens are minted by the upstream identity provider with the shared
SECRET_KEY; this service only decodes them. `sub` carries the caller's
email and `role` one of customer/vendor/admin.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from bookmyseat.core.config import get_settings
from bookmyseat.models.user import UserRole

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    email: str
    role: UserRole

    @property
    def is_staff(self) -> bool:
        return self.role in (UserRole.VENDOR, UserRole.ADMIN)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode["exp"] = expire
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    if credentials is None:
        raise _unauthorized("Not authenticated")

    settings = get_settings()
    try:
        payload = jwt.decode(
            credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except JWTError:
        raise _unauthorized("Invalid or expired token")

    email = payload.get("sub")
    if not email:
        raise _unauthorized("Token has no subject")

    try:
        role = UserRole(payload.get("role", UserRole.CUSTOMER.value))
    except ValueError:
        raise _unauthorized("Token carries an unknown role")

    return CurrentUser(email=email, role=role)


def require_roles(*roles: UserRole):
    """Dependency factory: 403 unless the caller holds one of `roles`."""

    async def checker(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient role for this operation",
            )
        return user

    return checker
