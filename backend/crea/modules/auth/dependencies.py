from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from crea.core.database import get_db
from crea.core.exceptions import AuthorizationError
from crea.core.logging_config import set_user_id
from crea.core.security import decode_token
from crea.models.user import User, UserRole

# auto_error=False so a missing header yields our own 401 message
security = HTTPBearer(auto_error=False)


async def _user_from_token(token: str, db: AsyncSession) -> User:
    payload = decode_token(token)

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, token failed"
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, token failed"
        )

    # GUID type handles the string id
    user = await db.get(User, str(user_id))
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )
    return user


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Get current authenticated user"""
    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, no token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await _user_from_token(credentials.credentials, db)

    # Rate limiter and log records key on the user
    request.state.user_id = str(user.id)
    set_user_id(str(user.id))
    return user


async def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """Get current admin user"""
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admins only"
        )
    return current_user


async def get_optional_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """Current user when a valid bearer token is sent, otherwise None"""
    if not credentials or not credentials.credentials:
        return None
    try:
        user = await _user_from_token(credentials.credentials, db)
    except HTTPException:
        return None
    request.state.user_id = str(user.id)
    set_user_id(str(user.id))
    return user


def ensure_owner_or_admin(user: User, owner_id: Optional[str], message: str = "Not allowed") -> None:
    """403 unless the user owns the record or is an admin"""
    if user.is_admin:
        return
    if owner_id is None or str(owner_id) != str(user.id):
        raise AuthorizationError(message)
