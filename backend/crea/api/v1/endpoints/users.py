"""
Password accounts, profiles and admin user management.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Request, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import get_db
from crea.core.exceptions import AuthenticationError, DuplicateResourceError
from crea.core.logging_config import logger, set_user_id
from crea.core.rate_limiter import auth_rate_limit
from crea.core.security import create_login_token, get_password_hash, verify_password
from crea.models.user import User, UserRole, MembershipType
from crea.modules.auth.dependencies import get_current_user, get_current_admin
from crea.schemas.auth import (
    UserRegister,
    UserLogin,
    UserResponse,
    AuthResponse,
    ProfileUpdate,
    AdminUserUpdate,
)
from crea.schemas.common import SuccessResponse
from crea.services.crud import CRUDService
from crea.services.membership_service import next_member_id
from crea.api.v1.endpoints.auth import build_auth_response

router = APIRouter()

users = CRUDService(User, "User")


def _token_for(user: User) -> str:
    return create_login_token({"sub": str(user.id), "email": user.email, "role": user.role.value})


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@auth_rate_limit()
async def register(
    request: Request,
    data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """Register with email and password"""
    result = await db.execute(select(User).where(User.email == data.email))
    if result.scalar_one_or_none():
        raise DuplicateResourceError("User already exists", field="email")

    fields = data.model_dump(exclude={"password"})
    user = await users.create(db, {**fields, "hashed_password": get_password_hash(data.password)})

    logger.log_auth_event("register", success=True, user_email=user.email)
    return build_auth_response(user, _token_for(user))


@router.post("/login", response_model=AuthResponse)
@auth_rate_limit()
async def login(
    request: Request,
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Login user (rate limited: 5/min)"""
    client_ip = request.client.host if request.client else "unknown"

    result = await db.execute(select(User).where(User.email == credentials.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.log_auth_event(
            event="login",
            success=False,
            user_email=credentials.email,
            reason="Invalid credentials",
            client_ip=client_ip
        )
        raise AuthenticationError("Invalid email or password")

    user.last_login = datetime.utcnow()
    await db.commit()
    await db.refresh(user)

    set_user_id(str(user.id))
    logger.log_auth_event("login", success=True, user_email=user.email, client_ip=client_ip)
    return build_auth_response(user, _token_for(user))


@router.get("/profile", response_model=UserResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Update own profile; a new password is re-hashed"""
    changes = data.model_dump(exclude_unset=True, exclude={"password"})
    changes = {k: v for k, v in changes.items() if v is not None}
    if data.password:
        changes["hashed_password"] = get_password_hash(data.password)
    return await users.apply(db, current_user, changes)


@router.get("", response_model=List[UserResponse])
async def list_users(
    division: Optional[str] = Query(None),
    role: Optional[UserRole] = Query(None),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    criteria = []
    if division:
        criteria.append(User.division == division)
    if role:
        criteria.append(User.role == role)
    return await users.list(db, *criteria)


@router.put("/{user_id}", response_model=UserResponse)
async def admin_update_user(
    user_id: str,
    data: AdminUserUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Admins may only change profile fields, membership type and role"""
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    user = await users.update(db, user_id, changes)
    logger.info(f"[Users] {admin.email} updated user {user.email}: {sorted(changes)}")
    return user


@router.delete("/{user_id}", response_model=SuccessResponse)
async def delete_user(
    user_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    if str(admin.id) == str(user_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account"
        )
    user = await users.delete(db, user_id)
    logger.info(f"[Users] {admin.email} deleted user {user.email}")
    return SuccessResponse(message="User removed")


@router.post("/{user_id}/generate-member-id", response_model=UserResponse)
async def generate_member_id(
    user_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Assign the next ORD-/LIF- id for the user's membership type"""
    user = await users.get(db, user_id)
    if user.membership_type in (None, MembershipType.NONE):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User has no membership type"
        )

    member_id = await next_member_id(db, user.membership_type)
    return await users.apply(db, user, {"member_id": member_id, "is_member": True})
