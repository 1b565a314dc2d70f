"""
Email OTP sign-up and token session endpoints.

Flow:
1. POST /auth/request-otp  → 6 digit code emailed, valid 15 minutes
2. POST /auth/verify-otp   → code consumed, account created if new,
                             access token (1h) + refresh token (7d)
3. POST /auth/refresh-token → new access token while the refresh token is valid
4. POST /auth/logout        → refresh token revoked
"""
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.config import settings
from crea.core.database import get_db
from crea.core.logging_config import logger, set_user_id
from crea.core.rate_limiter import auth_rate_limit
from crea.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    get_password_hash,
    hash_token,
    tokens_match,
)
from crea.models.user import User
from crea.modules.auth.dependencies import get_current_user
from crea.schemas.auth import (
    OTPRequest,
    OTPVerify,
    RefreshTokenRequest,
    UserResponse,
    AuthResponse,
    AccessTokenResponse,
)
from crea.schemas.common import SuccessResponse
from crea.services.email_service import email_service
from crea.services.otp_service import issue_otp, verify_otp

router = APIRouter()


def build_auth_response(user: User, token: str, refresh_token: str = None) -> AuthResponse:
    data = UserResponse.model_validate(user).model_dump()
    return AuthResponse(**data, token=token, refresh_token=refresh_token)


@router.post("/request-otp", response_model=SuccessResponse)
@auth_rate_limit()
async def request_otp(
    request: Request,
    data: OTPRequest,
    db: AsyncSession = Depends(get_db)
):
    """Email a verification code (rate limited: 5/min)"""
    otp = await issue_otp(db, data.email, data.name)
    sent = await email_service.send_otp_email(otp.email, otp.code, data.name)
    if not sent:
        logger.warning(f"[OTP] Code for {otp.email} could not be emailed")

    return SuccessResponse(message="Verification code sent")


@router.post("/verify-otp", response_model=AuthResponse)
@auth_rate_limit()
async def verify_otp_code(
    request: Request,
    data: OTPVerify,
    db: AsyncSession = Depends(get_db)
):
    """Verify a code, create the account on first sign-up and open a session"""
    otp = await verify_otp(db, data.email, data.code)

    result = await db.execute(select(User).where(User.email == data.email))
    user = result.scalar_one_or_none()

    if user is None:
        name = (data.name or otp.name or "").strip()
        if not name or not data.password:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Name and password are required to create an account"
            )
        user = User(
            name=name,
            email=data.email,
            hashed_password=get_password_hash(data.password),
        )
        db.add(user)
        await db.flush()
        logger.log_auth_event("signup", success=True, user_email=user.email)

    token_data = {"sub": str(user.id), "email": user.email, "role": user.role.value}
    access_token = create_access_token(token_data)
    refresh_token = create_refresh_token(token_data)

    user.refresh_token_hash = hash_token(refresh_token)
    user.refresh_token_expires_at = datetime.utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    user.last_login = datetime.utcnow()
    await db.commit()
    await db.refresh(user)

    set_user_id(str(user.id))
    logger.log_auth_event("otp_login", success=True, user_email=user.email)
    return build_auth_response(user, access_token, refresh_token)


@router.post("/refresh-token", response_model=AccessTokenResponse)
async def refresh_access_token(
    data: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db)
):
    """Exchange a stored, unexpired refresh token for a new access token"""
    payload = decode_token(data.refresh_token)

    if payload.get("type") != "refresh":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token"
        )

    user = await db.get(User, str(payload.get("sub")))
    if (
        user is None
        or not tokens_match(data.refresh_token, user.refresh_token_hash)
        or not user.refresh_token_expires_at
        or user.refresh_token_expires_at < datetime.utcnow()
    ):
        logger.log_auth_event("refresh", success=False, user_email=payload.get("email"), reason="token mismatch")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token"
        )

    token = create_access_token({"sub": str(user.id), "email": user.email, "role": user.role.value})
    return AccessTokenResponse(token=token)


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    current_user.refresh_token_hash = None
    current_user.refresh_token_expires_at = None
    await db.commit()

    logger.log_auth_event("logout", success=True, user_email=current_user.email)
    return SuccessResponse(message="Logged out")


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user info"""
    return current_user
