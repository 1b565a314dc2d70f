"""
Email one-time codes for sign-up verification.

A code is valid for OTP_EXPIRE_MINUTES and can be used once: a successful
verification removes every code issued for that email.
"""
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.config import settings
from crea.core.exceptions import OTPError
from crea.core.logging_config import logger
from crea.core.security import generate_otp_code
from crea.models.otp import OTP


async def issue_otp(db: AsyncSession, email: str, name: Optional[str] = None) -> OTP:
    """Replace any outstanding codes for the email with a fresh one"""
    email = email.lower()
    await db.execute(delete(OTP).where(OTP.email == email))

    otp = OTP(
        email=email,
        code=generate_otp_code(),
        name=name,
        expires_at=datetime.utcnow() + timedelta(minutes=settings.OTP_EXPIRE_MINUTES),
    )
    db.add(otp)
    await db.commit()
    await db.refresh(otp)

    logger.log_auth_event("otp_issued", success=True, user_email=email)
    return otp


async def verify_otp(db: AsyncSession, email: str, code: str) -> OTP:
    """
    Check a code and consume it.

    Raises OTPError("Invalid code") when no code matches and
    OTPError("Code expired") when the match is past its expiry (the stale code
    is deleted).
    """
    email = email.lower()
    result = await db.execute(
        select(OTP)
        .where(OTP.email == email, OTP.code == code.strip())
        .order_by(OTP.created_at.desc())
    )
    otp = result.scalars().first()

    if otp is None:
        logger.log_auth_event("otp_verify", success=False, user_email=email, reason="invalid code")
        raise OTPError("Invalid code")

    if otp.is_expired():
        await db.delete(otp)
        await db.commit()
        logger.log_auth_event("otp_verify", success=False, user_email=email, reason="expired")
        raise OTPError("Code expired")

    await db.execute(delete(OTP).where(OTP.email == email))
    await db.commit()

    logger.log_auth_event("otp_verify", success=True, user_email=email)
    return otp
