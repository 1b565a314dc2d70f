"""
Unit Tests for email one-time codes
"""
import pytest
from datetime import datetime, timedelta
from sqlalchemy import select

from crea.core.exceptions import OTPError
from crea.models.otp import OTP
from crea.services.otp_service import issue_otp, verify_otp


class TestIssueOTP:

    @pytest.mark.asyncio
    async def test_issue_creates_code(self, db_session):
        otp = await issue_otp(db_session, 'Member@Example.com', 'Asha')

        assert otp.email == 'member@example.com'
        assert otp.code.isdigit()
        assert otp.expires_at > datetime.utcnow()

    @pytest.mark.asyncio
    async def test_issue_replaces_previous_codes(self, db_session):
        await issue_otp(db_session, 'member@example.com')
        latest = await issue_otp(db_session, 'member@example.com')

        result = await db_session.execute(select(OTP).where(OTP.email == 'member@example.com'))
        codes = result.scalars().all()
        assert [c.id for c in codes] == [latest.id]


class TestVerifyOTP:

    @pytest.mark.asyncio
    async def test_valid_code_is_consumed(self, db_session):
        otp = await issue_otp(db_session, 'member@example.com', 'Asha')

        verified = await verify_otp(db_session, 'member@example.com', otp.code)
        assert verified.name == 'Asha'

        # Single use: the same code fails the second time
        with pytest.raises(OTPError) as exc_info:
            await verify_otp(db_session, 'member@example.com', otp.code)
        assert exc_info.value.message == 'Invalid code'

    @pytest.mark.asyncio
    async def test_wrong_code(self, db_session):
        otp = await issue_otp(db_session, 'member@example.com')
        wrong = '000000' if otp.code != '000000' else '111111'

        with pytest.raises(OTPError) as exc_info:
            await verify_otp(db_session, 'member@example.com', wrong)
        assert exc_info.value.message == 'Invalid code'

    @pytest.mark.asyncio
    async def test_expired_code_rejected_and_removed(self, db_session):
        otp = await issue_otp(db_session, 'member@example.com')
        otp.expires_at = datetime.utcnow() - timedelta(minutes=1)
        await db_session.commit()

        with pytest.raises(OTPError) as exc_info:
            await verify_otp(db_session, 'member@example.com', otp.code)
        assert exc_info.value.message == 'Code expired'

        result = await db_session.execute(select(OTP).where(OTP.email == 'member@example.com'))
        assert result.scalars().first() is None
