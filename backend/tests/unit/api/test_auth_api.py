"""
Tests for the email OTP and token session endpoints
"""
import pytest
from datetime import datetime, timedelta
from sqlalchemy import select

from crea.models.otp import OTP
from crea.models.user import User


async def request_code(client, db_session, email, name=None):
    response = await client.post('/api/auth/request-otp', json={'email': email, 'name': name})
    assert response.status_code == 200
    result = await db_session.execute(select(OTP).where(OTP.email == email.lower()))
    return result.scalar_one()


class TestOTPSignup:

    @pytest.mark.asyncio
    async def test_request_otp_emails_code(self, client, db_session, outbox):
        otp = await request_code(client, db_session, 'New.Member@example.com', 'New Member')

        assert len(otp.code) == 6
        assert outbox[-1]['to'] == 'new.member@example.com'
        assert otp.code in outbox[-1]['html']

    @pytest.mark.asyncio
    async def test_verify_creates_account(self, client, db_session):
        otp = await request_code(client, db_session, 'signup@example.com', 'Sign Up')

        response = await client.post('/api/auth/verify-otp', json={
            'email': 'signup@example.com',
            'code': otp.code,
            'password': 'secret123',
        })

        assert response.status_code == 200
        data = response.json()
        assert data['name'] == 'Sign Up'
        assert data['token']
        assert data['refreshToken']
        assert data['role'] == 'member'

        user = (await db_session.execute(select(User).where(User.email == 'signup@example.com'))).scalar_one()
        assert user.refresh_token_hash is not None
        assert (await db_session.execute(select(OTP))).scalars().all() == []

    @pytest.mark.asyncio
    async def test_code_single_use(self, client, db_session):
        otp = await request_code(client, db_session, 'once@example.com', 'Once')
        body = {'email': 'once@example.com', 'code': otp.code, 'password': 'secret123'}

        assert (await client.post('/api/auth/verify-otp', json=body)).status_code == 200
        response = await client.post('/api/auth/verify-otp', json=body)

        assert response.status_code == 400
        assert response.json()['message'] == 'Invalid code'

    @pytest.mark.asyncio
    async def test_expired_code(self, client, db_session):
        otp = await request_code(client, db_session, 'late@example.com', 'Late')
        otp.expires_at = datetime.utcnow() - timedelta(minutes=1)
        await db_session.commit()

        response = await client.post('/api/auth/verify-otp', json={
            'email': 'late@example.com', 'code': otp.code, 'password': 'secret123'
        })

        assert response.status_code == 400
        assert response.json()['message'] == 'Code expired'

    @pytest.mark.asyncio
    async def test_new_account_needs_password(self, client, db_session):
        otp = await request_code(client, db_session, 'nopass@example.com', 'No Pass')

        response = await client.post('/api/auth/verify-otp', json={'email': 'nopass@example.com', 'code': otp.code})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_existing_user_signs_in(self, client, db_session, test_user):
        otp = await request_code(client, db_session, test_user.email)

        response = await client.post('/api/auth/verify-otp', json={'email': test_user.email, 'code': otp.code})

        assert response.status_code == 200
        assert response.json()['id'] == str(test_user.id)


class TestTokenSession:

    async def sign_in(self, client, db_session, email):
        otp = await request_code(client, db_session, email, 'Session User')
        response = await client.post('/api/auth/verify-otp', json={
            'email': email, 'code': otp.code, 'password': 'secret123'
        })
        return response.json()

    @pytest.mark.asyncio
    async def test_refresh_issues_access_token(self, client, db_session):
        session = await self.sign_in(client, db_session, 'refresh@example.com')

        response = await client.post('/api/auth/refresh-token', json={'refreshToken': session['refreshToken']})

        assert response.status_code == 200
        token = response.json()['token']
        me = await client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})
        assert me.json()['email'] == 'refresh@example.com'

    @pytest.mark.asyncio
    async def test_access_token_not_accepted_as_refresh(self, client, db_session):
        session = await self.sign_in(client, db_session, 'mixup@example.com')

        response = await client.post('/api/auth/refresh-token', json={'refreshToken': session['token']})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_logout_revokes_refresh_token(self, client, db_session):
        session = await self.sign_in(client, db_session, 'logout@example.com')
        headers = {'Authorization': f"Bearer {session['token']}"}

        assert (await client.post('/api/auth/logout', headers=headers)).status_code == 200
        response = await client.post('/api/auth/refresh-token', json={'refreshToken': session['refreshToken']})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_requires_token(self, client):
        response = await client.get('/api/auth/me')
        assert response.status_code == 401
        assert response.json()['message'] == 'Not authorized, no token'

    @pytest.mark.asyncio
    async def test_garbage_token_rejected(self, client):
        response = await client.get('/api/auth/me', headers={'Authorization': 'Bearer not-a-jwt'})
        assert response.status_code == 401
