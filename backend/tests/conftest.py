"""
CREA Portal - Test Configuration and Fixtures
"""
import hashlib
import hmac
import itertools
import os
import tempfile
from typing import AsyncGenerator, List, Dict, Any

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

_TEST_DIR = tempfile.mkdtemp(prefix="crea-tests-")

# Set testing environment before the app reads its settings
os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{_TEST_DIR}/test.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['ENVIRONMENT'] = 'testing'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['LOG_FILE'] = ''
os.environ['LOG_LEVEL'] = 'WARNING'
os.environ['UPLOAD_DIR'] = f'{_TEST_DIR}/uploads'
os.environ['RAZORPAY_KEY_ID'] = 'rzp_test_key'
os.environ['RAZORPAY_KEY_SECRET'] = 'rzp_test_secret'
os.environ['RAZORPAY_WEBHOOK_SECRET'] = 'rzp_webhook_secret'
os.environ['SMTP_USER'] = ''
os.environ['SMTP_PASSWORD'] = ''

from crea.main import app
from crea.core.config import settings
from crea.core.database import Base, get_db
from crea.core.security import get_password_hash, create_access_token
from crea.models.user import User, UserRole
from crea.services.email_service import email_service
from crea.services.payment_service import payment_service
from crea.services.storage_service import storage_service

fake = Faker()

# Test database setup
test_engine = create_async_engine(os.environ['DATABASE_URL'], echo=False, poolclass=NullPool)
TestSessionLocal = sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


def _sign_payment(order_id: str, payment_id: str) -> str:
    """Checkout signature as Razorpay computes it"""
    message = f"{order_id}|{payment_id}".encode()
    return hmac.new(settings.RAZORPAY_KEY_SECRET.encode(), message, hashlib.sha256).hexdigest()


def _sign_webhook(body: bytes) -> str:
    return hmac.new(settings.RAZORPAY_WEBHOOK_SECRET.encode(), body, hashlib.sha256).hexdigest()


def _bearer(user: User) -> dict:
    token = create_access_token({
        'sub': str(user.id),
        'email': user.email,
        'role': user.role.value
    })
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def upload_root(tmp_path, monkeypatch):
    """Uploaded files and receipts land in a per-test directory"""
    root = tmp_path / 'uploads'
    root.mkdir()
    monkeypatch.setattr(storage_service, '_root', root)
    return root


@pytest.fixture(autouse=True)
def outbox(monkeypatch) -> List[Dict[str, Any]]:
    """Capture outgoing email instead of sending it"""
    sent = []

    async def fake_send_email(to, subject, html, text=None, attachments=None):
        sent.append({
            'to': to,
            'subject': subject,
            'html': html,
            'attachments': attachments or [],
        })
        return True

    monkeypatch.setattr(email_service, 'send_email', fake_send_email)
    return sent


@pytest.fixture(autouse=True)
def razorpay_orders(monkeypatch) -> List[Dict[str, Any]]:
    """Razorpay order creation without the network"""
    created = []
    counter = itertools.count(1)

    async def fake_create_order(amount_rupees, receipt, notes=None):
        order = {
            'id': f'order_test{next(counter):06d}',
            'amount': int(amount_rupees) * 100,
            'currency': settings.PAYMENT_CURRENCY,
            'receipt': receipt[:40],
            'notes': notes or {},
        }
        created.append(order)
        return order

    monkeypatch.setattr(payment_service, 'create_order', fake_create_order)
    return created


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a member test user"""
    user = User(
        name=fake.name(),
        email=fake.unique.email().lower(),
        hashed_password=get_password_hash('testpassword123'),
        role=UserRole.MEMBER,
        division='Pune',
        department='Engineering',
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """A second member, for ownership checks"""
    user = User(
        name=fake.name(),
        email=fake.unique.email().lower(),
        hashed_password=get_password_hash('otherpassword123'),
        role=UserRole.MEMBER,
        division='Nagpur',
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Create an admin test user"""
    user = User(
        name=fake.name(),
        email=fake.unique.email().lower(),
        hashed_password=get_password_hash('adminpassword123'),
        role=UserRole.ADMIN,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user"""
    return _bearer(test_user)


@pytest.fixture
def other_auth_headers(other_user: User) -> dict:
    return _bearer(other_user)


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    """Generate authentication headers for admin user"""
    return _bearer(admin_user)


@pytest.fixture
def sign_payment():
    return _sign_payment


@pytest.fixture
def sign_webhook():
    return _sign_webhook


@pytest.fixture
def headers_for():
    """Bearer headers for any user"""
    return _bearer
