from sqlalchemy import Column, String, DateTime, Integer, JSON, ForeignKey, Enum as SQLEnum
from datetime import datetime
import enum

from crea.core.database import Base
from crea.core.types import GUID, generate_uuid


class MembershipPlan(str, enum.Enum):
    """Membership plan applied for"""
    ORDINARY = "ordinary"
    LIFETIME = "lifetime"


class MembershipPaymentMethod(str, enum.Enum):
    UPI = "upi"
    CARD = "card"
    NETBANKING = "netbanking"
    QR = "qr"


class PaymentStatus(str, enum.Enum):
    """Payment status shared by memberships and donations"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class MembershipStatus(str, enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    EXPIRED = "expired"
    REJECTED = "rejected"


# Lifetime memberships never lapse in practice
LIFETIME_VALID_UNTIL = datetime(2099, 12, 31, 23, 59, 59)


class Membership(Base):
    """
    Membership application and its payment state.

    Status moves pending -> active only through a verified payment (or an
    admin-confirmed offline payment). renewal_history holds
    {renewal_date, payment_reference, amount, type} entries.
    """
    __tablename__ = "memberships"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    membership_id = Column(String(20), unique=True, index=True, nullable=False)  # CREA{year}{seq:04d}
    user_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # Applicant
    name = Column(String(255), nullable=False)
    designation = Column(String(255), nullable=False)
    division = Column(String(100), nullable=False)
    department = Column(String(255), nullable=False)
    place = Column(String(255), nullable=False)
    unit = Column(String(255), nullable=False)
    mobile = Column(String(20), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)

    type = Column(SQLEnum(MembershipPlan), default=MembershipPlan.ORDINARY, nullable=False)

    # Payment
    payment_method = Column(SQLEnum(MembershipPaymentMethod), nullable=True)
    payment_status = Column(SQLEnum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)
    payment_amount = Column(Integer, nullable=True)  # rupees
    payment_date = Column(DateTime, nullable=True)
    payment_reference = Column(String(100), nullable=True)
    razorpay_order_id = Column(String(100), unique=True, nullable=True, index=True)
    upgrade_order_id = Column(String(100), unique=True, nullable=True, index=True)
    upgrade_amount = Column(Integer, nullable=True)

    # Lifecycle
    status = Column(SQLEnum(MembershipStatus), default=MembershipStatus.PENDING, nullable=False)
    valid_from = Column(DateTime, nullable=True)
    valid_until = Column(DateTime, nullable=True)

    # Nested wizard data
    personal_details = Column(JSON, default=dict, nullable=False)
    professional_details = Column(JSON, default=dict, nullable=False)
    documents = Column(JSON, default=list, nullable=False)  # [{type, url, uploaded_at}]
    renewal_history = Column(JSON, default=list, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def has_expired(self, now: datetime = None) -> bool:
        if not self.valid_until:
            return False
        return self.valid_until < (now or datetime.utcnow())

    @property
    def is_expired(self) -> bool:
        return self.has_expired()

    def __repr__(self):
        return f"<Membership {self.membership_id} {self.status}>"


class OrderPurpose(str, enum.Enum):
    MEMBERSHIP = "membership"
    UPGRADE = "upgrade"


class MembershipOrder(Base):
    """
    Every Razorpay order issued for a membership.

    A reused application gets a fresh order each time, so earlier orders stay
    resolvable here. status/payment_id record settlement per order, which
    keeps a replayed signature from activating the membership twice.
    """
    __tablename__ = "membership_orders"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    order_id = Column(String(100), unique=True, index=True, nullable=False)
    membership_id = Column(GUID, ForeignKey("memberships.id", ondelete="CASCADE"), nullable=False, index=True)
    purpose = Column(SQLEnum(OrderPurpose), default=OrderPurpose.MEMBERSHIP, nullable=False)

    # Terms the order was issued for
    plan = Column(SQLEnum(MembershipPlan), nullable=False)
    amount = Column(Integer, nullable=False)  # rupees

    status = Column(SQLEnum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)
    payment_id = Column(String(100), nullable=True)
    paid_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    @property
    def is_upgrade(self) -> bool:
        return self.purpose == OrderPurpose.UPGRADE

    def __repr__(self):
        return f"<MembershipOrder {self.order_id} {self.purpose} {self.status}>"
