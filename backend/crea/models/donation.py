from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text, Enum as SQLEnum
from datetime import datetime
import enum

from crea.core.database import Base
from crea.core.types import GUID, generate_uuid
from crea.models.membership import PaymentStatus


class DonationPurpose(str, enum.Enum):
    GENERAL = "general"
    EDUCATION = "education"
    WELFARE = "welfare"
    INFRASTRUCTURE = "infrastructure"


class DonationPaymentMethod(str, enum.Enum):
    UPI = "upi"
    CARD = "card"
    NETBANKING = "netbanking"
    WALLET = "wallet"


class Donation(Base):
    """Donation and its Razorpay payment trail"""
    __tablename__ = "donations"

    id = Column(GUID, primary_key=True, default=generate_uuid)

    # Donor
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    mobile = Column(String(20), nullable=False)
    is_employee = Column(Boolean, default=False, nullable=False)
    employee_id = Column(String(50), nullable=True)
    designation = Column(String(255), nullable=True)
    division = Column(String(100), nullable=True)
    department = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    pincode = Column(String(10), nullable=True)
    message = Column(Text, nullable=True)

    amount = Column(Integer, nullable=False)  # rupees
    purpose = Column(SQLEnum(DonationPurpose), default=DonationPurpose.GENERAL, nullable=False)
    is_anonymous = Column(Boolean, default=False, nullable=False)

    # Payment
    payment_status = Column(SQLEnum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)
    payment_reference = Column(String(100), nullable=True)
    payment_date = Column(DateTime, nullable=True)
    payment_method = Column(SQLEnum(DonationPaymentMethod), nullable=True)
    upi_id = Column(String(100), nullable=True)
    razorpay_order_id = Column(String(100), unique=True, nullable=True, index=True)
    razorpay_payment_id = Column(String(100), nullable=True)
    razorpay_signature = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Donation {self.id} {self.amount} {self.payment_status}>"
