from sqlalchemy import Column, String, DateTime
from datetime import datetime

from crea.core.database import Base
from crea.core.types import GUID, generate_uuid


class OTP(Base):
    """One-time sign-up code sent by email"""
    __tablename__ = "otps"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    email = Column(String(255), index=True, nullable=False)
    code = Column(String(12), nullable=False)
    name = Column(String(255), nullable=True)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def is_expired(self, now: datetime = None) -> bool:
        return (now or datetime.utcnow()) > self.expires_at

    def __repr__(self):
        return f"<OTP {self.email}>"
