from sqlalchemy import Column, String, DateTime, Enum as SQLEnum
from datetime import datetime
import enum

from crea.core.database import Base
from crea.core.types import GUID, generate_uuid


class Division(str, enum.Enum):
    """Central Railway divisions"""
    BSL = "BSL"
    PUNE = "Pune"
    SOLAPUR = "Solapur"
    NAGPUR = "Nagpur"
    MUMBAI = "Mumbai"


class BodyMember(Base):
    """Office bearer shown on the association body page"""
    __tablename__ = "body_members"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    designation = Column(String(255), nullable=False)
    photo_url = Column(String(1024), nullable=False)
    division = Column(SQLEnum(Division), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<BodyMember {self.name} ({self.division})>"
