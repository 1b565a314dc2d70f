from sqlalchemy import Column, String, Boolean, DateTime, Text, ForeignKey
from datetime import datetime

from crea.core.database import Base
from crea.core.types import GUID, generate_uuid


class MutualTransfer(Base):
    """Request to swap postings with another engineer"""
    __tablename__ = "mutual_transfers"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    owner_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    contact_name = Column(String(255), nullable=True)
    contact_email = Column(String(255), nullable=True)
    contact_mobile = Column(String(20), nullable=True)

    post = Column(String(255), nullable=False)
    current_designation = Column(String(255), nullable=True)
    current_location = Column(String(255), nullable=False)
    desired_designation = Column(String(255), nullable=True)
    desired_location = Column(String(255), nullable=False)
    availability_date = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<MutualTransfer {self.current_location} -> {self.desired_location}>"
