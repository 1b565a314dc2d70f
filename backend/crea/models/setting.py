from sqlalchemy import Column, String, DateTime, Text, JSON, ForeignKey
from datetime import datetime

from crea.core.database import Base
from crea.core.types import GUID, generate_uuid


DEFAULT_SETTING_CATEGORY = "Membership Settings"


class Setting(Base):
    """Key/value portal setting (membership prices and similar)"""
    __tablename__ = "settings"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    key = Column(String(100), unique=True, nullable=False, index=True)
    value = Column(JSON, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), default=DEFAULT_SETTING_CATEGORY, nullable=False)

    updated_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Setting {self.key}>"
