from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text
from datetime import datetime

from crea.core.database import Base
from crea.core.types import GUID, generate_uuid


class BreakingNews(Base):
    """Ticker item; higher priority shows first"""
    __tablename__ = "breaking_news"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    priority = Column(Integer, default=5, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    expires_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<BreakingNews {self.title}>"
