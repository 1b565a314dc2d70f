from sqlalchemy import Column, String, Boolean, DateTime, Text, JSON
from datetime import datetime

from crea.core.database import Base
from crea.core.types import GUID, generate_uuid


class Event(Base):
    """Association event, optionally flagged as breaking news"""
    __tablename__ = "events"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    location = Column(String(255), nullable=True)
    photos = Column(JSON, default=list, nullable=False)
    breaking = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Event {self.title}>"
