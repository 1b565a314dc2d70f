from sqlalchemy import Column, String, Boolean, DateTime, Text, JSON, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from crea.core.database import Base
from crea.core.types import GUID, generate_uuid


class NotificationType(str, enum.Enum):
    FORUM = "forum"
    EVENT = "event"
    DOCUMENT = "document"
    MEMBERSHIP = "membership"
    TRANSFER = "transfer"
    SUGGESTION = "suggestion"
    SYSTEM = "system"
    ASSOCIATION = "association"
    BREAKING = "breaking"


class Notification(Base):
    """In-app notification for one user"""
    __tablename__ = "notifications"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(SQLEnum(NotificationType), default=NotificationType.SYSTEM, nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    link = Column(String(500), nullable=True)
    read = Column(Boolean, default=False, nullable=False, index=True)
    extra_metadata = Column("metadata", JSON, default=dict, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="notifications")

    def __repr__(self):
        return f"<Notification {self.type} user={self.user_id}>"
