from sqlalchemy import Column, String, Boolean, DateTime, Text, ForeignKey, Enum as SQLEnum
from datetime import datetime
import enum

from crea.core.database import Base
from crea.core.types import GUID, generate_uuid


class AdvertisementType(str, enum.Enum):
    ANNOUNCEMENT = "announcement"
    ACHIEVEMENT = "achievement"
    NOTIFICATION = "notification"


class AdvertisementPriority(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Advertisement(Base):
    """Banner shown on the home page between start_date and end_date"""
    __tablename__ = "advertisements"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(SQLEnum(AdvertisementType), default=AdvertisementType.ANNOUNCEMENT, nullable=False)
    priority = Column(SQLEnum(AdvertisementPriority), default=AdvertisementPriority.MEDIUM, nullable=False)
    link = Column(String(1024), nullable=True)
    image_url = Column(String(1024), nullable=True)
    video_url = Column(String(1024), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    created_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def is_running(self, now: datetime = None) -> bool:
        now = now or datetime.utcnow()
        if not self.is_active:
            return False
        if self.start_date and self.start_date > now:
            return False
        if self.end_date and self.end_date < now:
            return False
        return True

    def __repr__(self):
        return f"<Advertisement {self.title}>"
