from sqlalchemy import Column, String, Boolean, DateTime, Text, JSON, ForeignKey, Enum as SQLEnum
from datetime import datetime
import enum

from crea.core.database import Base
from crea.core.types import GUID, generate_uuid


class AchievementType(str, enum.Enum):
    AWARD = "award"
    COURT_CASE = "courtCase"
    MILESTONE = "milestone"


class Achievement(Base):
    __tablename__ = "achievements"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    type = Column(SQLEnum(AchievementType), default=AchievementType.MILESTONE, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(DateTime, nullable=True)
    image_url = Column(String(1024), nullable=True)
    photos = Column(JSON, default=list, nullable=False)
    category = Column(String(100), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Achievement {self.title}>"
