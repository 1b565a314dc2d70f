from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text, Enum as SQLEnum
from datetime import datetime
import enum

from crea.core.database import Base
from crea.core.types import GUID, generate_uuid


class ExternalLinkCategory(str, enum.Enum):
    GOVERNMENT = "government"
    INDUSTRY = "industry"
    ORGANIZATION = "organization"
    OTHER = "other"


class ExternalLink(Base):
    __tablename__ = "external_links"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    url = Column(String(1024), nullable=False)
    category = Column(SQLEnum(ExternalLinkCategory), default=ExternalLinkCategory.OTHER, nullable=False)
    description = Column(Text, nullable=True)
    order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<ExternalLink {self.title}>"
