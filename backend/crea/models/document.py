from sqlalchemy import Column, String, DateTime, Integer, Text, Enum as SQLEnum
from datetime import datetime
import enum

from crea.core.database import Base
from crea.core.types import GUID, generate_uuid


class ManualCategory(str, enum.Enum):
    TECHNICAL = "technical"
    SOCIAL = "social"
    ORGANIZATIONAL = "organizational"
    GENERAL = "general"


class CourtCaseStatus(str, enum.Enum):
    PENDING = "pending"
    ONGOING = "ongoing"
    CLOSED = "closed"


class FileAttachmentMixin:
    """Either an external url or an uploaded file stored under uploads/"""
    url = Column(String(1024), nullable=True)
    file_name = Column(String(255), nullable=True)
    mime_type = Column(String(100), nullable=True)
    size = Column(Integer, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_uploaded(self) -> bool:
        return bool(self.url and self.url.startswith("/uploads/"))


class Circular(FileAttachmentMixin, Base):
    """Board circular"""
    __tablename__ = "circulars"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    board_number = Column(String(100), nullable=True)
    subject = Column(Text, nullable=False)
    date_of_issue = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<Circular {self.board_number or self.id}>"


class Manual(FileAttachmentMixin, Base):
    """Technical or organizational manual"""
    __tablename__ = "manuals"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    subject = Column(Text, nullable=True)
    date = Column(DateTime, nullable=True)
    category = Column(SQLEnum(ManualCategory), default=ManualCategory.GENERAL, nullable=False)

    def __repr__(self):
        return f"<Manual {self.title}>"


class CourtCase(FileAttachmentMixin, Base):
    """Court case followed by the association"""
    __tablename__ = "court_cases"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    case_number = Column(String(100), nullable=False)
    subject = Column(Text, nullable=False)
    date = Column(DateTime, nullable=True)
    status = Column(SQLEnum(CourtCaseStatus), default=CourtCaseStatus.ONGOING, nullable=False)

    def __repr__(self):
        return f"<CourtCase {self.case_number}>"
