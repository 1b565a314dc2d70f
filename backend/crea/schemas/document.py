from typing import Optional, Literal
from datetime import datetime

from crea.models.document import ManualCategory, CourtCaseStatus
from crea.schemas.common import CreaSchema


class AttachmentFields(CreaSchema):
    url: Optional[str] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    size: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class CircularResponse(AttachmentFields):
    id: str
    board_number: Optional[str] = None
    subject: str
    date_of_issue: datetime


class ManualResponse(AttachmentFields):
    id: str
    title: str
    subject: Optional[str] = None
    date: Optional[datetime] = None
    category: ManualCategory


class CourtCaseResponse(AttachmentFields):
    id: str
    case_number: str
    subject: str
    date: Optional[datetime] = None
    status: CourtCaseStatus


DocumentKind = Literal["circular", "manual", "court-case"]


class DocumentItem(CreaSchema):
    """One row of the combined documents listing"""
    id: str
    type: DocumentKind
    title: str
    uploaded_at: datetime
    label: str
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    size: Optional[int] = None
    external_url: Optional[str] = None
    download_url: str
