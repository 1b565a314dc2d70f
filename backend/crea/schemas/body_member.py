from pydantic import Field
from typing import Optional
from datetime import datetime

from crea.models.body_member import Division
from crea.schemas.common import CreaSchema


class BodyMemberCreate(CreaSchema):
    name: str = Field(..., min_length=1, max_length=255)
    designation: str = Field(..., min_length=1, max_length=255)
    photo_url: str = Field(..., min_length=1)
    division: Division


class BodyMemberUpdate(CreaSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    designation: Optional[str] = Field(None, min_length=1, max_length=255)
    photo_url: Optional[str] = Field(None, min_length=1)
    division: Optional[Division] = None


class BodyMemberResponse(CreaSchema):
    id: str
    name: str
    designation: str
    photo_url: str
    division: Division
    created_at: datetime
