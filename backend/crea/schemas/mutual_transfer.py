from pydantic import EmailStr, Field
from typing import Optional
from datetime import datetime

from crea.schemas.common import CreaSchema


class MutualTransferCreate(CreaSchema):
    contact_name: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_mobile: Optional[str] = Field(None, pattern=r'^[6-9]\d{9}$')
    post: str = Field(..., min_length=1)
    current_designation: Optional[str] = None
    current_location: str = Field(..., min_length=1)
    desired_designation: Optional[str] = None
    desired_location: str = Field(..., min_length=1)
    availability_date: Optional[datetime] = None
    notes: Optional[str] = None


class MutualTransferUpdate(CreaSchema):
    contact_name: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_mobile: Optional[str] = Field(None, pattern=r'^[6-9]\d{9}$')
    post: Optional[str] = Field(None, min_length=1)
    current_designation: Optional[str] = None
    current_location: Optional[str] = Field(None, min_length=1)
    desired_designation: Optional[str] = None
    desired_location: Optional[str] = Field(None, min_length=1)
    availability_date: Optional[datetime] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class MutualTransferResponse(CreaSchema):
    id: str
    owner_id: str
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_mobile: Optional[str] = None
    post: str
    current_designation: Optional[str] = None
    current_location: str
    desired_designation: Optional[str] = None
    desired_location: str
    availability_date: Optional[datetime] = None
    notes: Optional[str] = None
    is_active: bool
    created_at: datetime
