from pydantic import Field
from typing import Optional, List
from datetime import datetime

from crea.schemas.common import CreaSchema


class EventCreate(CreaSchema):
    """Required fields are checked by the endpoint so a missing one is a 400"""
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    date: Optional[datetime] = None
    location: Optional[str] = None
    photos: List[str] = []
    breaking: bool = False


class EventUpdate(CreaSchema):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    date: Optional[datetime] = None
    location: Optional[str] = None
    photos: Optional[List[str]] = None
    breaking: Optional[bool] = None


class EventResponse(CreaSchema):
    id: str
    title: str
    description: str
    date: datetime
    location: Optional[str] = None
    photos: List[str] = []
    breaking: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None
