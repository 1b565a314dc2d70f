from pydantic import Field
from typing import Optional, List
from datetime import datetime

from crea.schemas.common import CreaSchema


class SuggestionCreate(CreaSchema):
    text: str = Field(..., min_length=1, max_length=5000)
    user_name: Optional[str] = None
    file_names: List[str] = []


class SuggestionUpdate(CreaSchema):
    text: Optional[str] = Field(None, min_length=1, max_length=5000)
    file_names: Optional[List[str]] = None


class SuggestionResponse(CreaSchema):
    id: str
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    text: str
    file_names: List[str] = []
    created_at: datetime
