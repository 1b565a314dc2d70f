from pydantic import Field
from typing import Optional, Any, List
from datetime import datetime

from crea.schemas.common import CreaSchema


class SettingUpsert(CreaSchema):
    key: str = Field(..., min_length=1, max_length=100)
    value: Any
    description: Optional[str] = None
    category: Optional[str] = None


class SettingsBulkUpdate(CreaSchema):
    settings: List[SettingUpsert]


class SettingResponse(CreaSchema):
    id: str
    key: str
    value: Any = None
    description: Optional[str] = None
    category: str
    updated_at: Optional[datetime] = None


class SettingEnvelope(CreaSchema):
    success: bool = True
    setting: SettingResponse


class SettingsEnvelope(CreaSchema):
    success: bool = True
    settings: List[SettingResponse]
