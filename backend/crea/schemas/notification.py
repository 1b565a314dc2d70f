from pydantic import Field
from typing import Optional, Dict, Any
from datetime import datetime

from crea.models.notification import NotificationType
from crea.schemas.common import CreaSchema


class NotificationResponse(CreaSchema):
    id: str
    user_id: str
    type: NotificationType
    title: str
    message: str
    link: Optional[str] = None
    read: bool
    metadata: Dict[str, Any] = Field(default_factory=dict, validation_alias="extra_metadata")
    created_at: datetime


class UnreadCountResponse(CreaSchema):
    count: int


class BroadcastRequest(CreaSchema):
    type: NotificationType = NotificationType.ASSOCIATION
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    link: Optional[str] = None


class BroadcastResponse(CreaSchema):
    success: bool = True
    sent: int
