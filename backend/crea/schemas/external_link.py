from pydantic import Field
from typing import Optional, List, Dict
from datetime import datetime

from crea.models.external_link import ExternalLinkCategory
from crea.schemas.common import CreaSchema


class ExternalLinkCreate(CreaSchema):
    title: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., pattern=r'^https?://')
    category: ExternalLinkCategory = ExternalLinkCategory.OTHER
    description: Optional[str] = None
    order: int = 0
    is_active: bool = True


class ExternalLinkUpdate(CreaSchema):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    url: Optional[str] = Field(None, pattern=r'^https?://')
    category: Optional[ExternalLinkCategory] = None
    description: Optional[str] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None


class ExternalLinkResponse(CreaSchema):
    id: str
    title: str
    url: str
    category: ExternalLinkCategory
    description: Optional[str] = None
    order: int
    is_active: bool
    created_at: datetime


class GroupedLinksResponse(CreaSchema):
    success: bool = True
    links: Dict[str, List[ExternalLinkResponse]]
