"""Home page content: advertisements, achievements and breaking news"""
from pydantic import Field, model_validator
from typing import Optional, List
from datetime import datetime

from crea.models.advertisement import AdvertisementType, AdvertisementPriority
from crea.models.achievement import AchievementType
from crea.schemas.common import CreaSchema


class AdvertisementCreate(CreaSchema):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    type: AdvertisementType = AdvertisementType.ANNOUNCEMENT
    priority: AdvertisementPriority = AdvertisementPriority.MEDIUM
    link: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    is_active: bool = True
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @model_validator(mode="after")
    def check_window(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class AdvertisementUpdate(CreaSchema):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    type: Optional[AdvertisementType] = None
    priority: Optional[AdvertisementPriority] = None
    link: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    is_active: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class AdvertisementResponse(CreaSchema):
    id: str
    title: str
    description: Optional[str] = None
    type: AdvertisementType
    priority: AdvertisementPriority
    link: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    is_active: bool
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_by: Optional[str] = None
    created_at: datetime


class AchievementCreate(CreaSchema):
    type: AchievementType = AchievementType.MILESTONE
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    date: Optional[datetime] = None
    image_url: Optional[str] = None
    photos: List[str] = []
    category: Optional[str] = None
    is_active: bool = True


class AchievementUpdate(CreaSchema):
    type: Optional[AchievementType] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    date: Optional[datetime] = None
    image_url: Optional[str] = None
    photos: Optional[List[str]] = None
    category: Optional[str] = None
    is_active: Optional[bool] = None


class AchievementResponse(CreaSchema):
    id: str
    type: AchievementType
    title: str
    description: Optional[str] = None
    date: Optional[datetime] = None
    image_url: Optional[str] = None
    photos: List[str] = []
    category: Optional[str] = None
    is_active: bool
    created_by: Optional[str] = None
    created_at: datetime


class BreakingNewsCreate(CreaSchema):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    priority: int = Field(5, ge=1, le=10)
    is_active: bool = True
    expires_at: Optional[datetime] = None


class BreakingNewsUpdate(CreaSchema):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    priority: Optional[int] = Field(None, ge=1, le=10)
    is_active: Optional[bool] = None
    expires_at: Optional[datetime] = None


class BreakingNewsResponse(CreaSchema):
    id: str
    title: str
    description: Optional[str] = None
    priority: int
    is_active: bool
    expires_at: Optional[datetime] = None
    created_at: datetime
