from pydantic import Field
from typing import Optional, List
from datetime import datetime

from crea.schemas.common import CreaSchema


class TopicCreate(CreaSchema):
    title: str = Field(..., min_length=1, max_length=255)
    author: Optional[str] = None


class TopicUpdate(CreaSchema):
    title: Optional[str] = Field(None, min_length=1, max_length=255)


class TopicResponse(CreaSchema):
    id: str
    title: str
    author: str
    replies: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None


class PostCreate(CreaSchema):
    content: str = Field(..., min_length=1)


class CommentCreate(CreaSchema):
    content: Optional[str] = None


class CommentResponse(CreaSchema):
    author: str
    author_id: Optional[str] = None
    content: str
    created_at: datetime


class PostResponse(CreaSchema):
    id: str
    topic_id: str
    author: str
    author_id: Optional[str] = None
    content: str
    likes_count: int = 0
    liked_by: List[str] = []
    comments: List[CommentResponse] = []
    created_at: datetime


class LikeResponse(CreaSchema):
    likes_count: int
    liked: bool
