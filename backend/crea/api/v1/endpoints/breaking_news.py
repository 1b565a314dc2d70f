from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import get_db
from crea.core.logging_config import logger
from crea.models.breaking_news import BreakingNews
from crea.models.user import User
from crea.modules.auth.dependencies import get_current_admin
from crea.schemas.common import SuccessResponse
from crea.schemas.content import BreakingNewsCreate, BreakingNewsUpdate, BreakingNewsResponse
from crea.services.crud import CRUDService

router = APIRouter()

breaking_news = CRUDService(
    BreakingNews,
    "Breaking news",
    default_order=[BreakingNews.priority.desc(), BreakingNews.created_at.desc()],
)


@router.get("", response_model=List[BreakingNewsResponse])
async def list_breaking_news(db: AsyncSession = Depends(get_db)):
    """Active, unexpired headlines, highest priority first"""
    now = datetime.utcnow()
    return await breaking_news.list(
        db,
        BreakingNews.is_active.is_(True),
        or_(BreakingNews.expires_at.is_(None), BreakingNews.expires_at > now),
    )


@router.get("/all", response_model=List[BreakingNewsResponse])
async def list_all_breaking_news(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await breaking_news.list(db)


@router.post("", response_model=BreakingNewsResponse, status_code=status.HTTP_201_CREATED)
async def create_breaking_news(
    data: BreakingNewsCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await breaking_news.create(db, data.model_dump())


@router.put("/{news_id}", response_model=BreakingNewsResponse)
async def update_breaking_news(
    news_id: str,
    data: BreakingNewsUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    return await breaking_news.update(db, news_id, changes)


@router.patch("/{news_id}/toggle-status", response_model=BreakingNewsResponse)
async def toggle_breaking_news(
    news_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    news = await breaking_news.get(db, news_id)
    news = await breaking_news.apply(db, news, {"is_active": not news.is_active})
    logger.info(f"[BreakingNews] {news.id} is_active={news.is_active}")
    return news


@router.delete("/{news_id}", response_model=SuccessResponse)
async def delete_breaking_news(
    news_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await breaking_news.delete(db, news_id)
    return SuccessResponse(message="Breaking news deleted")
