from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import get_db
from crea.models.achievement import Achievement, AchievementType
from crea.models.user import User
from crea.modules.auth.dependencies import get_current_admin
from crea.schemas.common import SuccessResponse
from crea.schemas.content import AchievementCreate, AchievementUpdate, AchievementResponse
from crea.services.crud import CRUDService

router = APIRouter()

achievements = CRUDService(Achievement, "Achievement", default_order=[Achievement.date.desc(), Achievement.created_at.desc()])


@router.get("", response_model=List[AchievementResponse])
async def list_achievements(type: Optional[AchievementType] = None, db: AsyncSession = Depends(get_db)):
    criteria = [Achievement.is_active.is_(True)]
    if type:
        criteria.append(Achievement.type == type)
    return await achievements.list(db, *criteria)


@router.get("/{achievement_id}", response_model=AchievementResponse)
async def get_achievement(achievement_id: str, db: AsyncSession = Depends(get_db)):
    return await achievements.get(db, achievement_id)


@router.post("", response_model=AchievementResponse, status_code=status.HTTP_201_CREATED)
async def create_achievement(
    data: AchievementCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await achievements.create(db, {**data.model_dump(), "created_by": admin.id})


@router.put("/{achievement_id}", response_model=AchievementResponse)
async def update_achievement(
    achievement_id: str,
    data: AchievementUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    return await achievements.update(db, achievement_id, changes)


@router.delete("/{achievement_id}", response_model=SuccessResponse)
async def delete_achievement(
    achievement_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await achievements.delete(db, achievement_id)
    return SuccessResponse(message="Achievement deleted")
