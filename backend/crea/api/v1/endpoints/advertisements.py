from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import get_db
from crea.models.advertisement import Advertisement
from crea.models.user import User
from crea.modules.auth.dependencies import get_current_admin
from crea.schemas.common import SuccessResponse
from crea.schemas.content import AdvertisementCreate, AdvertisementUpdate, AdvertisementResponse
from crea.services.crud import CRUDService

router = APIRouter()

advertisements = CRUDService(Advertisement, "Advertisement")


@router.get("", response_model=List[AdvertisementResponse])
async def list_running_advertisements(db: AsyncSession = Depends(get_db)):
    """Active advertisements whose date window contains now"""
    now = datetime.utcnow()
    return await advertisements.list(
        db,
        Advertisement.is_active.is_(True),
        or_(Advertisement.start_date.is_(None), Advertisement.start_date <= now),
        or_(Advertisement.end_date.is_(None), Advertisement.end_date >= now),
    )


@router.get("/all", response_model=List[AdvertisementResponse])
async def list_all_advertisements(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await advertisements.list(db)


@router.post("", response_model=AdvertisementResponse, status_code=status.HTTP_201_CREATED)
async def create_advertisement(
    data: AdvertisementCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await advertisements.create(db, {**data.model_dump(), "created_by": admin.id})


@router.put("/{advertisement_id}", response_model=AdvertisementResponse)
async def update_advertisement(
    advertisement_id: str,
    data: AdvertisementUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    return await advertisements.update(db, advertisement_id, changes)


@router.delete("/{advertisement_id}", response_model=SuccessResponse)
async def delete_advertisement(
    advertisement_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await advertisements.delete(db, advertisement_id)
    return SuccessResponse(message="Advertisement deleted")
