"""
Portal settings (membership prices and similar key/value configuration).
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import get_db
from crea.models.setting import Setting, DEFAULT_SETTING_CATEGORY
from crea.models.user import User
from crea.modules.auth.dependencies import get_current_admin
from crea.schemas.common import SuccessResponse
from crea.schemas.setting import (
    SettingUpsert,
    SettingsBulkUpdate,
    SettingEnvelope,
    SettingsEnvelope,
)
from crea.services.settings_service import DEFAULT_SETTINGS, ensure_default_settings

router = APIRouter()


async def _get_by_key(db: AsyncSession, key: str) -> Optional[Setting]:
    result = await db.execute(select(Setting).where(Setting.key == key))
    return result.scalar_one_or_none()


async def _upsert(db: AsyncSession, data: SettingUpsert, user: User) -> Setting:
    setting = await _get_by_key(db, data.key)
    if setting is None:
        setting = Setting(key=data.key, category=data.category or DEFAULT_SETTING_CATEGORY)
        db.add(setting)
    setting.value = data.value
    if data.description is not None:
        setting.description = data.description
    if data.category:
        setting.category = data.category
    setting.updated_by = user.id
    return setting


@router.get("", response_model=SettingsEnvelope)
async def list_settings(category: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    query = select(Setting).order_by(Setting.category, Setting.key)
    if category:
        query = query.where(Setting.category == category)
    result = await db.execute(query)
    return SettingsEnvelope(settings=list(result.scalars().all()))


@router.post("/initialize", response_model=SettingsEnvelope)
async def initialize_settings(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Insert the default settings that are missing"""
    await ensure_default_settings(db)
    result = await db.execute(select(Setting).where(Setting.key.in_([s["key"] for s in DEFAULT_SETTINGS])))
    return SettingsEnvelope(settings=list(result.scalars().all()))


@router.put("/bulk", response_model=SettingsEnvelope)
async def bulk_update_settings(
    data: SettingsBulkUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    saved: List[Setting] = []
    for item in data.settings:
        saved.append(await _upsert(db, item, admin))
    await db.commit()
    for setting in saved:
        await db.refresh(setting)
    return SettingsEnvelope(settings=saved)


@router.post("", response_model=SettingEnvelope)
async def upsert_setting(
    data: SettingUpsert,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create the setting or replace its value"""
    setting = await _upsert(db, data, admin)
    await db.commit()
    await db.refresh(setting)
    return SettingEnvelope(setting=setting)


@router.get("/{key}", response_model=SettingEnvelope)
async def get_setting(key: str, db: AsyncSession = Depends(get_db)):
    setting = await _get_by_key(db, key)
    if setting is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Setting not found")
    return SettingEnvelope(setting=setting)


@router.delete("/{key}", response_model=SuccessResponse)
async def delete_setting(
    key: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    setting = await _get_by_key(db, key)
    if setting is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Setting not found")
    await db.delete(setting)
    await db.commit()
    return SuccessResponse(message="Setting deleted")
