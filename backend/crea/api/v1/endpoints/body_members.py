from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import get_db
from crea.core.logging_config import logger
from crea.models.body_member import BodyMember, Division
from crea.models.user import User
from crea.modules.auth.dependencies import get_current_admin
from crea.schemas.body_member import BodyMemberCreate, BodyMemberUpdate, BodyMemberResponse
from crea.schemas.common import SuccessResponse
from crea.services.crud import CRUDService
from crea.services.storage_service import storage_service

router = APIRouter()

body_members = CRUDService(BodyMember, "Body member", default_order=[BodyMember.division, BodyMember.created_at])

BODY_MEMBER_PHOTOS_SUBDIR = "body-members"


@router.get("", response_model=List[BodyMemberResponse])
async def list_body_members(division: Optional[Division] = None, db: AsyncSession = Depends(get_db)):
    criteria = [BodyMember.division == division] if division else []
    return await body_members.list(db, *criteria)


@router.get("/{member_id}", response_model=BodyMemberResponse)
async def get_body_member(member_id: str, db: AsyncSession = Depends(get_db)):
    return await body_members.get(db, member_id)


@router.post("", response_model=BodyMemberResponse, status_code=status.HTTP_201_CREATED)
async def create_body_member(
    data: BodyMemberCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await body_members.create(db, data.model_dump())


@router.put("/{member_id}", response_model=BodyMemberResponse)
async def update_body_member(
    member_id: str,
    data: BodyMemberUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    return await body_members.update(db, member_id, changes)


@router.delete("/{member_id}", response_model=SuccessResponse)
async def delete_body_member(
    member_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    member = await body_members.delete(db, member_id)
    storage_service.delete(member.photo_url)
    return SuccessResponse(message="Body member deleted")


@router.post("/{member_id}/photo", response_model=BodyMemberResponse)
async def upload_body_member_photo(
    member_id: str,
    photo: UploadFile = File(...),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Replace the member's photo with an uploaded image"""
    member = await body_members.get(db, member_id)
    stored = await storage_service.save_upload(photo, BODY_MEMBER_PHOTOS_SUBDIR, kind="image")
    previous = member.photo_url
    member = await body_members.apply(db, member, {"photo_url": stored.url})
    storage_service.delete(previous)
    logger.info(f"[BodyMembers] Photo updated for {member.id}")
    return member
