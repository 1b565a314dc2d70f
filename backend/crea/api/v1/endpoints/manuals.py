from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import get_db
from crea.models.document import Manual, ManualCategory
from crea.models.user import User
from crea.modules.auth.dependencies import get_current_user, get_current_admin
from crea.schemas.common import SuccessResponse
from crea.schemas.document import ManualResponse
from crea.services.crud import CRUDService
from crea.services.document_service import (
    attachment_for_create, attachment_for_update, remove_attachment,
)

router = APIRouter()

manuals = CRUDService(Manual, "Manual", default_order=[Manual.date.desc(), Manual.created_at.desc()])

SUBDIR = "manuals"


@router.get("", response_model=List[ManualResponse])
async def list_manuals(
    category: Optional[ManualCategory] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    criteria = [Manual.category == category] if category else []
    return await manuals.list(db, *criteria)


@router.get("/{manual_id}", response_model=ManualResponse)
async def get_manual(
    manual_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await manuals.get(db, manual_id)


@router.post("", response_model=ManualResponse, status_code=status.HTTP_201_CREATED)
async def create_manual(
    title: str = Form(...),
    subject: Optional[str] = Form(None),
    date: Optional[datetime] = Form(None),
    category: ManualCategory = Form(ManualCategory.GENERAL),
    url: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    attachment = await attachment_for_create(SUBDIR, url, file)
    return await manuals.create(db, {
        "title": title,
        "subject": subject,
        "date": date or datetime.utcnow(),
        "category": category,
        **attachment,
    })


@router.put("/{manual_id}", response_model=ManualResponse)
async def update_manual(
    manual_id: str,
    title: Optional[str] = Form(None),
    subject: Optional[str] = Form(None),
    date: Optional[datetime] = Form(None),
    category: Optional[ManualCategory] = Form(None),
    url: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    manual = await manuals.get(db, manual_id)
    changes = {
        k: v for k, v in {
            "title": title,
            "subject": subject,
            "date": date,
            "category": category,
        }.items() if v is not None
    }
    changes.update(await attachment_for_update(manual, SUBDIR, url, file))
    return await manuals.apply(db, manual, changes)


@router.delete("/{manual_id}", response_model=SuccessResponse)
async def delete_manual(
    manual_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    manual = await manuals.delete(db, manual_id)
    remove_attachment(manual)
    return SuccessResponse(message="Manual removed")
