from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import get_db
from crea.models.document import Circular
from crea.models.user import User
from crea.modules.auth.dependencies import get_current_user, get_current_admin
from crea.schemas.common import SuccessResponse
from crea.schemas.document import CircularResponse
from crea.services.crud import CRUDService
from crea.services.document_service import (
    attachment_for_create, attachment_for_update, remove_attachment,
)

router = APIRouter()

circulars = CRUDService(Circular, "Circular", default_order=Circular.date_of_issue.desc())

SUBDIR = "circulars"


@router.get("", response_model=List[CircularResponse])
async def list_circulars(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await circulars.list(db)


@router.get("/{circular_id}", response_model=CircularResponse)
async def get_circular(
    circular_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await circulars.get(db, circular_id)


@router.post("", response_model=CircularResponse, status_code=status.HTTP_201_CREATED)
async def create_circular(
    subject: str = Form(...),
    date_of_issue: datetime = Form(..., alias="dateOfIssue"),
    board_number: Optional[str] = Form(None, alias="boardNumber"),
    url: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create a circular from an uploaded file or an external url"""
    attachment = await attachment_for_create(SUBDIR, url, file)
    return await circulars.create(db, {
        "subject": subject,
        "date_of_issue": date_of_issue,
        "board_number": board_number,
        **attachment,
    })


@router.put("/{circular_id}", response_model=CircularResponse)
async def update_circular(
    circular_id: str,
    subject: Optional[str] = Form(None),
    date_of_issue: Optional[datetime] = Form(None, alias="dateOfIssue"),
    board_number: Optional[str] = Form(None, alias="boardNumber"),
    url: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    circular = await circulars.get(db, circular_id)
    changes = {
        k: v for k, v in {
            "subject": subject,
            "date_of_issue": date_of_issue,
            "board_number": board_number,
        }.items() if v is not None
    }
    changes.update(await attachment_for_update(circular, SUBDIR, url, file))
    return await circulars.apply(db, circular, changes)


@router.delete("/{circular_id}", response_model=SuccessResponse)
async def delete_circular(
    circular_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    circular = await circulars.delete(db, circular_id)
    remove_attachment(circular)
    return SuccessResponse(message="Circular removed")
