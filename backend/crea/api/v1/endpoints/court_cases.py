from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import get_db
from crea.models.document import CourtCase, CourtCaseStatus
from crea.models.user import User
from crea.modules.auth.dependencies import get_current_user, get_current_admin
from crea.schemas.common import SuccessResponse
from crea.schemas.document import CourtCaseResponse
from crea.services.crud import CRUDService
from crea.services.document_service import (
    attachment_for_create, attachment_for_update, remove_attachment,
)

router = APIRouter()

court_cases = CRUDService(CourtCase, "Court case", default_order=[CourtCase.date.desc(), CourtCase.created_at.desc()])

SUBDIR = "court-cases"


@router.get("", response_model=List[CourtCaseResponse])
async def list_court_cases(
    status_filter: Optional[CourtCaseStatus] = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    criteria = [CourtCase.status == status_filter] if status_filter else []
    return await court_cases.list(db, *criteria)


@router.get("/{case_id}", response_model=CourtCaseResponse)
async def get_court_case(
    case_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await court_cases.get(db, case_id)


@router.post("", response_model=CourtCaseResponse, status_code=status.HTTP_201_CREATED)
async def create_court_case(
    case_number: str = Form(..., alias="caseNumber"),
    subject: str = Form(...),
    date: Optional[datetime] = Form(None),
    case_status: CourtCaseStatus = Form(CourtCaseStatus.ONGOING, alias="status"),
    url: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    attachment = await attachment_for_create(SUBDIR, url, file)
    return await court_cases.create(db, {
        "case_number": case_number,
        "subject": subject,
        "date": date or datetime.utcnow(),
        "status": case_status,
        **attachment,
    })


@router.put("/{case_id}", response_model=CourtCaseResponse)
async def update_court_case(
    case_id: str,
    case_number: Optional[str] = Form(None, alias="caseNumber"),
    subject: Optional[str] = Form(None),
    date: Optional[datetime] = Form(None),
    case_status: Optional[CourtCaseStatus] = Form(None, alias="status"),
    url: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    court_case = await court_cases.get(db, case_id)
    changes = {
        k: v for k, v in {
            "case_number": case_number,
            "subject": subject,
            "date": date,
            "status": case_status,
        }.items() if v is not None
    }
    changes.update(await attachment_for_update(court_case, SUBDIR, url, file))
    return await court_cases.apply(db, court_case, changes)


@router.delete("/{case_id}", response_model=SuccessResponse)
async def delete_court_case(
    case_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    court_case = await court_cases.delete(db, case_id)
    remove_attachment(court_case)
    return SuccessResponse(message="Court case removed")
