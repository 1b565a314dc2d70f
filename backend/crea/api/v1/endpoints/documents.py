"""
Combined listing and downloads for circulars, manuals and court cases.
"""
from typing import Any, Dict, List, Optional, Type

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse, RedirectResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.config import settings
from crea.core.database import get_db
from crea.models.document import Circular, Manual, CourtCase
from crea.models.user import User
from crea.modules.auth.dependencies import get_current_user
from crea.schemas.document import DocumentItem
from crea.services.storage_service import storage_service

router = APIRouter()

DOCUMENT_MODELS: Dict[str, Type] = {
    "circular": Circular,
    "manual": Manual,
    "court-case": CourtCase,
}


def _external_url(url: Optional[str]) -> Optional[str]:
    if url and (url.startswith("http://") or url.startswith("https://")):
        return url
    return None


def _download_url(kind: str, record_id: str) -> str:
    return f"{settings.API_PREFIX}/documents/{kind}/{record_id}/download"


def _item(kind: str, record: Any, title: str, label: str) -> DocumentItem:
    return DocumentItem(
        id=str(record.id),
        type=kind,
        title=title,
        uploaded_at=record.created_at,
        label=label,
        file_name=record.file_name,
        mime_type=record.mime_type,
        size=record.size,
        external_url=_external_url(record.url),
        download_url=_download_url(kind, str(record.id)),
    )


@router.get("", response_model=List[DocumentItem])
async def list_documents(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Every document, newest upload first"""
    circulars = (await db.execute(select(Circular))).scalars().all()
    manuals = (await db.execute(select(Manual))).scalars().all()
    court_cases = (await db.execute(select(CourtCase))).scalars().all()

    items = [
        *(_item("circular", c, c.subject, c.board_number or "") for c in circulars),
        *(_item("manual", m, m.title, m.category.value if m.category else "general") for m in manuals),
        *(_item("court-case", cc, cc.case_number, cc.status.value if cc.status else "ongoing") for cc in court_cases),
    ]
    items.sort(key=lambda item: item.uploaded_at, reverse=True)
    return items


@router.get("/{kind}/{record_id}/download")
async def download_document(
    kind: str,
    record_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Stream a stored file, or redirect to the document's external url"""
    model = DOCUMENT_MODELS.get(kind)
    if model is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid document type")

    record = await db.get(model, record_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")

    external = _external_url(record.url)
    if external:
        return RedirectResponse(external)

    path = storage_service.resolve(record.url)
    if path is None or not path.exists():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

    return FileResponse(
        path,
        media_type=record.mime_type or "application/octet-stream",
        filename=record.file_name or path.name,
    )
