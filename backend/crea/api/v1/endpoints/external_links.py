from collections import defaultdict
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import get_db
from crea.models.external_link import ExternalLink
from crea.models.user import User
from crea.modules.auth.dependencies import get_current_admin
from crea.schemas.common import SuccessResponse
from crea.schemas.external_link import (
    ExternalLinkCreate,
    ExternalLinkUpdate,
    ExternalLinkResponse,
    GroupedLinksResponse,
)
from crea.services.crud import CRUDService

router = APIRouter()

links = CRUDService(
    ExternalLink,
    "External link",
    default_order=[ExternalLink.category, ExternalLink.order, ExternalLink.created_at],
)


@router.get("", response_model=GroupedLinksResponse)
async def list_active_links(db: AsyncSession = Depends(get_db)):
    """Active links grouped by category"""
    grouped = defaultdict(list)
    for link in await links.list(db, ExternalLink.is_active.is_(True)):
        grouped[link.category.value].append(ExternalLinkResponse.model_validate(link))
    return GroupedLinksResponse(links=dict(grouped))


@router.get("/all", response_model=List[ExternalLinkResponse])
async def list_all_links(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await links.list(db)


@router.post("", response_model=ExternalLinkResponse, status_code=status.HTTP_201_CREATED)
async def create_link(
    data: ExternalLinkCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await links.create(db, data.model_dump())


@router.put("/{link_id}", response_model=ExternalLinkResponse)
async def update_link(
    link_id: str,
    data: ExternalLinkUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    return await links.update(db, link_id, changes)


@router.delete("/{link_id}", response_model=SuccessResponse)
async def delete_link(
    link_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await links.delete(db, link_id)
    return SuccessResponse(message="External link deleted")
