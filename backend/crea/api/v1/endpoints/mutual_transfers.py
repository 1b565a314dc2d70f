"""
Mutual transfer board: members advertise a swap between locations.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import get_db
from crea.models.mutual_transfer import MutualTransfer
from crea.models.user import User
from crea.modules.auth.dependencies import get_current_user, ensure_owner_or_admin
from crea.schemas.common import SuccessResponse
from crea.schemas.mutual_transfer import (
    MutualTransferCreate,
    MutualTransferUpdate,
    MutualTransferResponse,
)
from crea.services.crud import CRUDService

router = APIRouter()

transfers = CRUDService(MutualTransfer, "Mutual transfer")


def _contains(column, value: str):
    """Case-insensitive substring match"""
    return column.ilike(f"%{value.strip()}%")


@router.get("", response_model=List[MutualTransferResponse])
async def list_transfers(
    post: Optional[str] = None,
    current_location: Optional[str] = Query(None, alias="currentLocation"),
    desired_location: Optional[str] = Query(None, alias="desiredLocation"),
    include_inactive: bool = Query(False, alias="includeInactive"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    criteria = []
    if not include_inactive:
        criteria.append(MutualTransfer.is_active.is_(True))
    if post:
        criteria.append(_contains(MutualTransfer.post, post))
    if current_location:
        criteria.append(_contains(MutualTransfer.current_location, current_location))
    if desired_location:
        criteria.append(_contains(MutualTransfer.desired_location, desired_location))
    return await transfers.list(db, *criteria)


@router.get("/mine", response_model=List[MutualTransferResponse])
async def list_my_transfers(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await transfers.list(db, MutualTransfer.owner_id == current_user.id)


@router.post("", response_model=MutualTransferResponse, status_code=status.HTTP_201_CREATED)
async def create_transfer(
    data: MutualTransferCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Post a transfer request; contact details default to the poster's profile"""
    values = data.model_dump()
    values["contact_name"] = values.get("contact_name") or current_user.name
    values["contact_email"] = values.get("contact_email") or current_user.email
    values["contact_mobile"] = values.get("contact_mobile") or current_user.mobile
    return await transfers.create(db, {**values, "owner_id": current_user.id, "is_active": True})


@router.patch("/{transfer_id}", response_model=MutualTransferResponse)
async def update_transfer(
    transfer_id: str,
    data: MutualTransferUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    transfer = await transfers.get(db, transfer_id)
    ensure_owner_or_admin(current_user, transfer.owner_id, "Not allowed to edit this transfer request")
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    return await transfers.apply(db, transfer, changes)


@router.delete("/{transfer_id}", response_model=SuccessResponse)
async def delete_transfer(
    transfer_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    transfer = await transfers.get(db, transfer_id)
    ensure_owner_or_admin(current_user, transfer.owner_id, "Not allowed to delete this transfer request")
    await db.delete(transfer)
    await db.commit()
    return SuccessResponse(message="Transfer request deleted")
