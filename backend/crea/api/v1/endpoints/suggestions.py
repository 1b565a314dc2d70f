from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import get_db
from crea.models.notification import NotificationType
from crea.models.suggestion import Suggestion
from crea.models.user import User
from crea.modules.auth.dependencies import get_current_admin, get_optional_current_user
from crea.schemas.common import SuccessResponse
from crea.schemas.suggestion import SuggestionCreate, SuggestionUpdate, SuggestionResponse
from crea.services.crud import CRUDService
from crea.services.notification_service import notify_admins

router = APIRouter()

suggestions = CRUDService(Suggestion, "Suggestion")


@router.get("", response_model=List[SuggestionResponse])
async def list_suggestions(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await suggestions.list(db)


@router.post("", response_model=SuggestionResponse, status_code=status.HTTP_201_CREATED)
async def create_suggestion(
    data: SuggestionCreate,
    current_user: Optional[User] = Depends(get_optional_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Anyone may leave a suggestion; admins are notified"""
    values = data.model_dump()
    if current_user is not None:
        values["user_id"] = current_user.id
        values["user_name"] = values.get("user_name") or current_user.name
    suggestion = await suggestions.create(db, values)

    author = suggestion.user_name or "Anonymous"
    await notify_admins(
        db,
        NotificationType.SUGGESTION,
        "New Suggestion",
        f"{author}: {suggestion.text[:120]}",
        link="/admin/suggestions",
        metadata={"suggestionId": str(suggestion.id)},
    )
    await db.commit()
    return suggestion


@router.put("/{suggestion_id}", response_model=SuggestionResponse)
async def update_suggestion(
    suggestion_id: str,
    data: SuggestionUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    return await suggestions.update(db, suggestion_id, changes)


@router.delete("/{suggestion_id}", response_model=SuccessResponse)
async def delete_suggestion(
    suggestion_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await suggestions.delete(db, suggestion_id)
    return SuccessResponse(message="Suggestion deleted")
