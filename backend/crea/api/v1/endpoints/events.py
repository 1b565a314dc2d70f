from typing import List

from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import get_db
from crea.core.logging_config import logger
from crea.models.event import Event
from crea.models.notification import NotificationType
from crea.models.user import User
from crea.modules.auth.dependencies import get_current_admin
from crea.schemas.common import SuccessResponse
from crea.schemas.event import EventCreate, EventUpdate, EventResponse
from crea.services.crud import CRUDService
from crea.services.notification_service import notify_all_users
from crea.services.storage_service import storage_service

router = APIRouter()

events = CRUDService(Event, "Event", default_order=Event.date.desc())

EVENT_PHOTOS_SUBDIR = "events"


@router.get("", response_model=List[EventResponse])
async def list_events(db: AsyncSession = Depends(get_db)):
    """All events, newest date first"""
    return await events.list(db)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: str, db: AsyncSession = Depends(get_db)):
    return await events.get(db, event_id)


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create an event and notify every member"""
    if not (data.title and data.title.strip()) or not (data.description and data.description.strip()) or not data.date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title, description and date are required"
        )

    event = await events.create(db, data.model_dump())

    if event.breaking:
        kind, title = NotificationType.BREAKING, "Breaking News Alert"
    else:
        kind, title = NotificationType.EVENT, "New Event Published"
    await notify_all_users(
        db,
        kind,
        title,
        event.title,
        link="/events",
        metadata={"eventId": str(event.id)},
    )
    await db.commit()

    logger.info(f"[Events] {admin.email} created event {event.id}")
    return event


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    data: EventUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    return await events.update(db, event_id, changes)


@router.delete("/{event_id}", response_model=SuccessResponse)
async def delete_event(
    event_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    event = await events.delete(db, event_id)
    storage_service.delete_many(event.photos or [])
    return SuccessResponse(message="Event removed")


@router.post("/{event_id}/photos", response_model=EventResponse)
async def upload_event_photos(
    event_id: str,
    photos: List[UploadFile] = File(...),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Append uploaded images to the event's gallery"""
    event = await events.get(db, event_id)
    urls = []
    for photo in photos:
        stored = await storage_service.save_upload(photo, EVENT_PHOTOS_SUBDIR, kind="image")
        urls.append(stored.url)
    return await events.apply(db, event, {"photos": [*(event.photos or []), *urls]})
