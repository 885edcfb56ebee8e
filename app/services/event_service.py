from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from app import crud
from app.crud.event import flatten_event_data
from app.models.user import User, UserRole
from app.models.event import Event, EventStatus, EventGalleryImage
from app.schemas.event import EventCreate, EventUpdate
from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.db.database import utcnow, to_utc_naive
from app.services import notification_service
from app.services.image_storage import ImageStorage
import logging

logger = logging.getLogger(__name__)

# Optional columns an update may reset to null
CLEARABLE_FIELDS = {"image", "end_date_time", "max_participants", "requirements"}


def validate_schedule(date_time: Optional[datetime], end_date_time: Optional[datetime], *, check_future: bool = True) -> None:
    errors = []
    start = to_utc_naive(date_time) if date_time else None
    end = to_utc_naive(end_date_time) if end_date_time else None
    if check_future and start is not None and start <= utcnow():
        errors.append("date_time: Event date must be in the future")
    if start is not None and end is not None and end <= start:
        errors.append("end_date_time: End date must be after start date")
    if errors:
        raise ValidationError("Invalid event data", errors)


def get_event_or_404(db: Session, event_id: int) -> Event:
    event = crud.event.get(db, id=event_id)
    if not event:
        raise NotFoundError("Event not found")
    return event


def ensure_can_manage(event: Event, user: User, action: str = "edit") -> None:
    if event.organizer_id != user.id and not user.is_admin:
        raise ForbiddenError(f"Not authorized to {action} this event")


def create_event(db: Session, *, event_in: EventCreate, organizer: User) -> Event:
    validate_schedule(event_in.date_time, event_in.end_date_time)

    data = flatten_event_data(event_in.model_dump())
    data["organizer_id"] = organizer.id
    data["status"] = EventStatus.APPROVED if organizer.role == UserRole.ADMIN else EventStatus.PENDING

    event = Event(**data)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info(f"🎉 Event {event.id} '{event.title}' created by user {organizer.id} as {event.status.value}")

    if event.status == EventStatus.PENDING:
        notification_service.notify_safely(db, **notification_service.event_pending_payload(event))
        for admin in crud.user.get_admins(db):
            notification_service.notify_safely(
                db, **notification_service.admin_event_pending_payload(event, admin.id)
            )

    return event


def update_event(db: Session, *, event_id: int, event_in: EventUpdate, user: User) -> Event:
    event = get_event_or_404(db, event_id)
    ensure_can_manage(event, user, "edit")

    if event.is_terminal and not user.is_admin:
        raise ValidationError(f"A {event.status.value} event cannot be edited")

    update_data = {
        field: value
        for field, value in event_in.model_dump(exclude_unset=True).items()
        if value is not None or field in CLEARABLE_FIELDS
    }
    if "featured" in update_data and not user.is_admin:
        raise ForbiddenError("Only admins can feature events")
    new_capacity = update_data.get("max_participants")
    if new_capacity is not None and new_capacity < event.current_participants:
        raise ValidationError(
            "Invalid event data",
            [f"max_participants: cannot be lower than the {event.current_participants} registered participants"],
        )

    new_start = update_data.get("date_time")
    new_end = update_data.get("end_date_time", event.end_date_time)
    if new_start is not None:
        validate_schedule(new_start, new_end)
    elif "end_date_time" in update_data:
        validate_schedule(event.date_time, new_end, check_future=False)

    for field, value in flatten_event_data(update_data).items():
        setattr(event, field, value)

    # Any organizer edit sends an approved event back to moderation
    if event.status == EventStatus.APPROVED and not user.is_admin:
        event.status = EventStatus.PENDING
        logger.info(f"Event {event.id} edited by organizer {user.id}, back to pending")

    db.commit()
    db.refresh(event)
    return event


def delete_event(db: Session, *, event_id: int, user: User, storage: Optional[ImageStorage] = None) -> None:
    event = get_event_or_404(db, event_id)
    ensure_can_manage(event, user, "delete")

    handles = [event.image_handle] + [image.public_id for image in event.gallery]
    db.delete(event)
    db.commit()
    logger.info(f"🗑️ Event {event_id} deleted by user {user.id}")

    if storage is not None:
        for handle in handles:
            if handle:
                storage.delete(handle)


def get_event_for_viewer(db: Session, *, event_id: int, viewer: Optional[User]) -> Event:
    event = crud.event.get_with_details(db, event_id=event_id)
    if not event:
        raise NotFoundError("Event not found")
    if event.status != EventStatus.APPROVED:
        if viewer is None or (not viewer.is_admin and viewer.id != event.organizer_id):
            raise NotFoundError("Event not available")
    return event


def list_events(db: Session, *, viewer: Optional[User], page: int = 1, limit: int = 12, **filters) -> Tuple[List[Event], int]:
    return crud.event.get_listing(
        db,
        is_admin=bool(viewer and viewer.is_admin),
        skip=(page - 1) * limit,
        limit=limit,
        **filters
    )


def list_my_events(
    db: Session, *, user: User, status: Optional[EventStatus] = None, page: int = 1, limit: int = 10
) -> Tuple[List[Event], int]:
    return crud.event.get_by_organizer(
        db, organizer_id=user.id, status=status, skip=(page - 1) * limit, limit=limit
    )

# ==========================================
# IMAGES
# ==========================================

def set_cover_image(
    db: Session, *, event_id: int, user: User, storage: ImageStorage, content: bytes, filename: str, content_type: str
) -> Event:
    event = get_event_or_404(db, event_id)
    ensure_can_manage(event, user, "edit")

    stored = storage.upload(content, filename, content_type)
    previous_handle = event.image_handle
    event.image = stored.url
    event.image_handle = stored.handle
    db.commit()
    db.refresh(event)

    if previous_handle:
        storage.delete(previous_handle)
    return event


def add_gallery_image(
    db: Session, *, event_id: int, user: User, storage: ImageStorage, content: bytes, filename: str, content_type: str
) -> EventGalleryImage:
    event = get_event_or_404(db, event_id)
    ensure_can_manage(event, user, "edit")

    stored = storage.upload(content, filename, content_type, folder="gallery")
    image = EventGalleryImage(event_id=event.id, url=stored.url, public_id=stored.handle)
    db.add(image)
    db.commit()
    db.refresh(image)
    return image


def remove_gallery_image(db: Session, *, event_id: int, image_id: int, user: User, storage: ImageStorage) -> None:
    event = get_event_or_404(db, event_id)
    ensure_can_manage(event, user, "edit")

    image = crud.event.get_gallery_image(db, event_id=event.id, image_id=image_id)
    if not image:
        raise NotFoundError("Image not found")
    handle = image.public_id
    db.delete(image)
    db.commit()
    if handle:
        storage.delete(handle)
