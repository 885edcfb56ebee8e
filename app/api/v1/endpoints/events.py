# File: app/api/v1/endpoints/events.py
from typing import Any, Optional
from datetime import datetime
from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session
from app import crud, schemas
from app.api import deps
from app.db.database import get_db
from app.models.user import User, DanceStyle, SkillLevel
from app.models.event import Event, EventStatus, EventType
from app.services import (
    event_moderation_service,
    event_service,
    favourite_service,
    participation_service,
)
from app.services.image_storage import ImageStorage, get_image_storage
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def _event_list(events, total, page, limit) -> dict:
    return {
        "events": [schemas.EventOut.model_validate(e) for e in events],
        "pagination": schemas.build_pagination(page, limit, total),
    }


def _event_detail(db: Session, event: Event, viewer: Optional[User]) -> dict:
    data = schemas.EventOut.model_validate(event).model_dump(mode="json")
    data["is_favourite"] = False
    data["organizer"]["is_following"] = False
    if viewer is not None:
        data["is_favourite"] = crud.event.is_favourite(db, user_id=viewer.id, event_id=event.id)
        data["organizer"]["is_following"] = crud.user.is_following(
            db, follower_id=viewer.id, followed_id=event.organizer_id
        )
    return data


@router.get("")
def list_events(
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(deps.get_current_user_optional),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    search: Optional[str] = None,
    city: Optional[str] = None,
    dance_style: Optional[DanceStyle] = None,
    skill_level: Optional[SkillLevel] = None,
    event_type: Optional[EventType] = None,
    featured: Optional[bool] = None,
    organizer: Optional[int] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    show_past: bool = False,
    status_filter: Optional[EventStatus] = Query(None, alias="status"),
) -> Any:
    """Public event listing: featured first, then by date"""
    events, total = event_service.list_events(
        db,
        viewer=current_user,
        page=page,
        limit=limit,
        status=status_filter,
        search=search,
        city=city,
        dance_style=dance_style,
        skill_level=skill_level,
        event_type=event_type,
        featured=featured,
        organizer_id=organizer,
        date_from=date_from,
        date_to=date_to,
        show_past=show_past,
    )
    return {"success": True, "data": _event_list(events, total, page, limit)}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_event(
    event_in: schemas.EventCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.require_organizer),
) -> Any:
    event = event_service.create_event(db, event_in=event_in, organizer=current_user)
    message = "Event created and published" if event.status == EventStatus.APPROVED \
        else "Event created, awaiting approval"
    return schemas.success_response(message, {"event": schemas.EventOut.model_validate(event)})


@router.get("/my-events")
def my_events(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.require_organizer),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[EventStatus] = Query(None, alias="status"),
) -> Any:
    events, total = event_service.list_my_events(
        db, user=current_user, status=status_filter, page=page, limit=limit
    )
    return {"success": True, "data": _event_list(events, total, page, limit)}


@router.get("/joined")
def joined_events(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
    upcoming: bool = False,
) -> Any:
    events = crud.event.get_joined(db, user_id=current_user.id, upcoming=upcoming)
    return {"success": True, "data": {"events": [schemas.EventOut.model_validate(e) for e in events]}}


@router.get("/favourites")
def favourite_events(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    events = crud.event.get_favourites(db, user_id=current_user.id)
    return {"success": True, "data": {"events": [schemas.EventOut.model_validate(e) for e in events]}}


@router.post("/bulk-approve")
def bulk_approve(
    request: schemas.BulkApproveRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    result = event_moderation_service.bulk_approve(db, event_ids=request.event_ids, admin=current_user)
    return schemas.success_response(f"{result['approved_count']} events approved", result)


@router.get("/{event_id}")
def get_event(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(deps.get_current_user_optional),
) -> Any:
    event = event_service.get_event_for_viewer(db, event_id=event_id, viewer=current_user)
    return {"success": True, "data": {"event": _event_detail(db, event, current_user)}}


@router.put("/{event_id}")
def update_event(
    event_id: int,
    event_in: schemas.EventUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    event = event_service.update_event(db, event_id=event_id, event_in=event_in, user=current_user)
    return schemas.success_response("Event updated", {"event": schemas.EventOut.model_validate(event)})


@router.delete("/{event_id}")
def delete_event(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
    storage: ImageStorage = Depends(get_image_storage),
) -> Any:
    event_service.delete_event(db, event_id=event_id, user=current_user, storage=storage)
    return schemas.success_response("Event deleted")


@router.put("/{event_id}/status")
def update_event_status(
    event_id: int,
    status_in: schemas.EventStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    event = event_moderation_service.update_event_status(
        db,
        event_id=event_id,
        status=status_in.status,
        rejection_reason=status_in.rejection_reason,
        admin=current_user,
    )
    return schemas.success_response(
        f"Event status updated to {event.status.value}",
        {"event": schemas.EventOut.model_validate(event)},
    )


@router.post("/{event_id}/participate")
def toggle_participation(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    is_participating = participation_service.toggle_participation(db, event_id=event_id, user=current_user)
    event = crud.event.get(db, id=event_id)
    return schemas.success_response(
        "You joined the event" if is_participating else "You left the event",
        {"is_participating": is_participating, "current_participants": event.current_participants},
    )


@router.post("/{event_id}/favourite")
def toggle_favourite(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    is_favourite = favourite_service.toggle_favourite(db, event_id=event_id, user=current_user)
    return schemas.success_response(
        "Event added to favourites" if is_favourite else "Event removed from favourites",
        {"is_favourite": is_favourite},
    )


@router.post("/{event_id}/image")
def upload_cover_image(
    event_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
    storage: ImageStorage = Depends(get_image_storage),
) -> Any:
    """Replace the cover image of an event"""
    logger.info(f"📤 Cover image upload for event {event_id} from user {current_user.id}")
    event = event_service.set_cover_image(
        db,
        event_id=event_id,
        user=current_user,
        storage=storage,
        content=file.file.read(),
        filename=file.filename or "",
        content_type=file.content_type or "",
    )
    return schemas.success_response("Image uploaded", {"image": event.image})


@router.post("/{event_id}/gallery", status_code=status.HTTP_201_CREATED)
def upload_gallery_image(
    event_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
    storage: ImageStorage = Depends(get_image_storage),
) -> Any:
    image = event_service.add_gallery_image(
        db,
        event_id=event_id,
        user=current_user,
        storage=storage,
        content=file.file.read(),
        filename=file.filename or "",
        content_type=file.content_type or "",
    )
    return schemas.success_response("Image added to gallery", {"image": schemas.GalleryImageOut.model_validate(image)})


@router.delete("/{event_id}/gallery/{image_id}")
def delete_gallery_image(
    event_id: int,
    image_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
    storage: ImageStorage = Depends(get_image_storage),
) -> Any:
    event_service.remove_gallery_image(
        db, event_id=event_id, image_id=image_id, user=current_user, storage=storage
    )
    return schemas.success_response("Image removed from gallery")
