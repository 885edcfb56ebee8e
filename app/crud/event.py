# File: app/crud/event.py
from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import String, cast, or_
from app.crud.base import CRUDBase
from app.models.event import Event, EventStatus, EventGalleryImage
from app.models.event_participant import EventParticipant
from app.models.user import FavouriteEvent, SkillLevel
from app.schemas.event import EventCreate, EventUpdate
from app.db.database import utcnow, to_utc_naive

_NESTED_FIELDS = {
    "location": {
        "venue": "venue",
        "address": "address",
        "city": "city",
        "region": "region",
        "latitude": "latitude",
        "longitude": "longitude",
    },
    "contact_info": {"phone": "contact_phone", "email": "contact_email", "whatsapp": "contact_whatsapp"},
    "social_links": {"facebook": "facebook_url", "instagram": "instagram_url", "website": "website_url"},
}


def flatten_event_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Map nested request groups (location, contact, social) onto event columns"""
    flat = {}
    for key, value in data.items():
        if key in _NESTED_FIELDS:
            if value is None:
                continue
            for nested_key, column in _NESTED_FIELDS[key].items():
                if nested_key in value:
                    flat[column] = value[nested_key]
        elif key in ("date_time", "end_date_time") and value is not None:
            flat[key] = to_utc_naive(value)
        else:
            flat[key] = value
    return flat


def _with_details(query):
    return query.options(
        selectinload(Event.organizer),
        selectinload(Event.participants).selectinload(EventParticipant.user),
        selectinload(Event.gallery),
    )


class CRUDEvent(CRUDBase[Event, EventCreate, EventUpdate]):

    def get_with_details(self, db: Session, *, event_id: int) -> Optional[Event]:
        return _with_details(db.query(Event)).filter(Event.id == event_id).first()

    def get_listing(
        self,
        db: Session,
        *,
        is_admin: bool = False,
        status: Optional[EventStatus] = None,
        search: Optional[str] = None,
        city: Optional[str] = None,
        dance_style=None,
        skill_level: Optional[SkillLevel] = None,
        event_type=None,
        featured: Optional[bool] = None,
        organizer_id: Optional[int] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        show_past: bool = False,
        skip: int = 0,
        limit: int = 12
    ) -> Tuple[List[Event], int]:
        query = db.query(Event)

        # Admins may browse any status, everyone else only approved events
        if is_admin:
            query = query.filter(Event.status == (status or EventStatus.APPROVED))
        else:
            query = query.filter(Event.status == EventStatus.APPROVED)

        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Event.title.ilike(pattern),
                Event.description.ilike(pattern),
                cast(Event.tags, String).ilike(pattern),
            ))
        if city:
            query = query.filter(Event.city.ilike(f"%{city}%"))
        if dance_style:
            query = query.filter(Event.dance_style == dance_style)
        if skill_level and skill_level != SkillLevel.ALL:
            query = query.filter(Event.skill_level.in_([skill_level, SkillLevel.ALL]))
        if event_type:
            query = query.filter(Event.event_type == event_type)
        if featured:
            query = query.filter(Event.featured.is_(True))
        if organizer_id:
            query = query.filter(Event.organizer_id == organizer_id)

        if date_from or date_to:
            if date_from:
                query = query.filter(Event.date_time >= to_utc_naive(date_from))
            if date_to:
                query = query.filter(Event.date_time <= to_utc_naive(date_to))
        elif not is_admin and not show_past:
            query = query.filter(Event.date_time >= utcnow())

        total = query.count()
        events = (
            _with_details(query)
            .order_by(Event.featured.desc(), Event.date_time.asc(), Event.id.asc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return events, total

    def get_by_organizer(
        self,
        db: Session,
        *,
        organizer_id: int,
        status: Optional[EventStatus] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Event], int]:
        query = db.query(Event).filter(Event.organizer_id == organizer_id)
        if status:
            query = query.filter(Event.status == status)
        total = query.count()
        events = (
            _with_details(query)
            .order_by(Event.created_at.desc(), Event.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return events, total

    def get_joined(self, db: Session, *, user_id: int, upcoming: bool = False) -> List[Event]:
        query = (
            db.query(Event)
            .join(EventParticipant, EventParticipant.event_id == Event.id)
            .filter(EventParticipant.user_id == user_id, Event.status == EventStatus.APPROVED)
        )
        if upcoming:
            query = query.filter(Event.date_time >= utcnow())
        return _with_details(query).order_by(Event.date_time.asc(), Event.id.asc()).all()

    def get_favourites(self, db: Session, *, user_id: int) -> List[Event]:
        return (
            _with_details(db.query(Event))
            .join(FavouriteEvent, FavouriteEvent.event_id == Event.id)
            .filter(FavouriteEvent.user_id == user_id, Event.status == EventStatus.APPROVED)
            .order_by(FavouriteEvent.id)
            .all()
        )

    def get_pending(self, db: Session) -> List[Event]:
        return (
            _with_details(db.query(Event))
            .filter(Event.status == EventStatus.PENDING)
            .order_by(Event.created_at.asc(), Event.id.asc())
            .all()
        )

    def is_favourite(self, db: Session, *, user_id: int, event_id: int) -> bool:
        return db.query(FavouriteEvent).filter(
            FavouriteEvent.user_id == user_id,
            FavouriteEvent.event_id == event_id,
        ).first() is not None

    def get_gallery_image(self, db: Session, *, event_id: int, image_id: int) -> Optional[EventGalleryImage]:
        return db.query(EventGalleryImage).filter(
            EventGalleryImage.id == image_id,
            EventGalleryImage.event_id == event_id,
        ).first()


event = CRUDEvent(Event)
