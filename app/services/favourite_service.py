from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.models.user import User, FavouriteEvent
from app.models.event import EventStatus
from app.core.exceptions import ValidationError
from app.services import notification_service
from app.services.event_service import get_event_or_404
import logging

logger = logging.getLogger(__name__)


def toggle_favourite(db: Session, *, event_id: int, user: User) -> bool:
    """Add or remove an event from the user's favourites. Returns the new membership"""
    event = get_event_or_404(db, event_id)

    if event.status != EventStatus.APPROVED:
        raise ValidationError("Only approved events can be added to favourites")
    if event.organizer_id == user.id:
        raise ValidationError("You cannot add your own event to favourites")

    link = db.query(FavouriteEvent).filter(
        FavouriteEvent.user_id == user.id,
        FavouriteEvent.event_id == event.id,
    ).first()

    if link:
        db.delete(link)
        db.commit()
        logger.info(f"💔 User {user.id} removed event {event_id} from favourites")
        return False

    db.add(FavouriteEvent(user_id=user.id, event_id=event.id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Event {event_id} already in favourites of user {user.id}")
        return True

    logger.info(f"❤️ User {user.id} added event {event_id} to favourites")
    notification_service.notify_safely(db, **notification_service.event_favourite_payload(event, user))
    return True
