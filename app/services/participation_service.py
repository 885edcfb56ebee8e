from sqlalchemy import case, delete, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.models.user import User
from app.models.event import Event, EventStatus
from app.models.event_participant import EventParticipant, ParticipantStatus
from app.core.exceptions import ValidationError
from app.db.database import utcnow
from app.services.event_service import get_event_or_404
import logging

logger = logging.getLogger(__name__)


def leave_event(db: Session, event: Event, participation: EventParticipant) -> bool:
    """Remove a roster entry. The counter only moves when this call removed the row"""
    user_id = participation.user_id
    was_active = participation.status != ParticipantStatus.CANCELLED

    result = db.execute(
        delete(EventParticipant)
        .where(EventParticipant.id == participation.id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        # Another request already removed this entry
        db.rollback()
        logger.warning(f"User {user_id} already left event {event.id}")
        return False

    if was_active:
        db.execute(
            update(Event)
            .where(Event.id == event.id)
            .values(current_participants=case(
                (Event.current_participants > 0, Event.current_participants - 1),
                else_=0,
            ))
            .execution_options(synchronize_session=False)
        )
    db.commit()
    logger.info(f"👋 User {user_id} left event {event.id}")
    return False


def join_event(db: Session, event: Event, user: User) -> bool:
    if event.status != EventStatus.APPROVED:
        raise ValidationError("The event is not approved yet")
    now = utcnow()
    if event.date_time <= now:
        raise ValidationError("You cannot join a past event")

    # Reserve a seat first; the WHERE clause is the capacity check
    result = db.execute(
        update(Event)
        .where(
            Event.id == event.id,
            Event.status == EventStatus.APPROVED,
            Event.date_time > now,
            or_(Event.max_participants.is_(None), Event.current_participants < Event.max_participants),
        )
        .values(current_participants=Event.current_participants + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        db.refresh(event)
        if event.status != EventStatus.APPROVED:
            raise ValidationError("The event is not approved yet")
        if event.date_time <= utcnow():
            raise ValidationError("You cannot join a past event")
        raise ValidationError("The event is full")

    db.add(EventParticipant(
        event_id=event.id,
        user_id=user.id,
        registered_at=now,
        status=ParticipantStatus.REGISTERED,
    ))
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request from the same user already holds the seat
        db.rollback()
        logger.warning(f"Duplicate participation for user {user.id} on event {event.id} ignored")
        return True
    logger.info(f"🕺 User {user.id} joined event {event.id}")
    return True


def toggle_participation(db: Session, *, event_id: int, user: User) -> bool:
    """Join or leave an event. Returns whether the user participates afterwards"""
    event = get_event_or_404(db, event_id)
    participation = db.query(EventParticipant).filter(
        EventParticipant.event_id == event.id,
        EventParticipant.user_id == user.id,
    ).first()

    if participation:
        return leave_event(db, event, participation)
    return join_event(db, event, user)
