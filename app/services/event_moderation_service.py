"""Admin moderation of events: single status transitions and bulk approval.

Status writes are committed before any side effect runs. Notifications and
emails are best effort, so a failing organizer notification never undoes a
transition or stops the rest of a batch.
"""
from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from app.models.user import User
from app.models.event import Event, EventStatus
from app.core.email_service import email_service
from app.core.exceptions import NotFoundError
from app.services import notification_service
from app.services.event_service import get_event_or_404
import logging

logger = logging.getLogger(__name__)


def _notify_organizer(db: Session, event: Event, status: EventStatus, reason: Optional[str] = None) -> None:
    if status == EventStatus.APPROVED:
        payload = notification_service.event_approved_payload(event)
    elif status == EventStatus.REJECTED:
        payload = notification_service.event_rejected_payload(event, reason)
    else:
        return

    notification_service.notify_safely(db, **payload)

    organizer = event.organizer
    if organizer is None or not organizer.wants_email:
        return
    try:
        if status == EventStatus.APPROVED:
            sent = email_service.send_event_approved_email(organizer.email, organizer.name, event)
        else:
            sent = email_service.send_event_rejected_email(organizer.email, organizer.name, event, reason)
        if not sent:
            logger.warning(f"Status email for event {event.id} was not delivered")
    except Exception:
        logger.exception(f"Error sending {status.value} email for event {event.id}")


def update_event_status(
    db: Session,
    *,
    event_id: int,
    status: EventStatus,
    rejection_reason: Optional[str] = None,
    admin: User
) -> Event:
    event = get_event_or_404(db, event_id)
    previous = event.status

    event.status = status
    if status == EventStatus.REJECTED:
        event.rejection_reason = rejection_reason.strip() if rejection_reason and rejection_reason.strip() else None
    else:
        event.rejection_reason = None
    db.commit()
    db.refresh(event)
    logger.info(f"🛡️ Admin {admin.id} moved event {event.id} from {previous.value} to {status.value}")

    if previous != status:
        _notify_organizer(db, event, status, event.rejection_reason)
    return event


def bulk_approve(db: Session, *, event_ids: List[int], admin: User) -> dict:
    events = (
        db.query(Event)
        .options(selectinload(Event.organizer))
        .filter(Event.id.in_(event_ids), Event.status == EventStatus.PENDING)
        .order_by(Event.id)
        .all()
    )
    if not events:
        raise NotFoundError("No pending events found")

    approved_ids = [event.id for event in events]
    db.query(Event).filter(
        Event.id.in_(approved_ids),
        Event.status == EventStatus.PENDING,
    ).update(
        {Event.status: EventStatus.APPROVED, Event.rejection_reason: None},
        synchronize_session=False,
    )
    db.commit()
    logger.info(f"🛡️ Admin {admin.id} bulk-approved events {approved_ids}")

    for event in events:
        try:
            _notify_organizer(db, event, EventStatus.APPROVED)
        except Exception:
            db.rollback()
            logger.exception(f"Error sending approval notification for event {event.id}")

    return {"approved_count": len(approved_ids), "event_ids": approved_ids}
