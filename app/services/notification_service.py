from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from app import crud
from app.models.user import User
from app.models.event import Event
from app.models.notification import Notification, NotificationType
from app.core.email_service import email_service
from app.core.exceptions import ForbiddenError, NotFoundError
from app.db.database import utcnow
import logging

logger = logging.getLogger(__name__)


def create_notification(
    db: Session,
    *,
    recipient_id: int,
    notification_type: NotificationType,
    title: str,
    message: str,
    event_id: Optional[int] = None,
    comment_id: Optional[int] = None,
    from_user_id: Optional[int] = None,
    action_url: Optional[str] = None
) -> Notification:
    """Persist one in-app notification and commit it"""
    notification = Notification(
        recipient_id=recipient_id,
        notification_type=notification_type,
        title=title[:200],
        message=message[:500],
        event_id=event_id,
        comment_id=comment_id,
        from_user_id=from_user_id,
        action_url=action_url,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    logger.info(f"🔔 {notification_type.value} notification created for user {recipient_id}")
    return notification


def notify_safely(db: Session, **payload) -> Optional[Notification]:
    """Best-effort notification: a failure is logged and never reaches the caller"""
    try:
        return create_notification(db, **payload)
    except Exception:
        db.rollback()
        logger.exception(
            f"Failed to create {payload.get('notification_type')} notification "
            f"for user {payload.get('recipient_id')}"
        )
        return None

# ==========================================
# TEMPLATES
# ==========================================

def event_approved_payload(event: Event) -> dict:
    return dict(
        recipient_id=event.organizer_id,
        notification_type=NotificationType.EVENT_APPROVED,
        title="Event approved",
        message=f'Your event "{event.title}" has been approved and is now publicly visible',
        event_id=event.id,
        action_url=f"/events/{event.id}",
    )


def event_rejected_payload(event: Event, reason: Optional[str] = None) -> dict:
    message = f'Your event "{event.title}" has been rejected.'
    if reason:
        message += f" Reason: {reason}"
    return dict(
        recipient_id=event.organizer_id,
        notification_type=NotificationType.EVENT_REJECTED,
        title="Event rejected",
        message=message,
        event_id=event.id,
        action_url=f"/events/{event.id}",
    )


def event_pending_payload(event: Event) -> dict:
    return dict(
        recipient_id=event.organizer_id,
        notification_type=NotificationType.EVENT_PENDING,
        title="Event pending review",
        message=f'Your event "{event.title}" has been submitted and is awaiting approval',
        event_id=event.id,
        action_url=f"/events/{event.id}",
    )


def admin_event_pending_payload(event: Event, admin_id: int) -> dict:
    return dict(
        recipient_id=admin_id,
        notification_type=NotificationType.ADMIN_EVENT_PENDING,
        title="New event to review",
        message=f'The event "{event.title}" is waiting for moderation',
        event_id=event.id,
        from_user_id=event.organizer_id,
        action_url="/admin",
    )


def event_favourite_payload(event: Event, user: User) -> dict:
    return dict(
        recipient_id=event.organizer_id,
        notification_type=NotificationType.EVENT_FAVOURITE,
        title="Event added to favourites",
        message=f'{user.name} added your event "{event.title}" to their favourites',
        event_id=event.id,
        from_user_id=user.id,
        action_url=f"/events/{event.id}",
    )


def new_comment_payload(event: Event, author: User, comment_id: int) -> dict:
    return dict(
        recipient_id=event.organizer_id,
        notification_type=NotificationType.NEW_COMMENT,
        title="New comment",
        message=f'{author.name} commented on your event "{event.title}"',
        event_id=event.id,
        comment_id=comment_id,
        from_user_id=author.id,
        action_url=f"/events/{event.id}",
    )


def comment_reply_payload(parent_author_id: int, event_id: int, author: User, comment_id: int) -> dict:
    return dict(
        recipient_id=parent_author_id,
        notification_type=NotificationType.COMMENT_REPLY,
        title="New reply",
        message=f"{author.name} replied to your comment",
        event_id=event_id,
        comment_id=comment_id,
        from_user_id=author.id,
        action_url=f"/events/{event_id}",
    )


def new_follower_payload(follower: User, followed_id: int) -> dict:
    return dict(
        recipient_id=followed_id,
        notification_type=NotificationType.FOLLOW,
        title="New follower",
        message=f"{follower.name} started following you",
        from_user_id=follower.id,
        action_url=f"/users/{follower.id}",
    )

# ==========================================
# READ STATE
# ==========================================

def _get_owned(db: Session, notification_id: int, user: User) -> Notification:
    notification = crud.notification.get(db, id=notification_id)
    if not notification:
        raise NotFoundError("Notification not found")
    if notification.recipient_id != user.id:
        raise ForbiddenError("Not authorized")
    return notification


def list_notifications(
    db: Session,
    *,
    user: User,
    unread_only: bool = False,
    notification_type: Optional[NotificationType] = None,
    page: int = 1,
    limit: int = 20
) -> Tuple[List[Notification], int, int]:
    items, total = crud.notification.get_for_recipient(
        db,
        recipient_id=user.id,
        unread_only=unread_only,
        notification_type=notification_type,
        skip=(page - 1) * limit,
        limit=limit,
    )
    unread_count = crud.notification.count_unread(db, recipient_id=user.id)
    return items, total, unread_count


def mark_as_read(db: Session, *, notification_id: int, user: User) -> Notification:
    """Idempotent: an already-read notification keeps its original read_at"""
    notification = _get_owned(db, notification_id, user)
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = utcnow()
        db.commit()
        db.refresh(notification)
    return notification


def mark_all_as_read(db: Session, *, user: User) -> int:
    updated = crud.notification.mark_all_as_read(db, recipient_id=user.id)
    logger.info(f"✅ Marked {updated} notifications as read for user {user.id}")
    return updated


def delete_notification(db: Session, *, notification_id: int, user: User) -> None:
    notification = _get_owned(db, notification_id, user)
    db.delete(notification)
    db.commit()

# ==========================================
# BROADCAST
# ==========================================

def send_broadcast_emails(recipients: List[Tuple[str, str]], title: str, message: str, action_url: Optional[str] = None) -> dict:
    """Runs as a background task; failures are counted, never raised"""
    sent, failed = 0, 0
    for email, name in recipients:
        try:
            if email_service.send_custom_email(email, name, title, message, action_url):
                sent += 1
            else:
                failed += 1
        except Exception:
            failed += 1
            logger.exception(f"Broadcast email to {email} failed")
    if failed:
        logger.warning(f"📧 Broadcast '{title}': {sent} emails sent, {failed} failed")
    else:
        logger.info(f"📧 Broadcast '{title}': {sent} emails sent")
    return {"sent": sent, "failed": failed}


def broadcast(
    db: Session,
    *,
    title: str,
    message: str,
    user_ids: Optional[List[int]] = None,
    send_email: bool = False,
    action_url: Optional[str] = None,
    background_tasks=None
) -> dict:
    query = db.query(User)
    if user_ids:
        query = query.filter(User.id.in_(user_ids))
    recipients = query.all()
    if not recipients:
        raise NotFoundError("No recipients found")

    rows = [
        {
            "recipient_id": recipient.id,
            "notification_type": NotificationType.SYSTEM,
            "title": title,
            "message": message,
            "action_url": action_url,
            "is_read": False,
        }
        for recipient in recipients
    ]
    created = crud.notification.bulk_create(db, rows=rows)
    db.commit()
    logger.info(f"📢 Broadcast '{title}' delivered to {created} users")

    email_queued = 0
    if send_email:
        email_recipients = [(r.email, r.name) for r in recipients if r.wants_email]
        email_queued = len(email_recipients)
        if background_tasks is not None:
            background_tasks.add_task(send_broadcast_emails, email_recipients, title, message, action_url)
        else:
            send_broadcast_emails(email_recipients, title, message, action_url)

    return {"recipient_count": created, "email_queued": email_queued}
