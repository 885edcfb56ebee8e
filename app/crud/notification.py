# File: app/crud/notification.py
from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import desc
from app.crud.base import CRUDBase
from app.models.notification import Notification, NotificationType
from app.db.database import utcnow


class CRUDNotification(CRUDBase[Notification, Any, Any]):

    def get_for_recipient(
        self,
        db: Session,
        *,
        recipient_id: int,
        unread_only: bool = False,
        notification_type: Optional[NotificationType] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Notification], int]:
        query = db.query(Notification).filter(Notification.recipient_id == recipient_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        if notification_type:
            query = query.filter(Notification.notification_type == notification_type)

        total = query.count()
        notifications = (
            query.options(selectinload(Notification.event), selectinload(Notification.from_user))
            .order_by(desc(Notification.created_at), desc(Notification.id))
            .offset(skip)
            .limit(limit)
            .all()
        )
        return notifications, total

    def count_unread(self, db: Session, *, recipient_id: int) -> int:
        return db.query(Notification).filter(
            Notification.recipient_id == recipient_id,
            Notification.is_read.is_(False),
        ).count()

    def mark_all_as_read(self, db: Session, *, recipient_id: int) -> int:
        result = db.query(Notification).filter(
            Notification.recipient_id == recipient_id,
            Notification.is_read.is_(False),
        ).update({"is_read": True, "read_at": utcnow()}, synchronize_session=False)
        db.commit()
        return result

    def bulk_create(self, db: Session, *, rows: List[Dict[str, Any]]) -> int:
        """Insert many notifications in one statement; caller commits"""
        if not rows:
            return 0
        db.execute(Notification.__table__.insert(), rows)
        return len(rows)

    def delete_older_than(self, db: Session, *, cutoff: datetime) -> int:
        deleted = db.query(Notification).filter(
            Notification.created_at < cutoff
        ).delete(synchronize_session=False)
        db.commit()
        return deleted


notification = CRUDNotification(Notification)
