import logging
from datetime import timedelta
from typing import Optional
from sqlalchemy.orm import Session
from app import crud
from app.core.config import settings
from app.db.database import SessionLocal, utcnow

logger = logging.getLogger(__name__)


def purge_old_notifications(db: Session, *, retention_days: Optional[int] = None) -> int:
    """Delete notifications older than the retention window. 0 days keeps everything"""
    days = settings.NOTIFICATION_RETENTION_DAYS if retention_days is None else retention_days
    if days <= 0:
        return 0
    cutoff = utcnow() - timedelta(days=days)
    deleted = crud.notification.delete_older_than(db, cutoff=cutoff)
    logger.info(f"🧹 Removed {deleted} notifications older than {days} days")
    return deleted


def run_notification_cleanup():
    """Scheduler entry point; owns its session"""
    db = SessionLocal()
    try:
        return purge_old_notifications(db)
    except Exception as e:
        db.rollback()
        logger.error(f"Error in notification cleanup: {e}")
        return 0
    finally:
        db.close()
