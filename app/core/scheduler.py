# File: app/core/scheduler.py
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from app.core.config import settings
import logging

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()

def start_scheduler():
    """Start all scheduled jobs"""
    from app.services.notification_cleanup_service import run_notification_cleanup

    if settings.NOTIFICATION_RETENTION_DAYS <= 0:
        logger.info("Notification retention disabled, scheduler not started")
        return

    try:
        scheduler.add_job(
            run_notification_cleanup,
            trigger=IntervalTrigger(hours=settings.NOTIFICATION_CLEANUP_INTERVAL_HOURS),
            id='notification_retention',
            name='Delete notifications past the retention window',
            replace_existing=True
        )

        scheduler.start()
        logger.info("✅ Scheduler started successfully")
        logger.info(f"Active jobs: {len(scheduler.get_jobs())}")
    except Exception as e:
        logger.error(f"Failed to start scheduler: {e}")

def stop_scheduler():
    """Stop scheduler gracefully"""
    if not scheduler.running:
        return
    try:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
    except Exception as e:
        logger.error(f"Error stopping scheduler: {e}")
