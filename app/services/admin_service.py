from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app import crud
from app.models.user import User
from app.models.event import Event, EventStatus
from app.models.event_participant import EventParticipant, ParticipantStatus
from app.models.comment import Comment, CommentLike, DELETED_COMMENT_PLACEHOLDER
from app.schemas.user import AdminUserUpdate
from app.core.exceptions import ConflictError, ValidationError
from app.db.database import utcnow
from app.services.image_storage import ImageStorage
from app.services.user_service import get_user_or_404
import logging
import time

logger = logging.getLogger(__name__)

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
GROWTH_PERIODS = {"1month": 30, "3months": 90, "6months": 180, "1year": 365}
STARTED_AT = time.monotonic()


def _naive(value: datetime) -> datetime:
    return value.replace(tzinfo=None) if value is not None and value.tzinfo else value


def get_dashboard_stats(db: Session) -> dict:
    month_ago = utcnow() - timedelta(days=30)

    users_by_role = {
        role.value: count
        for role, count in db.query(User.role, func.count(User.id)).group_by(User.role).all()
    }
    events_by_status = {
        status.value: count
        for status, count in db.query(Event.status, func.count(Event.id)).group_by(Event.status).all()
    }

    def _distribution(column):
        return [
            {"name": getattr(key, "value", key), "count": count}
            for key, count in (
                db.query(column, func.count(Event.id))
                .filter(Event.status == EventStatus.APPROVED)
                .group_by(column)
                .order_by(func.count(Event.id).desc())
                .limit(10)
                .all()
            )
        ]

    avg_rating = db.query(func.avg(Comment.rating)).filter(Comment.rating.isnot(None)).scalar()

    return {
        "users": {
            "total": sum(users_by_role.values()),
            "this_month": db.query(User).filter(User.created_at >= month_ago).count(),
            "by_role": users_by_role,
        },
        "events": {
            "total": sum(events_by_status.values()),
            "pending": events_by_status.get(EventStatus.PENDING.value, 0),
            "approved": events_by_status.get(EventStatus.APPROVED.value, 0),
            "by_status": events_by_status,
            "this_month": db.query(Event).filter(Event.created_at >= month_ago).count(),
            "top_cities": _distribution(Event.city),
            "event_types": _distribution(Event.event_type),
            "dance_styles": _distribution(Event.dance_style),
        },
        "engagement": {
            "total_participations": db.query(func.coalesce(func.sum(Event.current_participants), 0)).scalar(),
            "total_comments": db.query(Comment).count(),
            "comments_this_month": db.query(Comment).filter(Comment.created_at >= month_ago).count(),
            "avg_rating": round(float(avg_rating), 1) if avg_rating is not None else 0,
        },
    }


def get_events_by_month(db: Session, *, year: int) -> list:
    start, end = datetime(year, 1, 1), datetime(year + 1, 1, 1)
    rows = db.query(Event.created_at, Event.status).filter(
        Event.created_at >= start, Event.created_at < end
    ).all()

    months = [
        {"month": name, "total": 0, "approved": 0, "pending": 0, "rejected": 0}
        for name in MONTH_NAMES
    ]
    for created_at, status in rows:
        bucket = months[_naive(created_at).month - 1]
        bucket["total"] += 1
        if status.value in bucket:
            bucket[status.value] += 1
    return months


def get_user_growth(db: Session, *, period: str = "6months") -> list:
    since = utcnow() - timedelta(days=GROWTH_PERIODS.get(period, 180))
    per_day = {}
    for (created_at,) in db.query(User.created_at).filter(User.created_at >= since).all():
        day = _naive(created_at).date().isoformat()
        per_day[day] = per_day.get(day, 0) + 1
    return [{"date": day, "count": per_day[day]} for day in sorted(per_day)]


def get_popular_content(db: Session) -> dict:
    popular_events = (
        db.query(Event)
        .filter(Event.status == EventStatus.APPROVED)
        .order_by(Event.current_participants.desc(), Event.id)
        .limit(10)
        .all()
    )

    organizer_rows = (
        db.query(
            Event.organizer_id,
            func.count(Event.id).label("event_count"),
            func.coalesce(func.sum(Event.current_participants), 0).label("total_participants"),
        )
        .filter(Event.status == EventStatus.APPROVED)
        .group_by(Event.organizer_id)
        .order_by(func.count(Event.id).desc())
        .limit(10)
        .all()
    )
    organizers = {
        u.id: u for u in db.query(User).filter(User.id.in_([row.organizer_id for row in organizer_rows])).all()
    }

    commented_rows = (
        db.query(
            Comment.event_id,
            func.count(Comment.id).label("comment_count"),
            func.avg(Comment.rating).label("avg_rating"),
        )
        .group_by(Comment.event_id)
        .order_by(func.count(Comment.id).desc())
        .limit(10)
        .all()
    )
    commented_events = {
        e.id: e for e in db.query(Event).filter(Event.id.in_([row.event_id for row in commented_rows])).all()
    }

    return {
        "popular_events": [
            {
                "id": e.id,
                "title": e.title,
                "date_time": e.date_time,
                "city": e.city,
                "current_participants": e.current_participants,
                "max_participants": e.max_participants,
            }
            for e in popular_events
        ],
        "active_organizers": [
            {
                "id": row.organizer_id,
                "name": organizers[row.organizer_id].name,
                "avatar": organizers[row.organizer_id].avatar,
                "event_count": row.event_count,
                "total_participants": int(row.total_participants),
            }
            for row in organizer_rows
            if row.organizer_id in organizers
        ],
        "most_commented_events": [
            {
                "id": row.event_id,
                "title": commented_events[row.event_id].title,
                "comment_count": row.comment_count,
                "avg_rating": round(float(row.avg_rating), 1) if row.avg_rating is not None else None,
            }
            for row in commented_rows
            if row.event_id in commented_events
        ],
    }


def get_system_health(db: Session) -> dict:
    try:
        db.execute(text("SELECT 1"))
        connected = True
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Health check query failed: {e}")
        connected = False

    activity = None
    if connected:
        since = utcnow() - timedelta(hours=24)
        activity = {
            "users_last_24h": db.query(User).filter(User.created_at >= since).count(),
            "events_last_24h": db.query(Event).filter(Event.created_at >= since).count(),
            "comments_last_24h": db.query(Comment).filter(Comment.created_at >= since).count(),
        }

    return {
        "database": {"connected": connected, "status": "healthy" if connected else "unhealthy"},
        "api": {"status": "operational", "uptime": round(time.monotonic() - STARTED_AT, 1)},
        "activity": activity,
    }


def update_user(db: Session, *, user_id: int, user_in: AdminUserUpdate) -> User:
    user = get_user_or_404(db, user_id)
    data = user_in.model_dump(exclude_unset=True)

    if data.get("email") and data["email"] != user.email:
        existing = crud.user.get_by_email(db, email=data["email"])
        if existing and existing.id != user.id:
            raise ConflictError("Email is already in use")

    update_data = {field: value for field, value in data.items() if value is not None}
    return crud.user.update(db, db_obj=user, obj_in=update_data)


def delete_user(db: Session, *, user_id: int, admin: User, storage: Optional[ImageStorage] = None) -> dict:
    """Remove an account and every record that only makes sense with it.

    Organized events go with the user. Roster entries and likes elsewhere are
    removed and their counters recomputed. Authored comments that have replies
    stay as anonymous placeholders, the rest are deleted. Follow edges,
    favourites and received notifications are removed by the foreign keys,
    while notifications sent by the user just lose their sender.
    """
    user = get_user_or_404(db, user_id)
    if user.id == admin.id:
        raise ValidationError("You cannot delete your own admin account")

    image_handles = [user.avatar_handle]
    for event in user.organized_events:
        image_handles.append(event.image_handle)
        image_handles.extend(image.public_id for image in event.gallery)

    # Roster entries on other organizers' events
    joined_event_ids = [
        event_id for (event_id,) in db.query(EventParticipant.event_id).filter(
            EventParticipant.user_id == user.id,
            EventParticipant.event_id.notin_(db.query(Event.id).filter(Event.organizer_id == user.id)),
        ).all()
    ]
    db.query(EventParticipant).filter(EventParticipant.user_id == user.id).delete(synchronize_session=False)
    for event_id in joined_event_ids:
        active = db.query(EventParticipant).filter(
            EventParticipant.event_id == event_id,
            EventParticipant.status != ParticipantStatus.CANCELLED,
        ).count()
        db.query(Event).filter(Event.id == event_id).update(
            {Event.current_participants: active}, synchronize_session=False
        )

    liked_comment_ids = [
        comment_id for (comment_id,) in db.query(CommentLike.comment_id).filter(CommentLike.user_id == user.id).all()
    ]
    db.query(CommentLike).filter(CommentLike.user_id == user.id).delete(synchronize_session=False)
    for comment_id in liked_comment_ids:
        likes = db.query(CommentLike).filter(CommentLike.comment_id == comment_id).count()
        db.query(Comment).filter(Comment.id == comment_id).update(
            {Comment.likes_count: likes}, synchronize_session=False
        )

    kept_comments = 0
    for comment in db.query(Comment).filter(Comment.author_id == user.id).order_by(Comment.id.desc()).all():
        if db.query(Comment).filter(Comment.parent_comment_id == comment.id).count():
            comment.content = DELETED_COMMENT_PLACEHOLDER
            comment.is_edited = True
            comment.edited_at = utcnow()
            kept_comments += 1
        else:
            db.delete(comment)
        db.flush()

    db.delete(user)
    db.commit()
    logger.info(
        f"🗑️ Admin {admin.id} deleted user {user_id} "
        f"({len(joined_event_ids)} rosters and {len(liked_comment_ids)} comment likes updated)"
    )

    if storage is not None:
        for handle in image_handles:
            if handle:
                storage.delete(handle)

    return {"rosters_updated": len(joined_event_ids), "comments_kept": kept_comments}
