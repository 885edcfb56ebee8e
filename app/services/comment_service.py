from typing import List, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app import crud
from app.models.user import User
from app.models.comment import Comment, CommentLike, DELETED_COMMENT_PLACEHOLDER
from app.schemas.comment import CommentCreate, CommentUpdate
from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.db.database import utcnow
from app.services import notification_service
from app.services.event_service import get_event_or_404
import logging

logger = logging.getLogger(__name__)


def get_comment_or_404(db: Session, comment_id: int) -> Comment:
    comment = crud.comment.get(db, id=comment_id)
    if not comment:
        raise NotFoundError("Comment not found")
    return comment


def _check_body(content, rating, event) -> None:
    if not content and rating is None:
        raise ValidationError("Invalid comment data", ["content: A comment is required when no rating is given"])
    if rating is not None and event.date_time > utcnow():
        raise ValidationError("Invalid comment data", ["rating: Events can be rated once they have started"])


def list_comments(db: Session, *, event_id: int, page: int = 1, limit: int = 10) -> Tuple[List[Comment], int]:
    get_event_or_404(db, event_id)
    return crud.comment.get_top_level(db, event_id=event_id, skip=(page - 1) * limit, limit=limit)


def add_comment(db: Session, *, event_id: int, comment_in: CommentCreate, user: User) -> Comment:
    event = get_event_or_404(db, event_id)
    _check_body(comment_in.content, comment_in.rating, event)

    parent = None
    if comment_in.parent_comment_id is not None:
        parent = crud.comment.get(db, id=comment_in.parent_comment_id)
        if not parent or parent.event_id != event.id:
            raise NotFoundError("Parent comment not found")
        if parent.parent_comment_id is not None:
            raise ValidationError("Replies can only be added to top-level comments")
        if comment_in.rating is not None:
            raise ValidationError("Invalid comment data", ["rating: Replies cannot carry a rating"])

    # The parent link lives on the reply itself, so this is a single insert
    comment = Comment(
        content=comment_in.content or "",
        rating=comment_in.rating,
        author_id=user.id,
        event_id=event.id,
        parent_comment_id=parent.id if parent else None,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info(f"💬 User {user.id} commented on event {event.id} (comment {comment.id})")

    if parent is not None:
        if parent.author_id is not None and parent.author_id != user.id:
            notification_service.notify_safely(
                db, **notification_service.comment_reply_payload(parent.author_id, event.id, user, comment.id)
            )
    elif event.organizer_id != user.id:
        notification_service.notify_safely(
            db, **notification_service.new_comment_payload(event, user, comment.id)
        )
    return comment


def update_comment(db: Session, *, comment_id: int, comment_in: CommentUpdate, user: User) -> Comment:
    comment = get_comment_or_404(db, comment_id)
    if comment.author_id != user.id and not user.is_admin:
        raise ForbiddenError("Not authorized to edit this comment")

    fields = comment_in.model_dump(exclude_unset=True)
    content = fields.get("content", comment.content)
    rating = fields.get("rating", comment.rating)
    if "rating" in fields and rating is not None:
        if comment.is_reply:
            raise ValidationError("Invalid comment data", ["rating: Replies cannot carry a rating"])
        _check_body(content, rating, comment.event)
    elif not content and rating is None:
        raise ValidationError("Invalid comment data", ["content: A comment is required when no rating is given"])

    comment.content = content or ""
    comment.rating = rating
    comment.is_edited = True
    comment.edited_at = utcnow()
    db.commit()
    db.refresh(comment)
    return comment


def delete_comment(db: Session, *, comment_id: int, user: User) -> bool:
    """Returns True when the comment row was removed, False when it was blanked"""
    comment = get_comment_or_404(db, comment_id)
    if comment.author_id != user.id and not user.is_admin:
        raise ForbiddenError("Not authorized to delete this comment")

    # A comment with replies stays in place to keep the thread readable
    if comment.replies:
        comment.content = DELETED_COMMENT_PLACEHOLDER
        comment.is_edited = True
        comment.edited_at = utcnow()
        db.commit()
        logger.info(f"Comment {comment_id} blanked, it has replies")
        return False

    db.delete(comment)
    db.commit()
    logger.info(f"🗑️ Comment {comment_id} deleted by user {user.id}")
    return True


def toggle_like(db: Session, *, comment_id: int, user: User) -> dict:
    comment = get_comment_or_404(db, comment_id)
    like = crud.comment.get_like(db, comment_id=comment.id, user_id=user.id)

    if like:
        db.delete(like)
        is_liked = False
    else:
        db.add(CommentLike(comment_id=comment.id, user_id=user.id))
        is_liked = True
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        comment = get_comment_or_404(db, comment_id)
        is_liked = True

    # The counter is always derived from the like rows
    comment.likes_count = crud.comment.count_likes(db, comment_id=comment.id)
    db.commit()
    return {"is_liked": is_liked, "likes_count": comment.likes_count}
