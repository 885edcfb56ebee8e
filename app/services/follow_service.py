from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app import crud
from app.models.user import User, UserFollow
from app.core.exceptions import NotFoundError, ValidationError
from app.services import notification_service
import logging

logger = logging.getLogger(__name__)


def toggle_follow(db: Session, *, target_id: int, user: User) -> dict:
    """Follow or unfollow another user.

    One edge row serves both directions, so the follower list of the target and
    the following list of the caller can never disagree.
    """
    if target_id == user.id:
        raise ValidationError("You cannot follow yourself")
    target = crud.user.get(db, id=target_id)
    if not target:
        raise NotFoundError("User not found")

    edge = crud.user.get_follow(db, follower_id=user.id, followed_id=target.id)
    if edge:
        db.delete(edge)
        db.commit()
        is_following = False
        logger.info(f"User {user.id} unfollowed {target.id}")
    else:
        db.add(UserFollow(follower_id=user.id, followed_id=target.id))
        try:
            db.commit()
            notification_service.notify_safely(
                db, **notification_service.new_follower_payload(user, target.id)
            )
            logger.info(f"👥 User {user.id} followed {target.id}")
        except IntegrityError:
            db.rollback()
            logger.warning(f"User {user.id} already follows {target.id}")
        is_following = True

    return {
        "is_following": is_following,
        "followers_count": crud.user.count_followers(db, user_id=target.id),
        "following_count": crud.user.count_following(db, user_id=user.id),
    }
