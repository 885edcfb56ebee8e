from typing import Optional, Tuple
from sqlalchemy.orm import Session
from app import crud
from app.models.user import User, UserRole
from app.schemas.auth import RegisterRequest, PasswordChangeRequest
from app.schemas.user import ProfileUpdate
from app.core.email_service import email_service
from app.core.exceptions import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from app.core.security import create_access_token, verify_password
from app.services.image_storage import ImageStorage
import logging

logger = logging.getLogger(__name__)


def register(db: Session, *, user_in: RegisterRequest) -> Tuple[User, str]:
    if crud.user.get_by_email(db, email=user_in.email):
        raise ConflictError("A user with this email already exists")

    user = crud.user.create(db, obj_in=user_in)
    logger.info(f"👤 New {user.role.value} registered: {user.email}")

    try:
        email_service.send_welcome_email(user.email, user.name, is_organizer=user.role == UserRole.ORGANIZER)
    except Exception:
        logger.exception(f"Welcome email to {user.email} failed")

    return user, create_access_token(user.id)


def login(db: Session, *, email: str, password: str) -> Tuple[User, str]:
    user = crud.user.authenticate(db, email=email, password=password)
    if not user:
        raise UnauthorizedError("Invalid email or password")
    logger.info(f"🔐 User {user.id} logged in")
    return user, create_access_token(user.id)


def update_profile(db: Session, *, user: User, profile_in: ProfileUpdate) -> User:
    data = profile_in.model_dump(exclude_unset=True)
    previous_avatar = user.avatar

    for field in ("name", "bio", "avatar", "city", "region"):
        if field not in data or (field == "name" and data[field] is None):
            continue
        value = data[field]
        setattr(user, field, value.strip() if isinstance(value, str) else value)
    if user.avatar != previous_avatar:
        # A pasted URL is not a blob we own
        user.avatar_handle = None
    if user.bio is None:
        user.bio = ""

    if data.get("dance_styles") is not None:
        user.preferred_dance_styles = [style.value for style in profile_in.dance_styles]
    if data.get("skill_level") is not None:
        user.preferred_skill_level = profile_in.skill_level

    if profile_in.notifications is not None:
        prefs = profile_in.notifications
        user.notify_email = prefs.email
        user.notify_push = prefs.push
        user.notify_new_events = prefs.new_events
        user.notify_event_reminders = prefs.event_reminders

    db.commit()
    db.refresh(user)
    return user


def set_avatar(
    db: Session, *, user: User, storage: ImageStorage, content: bytes, filename: str, content_type: str
) -> User:
    stored = storage.upload(content, filename, content_type, folder="avatars")
    previous_handle = user.avatar_handle
    user.avatar = stored.url
    user.avatar_handle = stored.handle
    db.commit()
    db.refresh(user)
    logger.info(f"🖼️ User {user.id} uploaded a new avatar")

    if previous_handle:
        storage.delete(previous_handle)
    return user


def change_password(db: Session, *, user: User, password_in: PasswordChangeRequest) -> None:
    if not verify_password(password_in.current_password, user.hashed_password):
        raise ValidationError("Current password is incorrect")
    crud.user.set_password(db, db_obj=user, password=password_in.new_password)
    logger.info(f"🔑 User {user.id} changed password")


def get_user_or_404(db: Session, user_id: int) -> User:
    user = crud.user.get(db, id=user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def get_social_counts(db: Session, *, user: User, viewer: Optional[User] = None) -> dict:
    counts = {
        "followers_count": crud.user.count_followers(db, user_id=user.id),
        "following_count": crud.user.count_following(db, user_id=user.id),
        "favourites_count": crud.user.count_favourites(db, user_id=user.id),
        "is_following": False,
    }
    if viewer is not None and viewer.id != user.id:
        counts["is_following"] = crud.user.is_following(db, follower_id=viewer.id, followed_id=user.id)
    return counts
