from .base import BaseModel
from .user import User, UserRole, DanceStyle, SkillLevel, UserFollow, FavouriteEvent
from .event import Event, EventStatus, EventType, EventGalleryImage, TERMINAL_STATUSES
from .event_participant import EventParticipant, ParticipantStatus
from .comment import Comment, CommentLike, DELETED_COMMENT_PLACEHOLDER
from .notification import Notification, NotificationType

__all__ = [
    "BaseModel", "User", "UserRole", "DanceStyle", "SkillLevel", "UserFollow", "FavouriteEvent",
    "Event", "EventStatus", "EventType", "EventGalleryImage", "TERMINAL_STATUSES",
    "EventParticipant", "ParticipantStatus",
    "Comment", "CommentLike", "DELETED_COMMENT_PLACEHOLDER",
    "Notification", "NotificationType",
]
