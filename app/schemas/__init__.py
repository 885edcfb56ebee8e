# File: app/schemas/__init__.py
from .common import Pagination, build_pagination, success_response
from .auth import Token, RegisterRequest, LoginRequest, PasswordChangeRequest
from .user import (
    UserSummary, UserPublic, UserProfile, AdminUserView,
    UserPreferences, NotificationPreferences,
    ProfileUpdate, AdminUserUpdate,
)
from .event import (
    Location, ContactInfo, SocialLinks,
    EventCreate, EventUpdate, EventStatusUpdate, BulkApproveRequest,
    EventOut, EventSummary, ParticipantOut, GalleryImageOut,
)
from .comment import CommentCreate, CommentUpdate, CommentOut
from .notification import Notification, NotificationData, BroadcastRequest

__all__ = [
    "Pagination", "build_pagination", "success_response",
    "Token", "RegisterRequest", "LoginRequest", "PasswordChangeRequest",
    "UserSummary", "UserPublic", "UserProfile", "AdminUserView",
    "UserPreferences", "NotificationPreferences", "ProfileUpdate", "AdminUserUpdate",
    "Location", "ContactInfo", "SocialLinks",
    "EventCreate", "EventUpdate", "EventStatusUpdate", "BulkApproveRequest",
    "EventOut", "EventSummary", "ParticipantOut", "GalleryImageOut",
    "CommentCreate", "CommentUpdate", "CommentOut",
    "Notification", "NotificationData", "BroadcastRequest",
]
