from sqlalchemy import Column, String, Boolean, DateTime, Integer, ForeignKey, Enum
from sqlalchemy.orm import relationship
from app.models.base import BaseModel
import enum


class NotificationType(enum.Enum):
    NEW_EVENT = "new_event"
    EVENT_APPROVED = "event_approved"
    EVENT_REJECTED = "event_rejected"
    EVENT_REMINDER = "event_reminder"
    EVENT_PENDING = "event_pending"
    ADMIN_EVENT_PENDING = "admin_event_pending"
    EVENT_CANCELLED = "event_cancelled"
    NEW_COMMENT = "new_comment"
    COMMENT_REPLY = "comment_reply"
    FOLLOW = "follow"
    LIKE = "like"
    EVENT_UPDATED = "event_updated"
    EVENT_FAVOURITE = "event_favourite"
    SYSTEM = "system"


class Notification(BaseModel):
    __tablename__ = "notifications"

    recipient_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    notification_type = Column(Enum(NotificationType), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(String(500), nullable=False)

    # Optional references, resolved when the notification is read
    event_id = Column(Integer, ForeignKey("events.id", ondelete="SET NULL"), nullable=True)
    comment_id = Column(Integer, ForeignKey("comments.id", ondelete="SET NULL"), nullable=True)
    from_user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    is_read = Column(Boolean, nullable=False, default=False, index=True)
    read_at = Column(DateTime, nullable=True)
    action_url = Column(String(255), nullable=True)

    # Relationships
    recipient = relationship("User", foreign_keys=[recipient_id])
    from_user = relationship("User", foreign_keys=[from_user_id])
    event = relationship("Event")

    @property
    def data(self):
        return {
            "event": self.event,
            "comment_id": self.comment_id,
            "from_user": self.from_user,
        }
