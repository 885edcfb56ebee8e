# File: app/schemas/notification.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from app.models.notification import NotificationType
from app.schemas.user import UserSummary


class NotificationEventRef(BaseModel):
    id: int
    title: str
    date_time: datetime
    venue: Optional[str] = None

    class Config:
        from_attributes = True


class NotificationData(BaseModel):
    event: Optional[NotificationEventRef] = None
    comment_id: Optional[int] = None
    from_user: Optional[UserSummary] = None


class Notification(BaseModel):
    id: int
    notification_type: NotificationType
    title: str
    message: str
    data: NotificationData
    is_read: bool
    read_at: Optional[datetime] = None
    action_url: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BroadcastRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=500)
    user_ids: Optional[List[int]] = None
    send_email: bool = False
    action_url: Optional[str] = Field(None, max_length=255)
