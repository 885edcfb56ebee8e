# File: app/schemas/user.py
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime
from app.models.user import UserRole, DanceStyle, SkillLevel

# ==========================================
# OUTPUT SCHEMAS
# ==========================================

class UserSummary(BaseModel):
    """Author/organizer reference embedded in other resources"""
    id: int
    name: str
    avatar: Optional[str] = None

    class Config:
        from_attributes = True


class NotificationPreferences(BaseModel):
    email: bool = True
    push: bool = True
    new_events: bool = True
    event_reminders: bool = True


class UserPreferences(BaseModel):
    dance_styles: List[DanceStyle] = []
    skill_level: Optional[SkillLevel] = None
    notifications: NotificationPreferences = NotificationPreferences()


class UserPublic(BaseModel):
    id: int
    name: str
    avatar: Optional[str] = None
    bio: Optional[str] = ""
    role: UserRole
    is_verified: bool = False
    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserProfile(UserPublic):
    """The caller's own account"""
    email: EmailStr
    preferences: UserPreferences
    following_ids: List[int] = []
    follower_ids: List[int] = []
    favourite_event_ids: List[int] = []


class AdminUserView(UserPublic):
    email: EmailStr

# ==========================================
# INPUT SCHEMAS
# ==========================================

class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)
    avatar: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=100)
    region: Optional[str] = Field(None, max_length=100)
    dance_styles: Optional[List[DanceStyle]] = None
    skill_level: Optional[SkillLevel] = None
    notifications: Optional[NotificationPreferences] = None

    @field_validator("skill_level")
    @classmethod
    def personal_level(cls, v):
        # "tutti" describes an event audience, not a dancer
        if v == SkillLevel.ALL:
            raise ValueError("Invalid skill level")
        return v


class AdminUserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    is_verified: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower() if v else v
