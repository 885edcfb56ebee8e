# File: app/schemas/event.py
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime
from app.models.user import DanceStyle, SkillLevel
from app.models.event import EventStatus, EventType
from app.models.event_participant import ParticipantStatus
from app.schemas.user import UserSummary


class Location(BaseModel):
    venue: str = Field(..., min_length=2, max_length=200)
    address: str = Field(..., min_length=5, max_length=300)
    city: str = Field(..., min_length=2, max_length=100)
    region: Optional[str] = Field(None, max_length=100)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class ContactInfo(BaseModel):
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    whatsapp: Optional[str] = Field(None, max_length=50)


class SocialLinks(BaseModel):
    facebook: Optional[str] = Field(None, max_length=500)
    instagram: Optional[str] = Field(None, max_length=500)
    website: Optional[str] = Field(None, max_length=500)


def _check_tags(tags):
    if tags is None:
        return tags
    cleaned = [tag.strip() for tag in tags]
    for tag in cleaned:
        if not 1 <= len(tag) <= 30:
            raise ValueError("Each tag must be between 1 and 30 characters")
    return cleaned


class EventCreate(BaseModel):
    title: str = Field(..., min_length=5, max_length=200)
    description: str = Field(..., min_length=20, max_length=2000)
    image: Optional[str] = Field(None, max_length=500)
    date_time: datetime
    end_date_time: Optional[datetime] = None
    location: Location
    dance_style: DanceStyle
    skill_level: SkillLevel = SkillLevel.ALL
    event_type: EventType
    price: float = Field(0, ge=0)
    currency: str = Field("EUR", max_length=10)
    max_participants: Optional[int] = Field(None, ge=1)
    tags: List[str] = []
    requirements: Optional[str] = Field(None, max_length=500)
    contact_info: Optional[ContactInfo] = None
    social_links: Optional[SocialLinks] = None

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, v):
        return v.strip()

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return _check_tags(v)


class EventUpdate(BaseModel):
    """Partial update; organizer and status are not editable here"""
    title: Optional[str] = Field(None, min_length=5, max_length=200)
    description: Optional[str] = Field(None, min_length=20, max_length=2000)
    image: Optional[str] = Field(None, max_length=500)
    date_time: Optional[datetime] = None
    end_date_time: Optional[datetime] = None
    location: Optional[Location] = None
    dance_style: Optional[DanceStyle] = None
    skill_level: Optional[SkillLevel] = None
    event_type: Optional[EventType] = None
    price: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = Field(None, max_length=10)
    max_participants: Optional[int] = Field(None, ge=1)
    tags: Optional[List[str]] = None
    requirements: Optional[str] = Field(None, max_length=500)
    contact_info: Optional[ContactInfo] = None
    social_links: Optional[SocialLinks] = None
    featured: Optional[bool] = None

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return _check_tags(v)


class EventStatusUpdate(BaseModel):
    status: EventStatus
    rejection_reason: Optional[str] = Field(None, max_length=500)


class BulkApproveRequest(BaseModel):
    event_ids: List[int] = Field(..., min_length=1)

# ==========================================
# OUTPUT SCHEMAS
# ==========================================

class LocationOut(BaseModel):
    venue: str
    address: str
    city: str
    region: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class ParticipantOut(BaseModel):
    user: UserSummary
    registered_at: datetime
    status: ParticipantStatus

    class Config:
        from_attributes = True


class GalleryImageOut(BaseModel):
    id: int
    url: str
    public_id: Optional[str] = None

    class Config:
        from_attributes = True


class EventOut(BaseModel):
    id: int
    title: str
    description: str
    image: Optional[str] = None
    organizer: UserSummary
    date_time: datetime
    end_date_time: Optional[datetime] = None
    location: LocationOut
    dance_style: DanceStyle
    skill_level: SkillLevel
    event_type: EventType
    price: float
    currency: str
    max_participants: Optional[int] = None
    current_participants: int
    participants: List[ParticipantOut] = []
    gallery: List[GalleryImageOut] = []
    tags: List[str] = []
    requirements: Optional[str] = None
    contact_info: ContactInfo
    social_links: SocialLinks
    status: EventStatus
    featured: bool
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EventSummary(BaseModel):
    """Compact reference used in notifications and user profiles"""
    id: int
    title: str
    date_time: datetime
    image: Optional[str] = None
    status: EventStatus

    class Config:
        from_attributes = True
