# File: app/models/event.py
from sqlalchemy import Column, String, Text, Boolean, Numeric, ForeignKey, Integer, DateTime, Enum, JSON, Float
from sqlalchemy.orm import relationship
from app.models.base import BaseModel
from app.models.user import DanceStyle, SkillLevel
import enum


class EventStatus(enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


TERMINAL_STATUSES = (EventStatus.CANCELLED, EventStatus.COMPLETED)


class EventType(enum.Enum):
    WORKSHOP = "workshop"
    SOCIAL = "social"
    FESTIVAL = "festival"
    COMPETITION = "competizione"
    COURSE = "corso"


class Event(BaseModel):
    __tablename__ = "events"

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String(500), nullable=True)
    image_handle = Column(String(500), nullable=True)
    organizer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Schedule (naive UTC)
    date_time = Column(DateTime, nullable=False, index=True)
    end_date_time = Column(DateTime, nullable=True)

    # Location
    venue = Column(String(200), nullable=False)
    address = Column(String(300), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    region = Column(String(100), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # Classification
    dance_style = Column(Enum(DanceStyle), nullable=False, index=True)
    skill_level = Column(Enum(SkillLevel), nullable=False, default=SkillLevel.ALL)
    event_type = Column(Enum(EventType), nullable=False)

    # Pricing & capacity
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    currency = Column(String(10), nullable=False, default="EUR")
    max_participants = Column(Integer, nullable=True)
    current_participants = Column(Integer, nullable=False, default=0)

    tags = Column(JSON, nullable=False, default=list)
    requirements = Column(String(500), nullable=True)

    # Contact & social
    contact_phone = Column(String(50), nullable=True)
    contact_email = Column(String(255), nullable=True)
    contact_whatsapp = Column(String(50), nullable=True)
    facebook_url = Column(String(500), nullable=True)
    instagram_url = Column(String(500), nullable=True)
    website_url = Column(String(500), nullable=True)

    # Moderation
    status = Column(Enum(EventStatus), nullable=False, default=EventStatus.PENDING, index=True)
    featured = Column(Boolean, nullable=False, default=False)
    rejection_reason = Column(Text, nullable=True)

    # Relationships
    organizer = relationship("User", back_populates="organized_events")
    participants = relationship(
        "EventParticipant",
        back_populates="event",
        order_by="EventParticipant.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    gallery = relationship(
        "EventGalleryImage",
        back_populates="event",
        order_by="EventGalleryImage.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    comments = relationship("Comment", back_populates="event", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def location(self):
        return {
            "venue": self.venue,
            "address": self.address,
            "city": self.city,
            "region": self.region,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }

    @property
    def contact_info(self):
        return {"phone": self.contact_phone, "email": self.contact_email, "whatsapp": self.contact_whatsapp}

    @property
    def social_links(self):
        return {"facebook": self.facebook_url, "instagram": self.instagram_url, "website": self.website_url}

    @property
    def participant_ids(self):
        return [p.user_id for p in self.participants]


class EventGalleryImage(BaseModel):
    __tablename__ = "event_gallery_images"

    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(String(500), nullable=False)
    public_id = Column(String(500), nullable=True)

    event = relationship("Event", back_populates="gallery")
