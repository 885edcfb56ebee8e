# File: app/models/user.py
from sqlalchemy import Column, String, Boolean, Enum, Integer, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from app.models.base import BaseModel
import enum


class UserRole(enum.Enum):
    USER = "user"
    ORGANIZER = "organizer"
    ADMIN = "admin"


class DanceStyle(enum.Enum):
    SALSA = "salsa"
    BACHATA = "bachata"
    KIZOMBA = "kizomba"
    MERENGUE = "merengue"
    REGGAETON = "reggaeton"
    OTHER = "altro"


class SkillLevel(enum.Enum):
    ALL = "tutti"
    BEGINNER = "principiante"
    INTERMEDIATE = "intermedio"
    ADVANCED = "avanzato"
    PROFESSIONAL = "professionista"


class User(BaseModel):
    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    avatar = Column(String(500), nullable=True)
    avatar_handle = Column(String(500), nullable=True)
    bio = Column(String(500), nullable=False, default="")
    role = Column(Enum(UserRole), nullable=False, default=UserRole.USER)
    is_verified = Column(Boolean, nullable=False, default=False)

    # Preferences
    preferred_dance_styles = Column(JSON, nullable=False, default=list)
    preferred_skill_level = Column(Enum(SkillLevel), nullable=False, default=SkillLevel.BEGINNER)
    notify_email = Column(Boolean, nullable=False, default=True)
    notify_push = Column(Boolean, nullable=False, default=True)
    notify_new_events = Column(Boolean, nullable=False, default=True)
    notify_event_reminders = Column(Boolean, nullable=False, default=True)

    # Location
    city = Column(String(100), nullable=True)
    region = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True, default="Italy")

    # Relationships
    organized_events = relationship(
        "Event", back_populates="organizer", cascade="all, delete-orphan", passive_deletes=True
    )
    following_links = relationship(
        "UserFollow",
        foreign_keys="UserFollow.follower_id",
        back_populates="follower",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    follower_links = relationship(
        "UserFollow",
        foreign_keys="UserFollow.followed_id",
        back_populates="followed",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    favourite_links = relationship(
        "FavouriteEvent",
        back_populates="user",
        order_by="FavouriteEvent.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def following_ids(self):
        return [link.followed_id for link in self.following_links]

    @property
    def follower_ids(self):
        return [link.follower_id for link in self.follower_links]

    @property
    def favourite_event_ids(self):
        return [link.event_id for link in self.favourite_links]

    @property
    def preferences(self):
        return {
            "dance_styles": self.preferred_dance_styles or [],
            "skill_level": self.preferred_skill_level,
            "notifications": {
                "email": self.notify_email,
                "push": self.notify_push,
                "new_events": self.notify_new_events,
                "event_reminders": self.notify_event_reminders,
            },
        }

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def wants_email(self) -> bool:
        return self.notify_email is not False


class UserFollow(BaseModel):
    """One directed edge of the follow graph; read from either side"""
    __tablename__ = "user_follows"
    __table_args__ = (UniqueConstraint("follower_id", "followed_id", name="uq_user_follows_pair"),)

    follower_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    followed_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    follower = relationship("User", foreign_keys=[follower_id], back_populates="following_links")
    followed = relationship("User", foreign_keys=[followed_id], back_populates="follower_links")


class FavouriteEvent(BaseModel):
    __tablename__ = "user_favourite_events"
    __table_args__ = (UniqueConstraint("user_id", "event_id", name="uq_user_favourite_events_pair"),)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User", back_populates="favourite_links")
    event = relationship("Event")
