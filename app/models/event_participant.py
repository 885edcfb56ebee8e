from sqlalchemy import Column, Integer, ForeignKey, DateTime, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from app.models.base import BaseModel
from app.db.database import utcnow
import enum


class ParticipantStatus(enum.Enum):
    REGISTERED = "registered"
    ATTENDED = "attended"
    CANCELLED = "cancelled"


class EventParticipant(BaseModel):
    __tablename__ = "event_participants"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_event_participants_pair"),)

    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    registered_at = Column(DateTime, nullable=False, default=utcnow)
    status = Column(Enum(ParticipantStatus), nullable=False, default=ParticipantStatus.REGISTERED)

    # Relationships
    event = relationship("Event", back_populates="participants")
    user = relationship("User")
