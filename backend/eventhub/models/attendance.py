"""Attendance (RSVP) ORM model — one row per (event, user)."""
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from eventhub.clock import utcnow
from eventhub.database import Base


class AttendanceStatus(str, enum.Enum):
    going = "GOING"
    maybe = "MAYBE"
    declined = "DECLINED"


class Attendance(Base):
    __tablename__ = "attendances"

    event_id = Column(String(36), ForeignKey("events.event_id", ondelete="CASCADE"), primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True, index=True)
    status = Column(SAEnum(AttendanceStatus), nullable=False, default=AttendanceStatus.going, index=True)
    responded_at = Column(DateTime, nullable=False, default=utcnow)

    event = relationship("Event", back_populates="attendances")
    user = relationship("User", lazy="joined")
