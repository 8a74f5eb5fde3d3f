"""Event ORM model."""
import uuid
import enum
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from eventhub.database import Base
from eventhub.models.attendance import AttendanceStatus


class Visibility(str, enum.Enum):
    public = "PUBLIC"
    private = "PRIVATE"


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    host_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    location = Column(String(500), nullable=True, index=True)
    visibility = Column(SAEnum(Visibility), nullable=False, default=Visibility.public, index=True)
    deleted = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    host = relationship("User", lazy="joined")
    attendances = relationship("Attendance", back_populates="event", cascade="all, delete-orphan")

    @property
    def attendee_count(self) -> int:
        return sum(1 for a in self.attendances if a.status == AttendanceStatus.going)
