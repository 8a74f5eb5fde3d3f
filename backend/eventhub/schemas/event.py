"""Pydantic schemas for Events."""
from __future__ import annotations
import enum
from datetime import datetime
from typing import Annotated, Optional
from pydantic import AfterValidator, BaseModel, Field, field_validator

from eventhub.clock import as_naive_utc
from eventhub.models.event import Visibility
from eventhub.schemas.user import UserOut


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


Title = Annotated[str, Field(max_length=200), AfterValidator(_not_blank)]


class EventCreate(BaseModel):
    title: Title
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    location: Optional[str] = Field(default=None, max_length=500)
    visibility: Visibility = Visibility.public

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_times(cls, value: datetime) -> datetime:
        return as_naive_utc(value)


class EventUpdate(BaseModel):
    """Partial update — only fields present and non-null are applied."""

    title: Optional[Title] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = Field(default=None, max_length=500)
    visibility: Optional[Visibility] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_times(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_naive_utc(value)


class EventOut(BaseModel):
    event_id: str
    title: str
    description: Optional[str] = None
    host: UserOut
    start_time: datetime
    end_time: datetime
    location: Optional[str] = None
    visibility: Visibility
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    attendee_count: int = 0
    links: dict[str, str] = {}

    model_config = {"from_attributes": True}


class EventStatus(str, enum.Enum):
    upcoming = "UPCOMING"
    ongoing = "ONGOING"
    completed = "COMPLETED"
    cancelled = "CANCELLED"  # reserved, nothing produces it yet


class EventStatusOut(BaseModel):
    event_id: str
    title: str
    status: EventStatus
    total_attendees: int
    going_count: int
    maybe_count: int
    declined_count: int
    start_time: datetime
    end_time: datetime
    can_user_attend: bool
    user_attendance_status: str
