"""Pydantic schemas for RSVPs."""
from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field

from eventhub.models.attendance import AttendanceStatus
from eventhub.schemas.event import EventOut
from eventhub.schemas.user import UserOut


class AttendanceCreate(BaseModel):
    """RSVP body. Clients send ``eventId``; ``event_id`` is accepted too."""

    event_id: str = Field(alias="eventId")
    status: AttendanceStatus = AttendanceStatus.going

    model_config = {"populate_by_name": True}


class AttendanceOut(BaseModel):
    event: EventOut
    user: UserOut
    status: AttendanceStatus
    responded_at: datetime

    model_config = {"from_attributes": True}
