"""Event API routes — delegates to event_service for invariant enforcement."""
import logging
from typing import Optional
from datetime import datetime
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from eventhub.clock import as_naive_utc
from eventhub.database import get_db
from eventhub.dependencies import get_current_user, get_optional_user, page_params
from eventhub.models.user import User
from eventhub.schemas.event import EventCreate, EventUpdate, EventOut, EventStatusOut
from eventhub.schemas.page import Page, PageRequest
from eventhub.services import event_service
from eventhub.services.visibility import EventFilters, viewer_for

logger = logging.getLogger(__name__)
router = APIRouter()

by_start_time = page_params("start_time")


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a new event hosted by the caller."""
    return event_service.create_event(
        db=db,
        host=user,
        title=payload.title,
        start_time=payload.start_time,
        end_time=payload.end_time,
        description=payload.description,
        location=payload.location,
        visibility=payload.visibility,
    )


@router.get("/", response_model=Page[EventOut])
def list_events(
    location: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None, alias="startDate", description="ISO-8601 date-time, inclusive lower bound on start"),
    end_date: Optional[datetime] = Query(None, alias="endDate", description="ISO-8601 date-time, inclusive upper bound on end"),
    visibility: Optional[str] = Query(None),
    page_request: PageRequest = Depends(by_start_time),
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """List events visible to the caller, with optional filters. Anonymous callers see public events only."""
    filters = EventFilters(
        location=location,
        start_date=as_naive_utc(start_date),
        end_date=as_naive_utc(end_date),
        visibility=visibility,
    )
    return event_service.list_events(db, filters, page_request, viewer_for(user))


@router.get("/upcoming", response_model=Page[EventOut])
def list_upcoming_events(
    page_request: PageRequest = Depends(by_start_time),
    db: Session = Depends(get_db),
):
    """Public events that have not started yet."""
    return event_service.list_upcoming_events(db, page_request)


@router.get("/my-hosted", response_model=Page[EventOut])
def list_my_hosted_events(
    page_request: PageRequest = Depends(by_start_time),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return event_service.list_hosted_events(db, user, page_request)


@router.get("/my-attending", response_model=Page[EventOut])
def list_my_attending_events(
    page_request: PageRequest = Depends(by_start_time),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return event_service.list_attending_events(db, user, page_request)


@router.get("/my-events", response_model=Page[EventOut])
def list_my_events(
    page_request: PageRequest = Depends(by_start_time),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Events the caller hosts or has responded to."""
    return event_service.list_user_events(db, user, page_request)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Fetch a single event. Private events are visible to their host and admins only."""
    return event_service.get_event(db, event_id, viewer_for(user))


@router.put("/{event_id}", response_model=EventOut)
def update_event(
    event_id: str,
    payload: EventUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Partially update an event (host or admin only)."""
    updates = payload.model_dump(exclude_unset=True, exclude_none=True)
    return event_service.update_event(db=db, event_id=event_id, actor=user, updates=updates)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Soft-delete an event (host or admin only)."""
    event_service.delete_event(db=db, event_id=event_id, actor=user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{event_id}/status", response_model=EventStatusOut)
def get_event_status(event_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Attendance counts, the caller's own response and where the event is in time."""
    return event_service.get_event_status(db, event_id, user)
