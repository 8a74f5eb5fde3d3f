"""Core event service.

Responsibilities:
- Authorization hook: only the host or an admin may update/delete
- Time-bound validation: end strictly after start, re-checked on partial updates
- Soft delete: ``deleted`` flag flip, every read filters it out
- Viewer-aware listings through ``visibility.build_event_predicate``
- Read-through cache for single events and the upcoming listing, dropped on every write
"""
import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from eventhub.cache import event_cache
from eventhub.clock import utcnow
from eventhub.exceptions import Forbidden, InvalidInput, NotFound
from eventhub.models.attendance import Attendance, AttendanceStatus
from eventhub.models.event import Event, Visibility
from eventhub.models.user import User
from eventhub.schemas.event import EventOut, EventStatus, EventStatusOut
from eventhub.schemas.page import Page, PageRequest
from eventhub.services.links import with_links
from eventhub.services.pagination import paginate
from eventhub.services.visibility import (
    EventFilters,
    Viewer,
    build_event_predicate,
    can_modify,
    can_view,
    viewer_for,
)

logger = logging.getLogger(__name__)

SORTABLE = {
    "start_time": Event.start_time,
    "end_time": Event.end_time,
    "title": Event.title,
    "location": Event.location,
    "created_at": Event.created_at,
}

UPDATABLE_FIELDS = ("title", "description", "start_time", "end_time", "location", "visibility")

NOT_RESPONDED = "NOT_RESPONDED"


def to_event_out(event: Event) -> EventOut:
    return with_links(EventOut.model_validate(event))


def _page_events(query, page_request: PageRequest) -> Page:
    # attendee_count reads every attendance; load them for the whole page at once
    query = query.options(selectinload(Event.attendances))
    return paginate(query, page_request, SORTABLE, Event.event_id, to_event_out)


def get_active_event(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.event_id == event_id, Event.deleted.is_(False)).first()
    if not event:
        raise NotFound(f"Event not found with ID: {event_id}")
    return event


def _check_authorization(event: Event, user: User, action: str) -> None:
    if not can_modify(event, user):
        raise Forbidden(f"You don't have permission to {action} this event")


def _check_time_bounds(start_time: datetime, end_time: datetime) -> None:
    if end_time <= start_time:
        raise InvalidInput("End time must be after start time")


def create_event(
    db: Session,
    host: User,
    title: str,
    start_time: datetime,
    end_time: datetime,
    description: Optional[str] = None,
    location: Optional[str] = None,
    visibility: Visibility = Visibility.public,
) -> EventOut:
    _check_time_bounds(start_time, end_time)

    event = Event(
        title=title,
        description=description,
        host_id=host.user_id,
        start_time=start_time,
        end_time=end_time,
        location=location,
        visibility=visibility,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    event_cache.invalidate_all()
    logger.info("Created event '%s' (%s) by host %s", title, event.event_id, host.user_id)
    return to_event_out(event)


def update_event(db: Session, event_id: str, actor: User, updates: dict[str, Any]) -> EventOut:
    """Apply a partial update; ``updates`` holds only the fields the caller sent."""
    event = get_active_event(db, event_id)
    _check_authorization(event, actor, "update")

    changes = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS and v is not None}
    _check_time_bounds(
        changes.get("start_time", event.start_time),
        changes.get("end_time", event.end_time),
    )

    for field, value in changes.items():
        setattr(event, field, value)

    db.commit()
    db.refresh(event)
    event_cache.invalidate_all()
    logger.info("Updated event %s (%s) by user %s", event_id, ", ".join(sorted(changes)) or "no changes", actor.user_id)
    return to_event_out(event)


def delete_event(db: Session, event_id: str, actor: User) -> None:
    event = get_active_event(db, event_id)
    _check_authorization(event, actor, "delete")

    event.deleted = True
    db.commit()
    event_cache.invalidate_all()
    logger.info("Soft-deleted event %s by user %s", event_id, actor.user_id)


def get_event(db: Session, event_id: str, viewer: Viewer) -> EventOut:
    # The cache holds the representation only; the viewer check runs on every call.
    event = event_cache.get_or_load(
        ("event", event_id),
        lambda: to_event_out(get_active_event(db, event_id)),
    )
    if not can_view(event.visibility, event.host.user_id, viewer):
        raise Forbidden("You don't have permission to view this event")
    return event


def list_upcoming_events(db: Session, page_request: PageRequest) -> Page:
    def load() -> Page:
        query = db.query(Event).filter(
            Event.deleted.is_(False),
            Event.visibility == Visibility.public,
            Event.start_time >= utcnow(),
        )
        return _page_events(query, page_request)

    def nothing_started(page: Page) -> bool:
        now = utcnow()
        return all(event.start_time >= now for event in page.content)

    key = ("upcoming", page_request.page, page_request.size, page_request.sort, page_request.descending)
    return event_cache.get_or_load(key, load, is_fresh=nothing_started)


def list_events(db: Session, filters: EventFilters, page_request: PageRequest, viewer: Viewer) -> Page:
    query = db.query(Event).filter(build_event_predicate(viewer, filters))
    return _page_events(query, page_request)


def list_hosted_events(db: Session, user: User, page_request: PageRequest) -> Page:
    query = db.query(Event).filter(Event.deleted.is_(False), Event.host_id == user.user_id)
    return _page_events(query, page_request)


def list_attending_events(db: Session, user: User, page_request: PageRequest) -> Page:
    query = (
        db.query(Event)
        .join(Attendance, Attendance.event_id == Event.event_id)
        .filter(Event.deleted.is_(False), Attendance.user_id == user.user_id)
    )
    return _page_events(query, page_request)


def list_user_events(db: Session, user: User, page_request: PageRequest) -> Page:
    """Events the user hosts or has responded to."""
    attended = select(Attendance.event_id).where(Attendance.user_id == user.user_id)
    query = db.query(Event).filter(
        Event.deleted.is_(False),
        or_(Event.host_id == user.user_id, Event.event_id.in_(attended)),
    )
    return _page_events(query, page_request)


def temporal_status(start_time: datetime, end_time: datetime, now: datetime) -> EventStatus:
    if now > end_time:
        return EventStatus.completed
    if start_time <= now:
        return EventStatus.ongoing
    return EventStatus.upcoming


def get_event_status(db: Session, event_id: str, user: User) -> EventStatusOut:
    event = get_active_event(db, event_id)
    if not can_view(event.visibility, event.host_id, viewer_for(user)):
        raise Forbidden("You don't have permission to view this event")

    counts = dict(
        db.query(Attendance.status, func.count())
        .filter(Attendance.event_id == event.event_id)
        .group_by(Attendance.status)
        .all()
    )
    going = counts.get(AttendanceStatus.going, 0)
    maybe = counts.get(AttendanceStatus.maybe, 0)
    declined = counts.get(AttendanceStatus.declined, 0)

    own = (
        db.query(Attendance.status)
        .filter(Attendance.event_id == event.event_id, Attendance.user_id == user.user_id)
        .scalar()
    )

    now = utcnow()
    return EventStatusOut(
        event_id=event.event_id,
        title=event.title,
        status=temporal_status(event.start_time, event.end_time, now),
        total_attendees=going + maybe + declined,
        going_count=going,
        maybe_count=maybe,
        declined_count=declined,
        start_time=event.start_time,
        end_time=event.end_time,
        can_user_attend=event.start_time > now,
        user_attendance_status=own.value if own is not None else NOT_RESPONDED,
    )
