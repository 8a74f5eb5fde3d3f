"""RSVP upserts and attendance listings."""
import logging

from sqlalchemy.orm import Session, selectinload

from eventhub.cache import event_cache
from eventhub.clock import utcnow
from eventhub.models.attendance import Attendance, AttendanceStatus
from eventhub.models.event import Event
from eventhub.models.user import User
from eventhub.schemas.attendance import AttendanceOut
from eventhub.schemas.page import Page, PageRequest
from eventhub.schemas.user import UserOut
from eventhub.services.event_service import get_active_event, to_event_out
from eventhub.services.pagination import paginate

logger = logging.getLogger(__name__)

SORTABLE = {
    "responded_at": Attendance.responded_at,
    "status": Attendance.status,
}


def to_attendance_out(attendance: Attendance) -> AttendanceOut:
    return AttendanceOut(
        event=to_event_out(attendance.event),
        user=UserOut.model_validate(attendance.user),
        status=attendance.status,
        responded_at=attendance.responded_at,
    )


def _page_attendances(query, page_request: PageRequest, tiebreak) -> Page:
    query = query.options(selectinload(Attendance.event).selectinload(Event.attendances))
    return paginate(query, page_request, SORTABLE, tiebreak, to_attendance_out)


def rsvp(db: Session, event_id: str, status: AttendanceStatus, user: User) -> AttendanceOut:
    """Create or overwrite the caller's response for an event.

    Any authenticated user may respond to any live event, hosts included.
    """
    event = get_active_event(db, event_id)

    attendance = (
        db.query(Attendance)
        .filter(Attendance.event_id == event.event_id, Attendance.user_id == user.user_id)
        .first()
    )
    if not attendance:
        attendance = Attendance(event_id=event.event_id, user_id=user.user_id)
        db.add(attendance)

    attendance.status = status
    attendance.responded_at = utcnow()
    db.commit()
    db.refresh(attendance)
    # attendee counts are part of the cached event representation
    event_cache.invalidate_all()
    logger.info("User %s RSVP'd '%s' to event %s", user.user_id, status.value, event.event_id)
    return to_attendance_out(attendance)


def list_user_attendances(db: Session, user: User, page_request: PageRequest) -> Page:
    query = (
        db.query(Attendance)
        .join(Event, Event.event_id == Attendance.event_id)
        .filter(Attendance.user_id == user.user_id, Event.deleted.is_(False))
    )
    return _page_attendances(query, page_request, Attendance.event_id)


def list_event_attendances(db: Session, event_id: str, page_request: PageRequest) -> Page:
    event = get_active_event(db, event_id)
    query = db.query(Attendance).filter(Attendance.event_id == event.event_id)
    return _page_attendances(query, page_request, Attendance.user_id)
