"""Attendance / RSVP API routes."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eventhub.database import get_db
from eventhub.dependencies import get_current_user, page_params, require_admin
from eventhub.models.user import User
from eventhub.schemas.attendance import AttendanceCreate, AttendanceOut
from eventhub.schemas.page import Page, PageRequest
from eventhub.services import attendance_service

logger = logging.getLogger(__name__)
router = APIRouter()

by_responded_at = page_params("responded_at")


@router.post("/", response_model=AttendanceOut)
def rsvp(payload: AttendanceCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Set or update the caller's RSVP status for an event."""
    return attendance_service.rsvp(db, payload.event_id, payload.status, user)


@router.get("/my-attendances", response_model=Page[AttendanceOut])
def list_my_attendances(
    page_request: PageRequest = Depends(by_responded_at),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return attendance_service.list_user_attendances(db, user, page_request)


@router.get("/event/{event_id}", response_model=Page[AttendanceOut])
def list_event_attendances(
    event_id: str,
    page_request: PageRequest = Depends(by_responded_at),
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """All responses for one event. Admin only."""
    return attendance_service.list_event_attendances(db, event_id, page_request)
