"""Who may see which events.

``build_event_predicate`` turns a viewer plus the optional list filters into a
single SQLAlchemy boolean clause for ``db.query(Event).filter(...)``. It has no
side effects and never touches the session, so every branch can be checked by
running the clause against a small fixture table.

Viewer rules for listings:

- anonymous: PUBLIC only, any requested visibility is ignored
- admin: everything, or exactly the requested visibility when it parses
- member: PUBLIC plus PRIVATE events they host; ``visibility=PRIVATE`` narrows
  to their own hosted private events, anything else narrows to PUBLIC

Private events a member only attends are left out here; the
``my-attending`` and ``my-events`` listings cover them.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from sqlalchemy import and_, or_
from sqlalchemy.sql.elements import ColumnElement

from eventhub.models.event import Event, Visibility
from eventhub.models.user import User


@dataclass(frozen=True)
class Anonymous:
    pass


@dataclass(frozen=True)
class Member:
    user_id: str


@dataclass(frozen=True)
class Admin:
    user_id: str


Viewer = Union[Anonymous, Member, Admin]

ANONYMOUS = Anonymous()


def viewer_for(user: Optional[User]) -> Viewer:
    if user is None:
        return ANONYMOUS
    if user.is_admin:
        return Admin(user.user_id)
    return Member(user.user_id)


@dataclass(frozen=True)
class EventFilters:
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    visibility: Optional[str] = None  # raw request value, parsed leniently


def parse_visibility(raw: Optional[str]) -> Optional[Visibility]:
    """Case-insensitive parse; blank or unknown values give ``None``."""
    if raw is None or not raw.strip():
        return None
    try:
        return Visibility(raw.strip().upper())
    except ValueError:
        return None


def _visibility_clause(viewer: Viewer, requested: Optional[str]) -> Optional[ColumnElement]:
    if isinstance(viewer, Anonymous):
        return Event.visibility == Visibility.public

    wanted = parse_visibility(requested)

    if isinstance(viewer, Admin):
        return Event.visibility == wanted if wanted is not None else None

    own_private = and_(Event.visibility == Visibility.private, Event.host_id == viewer.user_id)
    if requested is None or not requested.strip():
        return or_(Event.visibility == Visibility.public, own_private)
    if wanted == Visibility.private:
        return own_private
    return Event.visibility == Visibility.public


def build_event_predicate(viewer: Viewer, filters: EventFilters) -> ColumnElement:
    clauses = [Event.deleted.is_(False)]

    visibility = _visibility_clause(viewer, filters.visibility)
    if visibility is not None:
        clauses.append(visibility)

    if filters.location is not None and filters.location.strip():
        clauses.append(Event.location.icontains(filters.location, autoescape=True))
    if filters.start_date is not None:
        clauses.append(Event.start_time >= filters.start_date)
    if filters.end_date is not None:
        clauses.append(Event.end_time <= filters.end_date)

    return and_(*clauses)


def can_view(visibility: Visibility, host_id: str, viewer: Viewer) -> bool:
    """Single-event rule: PUBLIC for anyone, PRIVATE for its host or an admin.

    Stricter than the listing rule: attendees of a private event
    get no access through this check either.
    """
    if visibility == Visibility.public:
        return True
    if isinstance(viewer, Admin):
        return True
    return isinstance(viewer, Member) and viewer.user_id == host_id


def can_modify(event: Event, user: User) -> bool:
    return user.is_admin or event.host_id == user.user_id
