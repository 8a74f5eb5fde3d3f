"""Hypermedia links for event representations.

Applied to responses only, after the query has run.
"""
from eventhub.schemas.event import EventOut

API_PREFIX = "/api"


def event_links(event_id: str) -> dict[str, str]:
    href = f"{API_PREFIX}/events/{event_id}"
    return {
        "self": href,
        "update": href,
        "delete": href,
        "status": f"{href}/status",
        "attendances": f"{API_PREFIX}/attendances/event/{event_id}",
    }


def with_links(event: EventOut) -> EventOut:
    return event.model_copy(update={"links": event_links(event.event_id)})
