"""TicketContextPolicy — derive the immutable scoring context of a ticket."""

from __future__ import annotations

from datetime import datetime

from app.domain.entities.category import Category
from app.domain.entities.location import Location
from app.domain.entities.ticket import Ticket
from app.domain.value_objects.enums import Priority
from app.domain.value_objects.ticket_context import TicketContext

ONSITE_KEYWORD = "onsite"
VIP_LEVEL = 4

_PRIORITY_BY_CODE = {
    1: Priority.LOW,
    2: Priority.MEDIUM,
    3: Priority.HIGH,
    4: Priority.URGENT,
}


def map_priority(code: int | None) -> Priority:
    return _PRIORITY_BY_CODE.get(code, Priority.MEDIUM)


def is_vip_ticket(ticket: Ticket) -> bool:
    return ticket.priority == VIP_LEVEL or ticket.urgency == VIP_LEVEL


def requires_onsite(ticket: Ticket, category: Category | None) -> bool:
    if category is not None and category.requires_onsite:
        return True
    return ticket.mentions(ONSITE_KEYWORD)


def build_ticket_context(
    ticket: Ticket,
    category: Category | None,
    location: Location | None,
    now: datetime,
) -> TicketContext:
    """Project a ticket plus its resolved category and location into a TicketContext.

    Args:
        ticket: fetched (or placeholder) ticket.
        category: category resolved from the request, if any.
        location: requester location resolved by external id, if any.
        now: evaluation instant; fixes timezone offsets for the attempt.
    """
    required_skills: tuple[str, ...] = ()
    required_level = None
    estimated_hours = None
    if category is not None:
        required_skills = tuple(category.required_skills)
        required_level = category.priority_level
        estimated_hours = category.average_resolution_time

    return TicketContext(
        ticket_id=ticket.id,
        subject=ticket.subject,
        description=ticket.description or "",
        evaluated_at=now,
        category_id=category.id if category is not None else None,
        required_skills=required_skills,
        required_level=required_level,
        estimated_hours=estimated_hours,
        location_id=location.id if location is not None else None,
        location_name=location.name if location is not None else None,
        timezone=location.timezone if location is not None else None,
        is_vip=is_vip_ticket(ticket),
        priority=map_priority(ticket.priority),
        requires_onsite=requires_onsite(ticket, category),
    )
