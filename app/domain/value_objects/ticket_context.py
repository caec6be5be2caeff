"""TicketContext — immutable projection of a ticket used for one assignment attempt."""

from dataclasses import dataclass
from datetime import datetime

from app.domain.value_objects.enums import AgentLevel, Priority


@dataclass(frozen=True)
class TicketContext:
    ticket_id: str
    subject: str
    evaluated_at: datetime
    description: str = ""
    category_id: int | None = None
    required_skills: tuple[str, ...] = ()
    related_skills: tuple[str, ...] = ()
    required_level: AgentLevel | None = None
    estimated_hours: float | None = None
    location_id: int | None = None
    location_name: str | None = None
    timezone: str | None = None
    is_vip: bool = False
    priority: Priority = Priority.MEDIUM
    requires_onsite: bool = False
