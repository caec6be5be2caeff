"""Ticket entities — projections of tickets held by the external ticketing system."""

from dataclasses import dataclass
from datetime import datetime

UNKNOWN_SUBJECT = "Unknown"
DEFAULT_PRIORITY = 2


@dataclass
class Ticket:
    id: str
    subject: str
    description: str = ""
    priority: int = DEFAULT_PRIORITY
    urgency: int | None = None
    requester_location_id: str | None = None
    status: int | None = None
    created_at: datetime | None = None

    @classmethod
    def placeholder(cls, ticket_id: str) -> "Ticket":
        """Minimal stand-in used when the ticket cannot be fetched."""
        return cls(id=ticket_id, subject=UNKNOWN_SUBJECT, priority=DEFAULT_PRIORITY)

    def mentions(self, keyword: str) -> bool:
        needle = keyword.lower()
        return needle in (self.subject or "").lower() or needle in (self.description or "").lower()


@dataclass(frozen=True)
class OpenTicket:
    """An unresolved ticket currently held by an agent."""

    id: str
    created_at: datetime
    status: int | None = None
