"""Freshservice payload → domain mappers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from app.domain.entities.ticket import DEFAULT_PRIORITY, UNKNOWN_SUBJECT, OpenTicket, Ticket

DEFAULT_EVENT = "ticket_created"


@dataclass
class WebhookEvent:
    event: str
    ticket_id: str | None
    ticket: Ticket | None
    changes: dict[str, Any] = field(default_factory=dict)
    category_external_id: str | None = None

    @property
    def is_unassignment(self) -> bool:
        return "responder_id" in self.changes and self.changes["responder_id"] is None


def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_ticket_payload(payload: dict[str, Any]) -> Ticket:
    ticket_id = payload.get("id") or payload.get("display_id")
    if ticket_id is None:
        raise ValueError("Ticket payload has no id")

    requester = payload.get("requester") or {}
    location_id = requester.get("location_id") or payload.get("location_id")

    return Ticket(
        id=str(ticket_id),
        subject=payload.get("subject") or UNKNOWN_SUBJECT,
        description=payload.get("description_text") or payload.get("description") or "",
        priority=_as_int(payload.get("priority")) or DEFAULT_PRIORITY,
        urgency=_as_int(payload.get("urgency")),
        requester_location_id=str(location_id) if location_id is not None else None,
        status=_as_int(payload.get("status")),
        created_at=parse_datetime(payload.get("created_at")),
    )


def parse_open_ticket(payload: dict[str, Any]) -> OpenTicket:
    created_at = parse_datetime(payload.get("created_at"))
    if created_at is None:
        raise ValueError(f"Ticket {payload.get('id')} has no created_at")
    return OpenTicket(
        id=str(payload["id"]),
        created_at=created_at,
        status=_as_int(payload.get("status")),
    )


def parse_webhook_payload(payload: dict[str, Any]) -> WebhookEvent:
    """Accept both ``{"ticket": {...}}`` envelopes and bare ticket objects."""
    event = payload.get("event_type") or payload.get("action") or DEFAULT_EVENT
    raw_ticket = payload.get("ticket") or payload

    ticket = None
    if raw_ticket.get("id") is not None or raw_ticket.get("display_id") is not None:
        ticket = parse_ticket_payload(raw_ticket)

    custom_fields = raw_ticket.get("custom_fields") or {}
    category = custom_fields.get("category_id") or payload.get("category_id")

    return WebhookEvent(
        event=str(event),
        ticket_id=ticket.id if ticket else None,
        ticket=ticket,
        changes=dict(payload.get("changes") or {}),
        category_external_id=str(category) if category is not None else None,
    )
