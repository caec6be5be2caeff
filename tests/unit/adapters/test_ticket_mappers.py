"""Tests for Freshservice payload mappers."""

from datetime import datetime, timezone

import pytest

from app.adapters.ticketing.mappers import (
    parse_datetime,
    parse_open_ticket,
    parse_ticket_payload,
    parse_webhook_payload,
)


def test_parse_ticket_payload(sample_ticket_payload):
    ticket = parse_ticket_payload(sample_ticket_payload)

    assert ticket.id == "1042"
    assert ticket.description == "Since this morning the VPN drops every few minutes."
    assert ticket.priority == 3
    assert ticket.urgency == 2
    assert ticket.status == 2
    assert ticket.requester_location_id == "5001"
    assert ticket.created_at == datetime(2026, 10, 19, 8, 15, tzinfo=timezone.utc)


def test_parse_ticket_payload_defaults():
    ticket = parse_ticket_payload({"display_id": 12, "description": "<p>html</p>", "location_id": 9})

    assert ticket.id == "12"
    assert ticket.subject == "Unknown"
    assert ticket.description == "<p>html</p>"
    assert ticket.priority == 2
    assert ticket.urgency is None
    assert ticket.requester_location_id == "9"
    assert ticket.created_at is None


def test_parse_ticket_payload_requires_id():
    with pytest.raises(ValueError):
        parse_ticket_payload({"subject": "No id"})


def test_parse_datetime_variants():
    assert parse_datetime(None) is None
    assert parse_datetime("2026-10-19T08:15:00Z").tzinfo is not None
    assert parse_datetime("2026-10-19T08:15:00").tzinfo == timezone.utc
    assert parse_datetime("2026-10-19T10:15:00+02:00") == datetime(2026, 10, 19, 8, 15, tzinfo=timezone.utc)


def test_parse_open_ticket():
    t = parse_open_ticket({"id": 3, "status": 3, "created_at": "2026-10-01T00:00:00Z"})
    assert t.id == "3"
    assert t.status == 3


def test_parse_open_ticket_without_created_at():
    with pytest.raises(ValueError):
        parse_open_ticket({"id": 3})


# ─── Webhooks ────────────────────────────────────────────────────────


def test_webhook_envelope(sample_ticket_payload):
    payload = {
        "event_type": "ticket_created",
        "ticket": {**sample_ticket_payload, "custom_fields": {"category_id": 31}},
    }

    event = parse_webhook_payload(payload)

    assert event.event == "ticket_created"
    assert event.ticket_id == "1042"
    assert event.ticket.subject == "VPN keeps disconnecting"
    assert event.category_external_id == "31"
    assert not event.is_unassignment


def test_webhook_bare_ticket_defaults_to_created():
    event = parse_webhook_payload({"id": 5, "subject": "Printer"})
    assert event.event == "ticket_created"
    assert event.ticket_id == "5"
    assert event.category_external_id is None


def test_webhook_unassignment():
    event = parse_webhook_payload(
        {"action": "ticket_updated", "ticket": {"id": 5}, "changes": {"responder_id": None}}
    )
    assert event.event == "ticket_updated"
    assert event.is_unassignment


def test_webhook_reassignment_is_not_unassignment():
    event = parse_webhook_payload(
        {"event_type": "ticket_updated", "ticket": {"id": 5}, "changes": {"responder_id": 501}}
    )
    assert not event.is_unassignment


def test_webhook_without_ticket():
    event = parse_webhook_payload({"event_type": "ping"})
    assert event.ticket is None
    assert event.ticket_id is None
