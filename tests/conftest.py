"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone

import pytest


@pytest.fixture
def fixed_now():
    """Monday 2026-10-19, noon UTC."""
    return datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_ticket_payload():
    return {
        "id": 1042,
        "subject": "VPN keeps disconnecting",
        "description_text": "Since this morning the VPN drops every few minutes.",
        "priority": 3,
        "urgency": 2,
        "status": 2,
        "created_at": "2026-10-19T08:15:00Z",
        "requester": {"id": 77, "location_id": 5001},
    }
