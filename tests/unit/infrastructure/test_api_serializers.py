"""Tests for API result serialization and status mapping."""

from datetime import datetime, timezone

import pytest

from app.application.use_cases.assign_ticket import AgentSuggestion, AssignmentResult
from app.domain.entities.decision import Decision, DecisionAlternative
from app.domain.value_objects.enums import AssignmentMode, DecisionType, ErrorKind
from app.infrastructure.api.serializers import (
    assignment_result_to_dict,
    decision_to_dict,
    status_code_for,
)


def _failed(kind: ErrorKind) -> AssignmentResult:
    return AssignmentResult(success=False, mode=AssignmentMode.FAILED, ticket_id="T-1", error_kind=kind)


@pytest.mark.parametrize(
    "kind, status",
    [
        (ErrorKind.NO_ELIGIBLE_AGENTS, 200),
        (ErrorKind.BELOW_THRESHOLD, 200),
        (ErrorKind.UPSTREAM_UNAVAILABLE, 502),
        (ErrorKind.EXTERNAL_ASSIGNMENT_FAILED, 502),
        (ErrorKind.INTERNAL_ERROR, 500),
    ],
)
def test_status_code_for_failures(kind, status):
    assert status_code_for(_failed(kind)) == status


def test_success_is_200():
    result = AssignmentResult(success=True, mode=AssignmentMode.SUGGESTED, ticket_id="T-1")
    assert status_code_for(result) == 200


def test_assignment_result_to_dict():
    alice = AgentSuggestion(
        agent_id=1, agent_name="Alice", score=0.91, breakdown={"skill_score": 1.0}, reason="x", email="a@example.com"
    )
    result = AssignmentResult(
        success=True,
        mode=AssignmentMode.AUTO_ASSIGNED,
        ticket_id="T-1",
        assigned_agent=alice,
        suggestions=[alice],
        confidence=0.95,
        decision_id=12,
    )

    data = assignment_result_to_dict(result)

    assert data["mode"] == "AUTO_ASSIGNED"
    assert data["error_kind"] is None
    assert data["assigned_agent"]["email"] == "a@example.com"
    assert data["suggestions"][0]["score"] == 0.91
    assert data["decision_id"] == 12


def test_decision_to_dict():
    decision = Decision(
        id=3,
        ticket_id="T-1",
        ticket_subject="Printer",
        agent_id=1,
        type=DecisionType.SUGGESTED,
        score=0.8,
        alternatives=[DecisionAlternative(agent_id=2, agent_name="Bob", score=0.6)],
        created_at=datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
    )

    data = decision_to_dict(decision)

    assert data["type"] == "SUGGESTED"
    assert data["alternatives"][0]["agent_name"] == "Bob"
    assert data["created_at"] == "2026-10-19T12:00:00+00:00"
    assert data["feedback_at"] is None
