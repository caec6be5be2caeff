"""Tests for domain entities."""

from datetime import datetime, timezone

import pytest

from app.domain.entities.agent import Agent
from app.domain.entities.decision import Decision, Feedback
from app.domain.entities.location import Location
from app.domain.entities.ticket import Ticket
from app.domain.errors import FeedbackAlreadyRecordedError
from app.domain.value_objects.enums import DecisionType, SkillSource


def _decision() -> Decision:
    return Decision(
        id=10,
        ticket_id="T-1",
        ticket_subject="Printer jam",
        agent_id=1,
        type=DecisionType.SUGGESTED,
        score=0.82,
        score_breakdown={"skill_score": 1.0},
    )


def test_agent_effective_load_prefers_weighted():
    assert Agent(id=1, name="A", current_ticket_count=6).effective_load() == 6.0
    assert Agent(id=1, name="A", current_ticket_count=6, weighted_ticket_count=1.5).effective_load() == 1.5
    assert Agent(id=1, name="A", current_ticket_count=6, weighted_ticket_count=0).effective_load() == 0.0


def test_agent_is_active():
    assert Agent(id=1, name="A").is_active()
    assert not Agent(id=1, name="A", is_available=False).is_active()
    assert not Agent(id=1, name="A", manually_deactivated=True).is_active()


def test_agent_skill_set_merges_sources():
    agent = Agent(
        id=1,
        name="A",
        skills=["VPN"],
        category_skills=["vpn", "Printers"],
        skill_metadata={"infra": ["DNS"]},
    )
    assert agent.skill_set.names == {"vpn", "printers", "dns"}
    assert agent.skill_set.sources_of("vpn") == {SkillSource.MANUAL, SkillSource.CATEGORY}


def test_location_supports_onsite():
    assert Location(id=1, name="HQ", support_types=["Remote", " OnSite "]).supports_onsite()
    assert not Location(id=1, name="HQ", support_types=["remote"]).supports_onsite()


def test_location_same_timezone_needs_both():
    a = Location(id=1, name="A", timezone="Europe/Berlin")
    assert a.same_timezone(Location(id=2, name="B", timezone="europe/berlin"))
    assert not a.same_timezone(Location(id=2, name="B"))


def test_ticket_placeholder():
    t = Ticket.placeholder("99")
    assert t.id == "99"
    assert t.subject == "Unknown"
    assert t.priority == 2


def test_decision_feedback_accepted():
    d = _decision()
    at = datetime(2026, 10, 19, 15, 0, tzinfo=timezone.utc)

    d.record_feedback(Feedback(score=5, comments="Spot on", was_accepted=True), at)

    assert d.feedback_score == 5
    assert d.feedback_comments == "Spot on"
    assert d.was_accepted is True
    assert d.feedback_at == at
    assert d.type == DecisionType.SUGGESTED


def test_decision_feedback_override_keeps_score_snapshot():
    d = _decision()
    d.record_feedback(
        Feedback(score=2, was_accepted=True, overridden_by="lead@example.com", override_reason="Knows the user", selected_agent_id=3),
        datetime(2026, 10, 19, tzinfo=timezone.utc),
    )

    assert d.type == DecisionType.MANUAL_OVERRIDE
    assert d.was_accepted is False
    assert d.overridden_by == "lead@example.com"
    assert d.override_agent_id == 3
    assert d.score == 0.82
    assert d.score_breakdown == {"skill_score": 1.0}


def test_decision_feedback_only_once():
    d = _decision()
    d.record_feedback(Feedback(score=4), datetime(2026, 10, 19, tzinfo=timezone.utc))
    with pytest.raises(FeedbackAlreadyRecordedError):
        d.record_feedback(Feedback(score=1), datetime(2026, 10, 20, tzinfo=timezone.utc))
