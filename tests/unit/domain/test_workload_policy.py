"""Tests for WorkloadPolicy."""

from datetime import date, datetime, timezone

import pytest

from app.domain.entities.ticket import OpenTicket
from app.domain.policies.workload import (
    AgentWorkload,
    bucket_for,
    business_days_between,
    calculate_agent_workload,
    calculate_ticket_workload,
    compare_workloads,
)
from app.domain.value_objects.engine_settings import TicketAgeWeights
from app.domain.value_objects.enums import WorkloadBucket

# Monday
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
WEIGHTS = TicketAgeWeights()


def _ticket(tid: str, created: datetime) -> OpenTicket:
    return OpenTicket(id=tid, created_at=created)


def _workload(weighted: float, fresh: int = 0, raw: int = 0) -> AgentWorkload:
    return AgentWorkload(
        agent_id=1,
        raw_ticket_count=raw,
        weighted_ticket_count=weighted,
        breakdown={"fresh": fresh, "recent": 0, "stale": 0, "abandoned": 0},
        workload_score=min(1.0, weighted / 10),
    )


# ─── Business days ───────────────────────────────────────────────────


def test_same_day_is_zero_business_days():
    assert business_days_between(date(2026, 10, 19), date(2026, 10, 19)) == 0


def test_weekend_is_skipped():
    """Friday → Monday: Saturday and Sunday don't count, Monday does."""
    assert business_days_between(date(2026, 10, 16), date(2026, 10, 19)) == 1


def test_two_full_weeks():
    assert business_days_between(date(2026, 10, 5), date(2026, 10, 19)) == 10


def test_end_before_start_is_zero():
    assert business_days_between(date(2026, 10, 19), date(2026, 10, 1)) == 0


@pytest.mark.parametrize(
    "days, expected",
    [
        (0, WorkloadBucket.FRESH),
        (1, WorkloadBucket.FRESH),
        (2, WorkloadBucket.RECENT),
        (5, WorkloadBucket.RECENT),
        (6, WorkloadBucket.STALE),
        (14, WorkloadBucket.STALE),
        (15, WorkloadBucket.ABANDONED),
    ],
)
def test_bucket_boundaries(days, expected):
    assert bucket_for(days) == expected


# ─── Ticket workload ─────────────────────────────────────────────────


def test_ticket_created_this_morning_is_fresh():
    tw = calculate_ticket_workload(_ticket("1", datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)), WEIGHTS, NOW)
    assert tw.age_in_business_days == 0
    assert tw.bucket == WorkloadBucket.FRESH
    assert tw.weight == 2.0


def test_ticket_from_previous_week_friday_is_stale():
    """Created Friday 2026-10-09, evaluated Monday 2026-10-19 → 6 business days."""
    tw = calculate_ticket_workload(_ticket("1", datetime(2026, 10, 9, 9, 0, tzinfo=timezone.utc)), WEIGHTS, NOW)
    assert tw.age_in_days == 10
    assert tw.age_in_business_days == 6
    assert tw.bucket == WorkloadBucket.STALE
    assert tw.weight == 0.5


def test_naive_datetime_treated_as_utc():
    tw = calculate_ticket_workload(_ticket("1", datetime(2026, 10, 16, 9, 0)), WEIGHTS, NOW)
    assert tw.created_at.tzinfo is not None
    assert tw.age_in_business_days == 1


# ─── Agent workload ──────────────────────────────────────────────────


def test_agent_workload_one_ticket_per_bucket():
    tickets = [
        _ticket("fresh", datetime(2026, 10, 19, 7, 0, tzinfo=timezone.utc)),
        _ticket("recent", datetime(2026, 10, 14, 7, 0, tzinfo=timezone.utc)),
        _ticket("stale", datetime(2026, 10, 9, 7, 0, tzinfo=timezone.utc)),
        _ticket("abandoned", datetime(2026, 9, 1, 7, 0, tzinfo=timezone.utc)),
    ]
    wl = calculate_agent_workload(7, tickets, WEIGHTS, NOW)

    assert wl.agent_id == 7
    assert wl.raw_ticket_count == 4
    assert wl.breakdown == {"fresh": 1, "recent": 1, "stale": 1, "abandoned": 1}
    assert wl.weighted_ticket_count == 3.8
    assert wl.workload_score == 0.38
    assert [t.ticket_id for t in wl.tickets] == ["fresh", "recent", "stale", "abandoned"]


def test_each_ticket_lands_in_exactly_one_bucket():
    tickets = [
        _ticket(str(i), datetime(2026, 10, 19 - i, 7, 0, tzinfo=timezone.utc)) for i in range(12)
    ]
    wl = calculate_agent_workload(1, tickets, WEIGHTS, NOW)
    assert sum(wl.breakdown.values()) == len(tickets)


def test_empty_ticket_list():
    wl = calculate_agent_workload(1, [], WEIGHTS, NOW)
    assert wl.raw_ticket_count == 0
    assert wl.weighted_ticket_count == 0
    assert wl.workload_score == 0


def test_workload_score_capped_at_one():
    tickets = [_ticket(str(i), NOW) for i in range(8)]  # 8 × 2.0 = 16
    wl = calculate_agent_workload(1, tickets, WEIGHTS, NOW)
    assert wl.weighted_ticket_count == 16.0
    assert wl.workload_score == 1.0


def test_configured_age_weights_are_used():
    weights = TicketAgeWeights(fresh=3.0, recent=1.0, stale=0.25, abandoned=0.0)
    wl = calculate_agent_workload(1, [_ticket("1", NOW), _ticket("2", NOW)], weights, NOW)
    assert wl.weighted_ticket_count == 6.0


def test_recalculation_is_idempotent():
    tickets = [
        _ticket("a", datetime(2026, 10, 13, tzinfo=timezone.utc)),
        _ticket("b", datetime(2026, 10, 2, tzinfo=timezone.utc)),
    ]
    assert calculate_agent_workload(1, tickets, WEIGHTS, NOW) == calculate_agent_workload(1, tickets, WEIGHTS, NOW)


# ─── Comparison ──────────────────────────────────────────────────────


def test_weighted_difference_decides():
    assert compare_workloads(_workload(2.0), _workload(3.0)) < 0
    assert compare_workloads(_workload(3.0), _workload(2.0)) > 0


def test_fresh_count_breaks_near_tie():
    """Weighted within 0.1 → the agent with more fresh tickets is busier."""
    a = _workload(4.0, fresh=2, raw=3)
    b = _workload(4.05, fresh=1, raw=3)
    assert compare_workloads(a, b) > 0


def test_raw_count_breaks_remaining_tie():
    a = _workload(4.0, fresh=1, raw=2)
    b = _workload(4.0, fresh=1, raw=5)
    assert compare_workloads(a, b) < 0


def test_identical_workloads_compare_equal():
    assert compare_workloads(_workload(1.2, fresh=1, raw=1), _workload(1.2, fresh=1, raw=1)) == 0
