"""Tests for domain enums."""

from app.domain.value_objects.enums import (
    AgentLevel,
    AssignmentMode,
    DecisionType,
    ErrorKind,
    WorkloadBucket,
)


def test_level_ranks_are_ordered():
    assert [lvl.rank for lvl in AgentLevel] == [1, 2, 3, 4]


def test_level_is_at_least():
    assert AgentLevel.L3.is_at_least(AgentLevel.L2)
    assert AgentLevel.L2.is_at_least(AgentLevel.L2)
    assert not AgentLevel.L1.is_at_least(AgentLevel.L2)
    assert AgentLevel.MANAGER.is_at_least(AgentLevel.L3)


def test_no_match_kinds():
    assert ErrorKind.NO_ELIGIBLE_AGENTS.is_no_match
    assert ErrorKind.BELOW_THRESHOLD.is_no_match
    assert not ErrorKind.UPSTREAM_UNAVAILABLE.is_no_match
    assert not ErrorKind.EXTERNAL_ASSIGNMENT_FAILED.is_no_match
    assert not ErrorKind.INTERNAL_ERROR.is_no_match


def test_decision_type_values():
    assert {t.value for t in DecisionType} == {"AUTO_ASSIGNED", "SUGGESTED", "MANUAL_OVERRIDE", "REASSIGNED"}


def test_assignment_mode_values():
    assert AssignmentMode.FAILED.value == "FAILED"


def test_workload_buckets():
    assert [b.value for b in WorkloadBucket] == ["fresh", "recent", "stale", "abandoned"]
