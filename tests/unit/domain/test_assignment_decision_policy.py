"""Tests for AssignmentDecisionPolicy."""

import pytest

from app.domain.policies.assignment_decision import (
    DEFAULT_REASON,
    build_assignment_reason,
    calculate_confidence,
    format_assignment_note,
    score_distribution,
)
from app.domain.value_objects.scoring import EligibilityFlags, ScoreBreakdown, ScoringResult

FLAGS = EligibilityFlags(is_available=True, has_capacity=True, meets_location=True, meets_level=True)


def _result(score: float, name: str = "Agent", agent_id: int = 1, **breakdown) -> ScoringResult:
    values = {"skill_score": 0.5, "level_score": 0.5, "load_score": 0.5, "location_score": 0.5, "vip_score": 1.0}
    values.update(breakdown)
    return ScoringResult(
        agent_id=agent_id,
        agent_name=name,
        total_score=score,
        breakdown=ScoreBreakdown(**values),
        eligibility=FLAGS,
    )


# ─── Confidence ──────────────────────────────────────────────────────


def test_confidence_empty_ranking():
    assert calculate_confidence([]) == 0.0


def test_confidence_single_high_candidate():
    assert calculate_confidence([_result(0.85)]) == 0.95


@pytest.mark.parametrize(
    "top, runner_up, expected",
    [
        (0.85, 0.65, 0.9),  # gap is 0.1999... before rounding
        (0.80, 0.60, 0.9),
        (0.85, 0.75, 0.8),
        (0.85, 0.80, 0.7),
        (0.70, 0.20, 0.6),
        (0.50, 0.10, 0.4),
    ],
)
def test_confidence_by_gap(top, runner_up, expected):
    assert calculate_confidence([_result(top), _result(runner_up)]) == expected


# ─── Reason ──────────────────────────────────────────────────────────


def test_reason_lists_strong_factors():
    result = _result(0.9, skill_score=0.9, load_score=0.8, level_score=1.0, location_score=1.0)
    assert build_assignment_reason(result) == (
        "Selected due to excellent skill match, optimal workload balance, "
        "appropriate expertise level, location requirements met"
    )


def test_reason_single_factor():
    assert build_assignment_reason(_result(0.6, load_score=0.9)) == "Selected due to optimal workload balance"


def test_reason_defaults_when_nothing_stands_out():
    assert build_assignment_reason(_result(0.5)) == DEFAULT_REASON


# ─── Note ────────────────────────────────────────────────────────────


def test_note_lists_alternatives():
    note = format_assignment_note(
        "Alice",
        [_result(0.7, name="Bob"), _result(0.65, name="Carol")],
        "Selected due to excellent skill match",
    )
    lines = note.split("\n")

    assert lines[0] == "**Automated Assignment Recommendation**"
    assert "**Recommended Agent:** Alice" in lines
    assert "**Reason:** Selected due to excellent skill match" in lines
    assert "1. Bob (Score: 0.7)" in lines
    assert "2. Carol (Score: 0.65)" in lines
    assert lines[-1] == "_This recommendation was generated by the Ticket Assignment System_"


def test_note_without_alternatives():
    note = format_assignment_note("Alice", [], DEFAULT_REASON)
    lines = note.split("\n")
    assert lines[lines.index("**Alternative Options:**") + 1] == "None"


# ─── Distribution ────────────────────────────────────────────────────


def test_score_distribution_buckets_are_inclusive():
    results = [_result(s) for s in (0.0, 0.2, 0.21, 0.5, 0.61, 0.8, 0.81, 1.0)]
    assert score_distribution(results) == [
        {"range": "0-20", "count": 2},
        {"range": "21-40", "count": 1},
        {"range": "41-60", "count": 1},
        {"range": "61-80", "count": 2},
        {"range": "81-100", "count": 2},
    ]


def test_score_distribution_empty():
    assert [bucket["count"] for bucket in score_distribution([])] == [0, 0, 0, 0, 0]
