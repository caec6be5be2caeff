"""Tests for EngineSettings loading and validation."""

import pytest

from app.domain.errors import InvalidSettingsError
from app.domain.value_objects.engine_settings import (
    AssignmentSettings,
    EngineSettings,
    ScoringWeights,
    TicketAgeWeights,
)
from app.domain.value_objects.enums import LocationMatching


def test_defaults_when_nothing_persisted():
    s = EngineSettings.from_mapping({})

    assert s.weights == ScoringWeights(skill=0.30, level=0.25, load=0.25, location=0.10, vip=0.10)
    assert s.age_weights == TicketAgeWeights(fresh=2.0, recent=1.2, stale=0.5, abandoned=0.1)
    assert s.assignment.auto_assign_enabled is False
    assert s.assignment.max_suggestions == 3
    assert s.assignment.min_score_threshold == 0.5
    assert s.eligibility.workload_limit == 5
    assert s.eligibility.max_load_percentage == 0.9
    assert s.eligibility.location_matching == LocationMatching.DISABLED
    assert s.eligibility.check_pto is True


def test_persisted_rows_are_parsed():
    s = EngineSettings.from_mapping(
        {
            "scoring.weights": {
                "skillOverlap": 0.4,
                "levelCloseness": 0.2,
                "loadBalance": 0.2,
                "locationFit": 0.1,
                "vipAffinity": 0.1,
            },
            "workload.ageWeights": {"fresh": 3, "recent": 1.5, "stale": 0.4, "old": 0.05},
            "assignment.autoAssignEnabled": True,
            "assignment.maxSuggestionsCount": 5,
            "assignment.minScoreThreshold": "0.6",
            "eligibility.workloadLimit": 8,
            "eligibility.maxLoadPercentage": None,
            "eligibility.locationMatching": {"mode": "FLEXIBLE", "matchTimezone": False},
            "unrelated.key": "ignored",
        }
    )

    assert s.weights.skill == 0.4
    assert s.age_weights.fresh == 3.0
    assert s.age_weights.abandoned == 0.05
    assert s.assignment.auto_assign_enabled is True
    assert s.assignment.max_suggestions == 5
    assert s.assignment.min_score_threshold == 0.6
    assert s.eligibility.workload_limit == 8.0
    assert s.eligibility.max_load_percentage is None
    assert s.eligibility.location_matching == LocationMatching.FLEXIBLE
    assert s.eligibility.match_timezone is False


def test_weights_round_trip_through_storage_names():
    weights = ScoringWeights(skill=0.5, level=0.2, load=0.2, location=0.05, vip=0.05)
    assert ScoringWeights.from_mapping(weights.to_storage()) == weights


@pytest.mark.parametrize(
    "rows",
    [
        {"scoring.weights": {"skill": 0.9}},
        {"scoring.weights": {"skill": 1.5, "level": -0.5}},
        {"scoring.weights": {"skill": "lots"}},
        {"scoring.weights": [0.3, 0.25]},
        {"workload.ageWeights": {"fresh": -1}},
        {"assignment.maxSuggestionsCount": 0},
        {"assignment.minScoreThreshold": 1.5},
        {"assignment.minScoreThreshold": True},
        {"eligibility.workloadLimit": 0},
        {"eligibility.locationMatching": {"mode": "nearby"}},
        {"assignment.autoAssignEnabled": "false"},
        {"assignment.autoAssignEnabled": 1},
        {"eligibility.locationMatching": {"matchTimezone": "no"}},
        {"eligibility.locationMatching": {"allowRemoteForOnsite": None}},
    ],
)
def test_invalid_settings_fail_loudly(rows):
    with pytest.raises(InvalidSettingsError):
        EngineSettings.from_mapping(rows)


def test_weight_sum_tolerance():
    ScoringWeights(skill=0.305, level=0.25, load=0.25, location=0.10, vip=0.10)
    with pytest.raises(InvalidSettingsError):
        ScoringWeights(skill=0.35, level=0.25, load=0.25, location=0.10, vip=0.10)


def test_settings_are_immutable():
    s = AssignmentSettings()
    with pytest.raises(AttributeError):
        s.max_suggestions = 10
