"""Engine settings — the single typed source of truth for tunable behaviour.

Settings are persisted as loosely-typed key/value rows. ``EngineSettings.from_mapping``
turns those rows into validated, immutable value objects shared by the workload,
eligibility and scoring policies. Missing keys fall back to defaults; invalid
values raise ``InvalidSettingsError`` at load time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from app.domain.errors import InvalidSettingsError
from app.domain.value_objects.enums import LocationMatching, WorkloadBucket

WEIGHT_SUM_TOLERANCE = 0.01


@dataclass(frozen=True)
class ScoringWeights:
    skill: float = 0.30
    level: float = 0.25
    load: float = 0.25
    location: float = 0.10
    vip: float = 0.10

    def __post_init__(self) -> None:
        for name, value in self.as_dict().items():
            if not 0.0 <= value <= 1.0:
                raise InvalidSettingsError(f"Scoring weight '{name}' must be within [0, 1], got {value}")
        total = sum(self.as_dict().values())
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise InvalidSettingsError(f"Scoring weights must sum to 1.0, got {total:.3f}")

    def as_dict(self) -> dict[str, float]:
        return {
            "skill": self.skill,
            "level": self.level,
            "load": self.load,
            "location": self.location,
            "vip": self.vip,
        }

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "ScoringWeights":
        # Accept both the persisted camelCase names and our own.
        aliases = {
            "skill": ("skill", "skillOverlap"),
            "level": ("level", "levelCloseness"),
            "load": ("load", "loadBalance"),
            "location": ("location", "locationFit"),
            "vip": ("vip", "vipAffinity"),
        }
        values: dict[str, float] = {}
        for name, keys in aliases.items():
            for key in keys:
                if key in raw:
                    values[name] = _as_float(raw[key], f"scoring.weights.{key}")
                    break
        return cls(**values)

    def to_storage(self) -> dict[str, float]:
        return {
            "skillOverlap": self.skill,
            "levelCloseness": self.level,
            "loadBalance": self.load,
            "locationFit": self.location,
            "vipAffinity": self.vip,
        }


@dataclass(frozen=True)
class TicketAgeWeights:
    fresh: float = 2.0
    recent: float = 1.2
    stale: float = 0.5
    abandoned: float = 0.1

    def __post_init__(self) -> None:
        for bucket in WorkloadBucket:
            if self.for_bucket(bucket) < 0:
                raise InvalidSettingsError(f"Ticket age weight '{bucket.value}' must not be negative")

    def for_bucket(self, bucket: WorkloadBucket) -> float:
        return getattr(self, bucket.value)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "TicketAgeWeights":
        values: dict[str, float] = {}
        for name in ("fresh", "recent", "stale"):
            if name in raw:
                values[name] = _as_float(raw[name], f"workload.ageWeights.{name}")
        for key in ("abandoned", "old"):
            if key in raw:
                values["abandoned"] = _as_float(raw[key], f"workload.ageWeights.{key}")
                break
        return cls(**values)


@dataclass(frozen=True)
class AssignmentSettings:
    auto_assign_enabled: bool = False
    max_suggestions: int = 3
    min_score_threshold: float = 0.5

    def __post_init__(self) -> None:
        if self.max_suggestions < 1:
            raise InvalidSettingsError("maxSuggestionsCount must be at least 1")
        if not 0.0 <= self.min_score_threshold <= 1.0:
            raise InvalidSettingsError("minScoreThreshold must be within [0, 1]")


@dataclass(frozen=True)
class EligibilitySettings:
    workload_limit: float = 5
    max_load_percentage: float | None = 0.9
    location_matching: LocationMatching = LocationMatching.DISABLED
    match_timezone: bool = True
    allow_remote_for_onsite: bool = False
    check_pto: bool = True

    def __post_init__(self) -> None:
        if self.workload_limit <= 0:
            raise InvalidSettingsError("workloadLimit must be positive")
        if self.max_load_percentage is not None and self.max_load_percentage <= 0:
            raise InvalidSettingsError("maxLoadPercentage must be positive")


@dataclass(frozen=True)
class EngineSettings:
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    age_weights: TicketAgeWeights = field(default_factory=TicketAgeWeights)
    assignment: AssignmentSettings = field(default_factory=AssignmentSettings)
    eligibility: EligibilitySettings = field(default_factory=EligibilitySettings)

    @classmethod
    def from_mapping(cls, rows: Mapping[str, Any]) -> "EngineSettings":
        """Build settings from persisted key/value rows."""
        weights = ScoringWeights.from_mapping(_as_dict(rows.get("scoring.weights"), "scoring.weights"))
        age_weights = TicketAgeWeights.from_mapping(
            _as_dict(rows.get("workload.ageWeights"), "workload.ageWeights")
        )

        assignment_kwargs: dict[str, Any] = {}
        if "assignment.autoAssignEnabled" in rows:
            assignment_kwargs["auto_assign_enabled"] = _as_bool(
                rows["assignment.autoAssignEnabled"], "assignment.autoAssignEnabled"
            )
        if "assignment.maxSuggestionsCount" in rows:
            assignment_kwargs["max_suggestions"] = int(
                _as_float(rows["assignment.maxSuggestionsCount"], "assignment.maxSuggestionsCount")
            )
        if "assignment.minScoreThreshold" in rows:
            assignment_kwargs["min_score_threshold"] = _as_float(
                rows["assignment.minScoreThreshold"], "assignment.minScoreThreshold"
            )

        eligibility_kwargs: dict[str, Any] = {}
        if "eligibility.workloadLimit" in rows:
            eligibility_kwargs["workload_limit"] = _as_float(
                rows["eligibility.workloadLimit"], "eligibility.workloadLimit"
            )
        if "eligibility.maxLoadPercentage" in rows:
            raw_pct = rows["eligibility.maxLoadPercentage"]
            eligibility_kwargs["max_load_percentage"] = (
                None if raw_pct is None else _as_float(raw_pct, "eligibility.maxLoadPercentage")
            )
        location = _as_dict(rows.get("eligibility.locationMatching"), "eligibility.locationMatching")
        if "mode" in location:
            try:
                eligibility_kwargs["location_matching"] = LocationMatching(str(location["mode"]).lower())
            except ValueError as exc:
                raise InvalidSettingsError(f"Unknown location matching mode: {location['mode']!r}") from exc
        if "matchTimezone" in location:
            eligibility_kwargs["match_timezone"] = _as_bool(
                location["matchTimezone"], "eligibility.locationMatching.matchTimezone"
            )
        if "allowRemoteForOnsite" in location:
            eligibility_kwargs["allow_remote_for_onsite"] = _as_bool(
                location["allowRemoteForOnsite"], "eligibility.locationMatching.allowRemoteForOnsite"
            )

        return cls(
            weights=weights,
            age_weights=age_weights,
            assignment=AssignmentSettings(**assignment_kwargs),
            eligibility=EligibilitySettings(**eligibility_kwargs),
        )


def _as_float(value: Any, key: str) -> float:
    if isinstance(value, bool):
        raise InvalidSettingsError(f"Setting '{key}' must be numeric, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidSettingsError(f"Setting '{key}' must be numeric, got {value!r}") from exc


def _as_bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise InvalidSettingsError(f"Setting '{key}' must be true or false, got {value!r}")
    return value


def _as_dict(value: Any, key: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise InvalidSettingsError(f"Setting '{key}' must be an object")
    return value
