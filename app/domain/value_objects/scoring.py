"""Scoring value objects — per-agent fitness scores for a ticket."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoreBreakdown:
    skill_score: float
    level_score: float
    load_score: float
    location_score: float
    vip_score: float

    def as_dict(self) -> dict[str, float]:
        return {
            "skill_score": self.skill_score,
            "level_score": self.level_score,
            "load_score": self.load_score,
            "location_score": self.location_score,
            "vip_score": self.vip_score,
        }


@dataclass(frozen=True)
class EligibilityFlags:
    """Informational restatement of eligibility; never used as a second filter."""

    is_available: bool
    has_capacity: bool
    meets_location: bool
    meets_level: bool


@dataclass(frozen=True)
class ScoringResult:
    agent_id: int
    agent_name: str
    total_score: float
    breakdown: ScoreBreakdown
    eligibility: EligibilityFlags
