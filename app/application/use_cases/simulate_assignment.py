"""SimulateAssignmentUseCase — dry-run a hypothetical ticket against the agent pool.

Nothing is assigned and nothing is persisted. Eligibility is relaxed (no PTO,
level, load-percentage or specialization filters) and every candidate is
ranked, so operators can see the full scoring picture.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from app.application.ports.agent_repo import AgentRepository
from app.application.ports.category_repo import CategoryRepository
from app.application.ports.location_repo import LocationRepository
from app.application.ports.settings_repo import SettingsRepository
from app.domain.entities.agent import Agent
from app.domain.policies.assignment_decision import (
    build_assignment_reason,
    calculate_confidence,
    score_distribution,
)
from app.domain.policies.eligibility import EligibilityCriteria, filter_eligible_agents
from app.domain.policies.scoring import score_agents
from app.domain.value_objects.enums import AgentLevel
from app.domain.value_objects.scoring import ScoringResult
from app.domain.value_objects.ticket_context import TicketContext

logger = logging.getLogger(__name__)

SCENARIO_TICKET_ID = "test-ticket"
SCENARIO_SUBJECT = "Test Scenario"


@dataclass
class ScenarioRequest:
    skills: list[str] = field(default_factory=list)
    level: AgentLevel | None = None
    location_id: int | None = None
    is_vip: bool = False
    category_id: int | None = None


@dataclass
class ScenarioRecommendation:
    rank: int
    agent_id: int
    agent_name: str
    level: AgentLevel | None
    location: str
    current_workload: int
    weighted_workload: float
    total_score: float
    breakdown: dict[str, float]
    meets_threshold: bool
    reason: str
    confidence: float | None = None
    would_auto_assign: bool = False


@dataclass
class ScenarioResult:
    recommendations: list[ScenarioRecommendation]
    filters: dict[str, Any]
    statistics: dict[str, Any]


class SimulateAssignmentUseCase:
    def __init__(
        self,
        agent_repo: AgentRepository,
        category_repo: CategoryRepository,
        location_repo: LocationRepository,
        settings_repo: SettingsRepository,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._agents = agent_repo
        self._categories = category_repo
        self._locations = location_repo
        self._settings = settings_repo
        self._clock = clock

    async def execute(self, scenario: ScenarioRequest) -> ScenarioResult:
        settings = await self._settings.load()

        category = None
        if scenario.category_id is not None:
            category = await self._categories.get_by_id(scenario.category_id)
        location = None
        if scenario.location_id is not None:
            location = await self._locations.get_by_id(scenario.location_id)

        ctx = TicketContext(
            ticket_id=SCENARIO_TICKET_ID,
            subject=SCENARIO_SUBJECT,
            evaluated_at=self._clock(),
            category_id=category.id if category else None,
            required_skills=tuple(scenario.skills),
            required_level=scenario.level,
            location_id=scenario.location_id,
            location_name=location.name if location else None,
            timezone=location.timezone if location else None,
            is_vip=scenario.is_vip,
        )
        criteria = EligibilityCriteria(
            required_skills=ctx.required_skills,
            location_id=scenario.location_id,
            ticket_location=location,
            category_id=ctx.category_id,
            check_pto=False,
            max_load_percentage=None,
            is_test_scenario=True,
        )

        agents = await self._agents.get_all()
        eligibility = filter_eligible_agents(agents, criteria, settings.eligibility)
        ranked = score_agents(eligibility.eligible_agents, ctx, settings.weights)
        logger.info(
            "Scenario: %d/%d agents eligible, %d scored",
            len(eligibility.eligible_agents), eligibility.total_agents, len(ranked),
        )

        threshold = settings.assignment.min_score_threshold
        agents_by_id = {a.id: a for a in eligibility.eligible_agents}
        recommendations = [
            _recommendation(
                rank, result, agents_by_id[result.agent_id], threshold,
                confidence=calculate_confidence(ranked[:3]) if rank == 1 else None,
                would_auto_assign=(
                    rank == 1
                    and settings.assignment.auto_assign_enabled
                    and result.total_score >= threshold
                ),
            )
            for rank, result in enumerate(ranked, start=1)
        ]

        average = sum(r.total_score for r in ranked) / len(ranked) if ranked else 0.0
        statistics = {
            "total_agents": eligibility.total_agents,
            "eligible_agents": len(eligibility.eligible_agents),
            "scored_agents": len(ranked),
            "average_score": round(average, 4),
            "min_score_threshold": threshold,
            "agents_meeting_threshold": sum(1 for r in recommendations if r.meets_threshold),
            "score_distribution": score_distribution(ranked),
            "excluded_reasons": eligibility.excluded_reasons,
        }
        return ScenarioResult(
            recommendations=recommendations,
            filters=eligibility.filters,
            statistics=statistics,
        )


def _recommendation(
    rank: int,
    result: ScoringResult,
    agent: Agent,
    threshold: float,
    confidence: float | None,
    would_auto_assign: bool,
) -> ScenarioRecommendation:
    return ScenarioRecommendation(
        rank=rank,
        agent_id=result.agent_id,
        agent_name=result.agent_name,
        level=agent.level,
        location=agent.location.name if agent.location else "Remote",
        current_workload=agent.current_ticket_count,
        weighted_workload=agent.effective_load(),
        total_score=result.total_score,
        breakdown=result.breakdown.as_dict(),
        meets_threshold=result.total_score >= threshold,
        reason=build_assignment_reason(result),
        confidence=confidence,
        would_auto_assign=would_auto_assign,
    )
