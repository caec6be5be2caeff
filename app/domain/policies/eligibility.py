"""EligibilityPolicy — which agents may structurally receive a ticket.

Each predicate inspects one agent. Predicates run in a fixed order and the
first one that fails names the exclusion reason, so every excluded agent is
counted exactly once in the diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from app.domain.entities.agent import Agent
from app.domain.entities.location import Location
from app.domain.value_objects.engine_settings import EligibilitySettings
from app.domain.value_objects.enums import AgentLevel, ExclusionReason, LocationMatching


@dataclass(frozen=True)
class EligibilityCriteria:
    """Ticket requirements plus the operational flags of one attempt."""

    required_skills: tuple[str, ...] = ()
    min_level: AgentLevel | None = None
    location_id: int | None = None
    ticket_location: Location | None = None
    requires_onsite: bool = False
    category_id: int | None = None
    require_specialization: bool = False
    pto_agent_ids: frozenset[int] = frozenset()
    check_pto: bool = True
    max_load_percentage: float | None = None
    is_test_scenario: bool = False


@dataclass(frozen=True)
class EligibilityResult:
    eligible_agents: list[Agent]
    total_agents: int
    excluded_count: int
    excluded_reasons: dict[str, int] = field(default_factory=dict)
    filters: dict[str, object] = field(default_factory=dict)


Predicate = Callable[[Agent, EligibilityCriteria, EligibilitySettings], bool]


# ─── Predicates ──────────────────────────────────────────────────────


def is_status_ok(agent: Agent, criteria: EligibilityCriteria, settings: EligibilitySettings) -> bool:
    if criteria.is_test_scenario:
        return True
    return agent.is_active()


def load_ceiling(agent: Agent, criteria: EligibilityCriteria, settings: EligibilitySettings) -> float:
    ceiling = min(float(settings.workload_limit), float(agent.max_concurrent_tickets))
    if criteria.max_load_percentage is not None:
        effective_max = criteria.max_load_percentage * agent.max_concurrent_tickets
        ceiling = min(ceiling, effective_max)
    return ceiling


def has_capacity(agent: Agent, criteria: EligibilityCriteria, settings: EligibilitySettings) -> bool:
    # The raw count is a hard cap even when the weighted load looks light.
    if agent.current_ticket_count >= agent.max_concurrent_tickets:
        return False
    return agent.effective_load() < load_ceiling(agent, criteria, settings)


def has_required_skills(agent: Agent, criteria: EligibilityCriteria, settings: EligibilitySettings) -> bool:
    # "Any one of", not "all of": a single partial match is enough.
    if not criteria.required_skills:
        return True
    return agent.skill_set.matches_any(criteria.required_skills)


def meets_level(agent: Agent, criteria: EligibilityCriteria, settings: EligibilitySettings) -> bool:
    if criteria.min_level is None:
        return True
    return agent.level.is_at_least(criteria.min_level)


def is_not_on_pto(agent: Agent, criteria: EligibilityCriteria, settings: EligibilitySettings) -> bool:
    if not criteria.check_pto:
        return True
    return agent.id not in criteria.pto_agent_ids and not agent.is_pto


def matches_location(agent: Agent, criteria: EligibilityCriteria, settings: EligibilitySettings) -> bool:
    if settings.location_matching == LocationMatching.DISABLED:
        return True

    if criteria.requires_onsite and not settings.allow_remote_for_onsite:
        if agent.is_remote:
            return False
        if agent.location is None or not agent.location.supports_onsite():
            return False

    if criteria.location_id is None:
        return True

    same_location = agent.location is not None and agent.location.id == criteria.location_id
    if settings.location_matching == LocationMatching.STRICT:
        return same_location

    if same_location or agent.is_remote:
        return True
    if settings.match_timezone and agent.location is not None and criteria.ticket_location is not None:
        return agent.location.same_timezone(criteria.ticket_location)
    return False


def has_specialization(agent: Agent, criteria: EligibilityCriteria, settings: EligibilitySettings) -> bool:
    if criteria.is_test_scenario:
        return True
    if criteria.category_id is None or not criteria.require_specialization:
        return True
    return agent.is_specialized_in(criteria.category_id)


FILTER_CHAIN: list[tuple[ExclusionReason, Predicate]] = [
    (ExclusionReason.INACTIVE, is_status_ok),
    (ExclusionReason.AT_CAPACITY, has_capacity),
    (ExclusionReason.MISSING_SKILLS, has_required_skills),
    (ExclusionReason.INSUFFICIENT_LEVEL, meets_level),
    (ExclusionReason.ON_PTO, is_not_on_pto),
    (ExclusionReason.LOCATION_MISMATCH, matches_location),
    (ExclusionReason.NO_SPECIALIZATION, has_specialization),
]


# ─── Filter ──────────────────────────────────────────────────────────


def first_failing_reason(
    agent: Agent,
    criteria: EligibilityCriteria,
    settings: EligibilitySettings,
) -> ExclusionReason | None:
    for reason, predicate in FILTER_CHAIN:
        if not predicate(agent, criteria, settings):
            return reason
    return None


def filter_eligible_agents(
    agents: list[Agent],
    criteria: EligibilityCriteria,
    settings: EligibilitySettings,
) -> EligibilityResult:
    """Reduce the agent pool to the candidates that can take the ticket.

    Args:
        agents: full agent pool (or a pre-filtered slice of it).
        criteria: requirements and flags of this attempt.
        settings: configured eligibility behaviour.

    Returns:
        EligibilityResult with survivors in input order and the
        reason -> count map of everyone else.
    """
    eligible: list[Agent] = []
    reasons: dict[str, int] = {}

    for agent in agents:
        reason = first_failing_reason(agent, criteria, settings)
        if reason is None:
            eligible.append(agent)
        else:
            reasons[reason.value] = reasons.get(reason.value, 0) + 1

    return EligibilityResult(
        eligible_agents=eligible,
        total_agents=len(agents),
        excluded_count=len(agents) - len(eligible),
        excluded_reasons=reasons,
        filters=applied_filters(criteria, settings),
    )


def applied_filters(criteria: EligibilityCriteria, settings: EligibilitySettings) -> dict[str, object]:
    """Which filters were active — for audit and debugging only."""
    location_active = settings.location_matching != LocationMatching.DISABLED
    return {
        "status_filter": not criteria.is_test_scenario,
        "capacity_filter": True,
        "workload_limit": settings.workload_limit,
        "max_load_percentage": criteria.max_load_percentage,
        "skill_filter": bool(criteria.required_skills),
        "level_filter": criteria.min_level is not None,
        "pto_filter": criteria.check_pto,
        "location_filter": settings.location_matching.value if location_active else None,
        "onsite_required": criteria.requires_onsite,
        "specialization_filter": (
            not criteria.is_test_scenario
            and criteria.require_specialization
            and criteria.category_id is not None
        ),
        "test_scenario": criteria.is_test_scenario,
    }
