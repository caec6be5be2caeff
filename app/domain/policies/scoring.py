"""ScoringPolicy — multi-factor fitness score of an agent for a ticket.

Scoring is a pure function of (agent, ticket context, weights). It reads only
agent fields and the immutable context, so candidates can be scored in any
order, and scoring the same inputs twice yields the same result.
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.domain.entities.agent import Agent
from app.domain.value_objects.engine_settings import ScoringWeights
from app.domain.value_objects.enums import AgentLevel
from app.domain.value_objects.scoring import EligibilityFlags, ScoreBreakdown, ScoringResult
from app.domain.value_objects.ticket_context import TicketContext

RELATED_SKILL_BONUS = 0.05
MAX_RELATED_SKILL_BONUS = 0.20
# Share of max_concurrent_tickets treated as a comfortable full load.
LOAD_HEADROOM = 0.8

_LEVEL_DISTANCE_SCORES = {0: 1.0, 1: 0.8, 2: 0.5}
_LOAD_BANDS = [
    (1.2, 0.0),
    (1.0, 0.1),
    (0.85, 0.2),
    (0.7, 0.4),
    (0.5, 0.6),
    (0.3, 0.8),
    (0.15, 0.9),
]


# ─── Sub-scores ──────────────────────────────────────────────────────


def skill_score(agent: Agent, ctx: TicketContext) -> float:
    if not ctx.required_skills:
        return 1.0

    skills = agent.skill_set
    overlap = skills.count_matching(ctx.required_skills) / len(ctx.required_skills)

    required = set(ctx.required_skills)
    bonus_skills = sum(1 for s in ctx.related_skills if s not in required and s in skills)
    bonus = min(bonus_skills * RELATED_SKILL_BONUS, MAX_RELATED_SKILL_BONUS)

    return min(overlap + bonus, 1.0)


def level_score(agent: Agent, ctx: TicketContext) -> float:
    required = ctx.required_level or AgentLevel.L2
    distance = abs(agent.level.rank - required.rank)
    return _LEVEL_DISTANCE_SCORES.get(distance, 0.2)


def load_score(agent: Agent) -> float:
    if agent.max_concurrent_tickets <= 0:
        return 0.0

    ratio = agent.effective_load() / (agent.max_concurrent_tickets * LOAD_HEADROOM)
    for threshold, score in _LOAD_BANDS:
        if ratio >= threshold:
            return score
    return 1.0


def location_score(agent: Agent, ctx: TicketContext) -> float:
    if not ctx.requires_onsite:
        return 1.0 if agent.is_remote else 0.9

    location = agent.location
    if location is None:
        return 0.0
    if not location.supports_onsite():
        return 0.1
    if ctx.location_id is not None and location.id == ctx.location_id:
        return 1.0
    if location.timezone and ctx.timezone:
        if location.timezone.strip().lower() == ctx.timezone.strip().lower():
            return 0.7
        proximity = timezone_proximity(location.timezone, ctx.timezone, ctx.evaluated_at)
        if proximity is not None:
            return proximity
    return 0.3


def timezone_proximity(tz_a: str, tz_b: str, at: datetime) -> float | None:
    """Score in [0.2, 0.5] shrinking with the UTC offset gap at instant *at*.

    Returns None when either zone cannot be resolved.
    """
    offset_a = _utc_offset_hours(tz_a, at)
    offset_b = _utc_offset_hours(tz_b, at)
    if offset_a is None or offset_b is None:
        return None
    gap = min(abs(offset_a - offset_b), 12.0)
    return 0.5 - 0.3 * gap / 12.0


def vip_score(agent: Agent, ctx: TicketContext) -> float:
    if not ctx.is_vip:
        return 1.0

    score = 0.5

    satisfaction = agent.satisfaction_score or 0.0
    if satisfaction >= 4.5:
        score += 0.2
    elif satisfaction >= 4.0:
        score += 0.1

    if agent.total_assignments >= 100:
        score += 0.2
    elif agent.total_assignments >= 50:
        score += 0.1

    resolution = agent.average_resolution_time or 0.0
    if 0 < resolution <= 4:
        score += 0.1

    return min(score, 1.0)


# ─── Composite ───────────────────────────────────────────────────────


def score_agent(agent: Agent, ctx: TicketContext, weights: ScoringWeights) -> ScoringResult:
    skill = skill_score(agent, ctx)
    level = level_score(agent, ctx)
    load = load_score(agent)
    location = location_score(agent, ctx)
    vip = vip_score(agent, ctx)

    total = (
        skill * weights.skill
        + level * weights.level
        + load * weights.load
        + location * weights.location
        + vip * weights.vip
    )
    total = min(max(total, 0.0), 1.0)

    return ScoringResult(
        agent_id=agent.id,
        agent_name=agent.name,
        total_score=round_score(total),
        breakdown=ScoreBreakdown(
            skill_score=round_score(skill),
            level_score=round_score(level),
            load_score=round_score(load),
            location_score=round_score(location),
            vip_score=round_score(vip),
        ),
        eligibility=EligibilityFlags(
            is_available=agent.is_active(),
            has_capacity=agent.effective_load() < agent.max_concurrent_tickets,
            meets_location=not ctx.requires_onsite or agent.location is not None,
            meets_level=ctx.required_level is None or agent.level.is_at_least(ctx.required_level),
        ),
    )


def score_agents(agents: list[Agent], ctx: TicketContext, weights: ScoringWeights) -> list[ScoringResult]:
    """Score every candidate and rank them, best first.

    ``sorted`` is stable, so equal scores keep their input order.
    """
    results = [score_agent(agent, ctx, weights) for agent in agents]
    return sorted(results, key=lambda r: r.total_score, reverse=True)


def round_score(value: float) -> float:
    """Round half-up to two decimals (0.125 -> 0.13, unlike ``round``)."""
    return float(Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _utc_offset_hours(tz_name: str, at: datetime) -> float | None:
    try:
        zone = ZoneInfo(tz_name.strip())
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return None
    offset = at.astimezone(zone).utcoffset() if at.tzinfo else at.replace(tzinfo=zone).utcoffset()
    if offset is None:
        return None
    return offset.total_seconds() / 3600.0
