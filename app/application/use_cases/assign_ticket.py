"""AssignTicketUseCase — full pipeline: context → eligibility → scoring → decision."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from app.application.ports.agent_repo import AgentRepository
from app.application.ports.category_repo import CategoryRepository
from app.application.ports.decision_repo import DecisionRepository
from app.application.ports.location_repo import LocationRepository
from app.application.ports.settings_repo import SettingsRepository
from app.application.ports.ticketing_port import (
    TicketingError,
    TicketingPort,
    TicketingUnavailableError,
)
from app.domain.entities.agent import Agent
from app.domain.entities.decision import Decision, DecisionAlternative
from app.domain.entities.ticket import Ticket
from app.domain.policies.assignment_decision import (
    build_assignment_reason,
    calculate_confidence,
    format_assignment_note,
)
from app.domain.policies.eligibility import EligibilityCriteria, filter_eligible_agents
from app.domain.policies.scoring import score_agents
from app.domain.policies.ticket_context import build_ticket_context
from app.domain.value_objects.enums import AssignmentMode, DecisionType, ErrorKind
from app.domain.value_objects.scoring import ScoringResult

logger = logging.getLogger(__name__)

NO_ELIGIBLE_MESSAGE = "No eligible agents found"
BELOW_THRESHOLD_MESSAGE = "No agents met the minimum score threshold"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AssignmentRequest:
    ticket_id: str
    category_id: int | None = None
    pto_agent_ids: list[int] = field(default_factory=list)
    require_specialization: bool = False
    suggest_only: bool = False
    # Pre-fetched payload (e.g. from a webhook); skips the ticketing fetch.
    ticket: Ticket | None = None


@dataclass
class AgentSuggestion:
    agent_id: int
    agent_name: str
    score: float
    breakdown: dict[str, float]
    reason: str
    email: str | None = None


@dataclass
class AssignmentResult:
    """Outcome of one attempt; ``error_kind`` tells a no-match from a broken system."""

    success: bool
    mode: AssignmentMode
    ticket_id: str
    message: str | None = None
    assigned_agent: AgentSuggestion | None = None
    suggestions: list[AgentSuggestion] = field(default_factory=list)
    confidence: float | None = None
    decision_id: int | None = None
    processing_time_ms: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)
    error_kind: ErrorKind | None = None

    @property
    def is_no_match(self) -> bool:
        return self.error_kind is not None and self.error_kind.is_no_match

    @property
    def is_system_failure(self) -> bool:
        return self.error_kind is not None and not self.error_kind.is_no_match


class AssignTicketUseCase:
    """Orchestrates one assignment attempt for a single ticket."""

    def __init__(
        self,
        agent_repo: AgentRepository,
        category_repo: CategoryRepository,
        location_repo: LocationRepository,
        decision_repo: DecisionRepository,
        settings_repo: SettingsRepository,
        ticketing: TicketingPort,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._agents = agent_repo
        self._categories = category_repo
        self._locations = location_repo
        self._decisions = decision_repo
        self._settings = settings_repo
        self._ticketing = ticketing
        self._clock = clock

    async def execute(self, request: AssignmentRequest) -> AssignmentResult:
        """Assign or suggest agents for a ticket.

        Pipeline:
        1. Build ticket context (fetch ticket, resolve category and location)
        2. Filter eligible agents
        3. Score and rank candidates
        4. Drop candidates below the score threshold
        5. Auto-assign the winner or return suggestions, persisting a Decision
        """
        started = time.perf_counter()
        logger.info("Starting assignment for ticket %s", request.ticket_id)

        try:
            settings = await self._settings.load()

            # Step 1: context
            ticket = request.ticket or await self._fetch_ticket(request.ticket_id)
            category = None
            if request.category_id is not None:
                category = await self._categories.get_by_id(request.category_id)
            location = None
            if ticket.requester_location_id:
                location = await self._locations.get_by_external_id(ticket.requester_location_id)

            ctx = build_ticket_context(ticket, category, location, self._clock())
            logger.info(
                "Ticket %s: category=%s, vip=%s, onsite=%s",
                ticket.id, category.name if category else None, ctx.is_vip, ctx.requires_onsite,
            )

            # Step 2: eligibility
            criteria = EligibilityCriteria(
                required_skills=ctx.required_skills,
                min_level=ctx.required_level,
                location_id=ctx.location_id,
                ticket_location=location,
                requires_onsite=ctx.requires_onsite,
                category_id=ctx.category_id,
                require_specialization=request.require_specialization
                or bool(category and category.requires_specialization),
                pto_agent_ids=frozenset(request.pto_agent_ids),
                check_pto=settings.eligibility.check_pto,
                max_load_percentage=settings.eligibility.max_load_percentage,
            )
            agents = await self._agents.get_all()
            eligibility = filter_eligible_agents(agents, criteria, settings.eligibility)
            logger.info(
                "Ticket %s: %d/%d agents eligible",
                ticket.id, len(eligibility.eligible_agents), eligibility.total_agents,
            )

            if not eligibility.eligible_agents:
                logger.warning("No eligible agents found for ticket %s", ticket.id)
                return self._failed(
                    request.ticket_id, started, NO_ELIGIBLE_MESSAGE, ErrorKind.NO_ELIGIBLE_AGENTS,
                    metadata={
                        "eligibility_filters": eligibility.filters,
                        "excluded_reasons": eligibility.excluded_reasons,
                        "total_agents": eligibility.total_agents,
                    },
                )

            # Step 3: scoring
            ranked = score_agents(eligibility.eligible_agents, ctx, settings.weights)
            logger.info(
                "Ticket %s: top scores %s (threshold %.2f)",
                ticket.id,
                ", ".join(f"{r.agent_name}: {r.total_score:.2f}" for r in ranked[:3]),
                settings.assignment.min_score_threshold,
            )

            # Step 4: threshold
            qualified = [r for r in ranked if r.total_score >= settings.assignment.min_score_threshold]
            if not qualified:
                return self._failed(
                    request.ticket_id, started, BELOW_THRESHOLD_MESSAGE, ErrorKind.BELOW_THRESHOLD,
                    metadata={
                        "top_score": ranked[0].total_score,
                        "min_score_threshold": settings.assignment.min_score_threshold,
                    },
                )

            # Step 5: decide
            top = qualified[: settings.assignment.max_suggestions]
            agents_by_id = {a.id: a for a in eligibility.eligible_agents}
            suggestions = [_suggestion(r, agents_by_id.get(r.agent_id)) for r in top]
            confidence = calculate_confidence(top)

            # The decision type follows the global setting; suggest_only only
            # suppresses the external call.
            auto_enabled = settings.assignment.auto_assign_enabled
            auto_assign = auto_enabled and not request.suggest_only
            decision = Decision(
                id=None,
                ticket_id=ticket.id,
                ticket_subject=ticket.subject,
                agent_id=top[0].agent_id,
                type=DecisionType.AUTO_ASSIGNED if auto_enabled else DecisionType.SUGGESTED,
                score=top[0].total_score,
                score_breakdown=top[0].breakdown.as_dict(),
                alternatives=[
                    DecisionAlternative(
                        agent_id=r.agent_id,
                        agent_name=r.agent_name,
                        score=r.total_score,
                        score_breakdown=r.breakdown.as_dict(),
                    )
                    for r in top[1:]
                ],
                category_id=ctx.category_id,
                was_accepted=auto_assign,
                context_data={
                    "confidence": confidence,
                    "is_vip": ctx.is_vip,
                    "requires_onsite": ctx.requires_onsite,
                    "priority": ctx.priority.value,
                    "eligible_agents": len(eligibility.eligible_agents),
                    "excluded_reasons": eligibility.excluded_reasons,
                },
            )

            if auto_assign:
                return await self._auto_assign(
                    request, decision, top, suggestions, confidence,
                    agents_by_id[top[0].agent_id], started,
                )

            saved = await self._decisions.save(decision)
            return AssignmentResult(
                success=True,
                mode=AssignmentMode.SUGGESTED,
                ticket_id=request.ticket_id,
                message=f"Top {len(suggestions)} agent suggestions ready for review",
                suggestions=suggestions,
                confidence=confidence,
                decision_id=saved.id,
                processing_time_ms=_elapsed_ms(started),
            )

        except Exception as e:
            logger.exception("Assignment failed for ticket %s", request.ticket_id)
            return self._failed(
                request.ticket_id, started, f"Assignment failed: {e}", ErrorKind.INTERNAL_ERROR,
            )

    async def _fetch_ticket(self, ticket_id: str) -> Ticket:
        try:
            return await self._ticketing.get_ticket(ticket_id)
        except TicketingError as e:
            logger.warning("Failed to fetch ticket %s (%s), using minimal data", ticket_id, e)
            return Ticket.placeholder(ticket_id)

    async def _auto_assign(
        self,
        request: AssignmentRequest,
        decision: Decision,
        top: list[ScoringResult],
        suggestions: list[AgentSuggestion],
        confidence: float,
        agent: Agent,
        started: float,
    ) -> AssignmentResult:
        winner = top[0]
        try:
            if not agent.external_id:
                raise TicketingError(f"Agent {agent.id} has no ticketing id")
            await self._ticketing.assign_ticket(decision.ticket_id, agent.external_id)
        except TicketingError as e:
            kind = (
                ErrorKind.UPSTREAM_UNAVAILABLE
                if isinstance(e, TicketingUnavailableError)
                else ErrorKind.EXTERNAL_ASSIGNMENT_FAILED
            )
            logger.error("Ticket %s: external assignment to %s failed: %s", decision.ticket_id, agent.name, e)

            # Keep the ranking for manual follow-up; the load is left untouched.
            decision.type = DecisionType.SUGGESTED
            decision.was_accepted = False
            decision.context_data["external_assignment_error"] = str(e)
            saved = await self._decisions.save(decision)
            return AssignmentResult(
                success=False,
                mode=AssignmentMode.FAILED,
                ticket_id=request.ticket_id,
                message=f"External assignment failed: {e}",
                suggestions=suggestions,
                confidence=confidence,
                decision_id=saved.id,
                processing_time_ms=_elapsed_ms(started),
                error_kind=kind,
            )

        new_load = await self._agents.increment_load(agent.id)
        logger.info(
            "Ticket %s → Agent %s (score %.2f, load now %d)",
            decision.ticket_id, agent.name, winner.total_score, new_load,
        )

        note = format_assignment_note(agent.name, top[1:], build_assignment_reason(winner))
        try:
            await self._ticketing.add_note(decision.ticket_id, note, private=False)
        except TicketingError as e:
            logger.warning("Ticket %s: could not post assignment note: %s", decision.ticket_id, e)

        saved = await self._decisions.save(decision)
        return AssignmentResult(
            success=True,
            mode=AssignmentMode.AUTO_ASSIGNED,
            ticket_id=request.ticket_id,
            assigned_agent=suggestions[0],
            suggestions=suggestions,
            confidence=confidence,
            decision_id=saved.id,
            processing_time_ms=_elapsed_ms(started),
        )

    @staticmethod
    def _failed(
        ticket_id: str,
        started: float,
        message: str,
        kind: ErrorKind,
        metadata: dict[str, Any] | None = None,
    ) -> AssignmentResult:
        return AssignmentResult(
            success=False,
            mode=AssignmentMode.FAILED,
            ticket_id=ticket_id,
            message=message,
            processing_time_ms=_elapsed_ms(started),
            metadata=metadata or {},
            error_kind=kind,
        )


def _suggestion(result: ScoringResult, agent: Agent | None) -> AgentSuggestion:
    return AgentSuggestion(
        agent_id=result.agent_id,
        agent_name=result.agent_name,
        score=result.total_score,
        breakdown=result.breakdown.as_dict(),
        reason=build_assignment_reason(result),
        email=agent.email if agent else None,
    )


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
