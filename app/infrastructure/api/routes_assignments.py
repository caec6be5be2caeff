"""Assignment endpoints — assign, simulate, feedback, history."""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from app.adapters.persistence.repositories import SqlDecisionRepository
from app.application.use_cases.assign_ticket import AssignmentRequest, AssignTicketUseCase
from app.application.use_cases.record_feedback import RecordFeedbackUseCase
from app.application.use_cases.simulate_assignment import ScenarioRequest, SimulateAssignmentUseCase
from app.domain.entities.decision import Feedback
from app.domain.errors import DecisionNotFoundError, FeedbackAlreadyRecordedError, InvalidSettingsError
from app.domain.value_objects.enums import AgentLevel
from app.infrastructure.api.dependencies import (
    get_assign_ticket_uc,
    get_decision_repo,
    get_record_feedback_uc,
    get_simulate_assignment_uc,
)
from app.infrastructure.api.serializers import (
    assignment_result_to_dict,
    decision_to_dict,
    status_code_for,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assignments", tags=["assignments"])

# ── Request schemas ─────────────────────────────────────────────────


class AssignBody(BaseModel):
    ticket_id: str
    category_id: int | None = None
    pto_agent_ids: list[int] = Field(default_factory=list)
    require_specialization: bool = False
    suggest_only: bool = False


class ScenarioBody(BaseModel):
    skills: list[str] = Field(default_factory=list)
    level: AgentLevel | None = None
    location_id: int | None = None
    is_vip: bool = False
    category_id: int | None = None


class FeedbackBody(BaseModel):
    score: int = Field(ge=1, le=5)
    comments: str | None = None
    was_accepted: bool = False
    overridden_by: str | None = None
    override_reason: str | None = None
    selected_agent_id: int | None = None


# ── Endpoints ───────────────────────────────────────────────────────


@router.post("")
async def assign_ticket(
    body: AssignBody,
    assign_uc: AssignTicketUseCase = Depends(get_assign_ticket_uc),
):
    """Assign a ticket (when auto-assign is on) or return ranked suggestions."""
    result = await assign_uc.execute(
        AssignmentRequest(
            ticket_id=body.ticket_id,
            category_id=body.category_id,
            pto_agent_ids=body.pto_agent_ids,
            require_specialization=body.require_specialization,
            suggest_only=body.suggest_only,
        )
    )
    return JSONResponse(status_code=status_code_for(result), content=assignment_result_to_dict(result))


@router.post("/simulate")
async def simulate_assignment(
    body: ScenarioBody,
    simulate_uc: SimulateAssignmentUseCase = Depends(get_simulate_assignment_uc),
):
    """Rank the whole pool for a hypothetical ticket; nothing is persisted."""
    try:
        result = await simulate_uc.execute(ScenarioRequest(**body.model_dump()))
    except InvalidSettingsError as e:
        raise HTTPException(status_code=500, detail=f"Invalid engine settings: {e}")

    return {
        "recommendations": [
            {**asdict(r), "level": r.level.value if r.level else None}
            for r in result.recommendations
        ],
        "filters": result.filters,
        "statistics": result.statistics,
    }


@router.post("/decisions/{decision_id}/feedback")
async def record_feedback(
    decision_id: int,
    body: FeedbackBody,
    feedback_uc: RecordFeedbackUseCase = Depends(get_record_feedback_uc),
):
    """Record feedback or a manual override on a past decision (once)."""
    try:
        decision = await feedback_uc.execute(decision_id, Feedback(**body.model_dump()))
    except DecisionNotFoundError:
        raise HTTPException(status_code=404, detail="Decision not found")
    except FeedbackAlreadyRecordedError:
        raise HTTPException(status_code=409, detail="Feedback already recorded for this decision")

    return {"status": "ok", "decision": decision_to_dict(decision)}


@router.get("/history")
async def assignment_history(
    ticket_id: str | None = None,
    agent_id: int | None = None,
    limit: int = Query(default=50, ge=1, le=500),
    decisions: SqlDecisionRepository = Depends(get_decision_repo),
):
    """Recent decisions, newest first."""
    items = await decisions.list_recent(ticket_id=ticket_id, agent_id=agent_id, limit=limit)
    return {"total": len(items), "decisions": [decision_to_dict(d) for d in items]}


@router.delete("/history")
async def purge_history(
    days: int = Query(ge=1),
    decisions: SqlDecisionRepository = Depends(get_decision_repo),
):
    """Delete decisions older than ``days`` days."""
    deleted = await decisions.delete_older_than(days)
    logger.info("Deleted %d decisions older than %d days", deleted, days)
    return {"status": "ok", "deleted": deleted}


@router.delete("/decisions/{decision_id}")
async def delete_decision(
    decision_id: int,
    decisions: SqlDecisionRepository = Depends(get_decision_repo),
):
    if not await decisions.delete(decision_id):
        raise HTTPException(status_code=404, detail="Decision not found")
    return {"status": "ok", "deleted": decision_id}
