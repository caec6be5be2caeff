"""Agent workload endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.adapters.persistence.repositories import SqlAgentRepository
from app.application.use_cases.recalculate_workload import RecalculateWorkloadUseCase
from app.domain.errors import InvalidSettingsError
from app.infrastructure.api.dependencies import get_agent_repo, get_recalculate_workload_uc

router = APIRouter(prefix="/agents", tags=["agents"])


@router.get("/workload")
async def list_workload(agents: SqlAgentRepository = Depends(get_agent_repo)):
    """Current raw and weighted load of every agent."""
    items = await agents.get_all()
    return {
        "total": len(items),
        "agents": [
            {
                "id": a.id,
                "name": a.name,
                "level": a.level.value,
                "is_active": a.is_active(),
                "current_ticket_count": a.current_ticket_count,
                "weighted_ticket_count": a.weighted_ticket_count,
                "max_concurrent_tickets": a.max_concurrent_tickets,
                "load_percentage": (
                    round(a.effective_load() / a.max_concurrent_tickets * 100, 1)
                    if a.max_concurrent_tickets > 0
                    else None
                ),
            }
            for a in items
        ],
    }


@router.post("/workload/recalculate")
async def recalculate_workload(
    recalc_uc: RecalculateWorkloadUseCase = Depends(get_recalculate_workload_uc),
):
    """Recompute age-weighted workloads from the ticketing system."""
    try:
        summary = await recalc_uc.execute()
    except InvalidSettingsError as e:
        raise HTTPException(status_code=500, detail=f"Invalid engine settings: {e}")

    return {
        "status": "ok",
        "processed": summary.processed,
        "updated": summary.updated,
        "failed": summary.failed,
        "skipped": summary.skipped,
        "workloads": [
            {
                "agent_id": w.agent_id,
                "raw_ticket_count": w.raw_ticket_count,
                "weighted_ticket_count": w.weighted_ticket_count,
                "workload_score": w.workload_score,
                "breakdown": w.breakdown,
            }
            for w in summary.workloads
        ],
    }
