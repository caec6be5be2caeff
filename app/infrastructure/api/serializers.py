"""Domain/result → JSON-ready dict converters shared by the routers."""

from __future__ import annotations

from app.application.use_cases.assign_ticket import AgentSuggestion, AssignmentResult
from app.domain.entities.decision import Decision
from app.domain.value_objects.enums import ErrorKind

_STATUS_BY_ERROR = {
    ErrorKind.UPSTREAM_UNAVAILABLE: 502,
    ErrorKind.EXTERNAL_ASSIGNMENT_FAILED: 502,
    ErrorKind.INTERNAL_ERROR: 500,
}


def status_code_for(result: AssignmentResult) -> int:
    """No-match outcomes are ordinary 200 responses; only system failures are errors."""
    if result.error_kind is None or result.is_no_match:
        return 200
    return _STATUS_BY_ERROR.get(result.error_kind, 500)


def suggestion_to_dict(s: AgentSuggestion) -> dict:
    return {
        "agent_id": s.agent_id,
        "agent_name": s.agent_name,
        "email": s.email,
        "score": s.score,
        "breakdown": s.breakdown,
        "reason": s.reason,
    }


def assignment_result_to_dict(r: AssignmentResult) -> dict:
    return {
        "success": r.success,
        "mode": r.mode.value,
        "ticket_id": r.ticket_id,
        "message": r.message,
        "error_kind": r.error_kind.value if r.error_kind else None,
        "assigned_agent": suggestion_to_dict(r.assigned_agent) if r.assigned_agent else None,
        "suggestions": [suggestion_to_dict(s) for s in r.suggestions],
        "confidence": r.confidence,
        "decision_id": r.decision_id,
        "processing_time_ms": r.processing_time_ms,
        "metadata": r.metadata,
    }


def decision_to_dict(d: Decision) -> dict:
    return {
        "id": d.id,
        "ticket_id": d.ticket_id,
        "ticket_subject": d.ticket_subject,
        "agent_id": d.agent_id,
        "category_id": d.category_id,
        "type": d.type.value,
        "score": d.score,
        "score_breakdown": d.score_breakdown,
        "alternatives": [
            {
                "agent_id": a.agent_id,
                "agent_name": a.agent_name,
                "score": a.score,
                "score_breakdown": a.score_breakdown,
            }
            for a in d.alternatives
        ],
        "was_accepted": d.was_accepted,
        "overridden_by": d.overridden_by,
        "override_reason": d.override_reason,
        "override_agent_id": d.override_agent_id,
        "feedback_score": d.feedback_score,
        "feedback_comments": d.feedback_comments,
        "context_data": d.context_data,
        "created_at": d.created_at.isoformat() if d.created_at else None,
        "feedback_at": d.feedback_at.isoformat() if d.feedback_at else None,
    }
