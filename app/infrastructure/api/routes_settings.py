"""Engine settings endpoints."""

from __future__ import annotations

import logging
from dataclasses import replace

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.adapters.persistence.repositories import SqlSettingsRepository
from app.domain.errors import InvalidSettingsError
from app.domain.value_objects.engine_settings import EngineSettings, ScoringWeights
from app.infrastructure.api.dependencies import get_settings_repo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


class WeightsBody(BaseModel):
    """Partial update: omitted weights keep their current value."""

    skill: float | None = None
    level: float | None = None
    load: float | None = None
    location: float | None = None
    vip: float | None = None


@router.get("")
async def get_settings(settings_repo: SqlSettingsRepository = Depends(get_settings_repo)):
    try:
        engine_settings = await settings_repo.load()
    except InvalidSettingsError as e:
        raise HTTPException(status_code=500, detail=f"Invalid engine settings: {e}")
    return _serialize_settings(engine_settings)


@router.put("/weights")
async def update_weights(
    body: WeightsBody,
    settings_repo: SqlSettingsRepository = Depends(get_settings_repo),
):
    """Validate and persist new scoring weights (they must sum to 1.0)."""
    try:
        current = (await settings_repo.load()).weights
    except InvalidSettingsError:
        current = ScoringWeights()

    try:
        weights = replace(current, **body.model_dump(exclude_none=True))
    except InvalidSettingsError as e:
        raise HTTPException(status_code=422, detail=str(e))

    await settings_repo.save_weights(weights)
    logger.info("Scoring weights updated: %s", weights.as_dict())
    return {"status": "ok", "weights": weights.as_dict()}


def _serialize_settings(s: EngineSettings) -> dict:
    return {
        "scoring": {"weights": s.weights.as_dict()},
        "workload": {
            "age_weights": {
                "fresh": s.age_weights.fresh,
                "recent": s.age_weights.recent,
                "stale": s.age_weights.stale,
                "abandoned": s.age_weights.abandoned,
            }
        },
        "assignment": {
            "auto_assign_enabled": s.assignment.auto_assign_enabled,
            "max_suggestions": s.assignment.max_suggestions,
            "min_score_threshold": s.assignment.min_score_threshold,
        },
        "eligibility": {
            "workload_limit": s.eligibility.workload_limit,
            "max_load_percentage": s.eligibility.max_load_percentage,
            "location_matching": s.eligibility.location_matching.value,
            "match_timezone": s.eligibility.match_timezone,
            "allow_remote_for_onsite": s.eligibility.allow_remote_for_onsite,
            "check_pto": s.eligibility.check_pto,
        },
    }
