"""Health check endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import get_session
from app.adapters.persistence.repositories import SqlSettingsRepository
from app.config import settings
from app.domain.errors import InvalidSettingsError

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(session: AsyncSession = Depends(get_session)):
    """Report database reachability, engine settings validity and ticketing config."""
    checks: dict[str, str] = {}

    try:
        await session.execute(text("SELECT 1"))
        checks["database"] = "connected"
    except Exception as e:
        checks["database"] = f"error: {e}"

    if checks["database"] == "connected":
        try:
            await SqlSettingsRepository(session).load()
            checks["engine_settings"] = "valid"
        except InvalidSettingsError as e:
            checks["engine_settings"] = f"invalid: {e}"
    else:
        checks["engine_settings"] = "unknown"

    configured = bool(settings.freshservice_domain and settings.freshservice_api_key)
    checks["ticketing"] = "configured" if configured else "not configured"

    healthy = checks["database"] == "connected" and checks["engine_settings"] == "valid"
    return {
        "status": "ok" if healthy else "degraded",
        **checks,
        "service": "Ticket Assignment Engine",
    }
