"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import get_session
from app.adapters.persistence.repositories import (
    SqlAgentRepository,
    SqlCategoryRepository,
    SqlDecisionRepository,
    SqlLocationRepository,
    SqlSettingsRepository,
)
from app.adapters.ticketing.freshservice_adapter import FreshserviceAdapter
from app.application.use_cases.assign_ticket import AssignTicketUseCase
from app.application.use_cases.recalculate_workload import RecalculateWorkloadUseCase
from app.application.use_cases.record_feedback import RecordFeedbackUseCase
from app.application.use_cases.simulate_assignment import SimulateAssignmentUseCase

# Re-export session dependency
get_db_session = get_session

# Singleton adapter (stateless; opens a client per call)
_ticketing_adapter = FreshserviceAdapter()


def get_agent_repo(session: AsyncSession = Depends(get_session)) -> SqlAgentRepository:
    return SqlAgentRepository(session)


def get_category_repo(session: AsyncSession = Depends(get_session)) -> SqlCategoryRepository:
    return SqlCategoryRepository(session)


def get_decision_repo(session: AsyncSession = Depends(get_session)) -> SqlDecisionRepository:
    return SqlDecisionRepository(session)


def get_settings_repo(session: AsyncSession = Depends(get_session)) -> SqlSettingsRepository:
    return SqlSettingsRepository(session)


def get_assign_ticket_uc(
    session: AsyncSession = Depends(get_session),
) -> AssignTicketUseCase:
    return AssignTicketUseCase(
        agent_repo=SqlAgentRepository(session),
        category_repo=SqlCategoryRepository(session),
        location_repo=SqlLocationRepository(session),
        decision_repo=SqlDecisionRepository(session),
        settings_repo=SqlSettingsRepository(session),
        ticketing=_ticketing_adapter,
    )


def get_simulate_assignment_uc(
    session: AsyncSession = Depends(get_session),
) -> SimulateAssignmentUseCase:
    return SimulateAssignmentUseCase(
        agent_repo=SqlAgentRepository(session),
        category_repo=SqlCategoryRepository(session),
        location_repo=SqlLocationRepository(session),
        settings_repo=SqlSettingsRepository(session),
    )


def get_record_feedback_uc(
    session: AsyncSession = Depends(get_session),
) -> RecordFeedbackUseCase:
    return RecordFeedbackUseCase(decision_repo=SqlDecisionRepository(session))


def get_recalculate_workload_uc(
    session: AsyncSession = Depends(get_session),
) -> RecalculateWorkloadUseCase:
    return RecalculateWorkloadUseCase(
        agent_repo=SqlAgentRepository(session),
        settings_repo=SqlSettingsRepository(session),
        ticketing=_ticketing_adapter,
    )
