"""SQLAlchemy repository implementations."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.adapters.persistence.models import (
    AgentModel,
    CategoryModel,
    DecisionModel,
    LocationModel,
    SettingModel,
)
from app.application.ports.agent_repo import AgentRepository
from app.application.ports.category_repo import CategoryRepository
from app.application.ports.decision_repo import DecisionRepository
from app.application.ports.location_repo import LocationRepository
from app.application.ports.settings_repo import SettingsRepository
from app.domain.entities.agent import Agent
from app.domain.entities.category import Category
from app.domain.entities.decision import Decision, DecisionAlternative
from app.domain.entities.location import Location
from app.domain.value_objects.engine_settings import EngineSettings, ScoringWeights
from app.domain.value_objects.enums import AgentLevel, DecisionType

# ─── Mappers ─────────────────────────────────────────────────────────


def _location_to_domain(m: LocationModel) -> Location:
    return Location(
        id=m.id,
        name=m.name,
        timezone=m.timezone,
        support_types=list(m.support_types or []),
        external_id=m.external_id,
    )


def _category_to_domain(m: CategoryModel) -> Category:
    return Category(
        id=m.id,
        name=m.name,
        required_skills=list(m.required_skills or []),
        priority_level=AgentLevel(m.priority_level) if m.priority_level else None,
        average_resolution_time=m.average_resolution_time,
        requires_onsite=m.requires_onsite,
        requires_specialization=m.requires_specialization,
        external_id=m.external_id,
    )


def _agent_to_domain(m: AgentModel) -> Agent:
    return Agent(
        id=m.id,
        name=m.name,
        level=AgentLevel(m.level),
        email=m.email,
        external_id=m.external_id,
        is_available=m.is_available,
        manually_deactivated=m.manually_deactivated,
        skills=list(m.skills or []),
        category_skills=list(m.category_skills or []),
        auto_detected_skills=list(m.auto_detected_skills or []),
        skill_metadata=dict(m.skill_metadata or {}),
        location=_location_to_domain(m.location) if m.location else None,
        is_remote=m.is_remote,
        current_ticket_count=m.current_ticket_count,
        weighted_ticket_count=float(m.weighted_ticket_count) if m.weighted_ticket_count is not None else None,
        max_concurrent_tickets=m.max_concurrent_tickets,
        total_assignments=m.total_assignments,
        satisfaction_score=m.satisfaction_score,
        average_resolution_time=m.average_resolution_time,
        is_pto=m.is_pto,
        specialization_ids={c.id for c in m.specializations},
    )


def _decision_to_domain(m: DecisionModel) -> Decision:
    return Decision(
        id=m.id,
        ticket_id=m.ticket_id,
        ticket_subject=m.ticket_subject or "",
        agent_id=m.agent_id,
        type=DecisionType(m.type),
        score=m.score,
        score_breakdown=dict(m.score_breakdown or {}),
        alternatives=[
            DecisionAlternative(
                agent_id=alt["agent_id"],
                agent_name=alt.get("agent_name", ""),
                score=alt.get("score", 0.0),
                score_breakdown=alt.get("score_breakdown", {}),
            )
            for alt in (m.alternatives or [])
        ],
        category_id=m.category_id,
        was_accepted=m.was_accepted,
        overridden_by=m.overridden_by,
        override_reason=m.override_reason,
        override_agent_id=m.override_agent_id,
        feedback_score=m.feedback_score,
        feedback_comments=m.feedback_comments,
        context_data=dict(m.context_data or {}),
        created_at=m.created_at,
        feedback_at=m.feedback_at,
    )


def _alternative_to_json(alt: DecisionAlternative) -> dict:
    return {
        "agent_id": alt.agent_id,
        "agent_name": alt.agent_name,
        "score": alt.score,
        "score_breakdown": alt.score_breakdown,
    }


# ─── Repositories ────────────────────────────────────────────────────


class SqlAgentRepository(AgentRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    def _select(self):
        return select(AgentModel).options(
            selectinload(AgentModel.location),
            selectinload(AgentModel.specializations),
        )

    async def get_all(self) -> list[Agent]:
        result = await self._s.execute(self._select().order_by(AgentModel.id))
        return [_agent_to_domain(m) for m in result.scalars()]

    async def get_by_id(self, agent_id: int) -> Agent | None:
        result = await self._s.execute(self._select().where(AgentModel.id == agent_id))
        m = result.scalar_one_or_none()
        return _agent_to_domain(m) if m else None

    async def increment_load(self, agent_id: int) -> int:
        # Single UPDATE ... RETURNING: concurrent increments never lose an update.
        result = await self._s.execute(
            update(AgentModel)
            .where(AgentModel.id == agent_id)
            .values(current_ticket_count=AgentModel.current_ticket_count + 1)
            .returning(AgentModel.current_ticket_count)
        )
        new_count = result.scalar_one()
        await self._s.flush()
        return new_count

    async def update_workload(
        self,
        agent_id: int,
        raw_count: int,
        weighted_count: float,
        breakdown: dict[str, int],
    ) -> None:
        await self._s.execute(
            update(AgentModel)
            .where(AgentModel.id == agent_id)
            .values(
                current_ticket_count=raw_count,
                weighted_ticket_count=weighted_count,
                ticket_workload_breakdown=breakdown,
                last_workload_sync=func.now(),
            )
        )
        await self._s.flush()


class SqlCategoryRepository(CategoryRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_by_id(self, category_id: int) -> Category | None:
        m = await self._s.get(CategoryModel, category_id)
        return _category_to_domain(m) if m else None

    async def get_by_external_id(self, external_id: str) -> Category | None:
        result = await self._s.execute(
            select(CategoryModel).where(CategoryModel.external_id == str(external_id))
        )
        m = result.scalar_one_or_none()
        return _category_to_domain(m) if m else None


class SqlLocationRepository(LocationRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_by_id(self, location_id: int) -> Location | None:
        m = await self._s.get(LocationModel, location_id)
        return _location_to_domain(m) if m else None

    async def get_by_external_id(self, external_id: str) -> Location | None:
        result = await self._s.execute(
            select(LocationModel).where(LocationModel.external_id == str(external_id))
        )
        m = result.scalar_one_or_none()
        return _location_to_domain(m) if m else None


class SqlDecisionRepository(DecisionRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, decision: Decision) -> Decision:
        m = DecisionModel(
            ticket_id=decision.ticket_id,
            ticket_subject=decision.ticket_subject,
            agent_id=decision.agent_id,
            category_id=decision.category_id,
            type=decision.type.value,
            score=decision.score,
            score_breakdown=decision.score_breakdown,
            alternatives=[_alternative_to_json(a) for a in decision.alternatives],
            was_accepted=decision.was_accepted,
            context_data=decision.context_data,
        )
        self._s.add(m)
        await self._s.flush()
        await self._s.refresh(m)
        decision.id = m.id
        decision.created_at = m.created_at
        return decision

    async def get_by_id(self, decision_id: int) -> Decision | None:
        m = await self._s.get(DecisionModel, decision_id)
        return _decision_to_domain(m) if m else None

    async def update(self, decision: Decision) -> Decision:
        await self._s.execute(
            update(DecisionModel)
            .where(DecisionModel.id == decision.id)
            .values(
                type=decision.type.value,
                was_accepted=decision.was_accepted,
                overridden_by=decision.overridden_by,
                override_reason=decision.override_reason,
                override_agent_id=decision.override_agent_id,
                feedback_score=decision.feedback_score,
                feedback_comments=decision.feedback_comments,
                feedback_at=decision.feedback_at,
            )
        )
        await self._s.flush()
        return decision

    async def list_recent(
        self,
        ticket_id: str | None = None,
        agent_id: int | None = None,
        limit: int = 50,
    ) -> list[Decision]:
        query = select(DecisionModel)
        if ticket_id is not None:
            query = query.where(DecisionModel.ticket_id == ticket_id)
        if agent_id is not None:
            query = query.where(DecisionModel.agent_id == agent_id)
        result = await self._s.execute(
            query.order_by(DecisionModel.created_at.desc(), DecisionModel.id.desc()).limit(limit)
        )
        return [_decision_to_domain(m) for m in result.scalars()]

    async def delete(self, decision_id: int) -> bool:
        result = await self._s.execute(delete(DecisionModel).where(DecisionModel.id == decision_id))
        await self._s.flush()
        return result.rowcount > 0

    async def delete_older_than(self, days: int) -> int:
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        result = await self._s.execute(delete(DecisionModel).where(DecisionModel.created_at < cutoff))
        await self._s.flush()
        return result.rowcount


class SqlSettingsRepository(SettingsRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def load(self) -> EngineSettings:
        result = await self._s.execute(select(SettingModel))
        rows = {m.key: m.value for m in result.scalars()}
        return EngineSettings.from_mapping(rows)

    async def save_weights(self, weights: ScoringWeights) -> None:
        stmt = insert(SettingModel).values(
            key="scoring.weights",
            value=weights.to_storage(),
            category="scoring",
        )
        await self._s.execute(
            stmt.on_conflict_do_update(
                index_elements=[SettingModel.key],
                set_={"value": stmt.excluded.value, "updated_at": func.now()},
            )
        )
        await self._s.flush()
