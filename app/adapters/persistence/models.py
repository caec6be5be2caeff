"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.adapters.persistence.database import Base

# Agents specialised in a category (used by the specialization filter).
agent_categories = Table(
    "agent_categories",
    Base.metadata,
    Column("agent_id", Integer, ForeignKey("agents.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)


class LocationModel(Base):
    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str | None] = mapped_column(String(50), unique=True, nullable=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    timezone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    support_types: Mapped[list[str]] = mapped_column(ARRAY(String(20)), nullable=False, default=list)

    agents: Mapped[list["AgentModel"]] = relationship(back_populates="location")


class CategoryModel(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str | None] = mapped_column(String(50), unique=True, nullable=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    required_skills: Mapped[list[str]] = mapped_column(ARRAY(String(100)), nullable=False, default=list)
    priority_level: Mapped[str | None] = mapped_column(String(20), nullable=True)
    average_resolution_time: Mapped[float | None] = mapped_column(Float, nullable=True)
    requires_onsite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    requires_specialization: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class AgentModel(Base):
    __tablename__ = "agents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str | None] = mapped_column(String(50), unique=True, nullable=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    level: Mapped[str] = mapped_column(String(20), nullable=False, default="L1")
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    manually_deactivated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    skills: Mapped[list[str]] = mapped_column(ARRAY(String(100)), nullable=False, default=list)
    category_skills: Mapped[list[str]] = mapped_column(ARRAY(String(100)), nullable=False, default=list)
    auto_detected_skills: Mapped[list[str]] = mapped_column(ARRAY(String(100)), nullable=False, default=list)
    skill_metadata: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)

    location_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("locations.id", ondelete="SET NULL"), nullable=True
    )
    is_remote: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    current_ticket_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    weighted_ticket_count: Mapped[float | None] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=True
    )
    ticket_workload_breakdown: Mapped[dict[str, int]] = mapped_column(JSONB, nullable=False, default=dict)
    last_workload_sync: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    max_concurrent_tickets: Mapped[int] = mapped_column(Integer, nullable=False, default=5)

    total_assignments: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    satisfaction_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    average_resolution_time: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_pto: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    location: Mapped["LocationModel | None"] = relationship(back_populates="agents")
    specializations: Mapped[list["CategoryModel"]] = relationship(secondary=agent_categories)

    __table_args__ = (Index("idx_agents_location", "location_id"),)


class DecisionModel(Base):
    __tablename__ = "decisions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ticket_id: Mapped[str] = mapped_column(String(50), nullable=False)
    ticket_subject: Mapped[str | None] = mapped_column(Text, nullable=True)
    agent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("agents.id", ondelete="SET NULL"), nullable=True
    )
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    score: Mapped[float] = mapped_column(Float, nullable=False)
    score_breakdown: Mapped[dict[str, float]] = mapped_column(JSONB, nullable=False, default=dict)
    alternatives: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, nullable=False, default=list)
    was_accepted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    overridden_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    override_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    override_agent_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    feedback_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    feedback_comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    context_data: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    feedback_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_decisions_ticket", "ticket_id"),
        Index("idx_decisions_agent", "agent_id"),
        Index("idx_decisions_created", "created_at"),
    )


class SettingModel(Base):
    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[Any] = mapped_column(JSONB, nullable=True)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )
