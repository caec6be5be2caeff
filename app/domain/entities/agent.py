"""Agent entity — a support worker tickets can be routed to."""

from dataclasses import dataclass, field
from functools import cached_property
from typing import Any

from app.domain.entities.location import Location
from app.domain.value_objects.enums import AgentLevel
from app.domain.value_objects.skill_set import SkillSet


@dataclass
class Agent:
    id: int | None
    name: str
    level: AgentLevel = AgentLevel.L1
    email: str | None = None
    external_id: str | None = None
    is_available: bool = True
    manually_deactivated: bool = False
    skills: list[str] = field(default_factory=list)
    category_skills: list[str] = field(default_factory=list)
    auto_detected_skills: list[str] = field(default_factory=list)
    skill_metadata: dict[str, Any] = field(default_factory=dict)
    location: Location | None = None
    is_remote: bool = False
    current_ticket_count: int = 0
    weighted_ticket_count: float | None = None
    max_concurrent_tickets: int = 5
    total_assignments: int = 0
    satisfaction_score: float | None = None
    average_resolution_time: float | None = None
    is_pto: bool = False
    specialization_ids: set[int] = field(default_factory=set)

    @cached_property
    def skill_set(self) -> SkillSet:
        return SkillSet.from_sources(
            manual=self.skills,
            category=self.category_skills,
            auto_detected=self.auto_detected_skills,
            metadata=self.skill_metadata,
        )

    def is_active(self) -> bool:
        return self.is_available and not self.manually_deactivated

    def effective_load(self) -> float:
        """Weighted load when synced, raw open-ticket count otherwise."""
        if self.weighted_ticket_count is not None:
            return float(self.weighted_ticket_count)
        return float(self.current_ticket_count)

    def is_specialized_in(self, category_id: int) -> bool:
        return category_id in self.specialization_ids
