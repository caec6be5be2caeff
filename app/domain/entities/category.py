"""Category entity — ticket category with its skill and level requirements."""

from dataclasses import dataclass, field

from app.domain.value_objects.enums import AgentLevel


@dataclass
class Category:
    id: int | None
    name: str
    required_skills: list[str] = field(default_factory=list)
    priority_level: AgentLevel | None = None
    average_resolution_time: float | None = None
    requires_onsite: bool = False
    requires_specialization: bool = False
    external_id: str | None = None
