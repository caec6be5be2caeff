"""Port interface for assignment decision persistence."""

from abc import ABC, abstractmethod

from app.domain.entities.decision import Decision


class DecisionRepository(ABC):
    @abstractmethod
    async def save(self, decision: Decision) -> Decision:
        """Insert a new decision and return it with id and created_at set."""
        ...

    @abstractmethod
    async def get_by_id(self, decision_id: int) -> Decision | None:
        ...

    @abstractmethod
    async def update(self, decision: Decision) -> Decision:
        ...

    @abstractmethod
    async def list_recent(
        self,
        ticket_id: str | None = None,
        agent_id: int | None = None,
        limit: int = 50,
    ) -> list[Decision]:
        """Newest first, optionally filtered by ticket or chosen agent."""
        ...

    @abstractmethod
    async def delete(self, decision_id: int) -> bool:
        """Returns False when no such decision existed."""
        ...

    @abstractmethod
    async def delete_older_than(self, days: int) -> int:
        """Returns the number of decisions removed."""
        ...
