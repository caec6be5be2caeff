"""Port interface for agent persistence."""

from abc import ABC, abstractmethod

from app.domain.entities.agent import Agent


class AgentRepository(ABC):
    @abstractmethod
    async def get_all(self) -> list[Agent]:
        ...

    @abstractmethod
    async def get_by_id(self, agent_id: int) -> Agent | None:
        ...

    @abstractmethod
    async def increment_load(self, agent_id: int) -> int:
        """Atomically add one ticket to the agent's raw load.

        Returns the new current_ticket_count as stored.
        """
        ...

    @abstractmethod
    async def update_workload(
        self,
        agent_id: int,
        raw_count: int,
        weighted_count: float,
        breakdown: dict[str, int],
    ) -> None:
        ...
