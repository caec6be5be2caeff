"""Port interface for the external ticketing system."""

from abc import ABC, abstractmethod

from app.domain.entities.ticket import OpenTicket, Ticket


class TicketingError(Exception):
    """The ticketing system rejected a request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TicketingUnavailableError(TicketingError):
    """The ticketing system could not be reached."""


class TicketingRateLimitedError(TicketingError):
    """Rate limiting persisted past the retry budget."""


class TicketingPort(ABC):
    @abstractmethod
    async def get_ticket(self, ticket_id: str) -> Ticket:
        ...

    @abstractmethod
    async def assign_ticket(self, ticket_id: str, agent_external_id: str) -> None:
        ...

    @abstractmethod
    async def add_note(self, ticket_id: str, body: str, private: bool = True) -> None:
        ...

    @abstractmethod
    async def list_open_tickets(self, agent_external_id: str) -> list[OpenTicket]:
        """All open and pending tickets currently assigned to the agent."""
        ...
