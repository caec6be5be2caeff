"""Port interface for location lookups."""

from abc import ABC, abstractmethod

from app.domain.entities.location import Location


class LocationRepository(ABC):
    @abstractmethod
    async def get_by_id(self, location_id: int) -> Location | None:
        ...

    @abstractmethod
    async def get_by_external_id(self, external_id: str) -> Location | None:
        """Resolve a requester location reported by the ticketing system."""
        ...
