"""Port interface for ticket category lookups."""

from abc import ABC, abstractmethod

from app.domain.entities.category import Category


class CategoryRepository(ABC):
    @abstractmethod
    async def get_by_id(self, category_id: int) -> Category | None:
        ...

    @abstractmethod
    async def get_by_external_id(self, external_id: str) -> Category | None:
        ...
