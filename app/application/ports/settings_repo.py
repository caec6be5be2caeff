"""Port interface for persisted engine settings."""

from abc import ABC, abstractmethod

from app.domain.value_objects.engine_settings import EngineSettings, ScoringWeights


class SettingsRepository(ABC):
    @abstractmethod
    async def load(self) -> EngineSettings:
        """Read every settings row and build a validated EngineSettings.

        Raises InvalidSettingsError when stored values are out of range.
        """
        ...

    @abstractmethod
    async def save_weights(self, weights: ScoringWeights) -> None:
        ...
