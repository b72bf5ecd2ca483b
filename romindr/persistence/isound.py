from abc import ABC, abstractmethod

from romindr.helpers.monitoring import start_as_current_span
from romindr.models.readiness import ReadinessEnum


class ISound(ABC):
    @abstractmethod
    @start_as_current_span("sound_readiness")
    async def readiness(self) -> ReadinessEnum:
        pass

    @abstractmethod
    @start_as_current_span("sound_play")
    async def play(self, name: str) -> bool:
        pass
