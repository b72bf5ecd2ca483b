from abc import ABC, abstractmethod

from romindr.helpers.monitoring import start_as_current_span
from romindr.models.readiness import ReadinessEnum


class IStore(ABC):
    """
    Durable key-value storage made of named slots.

    Writes overwrite the whole slot, there is no versioning nor partial update.
    """

    @abstractmethod
    @start_as_current_span("store_readiness")
    async def readiness(self) -> ReadinessEnum:
        pass

    @abstractmethod
    @start_as_current_span("store_get")
    async def get(self, key: str) -> bytes | None:
        pass

    @abstractmethod
    @start_as_current_span("store_set")
    async def set(self, key: str, value: str | bytes) -> bool:
        pass

    @abstractmethod
    @start_as_current_span("store_delete")
    async def delete(self, key: str) -> bool:
        pass
