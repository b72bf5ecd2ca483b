from abc import ABC, abstractmethod

from romindr.helpers.monitoring import start_as_current_span
from romindr.models.notification import NotificationRequestModel
from romindr.models.readiness import ReadinessEnum


class INotification(ABC):
    """
    Local notification service of the host.

    All calls are best-effort: failures are logged and reported as `False`, never raised.
    """

    @abstractmethod
    @start_as_current_span("notification_readiness")
    async def readiness(self) -> ReadinessEnum:
        pass

    @abstractmethod
    @start_as_current_span("notification_authorize")
    async def authorize(self) -> bool:
        pass

    @abstractmethod
    @start_as_current_span("notification_add")
    async def add(self, request: NotificationRequestModel) -> bool:
        pass

    @abstractmethod
    @start_as_current_span("notification_remove")
    async def remove(self, request_id: str) -> bool:
        pass

    @abstractmethod
    @start_as_current_span("notification_pending")
    async def pending(self) -> list[NotificationRequestModel]:
        pass
