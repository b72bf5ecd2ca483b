from romindr.helpers.config_models.notification import (
    ConsoleModel as NotificationConsoleModel,
)
from romindr.helpers.config_models.sound import ConsoleModel as SoundConsoleModel
from romindr.helpers.logging import logger
from romindr.models.notification import NotificationRequestModel
from romindr.models.readiness import ReadinessEnum
from romindr.persistence.inotification import INotification
from romindr.persistence.isound import ISound


class ConsoleNotification(INotification):
    """
    Prints notification requests, no real notification will be delivered.
    """

    _config: NotificationConsoleModel

    def __init__(self, config: NotificationConsoleModel):
        logger.warning("Using console as notification, no real notification will be delivered")
        self._config = config

    async def readiness(self) -> ReadinessEnum:
        """
        Check the readiness of the console notification.
        """
        return ReadinessEnum.OK  # Always ready, it's a console :)

    async def authorize(self) -> bool:
        logger.info("🔓 Notifications authorized")
        return True

    async def add(self, request: NotificationRequestModel) -> bool:
        logger.info(
            "🔔 Every %02d/%02d: %s - %s (%s)",
            request.trigger.month,
            request.trigger.day,
            request.title,
            request.body,
            request.id,
        )
        return True

    async def remove(self, request_id: str) -> bool:
        logger.info("🔕 Canceled %s", request_id)
        return True

    async def pending(self) -> list[NotificationRequestModel]:
        # Console does not keep track of registrations
        return []


class ConsoleSound(ISound):
    _config: SoundConsoleModel

    def __init__(self, config: SoundConsoleModel):
        self._config = config

    async def readiness(self) -> ReadinessEnum:
        return ReadinessEnum.OK

    async def play(self, name: str) -> bool:
        logger.info("🎵 Playing %s", name)
        return True
