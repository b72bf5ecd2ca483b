from romindr.helpers.config_models.notification import (
    MemoryModel as NotificationMemoryModel,
)
from romindr.helpers.config_models.sound import MemoryModel as SoundMemoryModel
from romindr.helpers.config_models.store import MemoryModel as StoreMemoryModel
from romindr.helpers.logging import logger
from romindr.helpers.monitoring import suppress
from romindr.models.notification import NotificationRequestModel
from romindr.models.readiness import ReadinessEnum
from romindr.persistence.inotification import INotification
from romindr.persistence.isound import ISound
from romindr.persistence.istore import IStore


class MemoryStore(IStore):
    """
    A simple in-memory store.

    Data is lost when the process exits.
    """

    _config: StoreMemoryModel
    _slots: dict[str, bytes]

    def __init__(self, config: StoreMemoryModel):
        logger.warning("Using memory store, data will be lost on restart")
        self._config = config
        self._slots = {}

    async def readiness(self) -> ReadinessEnum:
        """
        Check the readiness of the memory store.
        """
        return ReadinessEnum.OK  # Always ready, it's memory :)

    async def get(self, key: str) -> bytes | None:
        """
        Get a slot value.

        If the slot does not exist, return `None`.
        """
        return self._slots.get(key, None)

    async def set(self, key: str, value: str | bytes) -> bool:
        """
        Overwrite a slot value.
        """
        self._slots[key] = value.encode() if isinstance(value, str) else value
        return True

    async def delete(self, key: str) -> bool:
        """
        Delete a slot, no-op if it does not exist.
        """
        with suppress(KeyError):
            self._slots.pop(key)
        return True


class MemoryNotification(INotification):
    """
    In-process notification registry.

    Requests are keyed by their identifier, adding an existing identifier replaces it. Nothing is scheduled before authorization is granted.
    """

    _authorized: bool
    _config: NotificationMemoryModel
    _requests: dict[str, NotificationRequestModel]

    def __init__(self, config: NotificationMemoryModel):
        self._authorized = False
        self._config = config
        self._requests = {}

    async def readiness(self) -> ReadinessEnum:
        """
        Check the readiness of the memory registry.
        """
        return ReadinessEnum.OK

    async def authorize(self) -> bool:
        self._authorized = True
        return True

    async def add(self, request: NotificationRequestModel) -> bool:
        if not self._authorized:
            logger.debug("Notifications not authorized, skipping %s", request.id)
            return False
        self._requests[request.id] = request
        logger.debug("Notification %s registered", request.id)
        return True

    async def remove(self, request_id: str) -> bool:
        with suppress(KeyError):
            self._requests.pop(request_id)
        return True

    async def pending(self) -> list[NotificationRequestModel]:
        return list(self._requests.values())


class MemorySound(ISound):
    """
    Records played clips instead of playing them.
    """

    _config: SoundMemoryModel
    played: list[str]

    def __init__(self, config: SoundMemoryModel):
        self._config = config
        self.played = []

    async def readiness(self) -> ReadinessEnum:
        return ReadinessEnum.OK

    async def play(self, name: str) -> bool:
        self.played.append(name)
        return True
