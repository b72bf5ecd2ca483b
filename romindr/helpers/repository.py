from datetime import date

from pydantic import TypeAdapter, ValidationError

from romindr.helpers.logging import logger
from romindr.helpers.monitoring import start_as_current_span
from romindr.models.reminder import ReminderModel, default_reminders
from romindr.persistence.istore import IStore

_reminders_adapter = TypeAdapter(list[ReminderModel])


class ReminderRepository:
    """
    Persists the whole reminder list as a single JSON document in one store slot.

    There is exactly one writer, no locking is done.
    """

    _key: str
    _store: IStore

    def __init__(self, store: IStore, key: str):
        self._key = key
        self._store = store

    @start_as_current_span("repository_save")
    async def save(self, reminders: list[ReminderModel]) -> bool:
        """
        Overwrite the slot with the full list.

        Returns `False` if the store could not write, the caller keeps its in-memory state.
        """
        data = _reminders_adapter.dump_json(reminders)
        res = await self._store.set(self._key, data)
        if not res:
            logger.warning("Reminders not saved to slot %s", self._key)
        return res

    @start_as_current_span("repository_load")
    async def load(self, today: date | None = None) -> list[ReminderModel]:
        """
        Read the list from the slot.

        A missing or undecodable slot returns the default reminders, seeded with `today` for custom dates.
        """
        data = await self._store.get(self._key)
        if not data:
            logger.info("No reminders saved yet, using defaults")
            return default_reminders(today)
        try:
            return _reminders_adapter.validate_json(data)
        except ValidationError as e:
            logger.warning(
                "Saved reminders cannot be decoded, resetting to defaults: %s",
                e.errors(),
            )
        return default_reminders(today)
