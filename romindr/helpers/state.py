import asyncio
from datetime import date
from uuid import UUID

from aiojobs import Scheduler

from romindr.helpers.config_models.feedback import FeedbackModel
from romindr.helpers.config_models.recurrence import LeapDayEnum
from romindr.helpers.logging import logger
from romindr.helpers.monitoring import SpanAttributeEnum, start_as_current_span
from romindr.helpers.recurrence import resolve, sorted_by_occurrence
from romindr.helpers.repository import ReminderRepository
from romindr.helpers.scheduler import ReminderScheduler
from romindr.models.reminder import ReminderModel, ReminderViewModel
from romindr.persistence.inotification import INotification
from romindr.persistence.isound import ISound


class FixedDateError(ValueError):
    pass


class ReminderNotFoundError(LookupError):
    pass


class AppState:
    """
    Application state, mutated by user events and rendered with `view`.

    `reminders` is the canonical list, in seed order. Events address reminders by identifier, never by display position. Every mutation saves the whole list then updates the notification registration.
    """

    bouncing: set[UUID]
    confetti: set[UUID]
    flashing: set[UUID]
    has_user_interacted: bool
    reminders: list[ReminderModel]

    _feedback: FeedbackModel
    _leap_day: LeapDayEnum
    _notification: INotification
    _repository: ReminderRepository
    _scheduler: ReminderScheduler
    _sound: ISound
    _sound_name: str

    def __init__(
        self,
        feedback: FeedbackModel,
        leap_day: LeapDayEnum,
        notification: INotification,
        repository: ReminderRepository,
        scheduler: ReminderScheduler,
        sound: ISound,
        sound_name: str,
    ):
        self._feedback = feedback
        self._leap_day = leap_day
        self._notification = notification
        self._repository = repository
        self._scheduler = scheduler
        self._sound = sound
        self._sound_name = sound_name
        self.bouncing = set()
        self.confetti = set()
        self.flashing = set()
        self.has_user_interacted = False
        self.reminders = []

    @start_as_current_span("state_load")
    async def load(self, today: date | None = None) -> None:
        """
        Restore reminders from storage and request notification authorization.

        Registrations are then synced with the restored state, disabled reminders are canceled.
        """
        self.reminders = await self._repository.load(today)
        self.has_user_interacted = False
        self.bouncing.clear()
        self.confetti.clear()
        self.flashing.clear()
        logger.info("Loaded %i reminders", len(self.reminders))

        if not await self._notification.authorize():
            logger.warning("Notifications not authorized, reminders will not be delivered")
        for reminder in self.reminders:
            await self._scheduler.sync(reminder)

    def view(self, today: date | None = None) -> list[ReminderViewModel]:
        """
        Render the reminders sorted by upcoming occurrence, with their transient flags.

        Recomputed occurrences of non-custom reminders are written back to the canonical list.
        """
        today = today or date.today()
        resolve(self.reminders, today, self._leap_day)
        views = sorted_by_occurrence(self.reminders, today, self._leap_day)
        for view in views:
            view.bouncing = view.id in self.bouncing
            view.confetti = view.id in self.confetti
            view.flashing = view.id in self.flashing
        return views

    def get(self, reminder_id: UUID) -> ReminderModel:
        for reminder in self.reminders:
            if reminder.id == reminder_id:
                return reminder
        raise ReminderNotFoundError(f"Reminder {reminder_id} not found")

    @start_as_current_span("state_toggle")
    async def toggle(
        self,
        reminder_id: UUID,
        enabled: bool,
        scheduler: Scheduler,
    ) -> ReminderModel:
        """
        Enable or disable a reminder.

        Setting the current value is a no-op. The chime is skipped on the first interaction after load. Confetti is only shown when enabling.
        """
        reminder = self.get(reminder_id)
        if reminder.is_enabled == enabled:
            return reminder

        # Enrich span
        SpanAttributeEnum.REMINDER_ID.attribute(str(reminder.id))
        SpanAttributeEnum.REMINDER_TITLE.attribute(reminder.title)
        SpanAttributeEnum.REMINDER_ENABLED.attribute(enabled)

        reminder.is_enabled = enabled
        logger.info("Reminder %s %s", reminder.title, "enabled" if enabled else "disabled")

        if self.has_user_interacted:
            await self._sound.play(self._sound_name)
        self.has_user_interacted = True

        await self._repository.save(self.reminders)
        await self._scheduler.sync(reminder)

        await self._flag(self.bouncing, reminder.id, self._feedback.bounce_sec, scheduler)
        await self._flag(self.flashing, reminder.id, self._feedback.flash_sec, scheduler)
        if enabled:
            await self._flag(
                self.confetti, reminder.id, self._feedback.confetti_sec, scheduler
            )

        return reminder

    @start_as_current_span("state_change_date")
    async def change_date(self, reminder_id: UUID, user_date: date) -> ReminderModel:
        """
        Set the date of a custom reminder.

        Raises `FixedDateError` for a non-custom reminder, their date is derived from the calendar.
        """
        reminder = self.get(reminder_id)
        if not reminder.is_custom_date:
            raise FixedDateError(f"Reminder {reminder.title} has a fixed date")
        if reminder.user_date == user_date:
            return reminder

        # Enrich span
        SpanAttributeEnum.REMINDER_ID.attribute(str(reminder.id))
        SpanAttributeEnum.REMINDER_TITLE.attribute(reminder.title)

        reminder.user_date = user_date
        logger.info("Reminder %s moved to %s", reminder.title, user_date)

        await self._repository.save(self.reminders)
        await self._scheduler.schedule(reminder)

        return reminder

    @staticmethod
    async def _flag(
        flags: set[UUID],
        reminder_id: UUID,
        duration_sec: float,
        scheduler: Scheduler,
    ) -> None:
        """
        Raise a presentation flag and lower it after `duration_sec`, in the background.

        A later raise of the same flag is not extended, the first reset wins.
        """
        flags.add(reminder_id)

        async def _reset() -> None:
            await asyncio.sleep(duration_sec)
            flags.discard(reminder_id)

        await scheduler.spawn(_reset())
