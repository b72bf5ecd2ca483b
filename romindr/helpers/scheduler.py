from romindr.helpers.config_models.notification import NotificationModel
from romindr.helpers.logging import logger
from romindr.helpers.monitoring import (
    counter_add,
    notification_canceled,
    notification_scheduled,
    start_as_current_span,
)
from romindr.models.notification import NotificationRequestModel, YearlyTriggerModel
from romindr.models.reminder import ReminderModel
from romindr.persistence.inotification import INotification


class ReminderScheduler:
    """
    Registers one yearly notification per enabled reminder.

    The reminder identifier is the registration identifier, so scheduling the same reminder again replaces its previous registration.
    """

    _config: NotificationModel
    _notification: INotification

    def __init__(self, notification: INotification, config: NotificationModel):
        self._config = config
        self._notification = notification

    def request(self, reminder: ReminderModel) -> NotificationRequestModel:
        """
        Build the notification request for a reminder.

        Trigger recurs on the month and day of the user date for a custom reminder, of the default date otherwise.
        """
        trigger_date = (
            reminder.user_date if reminder.is_custom_date else reminder.default_date
        )
        assert trigger_date
        return NotificationRequestModel(
            body=self._config.body_tpl.format(title=reminder.title),
            id=str(reminder.id),
            sound=self._config.sound,
            title=self._config.title,
            trigger=YearlyTriggerModel.from_date(trigger_date),
        )

    @start_as_current_span("scheduler_schedule")
    async def schedule(self, reminder: ReminderModel) -> bool:
        """
        Register the notification of an enabled reminder.

        No-op for a disabled reminder. Best-effort, the result is only informative.
        """
        if not reminder.is_enabled:
            return False
        request = self.request(reminder)
        res = await self._notification.add(request)
        if res:
            counter_add(notification_scheduled, 1)
        else:
            logger.debug("Notification for %s not registered", reminder.id)
        return res

    @start_as_current_span("scheduler_cancel")
    async def cancel(self, reminder: ReminderModel) -> bool:
        """
        Remove the registration of a reminder, if any.
        """
        res = await self._notification.remove(str(reminder.id))
        if res:
            counter_add(notification_canceled, 1)
        return res

    async def sync(self, reminder: ReminderModel) -> bool:
        """
        Schedule an enabled reminder, cancel a disabled one.
        """
        if reminder.is_enabled:
            return await self.schedule(reminder)
        return await self.cancel(reminder)
