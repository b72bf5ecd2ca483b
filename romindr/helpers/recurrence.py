"""
Yearly recurrence of reminders.

A reminder recurs on its month and day, ignoring the year. Comparisons are made on calendar days, the time of day is never considered.
"""

from collections.abc import Iterable
from datetime import date

from dateutil.relativedelta import relativedelta

from romindr.helpers.config_models.recurrence import LeapDayEnum
from romindr.models.reminder import ReminderModel, ReminderViewModel


def _apply(
    anchor: date,
    delta: relativedelta,
    leap_day: LeapDayEnum,
) -> date:
    # relativedelta clamps a February 29 anchor to February 28 on non-leap years
    occurrence = anchor + delta
    if leap_day == LeapDayEnum.MARCH_1 and occurrence.day != anchor.day:
        occurrence += relativedelta(days=1)
    return occurrence


def next_occurrence(
    anchor: date,
    today: date,
    leap_day: LeapDayEnum = LeapDayEnum.MARCH_1,
) -> date:
    """
    Next occurrence of `anchor` month and day, on or after `today`.

    Today counts as upcoming: an anchor falling on `today` returns `today`. The following year is computed from the anchor itself, so a February 29 anchor comes back on leap years.
    """
    this_year = relativedelta(year=today.year)
    candidate = _apply(anchor, this_year, leap_day)
    if candidate < today:
        candidate = _apply(anchor, this_year + relativedelta(years=1), leap_day)
    return candidate


def effective_date(
    reminder: ReminderModel,
    today: date,
    leap_day: LeapDayEnum = LeapDayEnum.MARCH_1,
) -> date:
    """
    Date used both to sort and to trigger a reminder.

    Custom reminders use the date picked by the user as-is, others recur from their default date.
    """
    if reminder.is_custom_date:
        return reminder.user_date
    assert reminder.default_date
    return next_occurrence(reminder.default_date, today, leap_day)


def resolve(
    reminders: Iterable[ReminderModel],
    today: date,
    leap_day: LeapDayEnum = LeapDayEnum.MARCH_1,
) -> None:
    """
    Write the recomputed occurrence back into non-custom reminders.

    Both `default_date` and `user_date` are set to the occurrence, so the next save persists it. An occurrence moved by the leap day policy is not written, the February 29 anchor is kept.
    """
    for reminder in reminders:
        if reminder.is_custom_date:
            continue
        assert reminder.default_date
        occurrence = next_occurrence(reminder.default_date, today, leap_day)
        if occurrence.day != reminder.default_date.day:
            continue
        reminder.default_date = occurrence
        reminder.user_date = occurrence


def sorted_by_occurrence(
    reminders: Iterable[ReminderModel],
    today: date,
    leap_day: LeapDayEnum = LeapDayEnum.MARCH_1,
) -> list[ReminderViewModel]:
    """
    Display projection: reminders ordered by upcoming occurrence.

    The canonical list is left in its own order. Sort is stable, reminders on the same day keep their relative order. Disabled reminders are kept.
    """
    views = [
        ReminderViewModel(
            effective_date=effective_date(reminder, today, leap_day),
            icon=reminder.icon,
            id=reminder.id,
            is_custom_date=reminder.is_custom_date,
            is_enabled=reminder.is_enabled,
            title=reminder.title,
        )
        for reminder in reminders
    ]
    return sorted(views, key=lambda view: view.effective_date)
