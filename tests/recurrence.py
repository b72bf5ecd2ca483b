from datetime import date, timedelta

import pytest
from pytest_assume.plugin import assume

from romindr.helpers.config_models.recurrence import LeapDayEnum
from romindr.helpers.recurrence import (
    effective_date,
    next_occurrence,
    resolve,
    sorted_by_occurrence,
)
from romindr.models.reminder import ReminderModel


def _fixed(title: str, anchor: date, enabled: bool = True) -> ReminderModel:
    return ReminderModel(
        default_date=anchor,
        icon="heart.fill",
        is_custom_date=False,
        is_enabled=enabled,
        title=title,
    )


def _custom(title: str, user_date: date) -> ReminderModel:
    return ReminderModel(
        icon="gift.fill",
        is_custom_date=True,
        title=title,
        user_date=user_date,
    )


@pytest.mark.parametrize(
    "anchor, today, expected",
    [
        pytest.param(
            date(2025, 10, 3),
            date(2025, 10, 10),
            date(2026, 10, 3),
            id="past_this_year",
        ),
        pytest.param(
            date(2025, 8, 18),
            date(2025, 8, 1),
            date(2025, 8, 18),
            id="later_this_year",
        ),
        pytest.param(
            date(2025, 8, 1),
            date(2025, 8, 1),
            date(2025, 8, 1),
            id="today",
        ),
        pytest.param(
            date(1990, 1, 1),
            date(2025, 12, 31),
            date(2026, 1, 1),
            id="new_year_eve",
        ),
        pytest.param(
            date(1990, 12, 31),
            date(2025, 1, 1),
            date(2025, 12, 31),
            id="anchor_year_ignored",
        ),
    ],
)
def test_next_occurrence(anchor: date, today: date, expected: date) -> None:
    assert next_occurrence(anchor, today) == expected


def test_next_occurrence_range() -> None:
    """
    Next occurrence is never before today, and less than a year after.
    """
    anchor = date(2020, 6, 15)
    today = date(2025, 1, 1)
    for offset in range(366):
        day = today + timedelta(days=offset)
        res = next_occurrence(anchor, day)
        assume(day <= res)
        assume(res < day.replace(year=day.year + 1))
        assume((res.month, res.day) == (6, 15))


def test_next_occurrence_past_is_one_year_later() -> None:
    """
    When the same-year candidate is already past, the result is exactly one year later.
    """
    today = date(2025, 7, 20)
    for offset in range(1, 200):
        anchor = today - timedelta(days=offset)
        assume(next_occurrence(anchor, today) == anchor.replace(year=today.year + 1))


def test_next_occurrence_idempotent() -> None:
    today = date(2025, 3, 10)
    for offset in range(366):
        anchor = date(2024, 1, 1) + timedelta(days=offset)
        for leap_day in LeapDayEnum:
            first = next_occurrence(anchor, today, leap_day)
            assume(next_occurrence(first, today, leap_day) == first)


@pytest.mark.parametrize(
    "leap_day, today, expected",
    [
        pytest.param(
            LeapDayEnum.MARCH_1,
            date(2025, 1, 10),
            date(2025, 3, 1),
            id="march_1",
        ),
        pytest.param(
            LeapDayEnum.FEBRUARY_28,
            date(2025, 1, 10),
            date(2025, 2, 28),
            id="february_28",
        ),
        pytest.param(
            LeapDayEnum.MARCH_1,
            date(2025, 3, 1),
            date(2025, 3, 1),
            id="march_1_today",
        ),
        pytest.param(
            LeapDayEnum.MARCH_1,
            date(2025, 3, 2),
            date(2026, 3, 1),
            id="march_1_past",
        ),
        pytest.param(
            LeapDayEnum.FEBRUARY_28,
            date(2027, 3, 15),
            date(2028, 2, 29),
            id="next_year_is_leap",
        ),
        pytest.param(
            LeapDayEnum.MARCH_1,
            date(2028, 2, 1),
            date(2028, 2, 29),
            id="leap_year",
        ),
    ],
)
def test_next_occurrence_leap_day(
    leap_day: LeapDayEnum,
    today: date,
    expected: date,
) -> None:
    assert next_occurrence(date(2024, 2, 29), today, leap_day) == expected


def test_effective_date_custom() -> None:
    """
    Custom dates are used as picked, even in the past.
    """
    picked = date(2019, 5, 4)
    reminder = _custom("Our Anniversary", picked)
    assert effective_date(reminder, date(2025, 10, 10)) == picked


def test_resolve_writes_back(today: date) -> None:
    fixed = _fixed("National Boyfriend Day", date(2025, 10, 3))
    picked = date(2019, 5, 4)
    custom = _custom("Our Anniversary", picked)

    resolve([fixed, custom], today)

    assume(fixed.default_date == date(2026, 10, 3))
    assume(fixed.user_date == date(2026, 10, 3))
    assume(custom.user_date == picked)
    assume(custom.default_date is None)


@pytest.mark.parametrize("leap_day", list(LeapDayEnum))
def test_resolve_keeps_leap_day(leap_day: LeapDayEnum) -> None:
    leap = _fixed("Leap Day", date(2024, 2, 29))

    resolve([leap], date(2025, 1, 10), leap_day)
    assume(leap.default_date == date(2024, 2, 29))

    resolve([leap], date(2027, 6, 1), leap_day)
    assume(effective_date(leap, date(2027, 6, 1), leap_day) == date(2028, 2, 29))
    assume(leap.default_date == date(2028, 2, 29))
    assume(leap.user_date == date(2028, 2, 29))


def test_sorted_by_occurrence(today: date) -> None:
    reminders = [
        _fixed("Valentine's Day", date(2026, 2, 14)),
        _custom("Our Anniversary", date(2025, 12, 1)),
        _fixed("National Boyfriend Day", date(2025, 10, 3)),
        _fixed("National Couples Day", date(2025, 8, 18), enabled=False),
    ]

    views = sorted_by_occurrence(reminders, today)

    assume(
        [view.title for view in views]
        == [
            "Our Anniversary",
            "Valentine's Day",
            "National Couples Day",
            "National Boyfriend Day",
        ]
    )
    assume(
        all(
            first.effective_date <= second.effective_date
            for first, second in zip(views, views[1:])
        )
    )
    # Disabled reminders are still displayed
    assume(any(not view.is_enabled for view in views))
    # Canonical order is untouched
    assume(reminders[0].title == "Valentine's Day")


def test_sorted_by_occurrence_stable(today: date) -> None:
    first = _fixed("First", date(2025, 11, 1))
    second = _custom("Second", date(2026, 11, 1))
    third = _fixed("Third", date(2025, 11, 1))

    views = sorted_by_occurrence([first, second, third], today)
    assume([view.title for view in views] == ["First", "Third", "Second"])

    views = sorted_by_occurrence([third, second, first], today)
    assume([view.title for view in views] == ["Third", "First", "Second"])
