from datetime import date
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, model_validator


class ReminderModel(BaseModel):
    # Immutable fields
    id: UUID = Field(default_factory=uuid4, frozen=True)
    # Editable fields
    default_date: date | None = None
    """Calendar anchor of a non-custom reminder. Only month and day are meaningful, year is overwritten on each recomputation."""
    icon: str
    is_custom_date: bool
    is_enabled: bool = True
    title: str
    user_date: date = Field(default_factory=date.today)
    """Date picked by the user for a custom reminder. For a non-custom reminder, holds the last recomputed occurrence."""

    @model_validator(mode="after")
    def _validate_default_date(self) -> "ReminderModel":
        if not self.is_custom_date and not self.default_date:
            raise ValueError("Non-custom reminder requires a default date")
        return self


class ReminderUpdateModel(BaseModel):
    is_enabled: bool | None = None
    user_date: date | None = None


class ReminderViewModel(BaseModel):
    """
    A reminder as displayed, with its occurrence resolved for a given day.

    Transient flags are presentation-only and are never persisted.
    """

    bouncing: bool = False
    confetti: bool = False
    effective_date: date
    flashing: bool = False
    icon: str
    id: UUID
    is_custom_date: bool
    is_enabled: bool
    title: str


def default_reminders(today: date | None = None) -> list[ReminderModel]:
    """
    Seed list used on first run, or when the persisted data cannot be decoded.

    Custom reminders start on `today`, the user is expected to pick their own date.
    """
    today = today or date.today()
    return [
        ReminderModel(
            default_date=date(2026, 2, 14),
            icon="heart.fill",
            is_custom_date=False,
            title="Valentine's Day",
        ),
        ReminderModel(
            icon="heart.circle.fill",
            is_custom_date=True,
            title="Our Anniversary",
            user_date=today,
        ),
        ReminderModel(
            icon="gift.fill",
            is_custom_date=True,
            title="Their Birthday",
            user_date=today,
        ),
        ReminderModel(
            default_date=date(2025, 10, 3),
            icon="heart.fill",
            is_custom_date=False,
            title="National Boyfriend Day",
        ),
        ReminderModel(
            default_date=date(2025, 8, 1),
            icon="heart.fill",
            is_custom_date=False,
            title="National Girlfriend Day",
        ),
        ReminderModel(
            default_date=date(2025, 8, 18),
            icon="heart.circle",
            is_custom_date=False,
            title="National Couples Day",
        ),
    ]
