from datetime import date

from pydantic import BaseModel, Field


class YearlyTriggerModel(BaseModel, frozen=True):
    """
    Calendar trigger firing every year on the same month and day.

    A February 29 trigger only fires on leap years.
    """

    day: int = Field(ge=1, le=31)
    month: int = Field(ge=1, le=12)
    repeats: bool = True

    @classmethod
    def from_date(cls, value: date) -> "YearlyTriggerModel":
        return cls(
            day=value.day,
            month=value.month,
        )


class NotificationRequestModel(BaseModel):
    # Immutable fields
    id: str = Field(frozen=True)
    """Registration identifier, registering the same one again replaces the previous request."""
    # Editable fields
    body: str
    sound: str | None = None
    title: str
    trigger: YearlyTriggerModel
