from enum import Enum

from pydantic import BaseModel


class LeapDayEnum(str, Enum):
    FEBRUARY_28 = "february_28"
    """Clamp a February 29 anchor to February 28 on non-leap years."""
    MARCH_1 = "march_1"
    """Roll a February 29 anchor forward to March 1 on non-leap years."""


class RecurrenceModel(BaseModel):
    leap_day: LeapDayEnum = LeapDayEnum.MARCH_1
