from pydantic import BaseModel, Field


class FeedbackModel(BaseModel):
    """
    Durations of the transient presentation flags set after a user interaction.
    """

    bounce_sec: float = Field(default=0.3, ge=0)
    confetti_sec: float = Field(default=1.5, ge=0)
    flash_sec: float = Field(default=0.3, ge=0)
