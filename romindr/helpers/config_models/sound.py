from enum import Enum
from functools import cached_property

from pydantic import BaseModel

from romindr.persistence.isound import ISound


class ModeEnum(str, Enum):
    CONSOLE = "console"
    """Log played sounds to the console."""
    MEMORY = "memory"
    """Record played sounds in memory."""


class ConsoleModel(BaseModel, frozen=True):
    @cached_property
    def instance(self) -> ISound:
        from romindr.persistence.console import (
            ConsoleSound,
        )

        return ConsoleSound(self)


class MemoryModel(BaseModel, frozen=True):
    @cached_property
    def instance(self) -> ISound:
        from romindr.persistence.memory import (
            MemorySound,
        )

        return MemorySound(self)


class SoundModel(BaseModel):
    console: ConsoleModel = ConsoleModel()  # Object is fully defined by default
    memory: MemoryModel = MemoryModel()  # Object is fully defined by default
    mode: ModeEnum = ModeEnum.CONSOLE
    name: str = "chime.wav"
    """Clip played when a reminder is toggled."""

    @cached_property
    def instance(self) -> ISound:
        if self.mode == ModeEnum.MEMORY:
            return self.memory.instance
        return self.console.instance
