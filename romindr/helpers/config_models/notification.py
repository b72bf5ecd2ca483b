from enum import Enum
from functools import cached_property

from pydantic import BaseModel, ValidationInfo, field_validator

from romindr.persistence.inotification import INotification


class ModeEnum(str, Enum):
    CONSOLE = "console"
    """Log requests to the console, nothing is delivered."""
    MEMORY = "memory"
    """Keep registrations in an in-process registry."""


class ConsoleModel(BaseModel, frozen=True):
    @cached_property
    def instance(self) -> INotification:
        from romindr.persistence.console import (
            ConsoleNotification,
        )

        return ConsoleNotification(self)


class MemoryModel(BaseModel, frozen=True):
    @cached_property
    def instance(self) -> INotification:
        from romindr.persistence.memory import (
            MemoryNotification,
        )

        return MemoryNotification(self)


class NotificationModel(BaseModel):
    body_tpl: str = "Today is {title}!"
    console: ConsoleModel | None = ConsoleModel()  # Object is fully defined by default
    memory: MemoryModel | None = MemoryModel()  # Object is fully defined by default
    mode: ModeEnum = ModeEnum.MEMORY
    sound: str | None = "chime.wav"
    title: str = "Romindr 💗"

    @field_validator("body_tpl")
    @classmethod
    def _validate_body_tpl(cls, body_tpl: str) -> str:
        # Template must only reference the "title" placeholder
        body_tpl.format(title="")
        return body_tpl

    @field_validator("console")
    @classmethod
    def _validate_console(
        cls,
        console: ConsoleModel | None,
        info: ValidationInfo,
    ) -> ConsoleModel | None:
        if not console and info.data.get("mode", None) == ModeEnum.CONSOLE:
            raise ValueError("Console config required")
        return console

    @cached_property
    def instance(self) -> INotification:
        if self.mode == ModeEnum.CONSOLE:
            assert self.console
            return self.console.instance

        assert self.memory
        return self.memory.instance
