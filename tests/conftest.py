import random
import string
from collections.abc import AsyncGenerator
from datetime import date

import pytest
import pytest_asyncio
from aiojobs import Scheduler

from romindr.helpers.cache import get_scheduler
from romindr.helpers.config_models.feedback import FeedbackModel
from romindr.helpers.config_models.notification import (
    MemoryModel as NotificationMemoryModel,
    NotificationModel,
)
from romindr.helpers.config_models.recurrence import LeapDayEnum
from romindr.helpers.config_models.sound import MemoryModel as SoundMemoryModel
from romindr.helpers.config_models.store import MemoryModel as StoreMemoryModel
from romindr.helpers.repository import ReminderRepository
from romindr.helpers.scheduler import ReminderScheduler
from romindr.helpers.state import AppState
from romindr.persistence.memory import MemoryNotification, MemorySound, MemoryStore


@pytest.fixture
def random_text() -> str:
    text = "".join(random.choice(string.ascii_letters) for _ in range(32))
    return text


@pytest.fixture
def today() -> date:
    return date(2025, 10, 10)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore(StoreMemoryModel())


@pytest.fixture
def repository(store: MemoryStore, random_text: str) -> ReminderRepository:
    return ReminderRepository(
        key=random_text,
        store=store,
    )


@pytest.fixture
def notification() -> MemoryNotification:
    return MemoryNotification(NotificationMemoryModel())


@pytest.fixture
def sound() -> MemorySound:
    return MemorySound(SoundMemoryModel())


@pytest.fixture
def reminder_scheduler(notification: MemoryNotification) -> ReminderScheduler:
    return ReminderScheduler(
        config=NotificationModel(),
        notification=notification,
    )


@pytest.fixture
def state(
    notification: MemoryNotification,
    reminder_scheduler: ReminderScheduler,
    repository: ReminderRepository,
    sound: MemorySound,
) -> AppState:
    return AppState(
        feedback=FeedbackModel(
            bounce_sec=0.05,
            confetti_sec=0.1,
            flash_sec=0.05,
        ),
        leap_day=LeapDayEnum.MARCH_1,
        notification=notification,
        repository=repository,
        scheduler=reminder_scheduler,
        sound=sound,
        sound_name="chime.wav",
    )


@pytest_asyncio.fixture(loop_scope="session")
async def scheduler() -> AsyncGenerator[Scheduler]:
    async with get_scheduler() as scheduler:
        yield scheduler
