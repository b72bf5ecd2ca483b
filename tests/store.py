from collections.abc import Callable
from datetime import date
from pathlib import Path

import pytest
from pytest_assume.plugin import assume

from romindr.helpers.config import CONFIG
from romindr.helpers.config_models.store import (
    MemoryModel as StoreMemoryModel,
    SqliteModel,
)
from romindr.helpers.repository import ReminderRepository
from romindr.models.readiness import ReadinessEnum
from romindr.models.reminder import default_reminders
from romindr.persistence.istore import IStore
from romindr.persistence.memory import MemoryStore
from romindr.persistence.redis import RedisStore
from romindr.persistence.sqlite import SqliteStore


def _memory(tmp_path: Path) -> IStore:  # noqa: ARG001
    return MemoryStore(StoreMemoryModel())


def _sqlite(tmp_path: Path) -> IStore:
    return SqliteStore(SqliteModel(path=str(tmp_path / "romindr")))


def _redis(tmp_path: Path) -> IStore:  # noqa: ARG001
    if not CONFIG.store.redis:
        pytest.skip("Redis store not configured")
    return RedisStore(CONFIG.store.redis)


_stores = [
    pytest.param(
        _memory,
        id="memory",
    ),
    pytest.param(
        _sqlite,
        id="sqlite",
    ),
    pytest.param(
        _redis,
        id="redis",
    ),
]

_default_titles = [
    "Valentine's Day",
    "Our Anniversary",
    "Their Birthday",
    "National Boyfriend Day",
    "National Girlfriend Day",
    "National Couples Day",
]


@pytest.mark.parametrize("store_factory", _stores)
@pytest.mark.asyncio(loop_scope="session")
@pytest.mark.repeat(3)
async def test_acid(
    store_factory: Callable[[Path], IStore],
    random_text: str,
    tmp_path: Path,
) -> None:
    """
    Test ACID properties of the store backend.

    Steps:
    1. Test not exists
    2. Insert test data
    3. Check it exists
    4. Overwrite it
    5. Delete it
    """
    store = store_factory(tmp_path)

    # Check readiness
    assume(await store.readiness() == ReadinessEnum.OK)

    # Check not exists
    assume(await store.get(random_text) is None)

    # Insert test slot
    assume(await store.set(random_text, "lorem ipsum"))
    assume(await store.get(random_text) == b"lorem ipsum")

    # Overwrite test slot
    assume(await store.set(random_text, b"dolor sit amet"))
    assume(await store.get(random_text) == b"dolor sit amet")

    # Delete test slot
    assume(await store.delete(random_text))
    assume(await store.get(random_text) is None)


@pytest.mark.parametrize("store_factory", _stores)
@pytest.mark.asyncio(loop_scope="session")
async def test_delete_missing(
    store_factory: Callable[[Path], IStore],
    random_text: str,
    tmp_path: Path,
) -> None:
    store = store_factory(tmp_path)

    assume(await store.delete(random_text))
    assume(await store.get(random_text) is None)


@pytest.mark.parametrize("store_factory", _stores)
@pytest.mark.asyncio(loop_scope="session")
async def test_round_trip(
    store_factory: Callable[[Path], IStore],
    random_text: str,
    tmp_path: Path,
    today: date,
) -> None:
    repository = ReminderRepository(
        key=random_text,
        store=store_factory(tmp_path),
    )
    reminders = default_reminders(today)
    reminders[1].user_date = date(2019, 5, 4)
    reminders[3].is_enabled = False

    assume(await repository.save(reminders))
    assume(await repository.load(today) == reminders)


@pytest.mark.asyncio(loop_scope="session")
async def test_sqlite_survives_restart(
    random_text: str,
    tmp_path: Path,
    today: date,
) -> None:
    reminders = default_reminders(today)
    reminders[0].is_enabled = False
    await ReminderRepository(key=random_text, store=_sqlite(tmp_path)).save(reminders)

    # New store instance on the same file
    repository = ReminderRepository(key=random_text, store=_sqlite(tmp_path))
    assert await repository.load(today) == reminders


@pytest.mark.asyncio(loop_scope="session")
async def test_load_missing(repository: ReminderRepository, today: date) -> None:
    reminders = await repository.load(today)

    assume([reminder.title for reminder in reminders] == _default_titles)
    assume(all(reminder.is_enabled for reminder in reminders))
    assume(len({reminder.id for reminder in reminders}) == 6)
    # Custom reminders start today
    assume(
        all(
            reminder.user_date == today
            for reminder in reminders
            if reminder.is_custom_date
        )
    )


@pytest.mark.parametrize(
    "data",
    [
        pytest.param(b"not json", id="not_json"),
        pytest.param(b"\xff\xfe", id="not_utf8"),
        pytest.param(b"{}", id="not_a_list"),
        pytest.param(b'[{"title": 42}]', id="missing_fields"),
        pytest.param(
            b'[{"title": "Lost", "icon": "heart.fill", "is_custom_date": false}]',
            id="fixed_without_date",
        ),
    ],
)
@pytest.mark.asyncio(loop_scope="session")
async def test_load_corrupt(
    data: bytes,
    random_text: str,
    store: MemoryStore,
    today: date,
) -> None:
    await store.set(random_text, data)
    repository = ReminderRepository(key=random_text, store=store)

    reminders = await repository.load(today)

    assert [reminder.title for reminder in reminders] == _default_titles


@pytest.mark.asyncio(loop_scope="session")
async def test_load_empty_list(
    random_text: str,
    store: MemoryStore,
    today: date,
) -> None:
    """
    An empty list is well-formed, it is not replaced by defaults.
    """
    await store.set(random_text, b"[]")
    repository = ReminderRepository(key=random_text, store=store)

    assert await repository.load(today) == []
