from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from uuid import uuid4

from opentelemetry.instrumentation.redis import RedisInstrumentor
from redis.asyncio import Connection, ConnectionPool, Redis, SSLConnection
from redis.asyncio.retry import Retry
from redis.backoff import ExponentialBackoff
from redis.exceptions import (
    BusyLoadingError,
    ConnectionError as RedisConnectionError,
    RedisError,
)

from romindr.helpers.cache import lru_acache
from romindr.helpers.config_models.store import RedisModel
from romindr.helpers.logging import logger
from romindr.models.readiness import ReadinessEnum
from romindr.persistence.istore import IStore

# Instrument redis
RedisInstrumentor().instrument()


class RedisStore(IStore):
    _config: RedisModel

    def __init__(self, config: RedisModel):
        self._config = config

    async def readiness(self) -> ReadinessEnum:
        """
        Check the readiness of the Redis store.

        This will validate the ACID properties of the database: Create, Read, Update, Delete.
        """
        test_name = f"readiness-{uuid4()}"
        test_value = "test"
        try:
            async with self._use_client() as client:
                # Test the item does not exist
                assert await client.get(test_name) is None
                # Create a new item
                await client.set(test_name, test_value)
                # Test the item is the same
                assert (await client.get(test_name)).decode() == test_value
                # Delete the item
                await client.delete(test_name)
                # Test the item does not exist
                assert await client.get(test_name) is None
            return ReadinessEnum.OK
        except AssertionError:
            logger.exception("Readiness test failed")
        except RedisError:
            logger.exception("Error requesting Redis")
        except Exception:
            logger.exception("Unknown error while checking Redis readiness")
        return ReadinessEnum.FAIL

    async def get(self, key: str) -> bytes | None:
        """
        Get a slot value.

        If the slot does not exist or if Redis cannot be reached, return `None`.
        """
        res = None
        try:
            async with self._use_client() as client:
                res = await client.get(key)
        except RedisError:
            logger.exception("Error getting slot %s", key)
        return res

    async def set(self, key: str, value: str | bytes) -> bool:
        """
        Overwrite a slot value, without expiration.
        """
        try:
            async with self._use_client() as client:
                await client.set(
                    name=key,
                    value=value,
                )
        except RedisError:
            logger.exception("Error setting slot %s", key)
            return False
        return True

    async def delete(self, key: str) -> bool:
        """
        Delete a slot, no-op if it does not exist.
        """
        try:
            async with self._use_client() as client:
                await client.delete(key)
        except RedisError:
            logger.exception("Error deleting slot %s", key)
            return False
        return True

    @lru_acache()
    async def _use_connection_pool(self) -> ConnectionPool:
        """
        Generate the Redis connection pool.
        """
        logger.info("Using Redis store %s:%s", self._config.host, self._config.port)

        return ConnectionPool(
            # Database location
            db=self._config.database,
            # Reliability
            health_check_interval=10,  # Check the health of the connection every 10 secs
            retry_on_error=[BusyLoadingError, RedisConnectionError],
            retry_on_timeout=True,
            retry=Retry(backoff=ExponentialBackoff(), retries=3),
            socket_connect_timeout=5,  # Give the system sufficient time to connect even under higher CPU conditions
            socket_timeout=1,  # Respond quickly or abort
            # Deployment
            connection_class=SSLConnection if self._config.ssl else Connection,
            host=self._config.host,
            port=self._config.port,
            # Authentication
            password=self._config.password.get_secret_value()
            if self._config.password
            else None,
        )

    @asynccontextmanager
    async def _use_client(self) -> AsyncGenerator[Redis]:
        """
        Return a Redis connection.
        """
        async with Redis(
            auto_close_connection_pool=False,
            connection_pool=await self._use_connection_pool(),
        ) as client:
            yield client
