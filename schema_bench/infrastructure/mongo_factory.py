"""
MongoDB client factory for the schema strategy benchmark.

Builds pymongo asyncio clients from settings and exposes `open_store`, an
async context manager that verifies connectivity before handing out a
`MongoStore` and always closes the client on exit.

Includes retry logic for the startup connectivity check using tenacity.
Operational calls made during a sweep are never retried.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from pymongo import AsyncMongoClient
from pymongo.errors import ConnectionFailure
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from schema_bench.config import Settings, get_settings
from schema_bench.infrastructure.errors import StoreConnectionError
from schema_bench.infrastructure.store import MongoStore
from schema_bench.utils.logging import get_logger

log = get_logger(__name__)


def create_client(
    uri_override: Optional[str] = None, settings: Optional[Settings] = None
) -> AsyncMongoClient:
    """
    Create an asyncio MongoDB client.

    Parameters
    ----------
    uri_override : str | None
        Connection string to use instead of `settings.mongo_uri`.
    settings : Settings | None
        Settings instance; defaults to the cached application settings.
    """
    settings = settings or get_settings()
    return AsyncMongoClient(
        uri_override or settings.mongo_uri,
        serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(ConnectionFailure),
    reraise=True,
)
async def check_connection(client: AsyncMongoClient) -> None:
    """
    Ping the server, retrying up to 3 times with exponential backoff.

    Raises
    ------
    pymongo.errors.ConnectionFailure
        If the server is still unreachable after all attempts.
    """
    await client.admin.command("ping")


@asynccontextmanager
async def open_store(
    uri_override: Optional[str] = None, settings: Optional[Settings] = None
) -> AsyncGenerator[MongoStore, None]:
    """
    Connect, verify the server answers, and yield a `MongoStore`.

    Example
    -------
        async with open_store() as store:
            await store.drop("workers")
    """
    settings = settings or get_settings()
    client = create_client(uri_override, settings)
    try:
        try:
            await check_connection(client)
        except ConnectionFailure as exc:
            raise StoreConnectionError(
                f"MongoDB unreachable at {uri_override or settings.mongo_uri}: {exc}"
            ) from exc
        log.info("Connected to MongoDB", extra={"database": settings.mongo_db})
        yield MongoStore(client[settings.mongo_db])
    finally:
        await client.close()


__all__ = ["check_connection", "create_client", "open_store"]
