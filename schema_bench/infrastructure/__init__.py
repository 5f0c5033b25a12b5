"""
Infrastructure package for the schema strategy benchmark.

Centralizes database connectivity concerns (client factory, store contract).
Keep this layer focused on I/O and resource management, decoupled from
strategy/orchestrator logic.
"""

from schema_bench.infrastructure.errors import (
    MissingDocumentError,
    StoreConnectionError,
    StoreError,
)
from schema_bench.infrastructure.mongo_factory import check_connection, create_client, open_store
from schema_bench.infrastructure.store import DocumentStore, MongoStore

__all__ = [
    "DocumentStore",
    "MissingDocumentError",
    "MongoStore",
    "StoreConnectionError",
    "StoreError",
    "check_connection",
    "create_client",
    "open_store",
]
