"""
Pytest configuration for the schema strategy benchmark.

Provides fixtures for:
- A fresh in-memory document store per test
- Settings override for integration tests
- MongoDB availability checks for the integration suite
"""

from __future__ import annotations

import logging
import os

import pytest
from pymongo import MongoClient

from schema_bench.config import Settings
from schema_bench.domain.generator import seed_random_source
from schema_bench.utils.logging import RESULTS_LOGGER_NAME
from tests.fakes import FakeDocumentStore


@pytest.fixture
def fake_store() -> FakeDocumentStore:
    return FakeDocumentStore()


@pytest.fixture(autouse=True)
def _seeded_random_source():
    """Make every test deterministic and restore entropy afterwards."""
    seed_random_source(1234)
    yield
    seed_random_source(None)


@pytest.fixture(autouse=True)
def _close_results_log():
    yield
    logger = logging.getLogger(RESULTS_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        MONGO_URI=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
        MONGO_DB=os.getenv("MONGO_DB", "schema_bench_test"),
        MONGO_SERVER_SELECTION_TIMEOUT_MS=2_000,
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture(scope="session")
def mongo_available(test_settings: Settings) -> bool:
    """
    Check if MongoDB is reachable.

    Used to conditionally skip integration tests when the server is not available.
    """
    client = MongoClient(test_settings.mongo_uri, serverSelectionTimeoutMS=2_000)
    try:
        client.admin.command("ping")
        return True
    except Exception:
        return False
    finally:
        client.close()
