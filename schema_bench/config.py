"""
Configuration settings for the schema strategy benchmark.

Uses Pydantic Settings to load environment variables for the MongoDB
connection, logging, the HTTP trigger, and the sweep parameters that shape
each generated dataset.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    mongo_uri: str = Field("mongodb://localhost:27017", alias="MONGO_URI")
    mongo_db: str = Field("perftest", alias="MONGO_DB")
    mongo_server_selection_timeout_ms: int = Field(
        5_000, alias="MONGO_SERVER_SELECTION_TIMEOUT_MS"
    )
    workers_collection: str = Field("workers", alias="WORKERS_COLLECTION")
    availabilities_collection: str = Field(
        "availabilities", alias="AVAILABILITIES_COLLECTION"
    )

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")
    results_log: str = Field("data.log", alias="RESULTS_LOG")
    http_host: str = Field("127.0.0.1", alias="HTTP_HOST")
    http_port: int = Field(3005, alias="HTTP_PORT")

    # Dataset shape
    num_workers: int = Field(5_000, alias="NUM_WORKERS", gt=0)
    avail_low: int = Field(1, alias="AVAIL_LOW", ge=1)
    avail_high: int = Field(3, alias="AVAIL_HIGH", ge=1)

    # Sweep over the chance that a worker owns availabilities
    avail_chance_start: float = Field(0.05, alias="AVAIL_CHANCE_START", ge=0.0, le=1.0)
    avail_chance_end: float = Field(0.60, alias="AVAIL_CHANCE_END", ge=0.0, le=1.0)
    avail_chance_increment: float = Field(0.05, alias="AVAIL_CHANCE_INCREMENT", gt=0.0)

    # Max in-flight attachment writes while building a dataset
    build_concurrency: int = Field(64, alias="BUILD_CONCURRENCY", gt=0)
    benchmark_seed: Optional[int] = Field(None, alias="BENCHMARK_SEED")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _check_ranges(self) -> "Settings":
        if self.avail_low > self.avail_high:
            raise ValueError(
                f"AVAIL_LOW ({self.avail_low}) must not exceed AVAIL_HIGH ({self.avail_high})"
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
