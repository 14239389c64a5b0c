"""
Infrastructure package for the reference-data validation engine.

Centralizes the adapters behind the lookup interfaces the pipelines consume:
PostgreSQL connectivity (pooling, retries), table-driven lookups and the
in-memory store. Keep this layer focused on I/O, decoupled from validation.
"""

from refdata.infrastructure.db_factory import (
    PoolManager,
    build_dsn,
    get_sync_pool,
)
from refdata.infrastructure.memory import InMemoryRecordStore
from refdata.infrastructure.repositories import (
    PostgresRatingLookup,
    PostgresRecordLookup,
    postgres_lookup,
)

__all__ = [
    "InMemoryRecordStore",
    "PoolManager",
    "PostgresRatingLookup",
    "PostgresRecordLookup",
    "build_dsn",
    "get_sync_pool",
    "postgres_lookup",
]
