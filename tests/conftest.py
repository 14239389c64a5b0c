"""
Pytest configuration for the reference-data validation engine.

Provides fixtures for:
- A fixed clock and engine configuration
- In-memory stores and pipelines per record kind
- Database connection management for integration tests
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import psycopg
import pytest

from refdata.config import Settings
from refdata.engine.config import EngineConfig
from refdata.infrastructure.memory import InMemoryRecordStore
from refdata.pipelines import BidPipeline, CurvePointPipeline, RatingPipeline, RulePipeline, TradePipeline

FIXED_NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)

TABLES = ("trade", "rule_name", "rating", "bid_list", "curve_point")


class FixedClock:
    """Clock that always answers the same instant; tests move it explicitly."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def trade_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def rule_store() -> InMemoryRecordStore:
    return InMemoryRecordStore(key_field="name")


@pytest.fixture
def rating_store() -> InMemoryRecordStore:
    return InMemoryRecordStore(key_field="order_number")


@pytest.fixture
def trade_pipeline(trade_store, engine_config, clock) -> TradePipeline:
    return TradePipeline(trade_store, config=engine_config, clock=clock)


@pytest.fixture
def rule_pipeline(rule_store, engine_config, clock) -> RulePipeline:
    return RulePipeline(rule_store, config=engine_config, clock=clock)


@pytest.fixture
def rating_pipeline(rating_store, engine_config, clock) -> RatingPipeline:
    return RatingPipeline(rating_store, config=engine_config, clock=clock)


@pytest.fixture
def bid_pipeline(engine_config, clock) -> BidPipeline:
    return BidPipeline(InMemoryRecordStore(), config=engine_config, clock=clock)


@pytest.fixture
def curve_point_pipeline(engine_config, clock) -> CurvePointPipeline:
    return CurvePointPipeline(InMemoryRecordStore(), config=engine_config, clock=clock)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "refdata"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def db_schema_initialized(db_connection: psycopg.Connection) -> bool:
    """
    Ensure the reference tables exist, creating them from db/init.sql.
    """
    init_sql_path = Path(__file__).parent.parent / "db" / "init.sql"
    with db_connection.cursor() as cur:
        cur.execute(init_sql_path.read_text(encoding="utf-8"))
    db_connection.commit()
    return True


@pytest.fixture(scope="function")
def clean_tables(db_connection: psycopg.Connection, db_schema_initialized: bool):
    """
    Empty every reference table before and after each test function.
    """
    truncate = f"TRUNCATE TABLE {', '.join(TABLES)} RESTART IDENTITY CASCADE;"
    with db_connection.cursor() as cur:
        cur.execute(truncate)
    db_connection.commit()
    yield
    with db_connection.cursor() as cur:
        cur.execute(truncate)
    db_connection.commit()
