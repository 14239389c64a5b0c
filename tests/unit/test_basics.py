from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from refdata import config
from refdata.domain.models import RatingRecord
from refdata.engine.config import EngineConfig
from refdata.infrastructure import db_factory
from refdata.infrastructure.db_factory import apply_statement_timeout, build_dsn, get_sync_pool
from refdata.infrastructure.memory import InMemoryRecordStore
from refdata.orchestrator import RunConfig, validate_records
from scripts import generate_samples

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def test_get_settings_defaults():
    settings = config.get_settings()
    assert settings.db_host == "localhost"
    assert settings.db_port == 5432
    assert settings.db_user == "postgres"
    assert settings.db_name == "refdata"
    assert settings.max_single_trade_value == Decimal("10000000")
    assert settings.strict_trade_status is False
    assert settings.strict_rating_consistency is False


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("MAX_SINGLE_TRADE_VALUE", "500")
    monkeypatch.setenv("TRADE_DATE_MAX_FUTURE_DAYS", "3")
    monkeypatch.setenv("STRICT_RATING_CONSISTENCY", "true")
    engine_config = EngineConfig.from_settings(config.Settings())
    assert engine_config.max_single_trade_value == Decimal("500")
    assert engine_config.trade_date_tolerance == timedelta(days=3)
    assert engine_config.strict_rating_consistency is True


def test_build_dsn_uses_settings():
    assert build_dsn().startswith("postgresql://postgres:")
    assert build_dsn().endswith("/refdata")


def test_sync_pool_is_shared_and_built_from_settings(monkeypatch):
    created = []

    class FakePool:
        def __init__(self, conninfo, min_size, max_size, open):
            created.append(conninfo)

        def close(self):
            pass

    monkeypatch.setattr(db_factory, "ConnectionPool", FakePool)
    monkeypatch.setattr(db_factory.PoolManager, "_instance", None)
    first = get_sync_pool()
    assert get_sync_pool() is first
    assert created == [build_dsn()]
    db_factory.PoolManager().close_all()


def test_statement_timeout_is_skipped_when_disabled():
    class Cursor:
        executed = []

        def execute(self, query):
            self.executed.append(query)

    cur = Cursor()
    apply_statement_timeout(cur, 0)
    assert cur.executed == []
    apply_statement_timeout(cur, 500)
    assert len(cur.executed) == 1


def test_memory_store_assigns_identities_and_tracks_order_numbers():
    store = InMemoryRecordStore(key_field="order_number")
    assert store.max_order_number() is None
    first = store.save(RatingRecord(fitch_rating="A", order_number=4))
    store.save(RatingRecord(fitch_rating="B", order_number=2))
    assert first.id == 1
    assert store.max_order_number() == 4
    assert store.find_by_natural_key(2).fitch_rating == "B"
    assert store.exists_by_id(2)
    store.delete(2)
    assert not store.exists_by_id(2)
    assert len(store) == 1


def test_memory_store_without_key_never_matches():
    store = InMemoryRecordStore()
    store.save(RatingRecord(order_number=1))
    assert store.find_by_natural_key(1) is None


def test_generate_samples_is_deterministic():
    first = generate_samples.generate_samples("trade", 5, invalid_ratio=0.5, seed=7, now=NOW)
    second = generate_samples.generate_samples("trade", 5, invalid_ratio=0.5, seed=7, now=NOW)
    assert first == second
    assert len(first) == 5


@pytest.mark.parametrize("kind", ["trade", "rule", "rating", "bid", "curve_point"])
def test_generated_valid_samples_pass_validation(kind, clock):
    samples = generate_samples.generate_samples(kind, 15, invalid_ratio=0.0, seed=11, now=NOW)
    results = validate_records(RunConfig(kind=kind, records=samples, config=EngineConfig(), clock=clock))
    assert all(r["status"] == "accepted" for r in results), results


@pytest.mark.parametrize("kind", ["trade", "rule", "rating", "bid", "curve_point"])
def test_generated_broken_samples_are_rejected(kind, clock):
    samples = generate_samples.generate_samples(kind, 10, invalid_ratio=1.0, seed=3, now=NOW)
    results = validate_records(RunConfig(kind=kind, records=samples, config=EngineConfig(), clock=clock))
    assert all(r["status"] == "rejected" for r in results), results


def test_generate_samples_unknown_kind():
    with pytest.raises(ValueError, match="Unknown record kind"):
        generate_samples.generate_samples("iban", 1)
