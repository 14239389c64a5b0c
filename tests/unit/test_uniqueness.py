from __future__ import annotations

import pytest

from refdata.domain.models import RuleRecord
from refdata.engine.errors import FailureKind, ValidationFailure
from refdata.engine.uniqueness import UniquenessGuard
from refdata.infrastructure.memory import InMemoryRecordStore


class _CountingLookup:
    def __init__(self, hit=None) -> None:
        self.hit = hit
        self.calls = 0

    def find_by_natural_key(self, key):
        self.calls += 1
        return self.hit

    def exists_by_id(self, record_id):
        return False


@pytest.fixture
def store() -> InMemoryRecordStore:
    store = InMemoryRecordStore(key_field="name")
    store.save(RuleRecord(name="alpha"))
    return store


@pytest.fixture
def guard(store) -> UniquenessGuard:
    return UniquenessGuard(
        store,
        entity="rule",
        key_label="Rule name",
        key_noun="name",
        field="name",
        render=lambda name: f"'{name}'",
    )


def test_free_key_passes(guard):
    guard.check_unique("beta", None)


def test_duplicate_on_create_fails(guard):
    with pytest.raises(ValidationFailure) as exc_info:
        guard.check_unique("alpha", None)
    assert exc_info.value.message == (
        "Rule name 'alpha' already exists. Each rule must have a unique name."
    )
    assert exc_info.value.kind is FailureKind.DUPLICATE
    assert exc_info.value.field == "name"


def test_own_record_is_excluded_on_update(guard):
    guard.check_unique("alpha", 1)


def test_other_record_holding_key_fails_on_update(guard):
    with pytest.raises(ValidationFailure, match="already exists"):
        guard.check_unique("alpha", 2)


def test_missing_key_skips_lookup():
    lookup = _CountingLookup()
    UniquenessGuard(lookup, "rating", "Order number", "order number", "order_number").check_unique(None, None)
    assert lookup.calls == 0


def test_one_read_per_check():
    lookup = _CountingLookup(hit=RuleRecord(id=3, name="x"))
    guard = UniquenessGuard(lookup, "rating", "Order number", "order number", "order_number")
    with pytest.raises(ValidationFailure) as exc_info:
        guard.check_unique(4, None)
    assert lookup.calls == 1
    assert exc_info.value.message == (
        "Order number 4 already exists. Each rating must have a unique order number."
    )
