"""
Normalization applied to a validated record before it is stored.

Every string field is trimmed and blank strings become None. Trade codes are
upper-cased. New records are stamped with their creation timestamps, updated
records with a revision timestamp, and new ratings without an order number
receive the next ordinal. Normalizing an already normalized record changes
nothing except the revision timestamp of an update.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, FrozenSet, Optional, TypeVar

from refdata.domain.models import (
    BaseRecord,
    BidRecord,
    CurvePointRecord,
    RatingRecord,
    RuleRecord,
    TradeRecord,
)
from refdata.engine.consistency import as_utc
from refdata.engine.fields import clean_text

RecordT = TypeVar("RecordT", bound=BaseRecord)

TRADE_UPPERCASE_FIELDS: FrozenSet[str] = frozenset({"account", "type", "status", "side"})


def clean_strings(record: BaseRecord, upper: FrozenSet[str] = frozenset()) -> Dict[str, Any]:
    """
    Updates that trim every string field of `record`, turn blanks into None and
    upper-case the fields named in `upper`.
    """
    updates: Dict[str, Any] = {}
    for name in type(record).model_fields:
        value = getattr(record, name)
        if not isinstance(value, str):
            continue
        text = clean_text(value)
        if text is not None and name in upper:
            text = text.upper()
        if text != value:
            updates[name] = text
    return updates


def _revision_stamp(creation_date: Optional[datetime], now: datetime) -> datetime:
    # The revision never predates the creation it revises.
    if creation_date is not None and as_utc(creation_date) > as_utc(now):
        return creation_date
    return now


def _creation_stamp(revision_date: Optional[datetime], now: datetime) -> datetime:
    # A supplied revision date bounds the creation stamp from above.
    if revision_date is not None and as_utc(revision_date) < as_utc(now):
        return revision_date
    return now


class Normalizer:
    """
    Produces the storable form of a validated record. Inputs are not mutated.
    """

    def _apply(self, record: RecordT, updates: Dict[str, Any], existing_id: Optional[int]) -> RecordT:
        updates["id"] = existing_id
        return record.model_copy(update=updates)

    def normalize_trade(
        self, trade: TradeRecord, existing_id: Optional[int], now: datetime
    ) -> TradeRecord:
        updates = clean_strings(trade, upper=TRADE_UPPERCASE_FIELDS)
        if existing_id is None:
            if trade.creation_date is None:
                updates["creation_date"] = _creation_stamp(trade.revision_date, now)
            if trade.trade_date is None:
                updates["trade_date"] = now
        else:
            updates["revision_date"] = _revision_stamp(trade.creation_date, now)
        return self._apply(trade, updates, existing_id)

    def normalize_rule(self, rule: RuleRecord, existing_id: Optional[int]) -> RuleRecord:
        return self._apply(rule, clean_strings(rule), existing_id)

    def normalize_rating(
        self,
        rating: RatingRecord,
        existing_id: Optional[int],
        max_order_number: Optional[int] = None,
    ) -> RatingRecord:
        """
        `max_order_number` is the highest ordinal currently stored (None when
        no rating exists); it is only consulted for new ratings without one.
        """
        updates = clean_strings(rating)
        if existing_id is None and rating.order_number is None:
            updates["order_number"] = (max_order_number or 0) + 1
        return self._apply(rating, updates, existing_id)

    def normalize_bid(self, bid: BidRecord, existing_id: Optional[int], now: datetime) -> BidRecord:
        updates = clean_strings(bid)
        if existing_id is None:
            if bid.creation_date is None:
                updates["creation_date"] = _creation_stamp(bid.revision_date, now)
        else:
            updates["revision_date"] = _revision_stamp(bid.creation_date, now)
        return self._apply(bid, updates, existing_id)

    def normalize_curve_point(
        self, point: CurvePointRecord, existing_id: Optional[int], now: datetime
    ) -> CurvePointRecord:
        updates: Dict[str, Any] = {}
        if existing_id is None:
            if point.creation_date is None:
                updates["creation_date"] = now
            if point.as_of_date is None:
                updates["as_of_date"] = now
        return self._apply(point, updates, existing_id)


__all__ = ["Normalizer", "TRADE_UPPERCASE_FIELDS", "clean_strings"]
