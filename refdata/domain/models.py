"""
Domain models for the reference-data validation engine.

Each record kind is a mutable bag of optional typed fields. Models only coerce
payload types (strings, decimals, timestamps); every business contract is
enforced by the engine so the caller gets the exact user-facing message.
Payload keys may use snake_case or the camelCase names sent by the forms.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_RECORD_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="forbid",
)


class BaseRecord(BaseModel):
    """
    Common shape of every record: an identity assigned by the persistence layer.
    """

    id: Optional[int] = Field(None, description="Identity; absent until persisted.")

    model_config = _RECORD_CONFIG


class TradeRecord(BaseRecord):
    """
    A booked trade with an optional buy leg and an optional sell leg.
    """

    account: Optional[str] = None
    type: Optional[str] = None
    buy_quantity: Optional[Decimal] = None
    sell_quantity: Optional[Decimal] = None
    buy_price: Optional[Decimal] = None
    sell_price: Optional[Decimal] = None
    benchmark: Optional[str] = None
    trade_date: Optional[datetime] = None
    security: Optional[str] = None
    status: Optional[str] = None
    trader: Optional[str] = None
    book: Optional[str] = None
    creation_name: Optional[str] = None
    creation_date: Optional[datetime] = None
    revision_name: Optional[str] = None
    revision_date: Optional[datetime] = None
    deal_name: Optional[str] = None
    deal_type: Optional[str] = None
    source_list_id: Optional[str] = None
    side: Optional[str] = None


class RuleRecord(BaseRecord):
    """
    A named business rule. `name` is the natural key.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    json_config: Optional[str] = Field(None, alias="json")
    template: Optional[str] = None
    sql_str: Optional[str] = None
    sql_part: Optional[str] = None


class RatingRecord(BaseRecord):
    """
    A credit rating notation across agencies. `order_number` is the natural key.
    """

    moodys_rating: Optional[str] = None
    sand_p_rating: Optional[str] = None
    fitch_rating: Optional[str] = None
    order_number: Optional[int] = None


class BidRecord(BaseRecord):
    """
    A bid list entry quoted for an account.
    """

    account: Optional[str] = None
    type: Optional[str] = None
    bid_quantity: Optional[Decimal] = None
    ask_quantity: Optional[Decimal] = None
    bid: Optional[Decimal] = None
    ask: Optional[Decimal] = None
    benchmark: Optional[str] = None
    bid_list_date: Optional[datetime] = None
    commentary: Optional[str] = None
    security: Optional[str] = None
    status: Optional[str] = None
    trader: Optional[str] = None
    book: Optional[str] = None
    creation_name: Optional[str] = None
    creation_date: Optional[datetime] = None
    revision_name: Optional[str] = None
    revision_date: Optional[datetime] = None
    deal_name: Optional[str] = None
    deal_type: Optional[str] = None
    source_list_id: Optional[str] = None
    side: Optional[str] = None


class CurvePointRecord(BaseRecord):
    """
    A single point (term, value) on a yield curve.
    """

    curve_id: Optional[int] = None
    as_of_date: Optional[datetime] = None
    term: Optional[Decimal] = None
    value: Optional[Decimal] = None
    creation_date: Optional[datetime] = None


__all__ = [
    "BaseRecord",
    "BidRecord",
    "CurvePointRecord",
    "RatingRecord",
    "RuleRecord",
    "TradeRecord",
]
