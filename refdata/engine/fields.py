"""
Per-field contracts: required-ness, length limits, numeric sign and precision,
and pattern conformance.

Every check is a pure function of the record. The first unmet contract raises
`ValidationFailure`; nothing is accumulated. Lengths and patterns are measured
on the trimmed value because that is what the normalizer will store.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Sequence, Tuple

from refdata.domain.models import (
    BidRecord,
    CurvePointRecord,
    RatingRecord,
    RuleRecord,
    TradeRecord,
)
from refdata.engine.errors import FailureKind, ValidationFailure
from refdata.engine.patterns import ACCOUNT, RULE_NAME, TRADE_TYPE, Agency, PatternLibrary

CODE_MAX_LENGTH = 30
TEXT_MAX_LENGTH = 125
STATUS_MAX_LENGTH = 10
MAX_INTEGER_DIGITS = 10
QUANTITY_DECIMALS = 2
PRICE_DECIMALS = 4
CURVE_DECIMALS = 4

# (attribute, label, max length)
TextLimit = Tuple[str, str, int]

TRADE_TEXT_LIMITS: Sequence[TextLimit] = (
    ("security", "Security", TEXT_MAX_LENGTH),
    ("status", "Status", STATUS_MAX_LENGTH),
    ("trader", "Trader", TEXT_MAX_LENGTH),
    ("benchmark", "Benchmark", TEXT_MAX_LENGTH),
    ("book", "Book", TEXT_MAX_LENGTH),
    ("creation_name", "Creation name", TEXT_MAX_LENGTH),
    ("revision_name", "Revision name", TEXT_MAX_LENGTH),
    ("deal_name", "Deal name", TEXT_MAX_LENGTH),
    ("deal_type", "Deal type", TEXT_MAX_LENGTH),
    ("source_list_id", "Source list ID", TEXT_MAX_LENGTH),
    ("side", "Side", TEXT_MAX_LENGTH),
)

BID_TEXT_LIMITS: Sequence[TextLimit] = (
    ("benchmark", "Benchmark", TEXT_MAX_LENGTH),
    ("commentary", "Commentary", TEXT_MAX_LENGTH),
    *(limit for limit in TRADE_TEXT_LIMITS if limit[0] != "benchmark"),
)

RATING_FIELDS: Sequence[Tuple[str, Agency]] = (
    ("moodys_rating", Agency.MOODYS),
    ("sand_p_rating", Agency.SP),
    ("fitch_rating", Agency.FITCH),
)


def clean_text(value: Optional[str]) -> Optional[str]:
    """Trimmed value, or None when absent or blank."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def is_blank(value: Optional[str]) -> bool:
    return clean_text(value) is None


def fail(message: str, kind: FailureKind, field: Optional[str] = None) -> ValidationFailure:
    return ValidationFailure(message, kind=kind, field=field)


def decimal_places(value: Decimal) -> int:
    exponent = value.normalize().as_tuple().exponent
    return -exponent if isinstance(exponent, int) and exponent < 0 else 0


def integer_digits(value: Decimal) -> int:
    return max(value.copy_abs().adjusted() + 1, 0)


class FieldValidator:
    """
    Field-level checks for every record kind.

    Parameters
    ----------
    patterns : PatternLibrary
        Compiled format rules used for pattern conformance.
    """

    def __init__(self, patterns: PatternLibrary) -> None:
        self.patterns = patterns

    # -- primitives -------------------------------------------------------

    def require(self, value: Optional[str], label: str, field: str) -> str:
        text = clean_text(value)
        if text is None:
            raise fail(f"{label} is required", FailureKind.REQUIRED, field)
        return text

    def check_length(self, value: Optional[str], limit: int, label: str, field: str) -> None:
        text = clean_text(value)
        if text is not None and len(text) > limit:
            raise fail(f"{label} cannot exceed {limit} characters", FailureKind.LENGTH, field)

    def check_lengths(self, record: Any, limits: Sequence[TextLimit]) -> None:
        for attribute, label, limit in limits:
            self.check_length(getattr(record, attribute), limit, label, attribute)

    def check_pattern(self, value: str, pattern_name: str, field: str) -> None:
        pattern = self.patterns.get(pattern_name)
        if not pattern.matches(value):
            raise fail(pattern.failure_message(value), FailureKind.PATTERN, field)

    def check_precision(
        self,
        value: Optional[Decimal],
        decimals: int,
        label: str,
        field: str,
    ) -> None:
        if value is None:
            return
        if integer_digits(value) > MAX_INTEGER_DIGITS:
            raise fail(
                f"{label} cannot exceed {MAX_INTEGER_DIGITS} integer digits",
                FailureKind.NUMERIC,
                field,
            )
        if decimal_places(value) > decimals:
            raise fail(
                f"{label} must have at most {decimals} decimal places",
                FailureKind.NUMERIC,
                field,
            )

    def check_not_negative(self, value: Optional[Decimal], label: str, field: str) -> None:
        if value is not None and value < 0:
            raise fail(f"{label} cannot be negative", FailureKind.NUMERIC, field)

    def _code(self, value: Optional[str], label: str, field: str, pattern_name: str) -> None:
        text = self.require(value, label, field)
        if len(text) > CODE_MAX_LENGTH:
            raise fail(
                f"{label} cannot exceed {CODE_MAX_LENGTH} characters", FailureKind.LENGTH, field
            )
        self.check_pattern(text, pattern_name, field)

    # -- trades -----------------------------------------------------------

    def validate_trade(self, trade: TradeRecord) -> None:
        self._code(trade.account, "Account", "account", ACCOUNT)
        self._code(trade.type, "Type", "type", TRADE_TYPE)
        self.validate_trade_legs(trade)
        self.check_lengths(trade, TRADE_TEXT_LIMITS)

    def validate_trade_legs(self, trade: TradeRecord) -> None:
        """
        At least one leg must carry a positive quantity, and each leg's price
        and quantity must be present together and strictly positive.
        """
        has_buy = trade.buy_quantity is not None and trade.buy_quantity > 0
        has_sell = trade.sell_quantity is not None and trade.sell_quantity > 0
        if not has_buy and not has_sell:
            raise fail(
                "Trade must have at least one operation (buy or sell) with positive quantity",
                FailureKind.NUMERIC,
                "buy_quantity",
            )

        for leg, quantity, price in (
            ("buy", trade.buy_quantity, trade.buy_price),
            ("sell", trade.sell_quantity, trade.sell_price),
        ):
            label = leg.capitalize()
            if quantity is not None:
                if quantity <= 0:
                    raise fail(
                        f"{label} quantity must be positive", FailureKind.NUMERIC, f"{leg}_quantity"
                    )
                if price is None or price <= 0:
                    raise fail(
                        f"{label} price must be positive when {leg} quantity is specified",
                        FailureKind.NUMERIC,
                        f"{leg}_price",
                    )
            elif price is not None:
                raise fail(
                    f"{label} price cannot be specified without {leg} quantity",
                    FailureKind.NUMERIC,
                    f"{leg}_price",
                )
            self.check_precision(quantity, QUANTITY_DECIMALS, f"{label} quantity", f"{leg}_quantity")
            self.check_precision(price, PRICE_DECIMALS, f"{label} price", f"{leg}_price")

    # -- rules ------------------------------------------------------------

    def validate_rule(self, rule: RuleRecord) -> None:
        name = self.require(rule.name, "Rule name", "name")
        if len(name) > TEXT_MAX_LENGTH:
            raise fail(
                f"Rule name cannot exceed {TEXT_MAX_LENGTH} characters", FailureKind.LENGTH, "name"
            )
        self.check_pattern(name, RULE_NAME, "name")
        self.check_length(rule.description, TEXT_MAX_LENGTH, "Description", "description")

    # -- ratings ----------------------------------------------------------

    def validate_rating(self, rating: RatingRecord) -> None:
        notations = [
            (attribute, agency, clean_text(getattr(rating, attribute)))
            for attribute, agency in RATING_FIELDS
        ]
        if all(value is None for _, _, value in notations):
            raise fail(
                "At least one rating agency notation must be provided",
                FailureKind.REQUIRED,
                "moodys_rating",
            )
        for attribute, agency, value in notations:
            if value is None:
                continue
            scale = self.patterns.rating_scale(agency)
            if not scale.matches(value):
                raise fail(scale.failure_message(value), FailureKind.PATTERN, attribute)
        if rating.order_number is not None and rating.order_number <= 0:
            raise fail("Order number must be positive", FailureKind.NUMERIC, "order_number")

    # -- bids -------------------------------------------------------------

    def validate_bid(self, bid: BidRecord) -> None:
        for attribute, label in (("account", "Account"), ("type", "Type")):
            text = self.require(getattr(bid, attribute), label, attribute)
            if len(text) > CODE_MAX_LENGTH:
                raise fail(
                    f"{label} cannot exceed {CODE_MAX_LENGTH} characters",
                    FailureKind.LENGTH,
                    attribute,
                )
        for attribute, label in (
            ("bid_quantity", "Bid quantity"),
            ("ask_quantity", "Ask quantity"),
            ("bid", "Bid"),
            ("ask", "Ask"),
        ):
            value = getattr(bid, attribute)
            self.check_not_negative(value, label, attribute)
            self.check_precision(value, QUANTITY_DECIMALS, label, attribute)
        self.check_lengths(bid, BID_TEXT_LIMITS)

    # -- curve points -----------------------------------------------------

    def validate_curve_point(self, point: CurvePointRecord) -> None:
        if point.curve_id is None or point.curve_id <= 0:
            raise fail(
                "Curve ID is required and must be positive",
                FailureKind.REQUIRED if point.curve_id is None else FailureKind.NUMERIC,
                "curve_id",
            )
        if point.term is None or point.term < 0:
            raise fail(
                "Term is required and must be positive or zero",
                FailureKind.REQUIRED if point.term is None else FailureKind.NUMERIC,
                "term",
            )
        if point.value is None:
            raise fail("Value is required", FailureKind.REQUIRED, "value")
        self.check_precision(point.term, CURVE_DECIMALS, "Term", "term")
        self.check_precision(point.value, CURVE_DECIMALS, "Value", "value")


__all__ = [
    "BID_TEXT_LIMITS",
    "FieldValidator",
    "RATING_FIELDS",
    "TRADE_TEXT_LIMITS",
    "clean_text",
    "is_blank",
]
