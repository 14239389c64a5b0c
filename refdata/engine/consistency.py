"""
Cross-field consistency rules.

Trade checks cover date ordering, side versus legs, the status vocabulary and
the single-leg notional ceiling. Rating checks compare the investment-grade
band across agencies. Status and agency divergence are logged warnings unless
the corresponding strict mode is enabled in `EngineConfig`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Optional

from refdata.domain.models import RatingRecord, TradeRecord
from refdata.engine.config import EngineConfig
from refdata.engine.errors import FailureKind, ValidationFailure
from refdata.engine.fields import RATING_FIELDS, clean_text
from refdata.engine.patterns import Agency
from refdata.utils.logging import get_logger

log = get_logger(__name__)


def as_utc(value: datetime) -> datetime:
    """Naive timestamps are read as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def leg_value(quantity: Optional[Decimal], price: Optional[Decimal]) -> Optional[Decimal]:
    if quantity is None or price is None:
        return None
    return quantity * price


class ConsistencyChecker:
    """
    Rules that relate several fields of one record to each other.
    """

    def __init__(self, config: EngineConfig) -> None:
        self.config = config

    # -- trades -----------------------------------------------------------

    def check_trade(self, trade: TradeRecord, now: datetime) -> None:
        self.check_trade_dates(trade, now)
        self.check_side(trade)
        self.check_status(trade)
        self.check_risk_limits(trade)

    def check_trade_dates(self, trade: TradeRecord, now: datetime) -> None:
        now = as_utc(now)
        tolerance = self.config.trade_date_tolerance
        if trade.trade_date is not None and as_utc(trade.trade_date) > now + tolerance:
            days = tolerance.days
            raise ValidationFailure(
                f"Trade date cannot be more than {days} day{'' if days == 1 else 's'} "
                "in the future",
                kind=FailureKind.CONSISTENCY,
                field="trade_date",
            )
        if trade.creation_date is not None and as_utc(trade.creation_date) > (
            now + self.config.creation_date_tolerance
        ):
            raise ValidationFailure(
                "Creation date cannot be in the future",
                kind=FailureKind.CONSISTENCY,
                field="creation_date",
            )
        check_revision_order(trade.creation_date, trade.revision_date)

    def check_side(self, trade: TradeRecord) -> None:
        side = clean_text(trade.side)
        if side is None:
            return
        side = side.upper()
        has_buy = trade.buy_quantity is not None and trade.buy_quantity > 0
        has_sell = trade.sell_quantity is not None and trade.sell_quantity > 0
        if side == "BUY" and not has_buy:
            raise ValidationFailure(
                "Side is BUY but no buy operation is defined",
                kind=FailureKind.CONSISTENCY,
                field="side",
            )
        if side == "SELL" and not has_sell:
            raise ValidationFailure(
                "Side is SELL but no sell operation is defined",
                kind=FailureKind.CONSISTENCY,
                field="side",
            )

    def check_status(self, trade: TradeRecord) -> None:
        status = clean_text(trade.status)
        if status is None:
            return
        status = status.upper()
        if status in self.config.standard_statuses:
            return
        if self.config.strict_trade_status:
            raise ValidationFailure(
                f"Status '{status}' is not a standard trade status",
                kind=FailureKind.CONSISTENCY,
                field="status",
            )
        log.warning(
            f"Non-standard status '{status}' used in trade",
            extra={"status": status, "account": trade.account, "trade_id": trade.id},
        )

    def check_risk_limits(self, trade: TradeRecord) -> None:
        ceiling = self.config.max_single_trade_value
        for leg, quantity, price in (
            ("Buy", trade.buy_quantity, trade.buy_price),
            ("Sell", trade.sell_quantity, trade.sell_price),
        ):
            value = leg_value(quantity, price)
            if value is not None and value > ceiling:
                raise ValidationFailure(
                    f"{leg} trade value exceeds maximum allowed limit of {ceiling}",
                    kind=FailureKind.LIMIT,
                    field=f"{leg.lower()}_quantity",
                )

    # -- ratings ----------------------------------------------------------

    def agency_grades(self, rating: RatingRecord) -> Dict[Agency, bool]:
        """Investment-grade flag for every agency notation present on the record."""
        grades: Dict[Agency, bool] = {}
        for attribute, agency in RATING_FIELDS:
            notation = clean_text(getattr(rating, attribute))
            if notation is not None:
                grades[agency] = self.config.patterns.is_investment_grade(agency, notation)
        return grades

    def check_rating(self, rating: RatingRecord) -> None:
        grades = self.agency_grades(rating)
        if len(set(grades.values())) < 2:
            return
        if self.config.strict_rating_consistency:
            raise ValidationFailure(
                "Ratings disagree between agencies on investment grade",
                kind=FailureKind.CONSISTENCY,
                field="moodys_rating",
            )
        log.warning(
            "Inconsistent ratings between agencies for this rating",
            extra={
                "rating_id": rating.id,
                "investment_grade": sorted(a.value for a, ok in grades.items() if ok),
                "speculative_grade": sorted(a.value for a, ok in grades.items() if not ok),
            },
        )


def check_revision_order(
    creation_date: Optional[datetime], revision_date: Optional[datetime]
) -> None:
    if creation_date is None or revision_date is None:
        return
    if as_utc(revision_date) < as_utc(creation_date):
        raise ValidationFailure(
            "Revision date cannot be before creation date",
            kind=FailureKind.CONSISTENCY,
            field="revision_date",
        )


__all__ = ["ConsistencyChecker", "as_utc", "check_revision_order", "leg_value"]
