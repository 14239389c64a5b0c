"""
Derived, read-only views over records.

Nothing here validates or raises on bad content: the functions accept records
that never went through a pipeline and simply score what is present.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Dict, Optional

from refdata.domain.models import RatingRecord, RuleRecord, TradeRecord
from refdata.engine.config import EngineConfig, get_engine_config
from refdata.engine.consistency import ConsistencyChecker, leg_value
from refdata.engine.fields import clean_text, is_blank
from refdata.engine.patterns import Agency

MAX_RISK_SCORE = 7


class ComplexityLevel(str, Enum):
    BASIC = "BASIC"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"


_LEVELS = (
    ComplexityLevel.BASIC,
    ComplexityLevel.INTERMEDIATE,
    ComplexityLevel.ADVANCED,
    ComplexityLevel.EXPERT,
)


# -- trades ---------------------------------------------------------------


def total_notional(trade: TradeRecord) -> Decimal:
    """Sum of the buy and sell leg values; a leg missing price or quantity counts 0."""
    total = Decimal(0)
    for quantity, price in (
        (trade.buy_quantity, trade.buy_price),
        (trade.sell_quantity, trade.sell_price),
    ):
        value = leg_value(quantity, price)
        if value is not None:
            total += value
    return total


def risk_score(trade: TradeRecord, config: Optional[EngineConfig] = None) -> int:
    """
    Score a trade from 0 (benign) to 7.

    +3 when total notional exceeds the high threshold (else +1 above the
    medium threshold), +2 for swap/option/derivative types, +1 without a
    benchmark, +1 for any status other than PENDING.
    """
    config = config or get_engine_config()
    score = 0

    notional = total_notional(trade)
    if notional > config.high_notional_threshold:
        score += 3
    elif notional > config.medium_notional_threshold:
        score += 1

    trade_type = (trade.type or "").upper()
    if any(keyword in trade_type for keyword in config.complex_trade_types):
        score += 2

    if is_blank(trade.benchmark):
        score += 1

    if trade.status is not None and trade.status.upper() != "PENDING":
        score += 1

    return min(score, MAX_RISK_SCORE)


def is_executable(trade: TradeRecord) -> bool:
    """True when the trade has an account, a type and one fully priced leg."""
    if is_blank(trade.account) or is_blank(trade.type):
        return False
    for quantity, price in (
        (trade.buy_quantity, trade.buy_price),
        (trade.sell_quantity, trade.sell_price),
    ):
        if quantity is not None and quantity > 0 and price is not None and price > 0:
            return True
    return False


# -- rules ----------------------------------------------------------------


def _has_sql(rule: RuleRecord) -> bool:
    return not is_blank(rule.sql_str) or not is_blank(rule.sql_part)


def complexity_level(rule: RuleRecord) -> ComplexityLevel:
    """Number of advanced components (JSON, template, SQL) mapped to a level."""
    components = sum(
        (
            not is_blank(rule.json_config),
            not is_blank(rule.template),
            _has_sql(rule),
        )
    )
    return _LEVELS[components]


def complexity_score(rule: RuleRecord) -> int:
    """Weighted complexity used to order rules for review."""
    score = 0
    if not is_blank(rule.json_config):
        score += 1
    if not is_blank(rule.template):
        score += 2
    if _has_sql(rule):
        score += 3
    if rule.description is not None and len(rule.description) > 50:
        score += 1
    return score


def is_complete_rule(rule: RuleRecord) -> bool:
    """A rule is complete with a name, a description and some executable logic."""
    has_logic = not is_blank(rule.template) or _has_sql(rule)
    return not is_blank(rule.name) and not is_blank(rule.description) and has_logic


def rule_summary(rule: RuleRecord) -> str:
    summary = f"Rule: {rule.name if rule.name is not None else 'Unnamed'}"
    description = clean_text(rule.description)
    if description is not None:
        summary += f" - {rule.description}"
    return f"{summary} [{complexity_level(rule).value}]"


# -- ratings --------------------------------------------------------------


def agency_grades(
    rating: RatingRecord, config: Optional[EngineConfig] = None
) -> Dict[Agency, bool]:
    """Investment-grade flag per agency notation present on the rating."""
    return ConsistencyChecker(config or get_engine_config()).agency_grades(rating)


def is_investment_grade(rating: RatingRecord, config: Optional[EngineConfig] = None) -> bool:
    """True when at least one agency rates the notation investment grade."""
    return any(agency_grades(rating, config).values())


__all__ = [
    "ComplexityLevel",
    "MAX_RISK_SCORE",
    "agency_grades",
    "complexity_level",
    "complexity_score",
    "is_complete_rule",
    "is_executable",
    "is_investment_grade",
    "risk_score",
    "rule_summary",
    "total_notional",
]
