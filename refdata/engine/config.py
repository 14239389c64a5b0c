"""
Immutable engine configuration: the pattern table plus business thresholds.

Built once from `Settings` and passed by reference into every pipeline, so the
validators hold no global or mutable state of their own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from functools import lru_cache
from typing import FrozenSet, Optional, Tuple

from refdata.config import Settings, get_settings
from refdata.engine.patterns import PatternLibrary

STANDARD_TRADE_STATUSES: FrozenSet[str] = frozenset(
    {"PENDING", "EXECUTED", "CANCELLED", "FAILED", "SETTLED"}
)
COMPLEX_TRADE_TYPES: Tuple[str, ...] = ("SWAP", "OPTION", "DERIVATIVE")


@dataclass(frozen=True)
class EngineConfig:
    """
    Everything the engine needs besides the record and its collaborators.
    """

    patterns: PatternLibrary = field(default_factory=PatternLibrary)
    max_single_trade_value: Decimal = Decimal("10000000")
    high_notional_threshold: Decimal = Decimal("1000000")
    medium_notional_threshold: Decimal = Decimal("100000")
    trade_date_tolerance: timedelta = timedelta(days=1)
    creation_date_tolerance: timedelta = timedelta(minutes=5)
    standard_statuses: FrozenSet[str] = STANDARD_TRADE_STATUSES
    complex_trade_types: Tuple[str, ...] = COMPLEX_TRADE_TYPES
    strict_trade_status: bool = False
    strict_rating_consistency: bool = False

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "EngineConfig":
        settings = settings or get_settings()
        return cls(
            max_single_trade_value=settings.max_single_trade_value,
            high_notional_threshold=settings.high_notional_threshold,
            medium_notional_threshold=settings.medium_notional_threshold,
            trade_date_tolerance=timedelta(days=settings.trade_date_max_future_days),
            creation_date_tolerance=timedelta(minutes=settings.creation_date_max_future_minutes),
            strict_trade_status=settings.strict_trade_status,
            strict_rating_consistency=settings.strict_rating_consistency,
        )


@lru_cache(maxsize=1)
def get_engine_config() -> EngineConfig:
    """
    Process-wide engine configuration derived from the cached settings.
    """
    return EngineConfig.from_settings()


__all__ = [
    "COMPLEX_TRADE_TYPES",
    "EngineConfig",
    "STANDARD_TRADE_STATUSES",
    "get_engine_config",
]
