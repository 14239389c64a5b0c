"""
Domain package for the reference-data validation engine.

Exports the record models that flow through the pipelines, the orchestrator
and the persistence adapters. Keep this package focused on data definitions.
"""

from refdata.domain.models import (
    BaseRecord,
    BidRecord,
    CurvePointRecord,
    RatingRecord,
    RuleRecord,
    TradeRecord,
)

__all__ = [
    "BaseRecord",
    "BidRecord",
    "CurvePointRecord",
    "RatingRecord",
    "RuleRecord",
    "TradeRecord",
]
