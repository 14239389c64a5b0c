"""
Pipelines package for the reference-data validation engine.

Re-exports the collaborator interfaces and one pipeline per record kind so
downstream code can import from `refdata.pipelines` directly.
"""

from refdata.pipelines.abstract import (
    Clock,
    OrderSequence,
    RecordLookup,
    RecordPipeline,
    SystemClock,
)
from refdata.pipelines.bid import BidPipeline
from refdata.pipelines.curve_point import CurvePointPipeline
from refdata.pipelines.rating import RatingLookup, RatingPipeline
from refdata.pipelines.rule import RulePipeline
from refdata.pipelines.trade import TradePipeline

__all__ = [
    # Interfaces
    "Clock",
    "OrderSequence",
    "RatingLookup",
    "RecordLookup",
    "RecordPipeline",
    "SystemClock",
    # Concrete pipelines
    "BidPipeline",
    "CurvePointPipeline",
    "RatingPipeline",
    "RulePipeline",
    "TradePipeline",
]
