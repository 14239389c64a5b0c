"""
Reference data validation - save-time rules for trading reference records.

This package validates and normalizes candidate records before they are
persisted:

- Trades (codes, legs, dates, side, notional ceiling)
- Rules (names, JSON/template/SQL components)
- Ratings (agency scales, cross-agency divergence, order numbers)
- Bid lists and curve points

Every broken contract surfaces as a `ValidationFailure` carrying the message
shown to operators and a machine-readable failure kind.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from refdata.config import Settings, get_settings
from refdata.domain import (
    BaseRecord,
    BidRecord,
    CurvePointRecord,
    RatingRecord,
    RuleRecord,
    TradeRecord,
)
from refdata.engine import EngineConfig, FailureKind, RecordNotFoundError, ValidationFailure
from refdata.orchestrator import RunConfig, available_kinds, get_pipeline, validate_records
from refdata.pipelines import (
    BidPipeline,
    CurvePointPipeline,
    RatingPipeline,
    RecordPipeline,
    RulePipeline,
    TradePipeline,
)
from refdata.utils.logging import configure_from_settings, configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "EngineConfig",
    "Settings",
    "get_settings",
    # Records
    "BaseRecord",
    "BidRecord",
    "CurvePointRecord",
    "RatingRecord",
    "RuleRecord",
    "TradeRecord",
    # Failures
    "FailureKind",
    "RecordNotFoundError",
    "ValidationFailure",
    # Pipelines
    "BidPipeline",
    "CurvePointPipeline",
    "RatingPipeline",
    "RecordPipeline",
    "RulePipeline",
    "TradePipeline",
    # Orchestration
    "RunConfig",
    "available_kinds",
    "get_pipeline",
    "validate_records",
    # Logging
    "configure_from_settings",
    "configure_logging",
    "get_logger",
]
