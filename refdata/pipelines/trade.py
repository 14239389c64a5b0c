"""
Trade pipeline: codes and legs, dates and side consistency, notional ceiling.
"""

from __future__ import annotations

from typing import Optional

from refdata.domain.models import TradeRecord
from refdata.pipelines.abstract import RecordPipeline


class TradePipeline(RecordPipeline[TradeRecord]):
    """
    Trades have no natural key; only field and consistency rules apply.
    """

    kind: str = "trade"
    entity: str = "Trade"
    record_type = TradeRecord

    def check(self, candidate: TradeRecord) -> None:
        self.fields.validate_trade(candidate)
        self.consistency.check_trade(candidate, self.clock.now())

    def normalize(self, candidate: TradeRecord, existing_id: Optional[int]) -> TradeRecord:
        return self.normalizer.normalize_trade(candidate, existing_id, self.clock.now())


__all__ = ["TradePipeline"]
