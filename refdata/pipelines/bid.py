"""
Bid list pipeline: required codes, non-negative amounts, creation/revision stamps.
"""

from __future__ import annotations

from typing import Optional

from refdata.domain.models import BidRecord
from refdata.engine.consistency import check_revision_order
from refdata.pipelines.abstract import RecordPipeline


class BidPipeline(RecordPipeline[BidRecord]):
    kind: str = "bid"
    entity: str = "BidList"
    record_type = BidRecord

    def check(self, candidate: BidRecord) -> None:
        self.fields.validate_bid(candidate)
        check_revision_order(candidate.creation_date, candidate.revision_date)

    def normalize(self, candidate: BidRecord, existing_id: Optional[int]) -> BidRecord:
        return self.normalizer.normalize_bid(candidate, existing_id, self.clock.now())


__all__ = ["BidPipeline"]
