"""
Rating pipeline: agency scales, cross-agency divergence, ordinal assignment
and unique order numbers.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from refdata.domain.models import RatingRecord
from refdata.engine.config import EngineConfig
from refdata.engine.uniqueness import UniquenessGuard
from refdata.pipelines.abstract import Clock, OrderSequence, RecordLookup, RecordPipeline


@runtime_checkable
class RatingLookup(RecordLookup[RatingRecord], OrderSequence, Protocol):
    """A rating store answers both key lookups and the ordinal peek."""


class RatingPipeline(RecordPipeline[RatingRecord]):
    """
    New ratings without an order number take `max(existing) + 1`.
    """

    kind: str = "rating"
    entity: str = "Rating"
    record_type = RatingRecord

    def __init__(
        self,
        lookup: RatingLookup,
        config: Optional[EngineConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(lookup, config=config, clock=clock)
        self.sequence: OrderSequence = lookup
        self.guard = UniquenessGuard(
            lookup,
            entity="rating",
            key_label="Order number",
            key_noun="order number",
            field="order_number",
        )

    def check(self, candidate: RatingRecord) -> None:
        self.fields.validate_rating(candidate)
        self.consistency.check_rating(candidate)

    def normalize(self, candidate: RatingRecord, existing_id: Optional[int]) -> RatingRecord:
        max_order_number = None
        if existing_id is None and candidate.order_number is None:
            max_order_number = self.sequence.max_order_number()
        return self.normalizer.normalize_rating(candidate, existing_id, max_order_number)

    def check_uniqueness(self, record: RatingRecord, existing_id: Optional[int]) -> None:
        self.guard.check_unique(record.order_number, existing_id)


__all__ = ["RatingLookup", "RatingPipeline"]
