"""
Curve point pipeline: curve id, term and value are mandatory.
"""

from __future__ import annotations

from typing import Optional

from refdata.domain.models import CurvePointRecord
from refdata.pipelines.abstract import RecordPipeline


class CurvePointPipeline(RecordPipeline[CurvePointRecord]):
    kind: str = "curve_point"
    entity: str = "CurvePoint"
    record_type = CurvePointRecord

    def check(self, candidate: CurvePointRecord) -> None:
        self.fields.validate_curve_point(candidate)

    def normalize(
        self, candidate: CurvePointRecord, existing_id: Optional[int]
    ) -> CurvePointRecord:
        return self.normalizer.normalize_curve_point(candidate, existing_id, self.clock.now())


__all__ = ["CurvePointPipeline"]
