"""
Rule pipeline: name format, structured content screening, unique name.
"""

from __future__ import annotations

from typing import Optional

from refdata.domain.models import RuleRecord
from refdata.engine.config import EngineConfig
from refdata.engine.uniqueness import UniquenessGuard
from refdata.pipelines.abstract import Clock, RecordLookup, RecordPipeline


class RulePipeline(RecordPipeline[RuleRecord]):
    """
    Rule names are the natural key and are compared after trimming.
    """

    kind: str = "rule"
    entity: str = "Rule"
    record_type = RuleRecord

    def __init__(
        self,
        lookup: RecordLookup[RuleRecord],
        config: Optional[EngineConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(lookup, config=config, clock=clock)
        self.guard = UniquenessGuard(
            lookup,
            entity="rule",
            key_label="Rule name",
            key_noun="name",
            field="name",
            render=lambda name: f"'{name}'",
        )

    def check(self, candidate: RuleRecord) -> None:
        self.fields.validate_rule(candidate)
        self.structured.validate_rule(candidate)

    def normalize(self, candidate: RuleRecord, existing_id: Optional[int]) -> RuleRecord:
        return self.normalizer.normalize_rule(candidate, existing_id)

    def check_uniqueness(self, record: RuleRecord, existing_id: Optional[int]) -> None:
        self.guard.check_unique(record.name, existing_id)


__all__ = ["RulePipeline"]
