"""
Collaborator interfaces and the base pipeline shared by every record kind.

Concrete pipelines (trade, rule, rating, bid, curve point) subclass
`RecordPipeline` and supply `check`, `normalize` and, when the kind has a
natural key, `check_uniqueness`. Callers only ever use `prepare_for_save`,
`validate` and `prepare_for_delete`.
"""

from __future__ import annotations

import abc
from datetime import datetime, timezone
from typing import Any, Generic, Optional, Protocol, TypeVar, runtime_checkable

from refdata.domain.models import BaseRecord
from refdata.engine.config import EngineConfig, get_engine_config
from refdata.engine.consistency import ConsistencyChecker
from refdata.engine.errors import RecordNotFoundError, ValidationFailure
from refdata.engine.fields import FieldValidator
from refdata.engine.normalizer import Normalizer
from refdata.engine.structured import StructuredContentValidator
from refdata.utils.logging import get_logger

RecordT = TypeVar("RecordT", bound=BaseRecord)
RecordT_co = TypeVar("RecordT_co", bound=BaseRecord, covariant=True)

log = get_logger(__name__)


@runtime_checkable
class RecordLookup(Protocol[RecordT_co]):
    """
    Read access to stored records of one kind.

    `find_by_natural_key` returns None for kinds without a natural key.
    """

    def find_by_natural_key(self, key: Any) -> Optional[RecordT_co]:
        ...

    def exists_by_id(self, record_id: int) -> bool:
        ...


@runtime_checkable
class OrderSequence(Protocol):
    """Peek at the highest rating ordinal in use (None when there is none)."""

    def max_order_number(self) -> Optional[int]:
        ...


@runtime_checkable
class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class RecordPipeline(abc.ABC, Generic[RecordT]):
    """
    Validate → normalize → check uniqueness, then hand back for persistence.

    Attributes
    ----------
    kind : str
        Machine-friendly record kind ("trade", "rule", ...).
    entity : str
        Entity name used in user-facing messages ("Trade", "Rule", ...).
    record_type : type
        Model class candidates are parsed into.
    """

    kind: str
    entity: str
    record_type: type[RecordT]

    def __init__(
        self,
        lookup: RecordLookup[RecordT],
        config: Optional[EngineConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.lookup = lookup
        self.config = config or get_engine_config()
        self.clock = clock or SystemClock()
        self.fields = FieldValidator(self.config.patterns)
        self.structured = StructuredContentValidator(self.config.patterns)
        self.consistency = ConsistencyChecker(self.config)
        self.normalizer = Normalizer()

    @abc.abstractmethod
    def check(self, candidate: RecordT) -> None:
        """Raise `ValidationFailure` on the first unmet contract."""
        raise NotImplementedError

    @abc.abstractmethod
    def normalize(self, candidate: RecordT, existing_id: Optional[int]) -> RecordT:
        """Return the storable form of an already checked candidate."""
        raise NotImplementedError

    def check_uniqueness(self, record: RecordT, existing_id: Optional[int]) -> None:
        """Kinds without a natural key accept every record."""

    def parse(self, payload: Any) -> RecordT:
        """Build a candidate from a form/API payload (dict) or pass a record through."""
        if isinstance(payload, self.record_type):
            return payload
        return self.record_type.model_validate(payload)

    def prepare_for_save(self, existing_id: Optional[int], candidate: RecordT) -> RecordT:
        """
        Run the full pipeline for a create (`existing_id` None) or an update.

        Returns
        -------
        RecordT
            Normalized copy of `candidate` carrying `existing_id` as identity.

        Raises
        ------
        ValidationFailure
            The first contract the candidate breaks.
        """
        operation = "create" if existing_id is None else "update"
        try:
            self.check(candidate)
            record = self.normalize(candidate, existing_id)
            self.check_uniqueness(record, existing_id)
        except ValidationFailure as failure:
            log.info(
                f"{self.entity} rejected: {failure.message}",
                extra={
                    "kind": self.kind,
                    "operation": operation,
                    "record_id": existing_id,
                    "failure_kind": failure.kind.value,
                    "field": failure.field,
                },
            )
            raise
        log.debug(
            f"{self.entity} ready for {operation}",
            extra={"kind": self.kind, "operation": operation, "record_id": existing_id},
        )
        return record

    def validate(self, candidate: RecordT) -> bool:
        """Non-throwing probe for pre-submission checks; uniqueness is not consulted."""
        try:
            self.check(candidate)
        except ValidationFailure:
            return False
        return True

    def prepare_for_delete(self, record_id: Optional[int]) -> None:
        """
        Existence check before the caller deletes a record.

        Raises
        ------
        RecordNotFoundError
            When the id is not a positive integer or designates no record.
        """
        if record_id is None or record_id <= 0:
            raise RecordNotFoundError("Invalid ID for deletion", record_id)
        if not self.lookup.exists_by_id(record_id):
            raise RecordNotFoundError(f"{self.entity} not found with id: {record_id}", record_id)


__all__ = [
    "Clock",
    "OrderSequence",
    "RecordLookup",
    "RecordPipeline",
    "SystemClock",
]
