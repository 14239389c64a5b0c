"""
Dict-backed record store.

Implements the lookup interfaces the pipelines consume, plus a `save` that
assigns identities the way the database would. Used for offline batch
validation from the CLI and as the store in tests.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Generic, Iterator, List, Optional, TypeVar

from refdata.domain.models import BaseRecord

RecordT = TypeVar("RecordT", bound=BaseRecord)


class InMemoryRecordStore(Generic[RecordT]):
    """
    In-memory store for one record kind.

    Parameters
    ----------
    key_field : str, optional
        Attribute holding the natural key. Without one, `find_by_natural_key`
        always returns None.
    """

    def __init__(self, key_field: Optional[str] = None) -> None:
        self.key_field = key_field
        self._records: Dict[int, RecordT] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RecordT]:
        return iter(list(self._records.values()))

    def find_by_natural_key(self, key: Any) -> Optional[RecordT]:
        if self.key_field is None or key is None:
            return None
        for record in self._records.values():
            if getattr(record, self.key_field) == key:
                return record
        return None

    def exists_by_id(self, record_id: int) -> bool:
        return record_id in self._records

    def find_by_id(self, record_id: int) -> Optional[RecordT]:
        return self._records.get(record_id)

    def max_order_number(self) -> Optional[int]:
        numbers = [
            record.order_number
            for record in self._records.values()
            if getattr(record, "order_number", None) is not None
        ]
        return max(numbers) if numbers else None

    def save(self, record: RecordT) -> RecordT:
        """Store `record`, assigning an identity when it has none."""
        with self._lock:
            if record.id is None:
                record = record.model_copy(update={"id": self._next_id})
            self._next_id = max(self._next_id, record.id + 1)
            self._records[record.id] = record
            return record

    def delete(self, record_id: int) -> None:
        with self._lock:
            self._records.pop(record_id, None)

    def all(self) -> List[RecordT]:
        return list(self._records.values())


__all__ = ["InMemoryRecordStore"]
