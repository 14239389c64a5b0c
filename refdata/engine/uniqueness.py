"""
Natural-key uniqueness enforcement.

The guard performs one read through the injected lookup and compares the
identity of any hit with the identity being saved. It does not lock: two
concurrent saves of the same key can both pass before either writes, so the
store must back this with a unique constraint (see `db/init.sql`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional

from refdata.engine.errors import FailureKind, ValidationFailure

if TYPE_CHECKING:
    from refdata.pipelines.abstract import RecordLookup


class UniquenessGuard:
    """
    Rejects a natural key already held by another record.

    Parameters
    ----------
    lookup : RecordLookup
        Capability answering `find_by_natural_key`.
    entity : str
        Lower-case entity noun used in the message ("rule").
    key_label : str
        Label that opens the message ("Rule name").
    key_noun : str
        Noun for the key at the end of the message ("name").
    field : str
        Record attribute holding the key.
    render : callable, optional
        Formats the key value inside the message.
    """

    def __init__(
        self,
        lookup: RecordLookup[Any],
        entity: str,
        key_label: str,
        key_noun: str,
        field: str,
        render: Optional[Callable[[Any], str]] = None,
    ) -> None:
        self.lookup = lookup
        self.entity = entity
        self.key_label = key_label
        self.key_noun = key_noun
        self.field = field
        self.render = render or str

    def check_unique(self, key: Any, exclude_id: Optional[int]) -> None:
        if key is None:
            return
        existing = self.lookup.find_by_natural_key(key)
        if existing is None or (exclude_id is not None and existing.id == exclude_id):
            return
        raise ValidationFailure(
            f"{self.key_label} {self.render(key)} already exists. "
            f"Each {self.entity} must have a unique {self.key_noun}.",
            kind=FailureKind.DUPLICATE,
            field=self.field,
        )


__all__ = ["UniquenessGuard"]
