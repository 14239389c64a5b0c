"""
Read-only PostgreSQL lookups consumed by the pipelines.

One table description per record kind drives every query, so the lookups stay
generic: natural-key fetch, existence by id and, for ratings, the highest order
number. Writes remain the caller's responsibility.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Mapping, Optional, Type, TypeVar

import psycopg
from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from refdata.config import get_settings
from refdata.domain.models import (
    BaseRecord,
    BidRecord,
    CurvePointRecord,
    RatingRecord,
    RuleRecord,
    TradeRecord,
)
from refdata.infrastructure.db_factory import apply_statement_timeout, get_sync_pool
from refdata.utils.logging import get_logger

RecordT = TypeVar("RecordT", bound=BaseRecord)

log = get_logger(__name__)


@dataclass(frozen=True)
class TableSpec:
    """
    Where a record kind lives and how its fields map to columns.

    Fields not listed in `column_overrides` use their own name as column name.
    """

    table: str
    record_type: Type[BaseRecord]
    key_field: Optional[str] = None
    column_overrides: Mapping[str, str] = field(default_factory=dict)

    def column(self, field_name: str) -> str:
        return self.column_overrides.get(field_name, field_name)

    def columns(self) -> Dict[str, str]:
        return {name: self.column(name) for name in self.record_type.model_fields}


TABLES: Dict[str, TableSpec] = {
    "trade": TableSpec("trade", TradeRecord),
    "rule": TableSpec(
        "rule_name", RuleRecord, key_field="name", column_overrides={"json_config": "json"}
    ),
    "rating": TableSpec("rating", RatingRecord, key_field="order_number"),
    "bid": TableSpec("bid_list", BidRecord),
    "curve_point": TableSpec("curve_point", CurvePointRecord),
}

_transient = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)


class PostgresRecordLookup(Generic[RecordT]):
    """
    `RecordLookup` backed by a PostgreSQL table.

    Parameters
    ----------
    spec : TableSpec
        Table description for the record kind.
    pool : ConnectionPool, optional
        Pool to borrow connections from; defaults to the shared managed pool.
    statement_timeout_ms : int, optional
        Per-statement timeout; defaults to settings.
    """

    def __init__(
        self,
        spec: TableSpec,
        pool: Optional[ConnectionPool] = None,
        statement_timeout_ms: Optional[int] = None,
    ) -> None:
        self.spec = spec
        self._pool = pool
        self.statement_timeout_ms = (
            statement_timeout_ms
            if statement_timeout_ms is not None
            else get_settings().db_statement_timeout_ms
        )

    @property
    def pool(self) -> ConnectionPool:
        if self._pool is None:
            self._pool = get_sync_pool()
        return self._pool

    @_transient
    def _fetch_one(self, query: sql.Composable, params: tuple[Any, ...]) -> Optional[dict]:
        with self.pool.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                apply_statement_timeout(cur, self.statement_timeout_ms)
                cur.execute(query, params)
                return cur.fetchone()

    def _select(self) -> sql.Composable:
        return sql.SQL("SELECT {fields} FROM {table}").format(
            fields=sql.SQL(", ").join(
                sql.SQL("{} AS {}").format(sql.Identifier(column), sql.Identifier(name))
                for name, column in self.spec.columns().items()
            ),
            table=sql.Identifier(self.spec.table),
        )

    def find_by_natural_key(self, key: Any) -> Optional[RecordT]:
        if self.spec.key_field is None or key is None:
            return None
        query = sql.SQL("{select} WHERE {key} = %s LIMIT 1").format(
            select=self._select(),
            key=sql.Identifier(self.spec.column(self.spec.key_field)),
        )
        row = self._fetch_one(query, (key,))
        if row is None:
            return None
        return self.spec.record_type.model_validate(row)  # type: ignore[return-value]

    def exists_by_id(self, record_id: int) -> bool:
        query = sql.SQL("SELECT EXISTS (SELECT 1 FROM {table} WHERE {id} = %s) AS present").format(
            table=sql.Identifier(self.spec.table),
            id=sql.Identifier(self.spec.column("id")),
        )
        row = self._fetch_one(query, (record_id,))
        return bool(row and row["present"])


class PostgresRatingLookup(PostgresRecordLookup[RatingRecord]):
    """Rating lookup that can also peek at the highest order number."""

    def __init__(
        self,
        pool: Optional[ConnectionPool] = None,
        statement_timeout_ms: Optional[int] = None,
    ) -> None:
        super().__init__(TABLES["rating"], pool=pool, statement_timeout_ms=statement_timeout_ms)

    def max_order_number(self) -> Optional[int]:
        query = sql.SQL("SELECT MAX({order}) AS max_order FROM {table}").format(
            order=sql.Identifier(self.spec.column("order_number")),
            table=sql.Identifier(self.spec.table),
        )
        row = self._fetch_one(query, ())
        return None if row is None else row["max_order"]


def postgres_lookup(
    kind: str, pool: Optional[ConnectionPool] = None
) -> PostgresRecordLookup[Any]:
    """Lookup for `kind` against the configured database."""
    if kind == "rating":
        return PostgresRatingLookup(pool=pool)
    try:
        spec = TABLES[kind]
    except KeyError:
        raise ValueError(f"Unknown record kind '{kind}'. Available: {', '.join(TABLES)}") from None
    return PostgresRecordLookup(spec, pool=pool)


__all__ = [
    "PostgresRatingLookup",
    "PostgresRecordLookup",
    "TABLES",
    "TableSpec",
    "postgres_lookup",
]
