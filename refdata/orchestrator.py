"""
Orchestrator for running batches of candidate records through their pipelines.

Usage (example from CLI):
    from refdata.orchestrator import RunConfig, validate_records

    results = validate_records(RunConfig(kind="trade", records=payloads))
    print(results)

Reports are saved to `results/` when persisting:
- `results/latest.json` (last run)
- `results/run-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Optional

from pydantic import ValidationError as PydanticValidationError

from refdata.domain.models import BaseRecord, RatingRecord, RuleRecord, TradeRecord
from refdata.engine import scoring
from refdata.engine.config import EngineConfig, get_engine_config
from refdata.engine.errors import ValidationFailure
from refdata.infrastructure.memory import InMemoryRecordStore
from refdata.pipelines import (
    BidPipeline,
    Clock,
    CurvePointPipeline,
    RatingPipeline,
    RecordLookup,
    RecordPipeline,
    RulePipeline,
    TradePipeline,
)
from refdata.utils.logging import get_logger

log = get_logger(__name__)

FailurePolicy = Literal["tolerant", "strict"]


def _pipeline_factories() -> Dict[str, Callable[..., RecordPipeline[Any]]]:
    """Registry of available pipelines keyed by record kind."""
    return {
        "trade": TradePipeline,
        "rule": RulePipeline,
        "rating": RatingPipeline,
        "bid": BidPipeline,
        "curve_point": CurvePointPipeline,
    }


_NATURAL_KEYS: Dict[str, Optional[str]] = {
    "trade": None,
    "rule": "name",
    "rating": "order_number",
    "bid": None,
    "curve_point": None,
}


def available_kinds() -> List[str]:
    """List available record kinds."""
    return sorted(_pipeline_factories().keys())


def get_pipeline(
    kind: str,
    lookup: RecordLookup[Any],
    config: Optional[EngineConfig] = None,
    clock: Optional[Clock] = None,
) -> RecordPipeline[Any]:
    factories = _pipeline_factories()
    if kind not in factories:
        raise ValueError(f"Unknown record kind '{kind}'. Available: {', '.join(available_kinds())}")
    return factories[kind](lookup, config=config, clock=clock)


def default_store(kind: str) -> InMemoryRecordStore[Any]:
    """Empty in-memory store keyed the way `kind` is unique."""
    if kind not in _NATURAL_KEYS:
        raise ValueError(f"Unknown record kind '{kind}'. Available: {', '.join(available_kinds())}")
    return InMemoryRecordStore(key_field=_NATURAL_KEYS[kind])


@dataclass
class RunConfig:
    """
    One batch validation run.

    Attributes
    ----------
    kind : str
        Record kind every payload belongs to.
    records : list[dict]
        Candidate payloads; an "id" entry marks an update of that record.
    lookup : RecordLookup, optional
        Store consulted for uniqueness. Defaults to a fresh in-memory store,
        which accepted records are saved into so later payloads see them.
    failure_policy : "tolerant" | "strict"
        Tolerant keeps going after a rejection, strict stops at the first one.
    persist : bool
        Whether to write the report to `results_dir`.
    """

    kind: str
    records: List[Dict[str, Any]]
    lookup: Optional[RecordLookup[Any]] = None
    config: Optional[EngineConfig] = None
    clock: Optional[Clock] = None
    failure_policy: FailurePolicy = "tolerant"
    persist: bool = False
    results_dir: Path = field(default_factory=lambda: Path("results"))


def derived_views(record: BaseRecord, config: Optional[EngineConfig] = None) -> Dict[str, Any]:
    """Read-only scores shown next to an accepted record."""
    if isinstance(record, TradeRecord):
        return {
            "risk_score": scoring.risk_score(record, config),
            "executable": scoring.is_executable(record),
        }
    if isinstance(record, RuleRecord):
        return {
            "complexity": scoring.complexity_level(record).value,
            "complexity_score": scoring.complexity_score(record),
        }
    if isinstance(record, RatingRecord):
        return {"investment_grade": scoring.is_investment_grade(record, config)}
    return {}


def _run_one(
    pipeline: RecordPipeline[Any],
    store: Optional[InMemoryRecordStore[Any]],
    index: int,
    payload: Dict[str, Any],
) -> Dict[str, Any]:
    body = dict(payload)
    existing_id = body.pop("id", None)
    result: Dict[str, Any] = {"index": index, "kind": pipeline.kind, "id": existing_id}
    try:
        candidate = pipeline.parse(body)
    except PydanticValidationError as exc:
        log.info(
            f"{pipeline.entity} payload malformed",
            extra={"kind": pipeline.kind, "index": index, "errors": exc.error_count()},
        )
        result.update(
            status="malformed",
            error={"message": str(exc), "kind": "MALFORMED", "field": None},
        )
        return result

    try:
        record = pipeline.prepare_for_save(existing_id, candidate)
    except ValidationFailure as failure:
        result.update(status="rejected", error=failure.to_dict())
        return result

    if store is not None:
        record = store.save(record)
    result.update(
        status="accepted",
        id=record.id,
        record=record.model_dump(mode="json", by_alias=True),
        derived=derived_views(record, pipeline.config),
    )
    return result


def _persist_results(payload: dict, results_dir: Path) -> None:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    with latest_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    with archive_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)

    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


def validate_records(run: RunConfig) -> List[Dict[str, Any]]:
    """
    Validate and normalize every payload of `run`.

    Returns
    -------
    List[dict]
        One entry per processed payload with `status` ("accepted", "rejected"
        or "malformed"), the normalized record or the failure, and derived views.
        Under the strict policy the list stops at the first rejection.

    Raises
    ------
    ValueError
        For an unknown record kind.
    """
    store: Optional[InMemoryRecordStore[Any]] = None
    lookup = run.lookup
    if lookup is None:
        store = default_store(run.kind)
        lookup = store

    pipeline = get_pipeline(run.kind, lookup, config=run.config or get_engine_config(), clock=run.clock)
    log.info(
        f"[VALIDATE START] {run.kind}",
        extra={"kind": run.kind, "records": len(run.records), "failure_policy": run.failure_policy},
    )

    results: List[Dict[str, Any]] = []
    for index, payload in enumerate(run.records):
        result = _run_one(pipeline, store, index, payload)
        results.append(result)
        if result["status"] != "accepted" and run.failure_policy == "strict":
            log.warning(
                f"[VALIDATE ABORTED] {run.kind} at record {index}",
                extra={"kind": run.kind, "index": index},
            )
            break

    accepted = sum(1 for r in results if r["status"] == "accepted")
    summary = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "kind": run.kind,
        "total": len(run.records),
        "processed": len(results),
        "accepted": accepted,
        "rejected": len(results) - accepted,
        "results": results,
    }
    if run.persist:
        _persist_results(summary, Path(run.results_dir))

    log.info(
        f"[VALIDATE COMPLETE] {run.kind}",
        extra={"kind": run.kind, "accepted": accepted, "rejected": summary["rejected"]},
    )
    return results


__all__ = [
    "RunConfig",
    "available_kinds",
    "default_store",
    "derived_views",
    "get_pipeline",
    "validate_records",
]
