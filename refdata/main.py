from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import typer

from refdata.config import get_settings
from refdata.engine.errors import RecordNotFoundError
from refdata.orchestrator import RunConfig, available_kinds, get_pipeline, validate_records
from refdata.reporter import print_results
from refdata.utils.logging import configure_from_settings

app = typer.Typer(help="Reference data validation CLI.")


def _check_kind(kind: str) -> None:
    if kind not in available_kinds():
        typer.echo(f"Unknown record kind '{kind}'. Available: {', '.join(available_kinds())}", err=True)
        raise typer.Exit(code=2)


def _load_candidates(file: Path) -> List[Dict[str, Any]]:
    """
    Read a JSON object or a list of objects; anything else exits with code 2.
    """
    try:
        with file.open("r", encoding="utf-8") as f:
            payloads = json.load(f)
    except json.JSONDecodeError as exc:
        typer.echo(f"{file} is not valid JSON: {exc}", err=True)
        raise typer.Exit(code=2)
    if isinstance(payloads, dict):
        payloads = [payloads]
    if not isinstance(payloads, list):
        typer.echo(f"{file} must hold a JSON object or a list of objects", err=True)
        raise typer.Exit(code=2)
    for index, payload in enumerate(payloads):
        if not isinstance(payload, dict):
            typer.echo(f"Candidate #{index} in {file} is not a JSON object", err=True)
            raise typer.Exit(code=2)
    return payloads


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"max_trade_value={settings.max_single_trade_value} "
        f"notional_thresholds={settings.medium_notional_threshold}/{settings.high_notional_threshold} | "
        f"strict_status={settings.strict_trade_status} "
        f"strict_ratings={settings.strict_rating_consistency}"
    )


@app.command()
def kinds() -> None:
    """
    List the record kinds that can be validated.
    """
    typer.echo("Available kinds: " + ", ".join(available_kinds()))


@app.command()
def validate(
    kind: str = typer.Argument(..., help="Record kind (trade, rule, rating, bid, curve_point)."),
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with a list of candidates."),
    database: bool = typer.Option(
        False,
        "--database",
        "-d",
        help="Check uniqueness against PostgreSQL instead of an in-memory store.",
    ),
    strict: bool = typer.Option(False, "--strict", help="Stop at the first rejected record."),
    persist: bool = typer.Option(False, "--persist", help="Write the report under results/."),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON instead of a table."),
) -> None:
    """
    Validate and normalize a batch of candidate records.
    """
    configure_from_settings(get_settings())
    _check_kind(kind)

    payloads = _load_candidates(file)

    lookup = None
    if database:
        from refdata.infrastructure.repositories import postgres_lookup

        lookup = postgres_lookup(kind)

    results = validate_records(
        RunConfig(
            kind=kind,
            records=payloads,
            lookup=lookup,
            failure_policy="strict" if strict else "tolerant",
            persist=persist,
        )
    )
    if as_json:
        typer.echo(json.dumps(results, indent=2))
    else:
        print_results(results, kind=kind)

    if any(r["status"] != "accepted" for r in results):
        raise typer.Exit(code=1)


@app.command("delete-check")
def delete_check(
    kind: str = typer.Argument(..., help="Record kind."),
    record_id: int = typer.Argument(..., help="Identity of the record to delete."),
) -> None:
    """
    Check against PostgreSQL that a record can be deleted.
    """
    configure_from_settings(get_settings())
    _check_kind(kind)

    from refdata.infrastructure.repositories import postgres_lookup

    pipeline = get_pipeline(kind, postgres_lookup(kind))
    try:
        pipeline.prepare_for_delete(record_id)
    except RecordNotFoundError as exc:
        typer.echo(exc.message, err=True)
        raise typer.Exit(code=1)
    typer.echo(f"{pipeline.entity} {record_id} can be deleted.")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
