"""
Sample candidate generator for the reference-data validation CLI.

Emits deterministic pseudo-random candidate payloads (camelCase keys, as the
forms send them) for one record kind, with an optional share of deliberately
broken records, so `refdata validate KIND FILE` has something to chew on.
"""

from __future__ import annotations

import json
import random
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, List

import typer

app = typer.Typer(help="Generate sample candidate records as JSON.")

ACCOUNTS = ["ACC-001", "ACC-002", "DESK_7", "HEDGE-FUND-3"]
TRADE_TYPES = ["SPOT", "FORWARD", "SWAP", "OPTION"]
STATUSES = ["PENDING", "EXECUTED", "SETTLED"]
MOODYS = ["Aaa", "Aa2", "A1", "Baa3", "Ba1", "B2", "Caa1"]
LETTERS = ["AAA", "AA-", "A+", "BBB", "BB+", "B-", "CCC"]


def _trade(rng: random.Random, index: int, now: datetime) -> Dict[str, Any]:
    side = rng.choice(["BUY", "SELL"])
    quantity = f"{rng.randint(1, 5_000)}.{rng.randint(0, 99):02d}"
    price = f"{rng.randint(1, 500)}.{rng.randint(0, 9999):04d}"
    payload: Dict[str, Any] = {
        "account": rng.choice(ACCOUNTS),
        "type": rng.choice(TRADE_TYPES),
        "status": rng.choice(STATUSES),
        "side": side,
        "security": f"SEC{index:05d}",
        "trader": rng.choice(["alice", "bob", "carol"]),
        "tradeDate": (now - timedelta(days=rng.randint(0, 30))).isoformat(),
    }
    if side == "BUY":
        payload.update(buyQuantity=quantity, buyPrice=price)
    else:
        payload.update(sellQuantity=quantity, sellPrice=price)
    if rng.random() < 0.5:
        payload["benchmark"] = "SOFR"
    return payload


def _broken_trade(rng: random.Random, index: int, now: datetime) -> Dict[str, Any]:
    payload = _trade(rng, index, now)
    breakage = rng.choice(["account", "legs", "future"])
    if breakage == "account":
        payload["account"] = "acc 001"
    elif breakage == "legs":
        for key in ("buyQuantity", "sellQuantity"):
            payload.pop(key, None)
    else:
        payload["tradeDate"] = (now + timedelta(days=10)).isoformat()
    return payload


def _rule(rng: random.Random, index: int, now: datetime) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "name": f"rule_{index:04d}",
        "description": f"Sample rule number {index}",
    }
    if rng.random() < 0.5:
        payload["json"] = json.dumps({"threshold": rng.randint(1, 100)})
    if rng.random() < 0.5:
        payload["template"] = "Amount {amount} exceeds {threshold}"
    if rng.random() < 0.3:
        payload["sqlPart"] = f"amount > {rng.randint(100, 10_000)}"
    return payload


def _broken_rule(rng: random.Random, index: int, now: datetime) -> Dict[str, Any]:
    payload = _rule(rng, index, now)
    breakage = rng.choice(["json", "template", "sql"])
    if breakage == "json":
        payload["json"] = "{not json"
    elif breakage == "template":
        payload["template"] = "Amount {amount"
    else:
        payload["sqlStr"] = "SELECT * FROM users; DROP TABLE users"
    return payload


def _rating(rng: random.Random, index: int, now: datetime) -> Dict[str, Any]:
    position = rng.randrange(len(MOODYS))
    return {
        "moodysRating": MOODYS[position],
        "sandPRating": LETTERS[position],
        "fitchRating": LETTERS[position],
    }


def _broken_rating(rng: random.Random, index: int, now: datetime) -> Dict[str, Any]:
    payload = _rating(rng, index, now)
    payload["moodysRating"] = "AAA"
    return payload


def _bid(rng: random.Random, index: int, now: datetime) -> Dict[str, Any]:
    return {
        "account": rng.choice(ACCOUNTS),
        "type": rng.choice(TRADE_TYPES),
        "bidQuantity": f"{rng.randint(1, 1_000)}.00",
        "bid": f"{rng.randint(1, 200)}.{rng.randint(0, 99):02d}",
        "ask": f"{rng.randint(201, 400)}.{rng.randint(0, 99):02d}",
        "commentary": "Sample bid",
    }


def _broken_bid(rng: random.Random, index: int, now: datetime) -> Dict[str, Any]:
    payload = _bid(rng, index, now)
    payload["bid"] = "-1.00"
    return payload


def _curve_point(rng: random.Random, index: int, now: datetime) -> Dict[str, Any]:
    return {
        "curveId": rng.randint(1, 5),
        "term": f"{rng.randint(0, 30)}.{rng.randint(0, 9999):04d}",
        "value": f"{rng.uniform(-1, 8):.4f}",
    }


def _broken_curve_point(rng: random.Random, index: int, now: datetime) -> Dict[str, Any]:
    payload = _curve_point(rng, index, now)
    payload["curveId"] = 0
    return payload


Generator = Callable[[random.Random, int, datetime], Dict[str, Any]]

GENERATORS: Dict[str, tuple[Generator, Generator]] = {
    "trade": (_trade, _broken_trade),
    "rule": (_rule, _broken_rule),
    "rating": (_rating, _broken_rating),
    "bid": (_bid, _broken_bid),
    "curve_point": (_curve_point, _broken_curve_point),
}


def generate_samples(
    kind: str,
    count: int,
    invalid_ratio: float = 0.0,
    seed: int = 42,
    now: datetime | None = None,
) -> List[Dict[str, Any]]:
    """Deterministic list of `count` candidate payloads for `kind`."""
    if kind not in GENERATORS:
        raise ValueError(f"Unknown record kind '{kind}'. Available: {', '.join(GENERATORS)}")
    rng = random.Random(seed)
    reference = now or datetime.now(UTC)
    valid, broken = GENERATORS[kind]
    return [
        (broken if rng.random() < invalid_ratio else valid)(rng, index, reference)
        for index in range(count)
    ]


@app.command()
def main(
    kind: str = typer.Argument(..., help="Record kind (trade, rule, rating, bid, curve_point)."),
    count: int = typer.Option(20, "--count", "-n", help="Number of candidates to generate."),
    invalid_ratio: float = typer.Option(
        0.2,
        "--invalid-ratio",
        help="Share of deliberately broken candidates (0.0 - 1.0).",
    ),
    seed: int = typer.Option(42, "--seed", help="Deterministic RNG seed."),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Output JSON path (defaults to samples/<kind>.json).",
    ),
) -> None:
    """
    Generate sample candidates and write them to a JSON file.
    """
    path = output or Path("samples") / f"{kind}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        samples = generate_samples(kind, count, invalid_ratio=invalid_ratio, seed=seed)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)

    with path.open("w", encoding="utf-8") as f:
        json.dump(samples, f, indent=2)
    typer.echo(f"Wrote {len(samples)} {kind} candidates -> {path} (seed={seed})")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
