from __future__ import annotations

from typing import Any, Dict, List

from rich import box
from rich.console import Console
from rich.table import Table


def _format_derived(derived: Dict[str, Any]) -> str:
    return " ".join(f"{key}={value}" for key, value in derived.items())


def print_results(results: List[Dict[str, Any]], kind: str = "") -> None:
    """
    Render batch validation results as a rich table.

    Accepted rows show the assigned id and derived views, rejected rows the
    failure kind, offending field and message.
    """
    console = Console()

    if not results:
        console.print("[yellow]No results to display.[/yellow]")
        return

    accepted = sum(1 for r in results if r.get("status") == "accepted")
    title = "Reference Data Validation Results"
    if kind:
        title = f"{title}\n[dim]Kind: {kind} │ Accepted: {accepted} │ Rejected: {len(results) - accepted}[/dim]"

    table = Table(title=title, box=box.ROUNDED, caption="In submission order")

    table.add_column("#", justify="right", style="dim")
    table.add_column("Status", no_wrap=True)
    table.add_column("Id", justify="right", style="magenta")
    table.add_column("Failure", style="red")
    table.add_column("Field", style="yellow")
    table.add_column("Details")

    for res in results:
        index = str(res.get("index", ""))
        record_id = "" if res.get("id") is None else str(res["id"])
        if res.get("status") == "accepted":
            table.add_row(
                index,
                "[green]accepted[/green]",
                record_id,
                "",
                "",
                _format_derived(res.get("derived", {})),
            )
        else:
            error = res.get("error", {})
            table.add_row(
                index,
                f"[bold red]{res.get('status', 'rejected')}[/bold red]",
                record_id,
                error.get("kind", ""),
                error.get("field") or "",
                error.get("message", ""),
            )

    console.print(table)
