from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.rule import Rule
from rich.table import Table

MEAN_FIELDS = {
    "embedded": "embedded_avg_ms",
    "reference_array": "reference_array_avg_ms",
    "back_reference": "back_reference_avg_ms",
}


def print_banner(plan: Dict[str, Any], console: Optional[Console] = None) -> None:
    """
    Print the sweep parameters before the first step runs.
    """
    console = console or Console()
    console.print(Rule("Schema strategy benchmark"))
    console.print(f"Number of workers: {plan['workers']}")
    console.print(
        f"Availabilities per selected worker: {plan['avail_low']}..{plan['avail_high']}"
    )
    console.print(
        f"Availability chance: {plan['start']} -> {plan['end']} "
        f"(step {plan['increment']}, {plan['steps']} sets)"
    )
    console.print(f"Strategies: {', '.join(plan['strategies'])}")
    console.print(Rule())


def print_step_header(step: int, total: int, chance: float, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(Rule(f"Test set {step}/{total}"))
    console.print(f"Chance for a worker to have at least one availability: {round(chance, 3)}")


def print_step_result(record: Dict[str, Any], console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(
        f"Availabilities: {record['availabilities']} | "
        f"workers with availabilities: {record['workers_with_availabilities']} | "
        f"generated in {record['generation_ms']:.2f}ms"
    )
    for strategy, field_name in MEAN_FIELDS.items():
        if field_name in record:
            console.print(f"  [cyan]{strategy}[/cyan] avg: {record[field_name]}ms")


def format_step_message(record: Dict[str, Any]) -> str:
    """One-line summary used as the message of a results log entry."""
    parts = [
        f"workers: {record['workers']}",
        f"availabilities: {record['availabilities']}",
        f"workers with availabilities: {record['workers_with_availabilities']}",
    ]
    parts.extend(
        f"{strategy} avg: {record[field_name]}ms"
        for strategy, field_name in MEAN_FIELDS.items()
        if field_name in record
    )
    return " | ".join(parts)


def log_step_record(results_log: logging.Logger, record: Dict[str, Any]) -> None:
    """Append one sweep step to the results log as a single JSON line."""
    results_log.info(format_step_message(record), extra=record)


def print_results(records: List[Dict[str, Any]], console: Optional[Console] = None) -> None:
    """
    Render all sweep steps as a rich table, one row per availability chance.
    """
    console = console or Console()

    if not records:
        console.print("[yellow]No results to display.[/yellow]")
        return

    table = Table(
        title="Schema Strategy Benchmark Results",
        box=box.ROUNDED,
        caption="Mean lookup latency per sampled worker (ms)",
    )
    table.add_column("Set", justify="right", style="dim")
    table.add_column("Chance", justify="right", style="cyan", no_wrap=True)
    table.add_column("Workers", justify="right", style="magenta")
    table.add_column("Availabilities", justify="right", style="magenta")
    table.add_column("With avail.", justify="right", style="blue")

    present = [name for name, field_name in MEAN_FIELDS.items() if field_name in records[0]]
    for strategy in present:
        table.add_column(strategy, justify="right", style="green")

    for rec in records:
        row = [
            str(rec["step"]),
            f"{rec['availability_chance']:.2f}",
            f"{rec['workers']:,}",
            f"{rec['availabilities']:,}",
            f"{rec['workers_with_availabilities']:,}",
        ]
        row.extend(f"{rec[MEAN_FIELDS[strategy]]:.2f}" for strategy in present)
        table.add_row(*row)

    console.print(table)


__all__ = [
    "MEAN_FIELDS",
    "format_step_message",
    "log_step_record",
    "print_banner",
    "print_results",
    "print_step_header",
    "print_step_result",
]
