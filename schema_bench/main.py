from __future__ import annotations

import sys
from typing import List, Optional

import typer

from schema_bench.config import get_settings
from schema_bench.infrastructure.errors import StoreConnectionError
from schema_bench.orchestrator import SweepConfig, available_strategies, run_sweep_sync
from schema_bench.utils.logging import configure_logging

app = typer.Typer(help="MongoDB schema strategy benchmark CLI.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    config = SweepConfig.from_settings(settings)
    typer.echo(
        f"DB={settings.mongo_uri}/{settings.mongo_db} | "
        f"workers={config.num_workers} avail={config.avail_low}..{config.avail_high} "
        f"chance={config.start}->{config.end} step={config.increment} "
        f"({len(config.chances())} sets) concurrency={config.concurrency}"
    )


@app.command()
def strategies() -> None:
    """
    List access strategies in measurement order.
    """
    typer.echo("Available strategies: " + ", ".join(available_strategies()))


@app.command()
def run(
    strategy: List[str] = typer.Option(
        ["all"],
        "--strategy",
        "-s",
        help="Strategy to measure (embedded, reference_array, back_reference, all). Repeatable.",
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", help="Override number of workers per set."
    ),
    start: Optional[float] = typer.Option(None, "--start", help="First availability chance."),
    end: Optional[float] = typer.Option(None, "--end", help="Last availability chance."),
    increment: Optional[float] = typer.Option(
        None, "--increment", help="Availability chance step between sets."
    ),
    concurrency: Optional[int] = typer.Option(
        None, "--concurrency", "-c", help="Max in-flight attachment writes while building."
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for the random source."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit console logs as JSON."),
) -> None:
    """
    Run the full availability-chance sweep against MongoDB.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=json_logs or settings.log_json)

    try:
        config = SweepConfig.from_settings(
            settings,
            num_workers=workers,
            start=start,
            end=end,
            increment=increment,
            concurrency=concurrency,
            seed=seed,
            strategies=tuple(strategy),
        )
    except ValueError as exc:
        typer.echo(f"Invalid sweep options: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    try:
        run_sweep_sync(config)
    except StoreConnectionError as exc:
        typer.echo(f"Cannot reach MongoDB: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port."),
) -> None:
    """
    Serve the HTTP trigger (GET /test starts a sweep).
    """
    import uvicorn

    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    uvicorn.run(
        "schema_bench.api:app",
        host=host or settings.http_host,
        port=port or settings.http_port,
        log_level=settings.log_level.lower(),
    )


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
