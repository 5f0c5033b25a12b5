"""HTTP trigger for the benchmark sweep.

``GET /test`` schedules a full sweep as a background task and answers
immediately. Results are only available through the results log; the
response never carries measurements.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, FastAPI
from fastapi.responses import PlainTextResponse

from schema_bench import __version__
from schema_bench.orchestrator import SweepConfig, run_sweep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["benchmark"])


def get_sweep_config() -> SweepConfig:
    return SweepConfig.from_settings()


SweepConfigDep = Annotated[SweepConfig, Depends(get_sweep_config)]


async def _run_sweep_in_background(config: SweepConfig) -> None:
    # Nothing awaits this task, so failures are logged here with their traceback.
    try:
        await run_sweep(config)
    except Exception:
        logger.exception("Background sweep failed")


@router.get("/test", response_class=PlainTextResponse)
async def trigger_sweep(config: SweepConfigDep, background_tasks: BackgroundTasks) -> str:
    """Start a sweep and acknowledge without waiting for it."""
    logger.info(
        "Sweep requested over HTTP",
        extra={"workers": config.num_workers, "sets": len(config.chances())},
    )
    background_tasks.add_task(_run_sweep_in_background, config)
    return "running!"


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": __version__}


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(title="Schema Strategy Benchmark", version=__version__)
    app.include_router(router)
    return app


# Module-level application instance used by ``uvicorn schema_bench.api:app``.
app = create_app()


__all__ = ["app", "create_app", "get_sweep_config", "router"]
