"""Tests for schema_bench/main.py, the typer CLI.

The sweep itself is replaced with a recorder so no MongoDB server is needed.
"""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from schema_bench import main as main_module
from schema_bench.infrastructure.errors import StoreConnectionError
from schema_bench.main import app
from schema_bench.orchestrator import SweepConfig

runner = CliRunner()


@pytest.fixture(autouse=True)
def _no_logging_reconfiguration(monkeypatch):
    monkeypatch.setattr(main_module, "configure_logging", lambda **kwargs: None)


@pytest.fixture
def recorded_configs(monkeypatch) -> list[SweepConfig]:
    configs: list[SweepConfig] = []
    monkeypatch.setattr(main_module, "run_sweep_sync", configs.append)
    return configs


def test_strategies_lists_measurement_order():
    result = runner.invoke(app, ["strategies"])

    assert result.exit_code == 0
    assert "embedded, reference_array, back_reference" in result.output


def test_info_reports_set_count():
    result = runner.invoke(app, ["info"])

    assert result.exit_code == 0
    assert "sets)" in result.output
    assert "workers=" in result.output


def test_run_passes_overrides_to_the_sweep(recorded_configs: list[SweepConfig]):
    result = runner.invoke(
        app,
        ["run", "-w", "50", "--start", "0.1", "--end", "0.2", "--increment", "0.1",
         "-s", "embedded", "-s", "back_reference", "--seed", "9"],
    )

    assert result.exit_code == 0, result.output
    (config,) = recorded_configs
    assert config.num_workers == 50
    assert config.chances() == [0.1, 0.2]
    assert config.strategies == ("embedded", "back_reference")
    assert config.seed == 9


def test_run_defaults_to_all_strategies(recorded_configs: list[SweepConfig]):
    result = runner.invoke(app, ["run"])

    assert result.exit_code == 0, result.output
    assert recorded_configs[0].strategies == ("all",)


def test_run_exits_non_zero_when_mongo_is_unreachable(monkeypatch):
    def unreachable(config: SweepConfig) -> None:
        raise StoreConnectionError("MongoDB unreachable at mongodb://nowhere")

    monkeypatch.setattr(main_module, "run_sweep_sync", unreachable)

    result = runner.invoke(app, ["run"])

    assert result.exit_code == 1
    assert "Cannot reach MongoDB" in result.output


@pytest.mark.parametrize(
    "args",
    [["--increment", "0"], ["--start", "1.5"], ["--concurrency", "0"], ["-s", "bogus"]],
)
def test_run_rejects_invalid_options_before_connecting(recorded_configs, args):
    result = runner.invoke(app, ["run", *args])

    assert result.exit_code == 2
    assert "Invalid sweep options" in result.output
    assert recorded_configs == []
