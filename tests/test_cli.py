from __future__ import annotations

import json

import pytest

from layoutroi import cli
from layoutroi.config import load_config
from layoutroi.models import Benefit


def test_json_output(isolated_env, capsys):
    code = cli.main(
        [
            "--layout-type",
            "line",
            "--measurement-unit",
            "squareFeet",
            "--project-size",
            "10,000",
            "--hourly-rate",
            "$65",
            "--json",
        ]
    )
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["roi"]["traditional_hours"] == pytest.approx(10000 / 330)
    assert payload["roi"]["usage_cost"] == pytest.approx(2000)
    assert payload["benefits"]["selected_reduction"] == 50


def test_invalid_value_returns_2(isolated_env, capsys):
    assert cli.main(["--hourly-rate", "abc"]) == 2
    assert "error:" in capsys.readouterr().err


def test_out_of_range_reduction_returns_2(isolated_env, capsys):
    assert cli.main(["--selected-reduction", "90"]) == 2
    assert "selected_reduction" in capsys.readouterr().err


def test_disable_benefit_flag(isolated_env):
    args = cli.parse_args(["--disable-benefit", "communication", "--disable-benefit", "safety"])
    state = cli.build_state(args)
    assert state.benefits.enabled_flags == frozenset(
        {Benefit.REWORK, Benefit.SCHEDULE, Benefit.COMPETITIVE}
    )


def test_export_writes_outputs(isolated_env):
    out_dir = isolated_env / "exports"
    code = cli.main(["--export", "--output-dir", str(out_dir), "--ownership-model", "rental"])
    assert code == 0
    assert (out_dir / "ROI_Analysis.xlsx").exists()
    assert (out_dir / "Cost_Comparison.csv").exists()
    assert (out_dir / "roi_result.json").exists()


def test_notify_uses_given_sink(isolated_env, reference_state):
    class RecordingSink:
        def __init__(self) -> None:
            self.states = []

        def notify(self, state) -> bool:
            self.states.append(state)
            return False

    sink = RecordingSink()
    cfg = load_config({"LAYOUTROI_OUTPUT_DIR": str(isolated_env)}, None)
    assert cli.run(reference_state, cfg, notify=True, sink=sink) == 0
    assert sink.states == [reference_state]


def test_summary_is_logged(isolated_env, caplog):
    with caplog.at_level("INFO", logger="layoutroi.cli"):
        assert cli.main(["--analysis-type", "company", "--project-count", "12"]) == 0
    assert "Total Annual Costs" in caplog.text
