from pathlib import Path

import pytest

matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")  # type: ignore[attr-defined]

from layoutroi.models import SessionState
from layoutroi.visuals import emit_charts


def test_emit_charts_creates_charts(tmp_path, reference_state):
    output_dir = (tmp_path / "visuals").resolve()
    result = emit_charts(reference_state, output_dir, format="png", bundle_pdf=False)

    assert result["charts"], "Expected at least one chart path to be returned"
    chart_names = {Path(path).name for path in result["charts"]}
    assert chart_names == {"cumulative_cost.png", "cost_comparison.png"}
    for chart_path in result["charts"]:
        chart_file = Path(chart_path)
        assert chart_file.exists()
        assert chart_file.parent == output_dir
    assert result["pdf"] is None
    assert result["skipped"] == []


def test_emit_charts_bundles_pdf(tmp_path, session_factory):
    state = session_factory(analysis_type="company", project_count=12, ownership_model="rental")
    result = emit_charts(state, tmp_path, format="both")
    chart_names = {Path(path).name for path in result["charts"]}
    assert {"cumulative_cost.png", "cumulative_cost.pdf"} <= chart_names
    assert result["pdf"] is not None
    assert Path(result["pdf"]).name == "ROI_Visual_Summary.pdf"
    assert Path(result["pdf"]).stat().st_size > 0


def test_emit_charts_without_results(tmp_path):
    result = emit_charts(SessionState(), tmp_path)
    assert result == {"charts": [], "pdf": None, "skipped": ["no calculation available"]}
