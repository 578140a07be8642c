"""Workbook and CSV export of a finished calculation."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

from .models import SessionState
from .reporting import benefits_frame, cost_comparison_frame, performance_frame, series_frame

logger = logging.getLogger(__name__)


def summary_frame(state: SessionState) -> pd.DataFrame:
    roi = state.roi
    benefits = state.benefits
    rows = [
        ("Analysis type", state.options.analysis_type.value),
        ("Layout type", state.options.layout_type.value),
        ("Measurement unit", state.options.measurement_unit.value if state.options.measurement_unit else ""),
        ("Ownership model", state.options.ownership_model.value),
        ("Project size", state.traditional.project_size),
        ("Projects", roi.project_count if roi else None),
        ("Estimated layout days", state.device.estimated_layout_days),
        ("Traditional labor cost", roi.traditional_labor_cost if roi else None),
        ("Device labor cost", roi.device_labor_cost if roi else None),
        ("Usage cost", roi.usage_cost if roi else None),
        ("Uncapped usage cost", roi.uncapped_usage_cost if roi else None),
        ("Annual savings", roi.annual_savings if roi else None),
        ("ROI %", roi.roi if roi else None),
        ("Break-even months", roi.breakeven_months if roi else None),
        ("5-year ROI %", roi.five_year_roi if roi else None),
        ("Enhanced ROI %", benefits.enhanced_roi if benefits else None),
    ]
    return pd.DataFrame(rows, columns=["FIELD", "VALUE"])


def write_outputs(
    state: SessionState,
    xlsx_path: str | Path,
    csv_path: str | Path,
    json_path: Optional[str | Path] = None,
) -> Dict[str, Path]:
    """Write the Summary/CostComparison/Performance/Series/Benefits workbook.

    The cost comparison is also written as CSV; ``json_path`` adds the full
    ROI and benefit records as JSON.
    """

    if state.roi is None or state.benefits is None:
        raise ValueError("state has not been computed; call recompute() first")

    xlsx = Path(xlsx_path)
    csv = Path(csv_path)
    xlsx.parent.mkdir(parents=True, exist_ok=True)
    csv.parent.mkdir(parents=True, exist_ok=True)

    costs = cost_comparison_frame(state.roi)
    with pd.ExcelWriter(xlsx, engine="openpyxl") as writer:
        summary_frame(state).to_excel(writer, sheet_name="Summary", index=False)
        costs.to_excel(writer, sheet_name="CostComparison", index=False)
        performance_frame(state.roi).to_excel(writer, sheet_name="Performance", index=False)
        series_frame(state.roi).to_excel(writer, sheet_name="Series", index=False)
        benefits_frame(state.benefits).to_excel(writer, sheet_name="Benefits", index=False)
    costs.to_csv(csv, index=False)

    written = {"xlsx": xlsx, "csv": csv}
    if json_path is not None:
        out_json = Path(json_path)
        out_json.parent.mkdir(parents=True, exist_ok=True)
        payload = {"roi": state.roi.to_dict(), "benefits": state.benefits.to_dict()}
        with open(out_json, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2)
        written["json"] = out_json
    logger.debug("outputs_written => %s", ", ".join(str(p) for p in written.values()))
    return written
