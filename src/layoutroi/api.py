from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Optional

from .config import load_config
from .models import ALL_BENEFITS, Benefit, SessionState
from .session import new_session, set_benefit, recompute
from .writer import write_outputs


@dataclass
class CalculationOptions:
    analysis_type: str = "project"
    layout_type: str = "line"
    measurement_unit: Optional[str] = "squareFeet"
    ownership_model: str = "fullKit"
    worker_count: float = 2
    hourly_rate: float = 65.0
    project_size: float = 10000.0
    project_count: float = 12
    rework_percentage: float = 10.0
    selected_reduction: float = 50.0
    enabled_benefits: FrozenSet[Benefit] = field(default_factory=lambda: ALL_BENEFITS)


def calculate(options: Optional[CalculationOptions] = None) -> SessionState:
    """Programmatic interface returning the computed session.

    Raises :class:`layoutroi.session.InputError` for invalid input.
    """

    opts = options or CalculationOptions()
    state = new_session(
        analysis_type=opts.analysis_type,
        layout_type=opts.layout_type,
        measurement_unit=opts.measurement_unit,
        ownership_model=opts.ownership_model,
        worker_count=opts.worker_count,
        hourly_rate=opts.hourly_rate,
        project_size=opts.project_size,
        project_count=opts.project_count,
        rework_percentage=opts.rework_percentage,
        selected_reduction=opts.selected_reduction,
    )
    wanted = {Benefit(flag) for flag in opts.enabled_benefits}
    for flag in Benefit:
        if flag not in wanted:
            state = set_benefit(state, flag, False, compute=False)
    return recompute(state)


def export(state: SessionState, output_dir: Optional[Path] = None) -> Dict[str, Path]:
    """Write workbook, CSV and JSON artifacts and return their paths."""

    env = dict(os.environ)
    if output_dir:
        env["LAYOUTROI_OUTPUT_DIR"] = str(output_dir)
    cfg = load_config(env, None)
    return write_outputs(state, cfg.output_xlsx, cfg.output_csv, cfg.output_json)
