import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from dotenv import load_dotenv

from .config import Config
from .config import load_config as load_runtime_config
from .models import AnalysisType, Benefit, LayoutType, MeasurementUnit, OwnershipModel, SessionState
from .notifier import ReportingSink, sink_from_config
from .policy import apply_policy_defaults
from .reporting import make_summary_text
from .session import InputError, apply_updates, recompute, set_benefit
from .visuals import emit_charts
from .writer import write_outputs

BASE_DIR = Path(__file__).resolve().parents[2]

logger = logging.getLogger(__name__)

INPUT_ARGS = (
    "analysis_type",
    "layout_type",
    "measurement_unit",
    "ownership_model",
    "worker_count",
    "hourly_rate",
    "project_size",
    "project_count",
    "rework_percentage",
    "company_name",
    "contact_name",
    "zip_code",
    "email",
    "phone",
    "selected_reduction",
)


def build_state(args: argparse.Namespace) -> SessionState:
    """Turn parsed arguments into a computed session, rejecting bad input."""

    updates: Dict[str, object] = {
        name: getattr(args, name) for name in INPUT_ARGS if getattr(args, name, None) is not None
    }
    state = apply_updates(SessionState(), updates)
    for name in getattr(args, "disable_benefit", None) or []:
        state = set_benefit(state, name, False, compute=False)
    return recompute(state)


def run(
    state: SessionState,
    runtime_config: Optional[Config] = None,
    *,
    notify: bool = False,
    as_json: bool = False,
    sink: Optional[ReportingSink] = None,
) -> int:
    runtime_cfg = runtime_config or load_runtime_config(os.environ, None)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    if as_json:
        payload = {"roi": state.roi.to_dict(), "benefits": state.benefits.to_dict()}
        sys.stdout.write(json.dumps(payload, indent=2) + "\n")
    else:
        logger.info("\n=== SUMMARY ===\n")
        logger.info("%s", make_summary_text(state))

    outputs: List[Path] = []
    if runtime_cfg.export:
        written = write_outputs(state, runtime_cfg.output_xlsx, runtime_cfg.output_csv, runtime_cfg.output_json)
        outputs.extend(written.values())
    if runtime_cfg.emit_charts:
        charts = emit_charts(state, runtime_cfg.output_dir, format=runtime_cfg.chart_format)
        outputs.extend(Path(p) for p in charts["charts"])
        if charts["pdf"]:
            outputs.append(Path(charts["pdf"]))
        for reason in charts["skipped"]:
            logger.info("Chart skipped: %s", reason)
    if outputs:
        logger.info("\nOutputs written:")
        for path in outputs:
            logger.info(" - %s", path)

    # The engine result is final here; reporting cannot change it.
    if notify:
        reporter = sink or sink_from_config(runtime_cfg)
        if reporter.notify(state):
            logger.info("CRM notified.")
    return 0


def _choices(enum_type) -> List[str]:
    return [member.value for member in enum_type]


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare traditional layout against a layout printer")
    parser.add_argument("--analysis-type", choices=_choices(AnalysisType), help="Single project or company-wide analysis")
    parser.add_argument("--layout-type", choices=_choices(LayoutType), help="Line or point layout")
    parser.add_argument("--measurement-unit", choices=_choices(MeasurementUnit), help="Unit for line layouts")
    parser.add_argument("--ownership-model", choices=_choices(OwnershipModel), help="Purchase kit, printer only, or rental")
    parser.add_argument("--worker-count", help="Traditional crew size")
    parser.add_argument("--hourly-rate", help="Labor rate per worker-hour")
    parser.add_argument("--project-size", help="Square feet, lineal feet or points per project")
    parser.add_argument("--project-count", help="Projects per year (company analysis)")
    parser.add_argument("--rework-percentage", help="Typical rework as a percentage of labor")
    parser.add_argument("--selected-reduction", help="Rework reduction percentage for the benefit analysis")
    parser.add_argument(
        "--disable-benefit",
        action="append",
        choices=_choices(Benefit),
        help="Exclude a benefit category from the enhanced ROI (repeatable)",
    )
    parser.add_argument("--company-name", help="Customer company name")
    parser.add_argument("--contact-name", help="Customer contact name")
    parser.add_argument("--zip-code", help="Customer zip code")
    parser.add_argument("--email", help="Customer email")
    parser.add_argument("--phone", help="Customer phone (optional)")
    parser.add_argument("--output-dir", help="Directory for generated outputs")
    parser.add_argument("--policy", help="Policy JSON supplying environment defaults")
    parser.add_argument("--export", action="store_true", help="Write the Excel workbook, CSV and JSON results")
    parser.add_argument("--charts", action="store_true", help="Write cumulative and cost comparison charts")
    parser.add_argument("--chart-format", choices=["png", "pdf", "both"], help="Chart file format")
    parser.add_argument("--json", action="store_true", help="Print results as JSON instead of the summary")
    parser.add_argument("--notify", action="store_true", help="Send the analysis snapshot to the CRM endpoint")
    parser.add_argument("--crm-url", help="CRM function endpoint")
    parser.add_argument("--disable-crm", action="store_true", help="Never contact the CRM endpoint")
    parser.add_argument("-v", "--verbose", action="store_true", help="Increase logging verbosity")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv(BASE_DIR / ".env")
    args = parse_args(argv)
    runtime_cfg = load_runtime_config(os.environ, args)
    if apply_policy_defaults(runtime_cfg.policy_path):
        runtime_cfg = load_runtime_config(os.environ, args)
    log_level = logging.DEBUG if runtime_cfg.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(message)s")
    try:
        state = build_state(args)
    except InputError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    try:
        return run(state, runtime_cfg, notify=args.notify, as_json=args.json)
    except Exception:  # pragma: no cover
        logger.exception("Fatal error during ROI calculation")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
