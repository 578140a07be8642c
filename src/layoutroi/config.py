from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import SimpleNamespace
from typing import Mapping, Optional


_BOOLEAN_TRUE = {"1", "true", "yes", "on"}
_CHART_FORMATS = {"png", "pdf", "both"}


@dataclass(frozen=True)
class RetryPolicy:
    """Timeout, retry and backoff for CRM sends.

    ``circuit_breaker_failures`` consecutive failed notifications suspend
    reporting for the rest of the session; 0 never suspends.
    """

    timeout_seconds: float = 10.0
    retries: int = 0
    backoff_factor: float = 0.0
    circuit_breaker_failures: int = 3


@dataclass(frozen=True)
class Config:
    """Runtime configuration assembled from environment variables and CLI options."""

    base_dir: Path
    output_dir: Path
    output_xlsx: Path
    output_csv: Path
    output_json: Path
    policy_path: Path
    crm_url: Optional[str]
    crm_api_key: Optional[str]
    disable_crm: bool
    crm_retry: RetryPolicy
    chart_format: str = "png"
    emit_charts: bool = False
    export: bool = False
    verbose: bool = False


def _to_path(value: object | None) -> Optional[Path]:
    if value is None:
        return None
    if isinstance(value, Path):
        return value.expanduser().resolve()
    text = str(value).strip()
    if not text:
        return None
    return Path(text).expanduser().resolve()


def _to_int(value: object | None) -> Optional[int]:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(float(text))
    except ValueError:
        return None


def _to_float(value: object | None) -> Optional[float]:
    if value is None:
        return None
    text = str(value).replace("$", "").replace(",", "").strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _to_text(value: object | None) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _flag(value: object | None) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _BOOLEAN_TRUE


def _namespace(cli_args: object | None) -> SimpleNamespace:
    if cli_args is None:
        return SimpleNamespace()
    if isinstance(cli_args, SimpleNamespace):
        return cli_args
    if hasattr(cli_args, "__dict__"):
        return SimpleNamespace(**{k: v for k, v in vars(cli_args).items()})
    return SimpleNamespace()


def load_config(env: Mapping[str, str], cli_args: object | None = None) -> Config:
    """Build a runtime :class:`Config` from environment variables and CLI options."""

    base_dir = Path(__file__).resolve().parents[2]
    default_output_dir = (base_dir / "outputs").resolve()
    default_policy = (base_dir / "references" / "policy.json").resolve()

    output_dir = _to_path(env.get("LAYOUTROI_OUTPUT_DIR")) or default_output_dir
    policy_path = _to_path(env.get("LAYOUTROI_POLICY")) or default_policy
    crm_url = _to_text(env.get("LAYOUTROI_CRM_URL"))
    crm_api_key = _to_text(env.get("LAYOUTROI_CRM_API_KEY"))
    disable_crm = _flag(env.get("LAYOUTROI_DISABLE_CRM"))
    timeout = _to_float(env.get("LAYOUTROI_CRM_TIMEOUT"))
    retries = _to_int(env.get("LAYOUTROI_CRM_RETRIES"))
    backoff = _to_float(env.get("LAYOUTROI_CRM_BACKOFF"))
    chart_format = (env.get("LAYOUTROI_CHART_FORMAT") or "png").strip().lower()
    emit_charts = _flag(env.get("LAYOUTROI_CHARTS"))
    export = _flag(env.get("LAYOUTROI_EXPORT"))
    verbose = False

    cli_ns = _namespace(cli_args)
    if getattr(cli_ns, "output_dir", None):
        output_dir = _to_path(cli_ns.output_dir) or output_dir
    if getattr(cli_ns, "policy", None):
        policy_path = _to_path(cli_ns.policy) or policy_path
    if getattr(cli_ns, "crm_url", None):
        crm_url = _to_text(cli_ns.crm_url)
    if getattr(cli_ns, "disable_crm", False):
        disable_crm = True
    if getattr(cli_ns, "chart_format", None):
        chart_format = str(cli_ns.chart_format).strip().lower()
    if getattr(cli_ns, "charts", False):
        emit_charts = True
    if getattr(cli_ns, "export", False):
        export = True
    if getattr(cli_ns, "verbose", False):
        verbose = bool(cli_ns.verbose)

    if chart_format not in _CHART_FORMATS:
        chart_format = "png"
    if crm_url is None:
        disable_crm = True

    return Config(
        base_dir=base_dir,
        output_dir=output_dir,
        output_xlsx=(output_dir / "ROI_Analysis.xlsx").resolve(),
        output_csv=(output_dir / "Cost_Comparison.csv").resolve(),
        output_json=(output_dir / "roi_result.json").resolve(),
        policy_path=policy_path,
        crm_url=crm_url,
        crm_api_key=crm_api_key,
        disable_crm=disable_crm,
        crm_retry=RetryPolicy(
            timeout_seconds=timeout if timeout and timeout > 0 else 10.0,
            retries=max(0, retries or 0),
            backoff_factor=max(0.0, backoff or 0.0),
        ),
        chart_format=chart_format,
        emit_charts=emit_charts,
        export=export,
        verbose=verbose,
    )


__all__ = ["Config", "RetryPolicy", "load_config"]
