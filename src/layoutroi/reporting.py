from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import pandas as pd

from .models import BenefitResult, PeriodPoint, ROIResult, SessionState
from .rates import ownership_label, rate_label
from .roi import headline_metrics

NOT_REACHED = "not reached"


def format_currency(value: float) -> str:
    """USD with no decimals, e.g. ``-$1,235``."""

    rounded = round(float(value))
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.0f}"


def format_number(value: float) -> str:
    number = float(value)
    if number.is_integer():
        return f"{number:,.0f}"
    return f"{number:,.3f}".rstrip("0").rstrip(".")


def format_number_with_decimals(value: float) -> str:
    return f"{float(value):,.2f}"


def format_pct(value: Optional[float]) -> str:
    if value is None:
        return "n/a"
    return f"{round(value):,.0f}%"


def format_breakeven(months: Optional[float]) -> str:
    if months is None:
        return NOT_REACHED
    return f"{months:,.1f} months"


def cost_comparison_frame(roi: ROIResult) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"CATEGORY": row.name, "TRADITIONAL": row.traditional, "DEVICE": row.device, "RENTAL": row.rental}
            for row in roi.cost_comparison
        ],
        columns=["CATEGORY", "TRADITIONAL", "DEVICE", "RENTAL"],
    )


def performance_frame(roi: ROIResult) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "METRIC": metric.name,
                "TRADITIONAL": metric.traditional,
                "DEVICE": metric.device,
                "IMPROVEMENT_PCT": round(metric.improvement_pct, 1),
            }
            for metric in roi.performance
        ],
        columns=["METRIC", "TRADITIONAL", "DEVICE", "IMPROVEMENT_PCT"],
    )


def series_frame_rows(series: Sequence[PeriodPoint]) -> List[Dict[str, object]]:
    return [
        {
            "PERIOD": point.period,
            "TRADITIONAL": point.traditional_cumulative,
            "DEVICE": point.device_cumulative,
        }
        for point in series
    ]


def series_frame(roi: ROIResult) -> pd.DataFrame:
    return pd.DataFrame(series_frame_rows(roi.display_series), columns=["PERIOD", "TRADITIONAL", "DEVICE"])


def benefits_frame(benefits: BenefitResult) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"BENEFIT": flag.value, "VALUE": value, "ENABLED": flag in benefits.enabled_flags}
            for flag, value in benefits.values().items()
        ],
        columns=["BENEFIT", "VALUE", "ENABLED"],
    )


def make_summary_text(state: SessionState) -> str:
    roi = state.roi
    benefits = state.benefits
    if roi is None or benefits is None:
        return "No calculation available.\n"

    table = cost_comparison_frame(roi)
    if not roi.show_rental_hint:
        table = table.drop(columns=["RENTAL"])
    for column in table.columns[1:]:
        table[column] = table[column].map(format_currency)

    headline = headline_metrics(state.traditional, state.device, roi)
    lines = [
        f"Ownership model: {ownership_label(state.options.ownership_model)}",
        f"Device productivity: {format_number(state.device.productivity)} {rate_label(state.options)} "
        f"({headline['speed_multiple']:.0f}x faster than traditional)",
        f"Layout hours: {roi.traditional_hours:,.1f} traditional vs {roi.device_hours:,.1f} device "
        f"({roi.productivity_increase:.1f}% faster)",
        f"Man-hours saved: {headline['man_hours_saved']:,.1f}; layout days saved: {headline['days_saved']:.0f}",
        f"ROI: {format_pct(roi.roi)}; break-even: {format_breakeven(roi.breakeven_months)}; "
        f"5-year ROI: {format_pct(roi.five_year_roi)}",
        f"Enhanced ROI with selected benefits: {format_pct(benefits.enhanced_roi)}",
        f"3-year savings: {format_currency(benefits.three_year_savings)} "
        f"(with benefits {format_currency(benefits.three_year_enhanced_savings)})",
        "Cost comparison:",
        table.to_string(index=False),
    ]
    if roi.show_rental_hint:
        lines.append(
            "Rental may be more cost-effective than purchasing for this workload: "
            f"{format_currency(roi.rental_total_cost)} vs {format_currency(roi.device_total_cost)}."
        )
    return "\n".join(lines) + "\n"
