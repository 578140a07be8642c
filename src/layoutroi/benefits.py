"""Qualitative-benefit valuation layered on top of an ROI result."""

from __future__ import annotations

import logging
from typing import Iterable, Tuple

from .models import (
    ALL_BENEFITS,
    AnalysisOptions,
    Benefit,
    BenefitResult,
    DeviceInputs,
    ROIResult,
)

logger = logging.getLogger(__name__)

DEFAULT_REDUCTION_RANGE: Tuple[float, float] = (25.0, 75.0)
DEFAULT_REDUCTION = 50.0

# Heuristics: avoided information requests, project value as a labor
# multiple, and the shares of that value recovered or won.
RFIS_AVOIDED_PER_PROJECT = 2
COST_PER_RFI = 2000.0
PROJECT_VALUE_LABOR_MULTIPLE = 5.0
SCHEDULE_RECOVERY_SHARE = 0.05
SAFETY_VALUE_PER_PROJECT = 500.0
COMPETITIVE_WIN_SHARE = 0.01
COMPARISON_YEARS = 3


def clamp_reduction(value: float, reduction_range: Tuple[float, float] = DEFAULT_REDUCTION_RANGE) -> float:
    low, high = reduction_range
    return max(low, min(high, float(value)))


def _safe_pct(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator * 100.0


def calculate_benefits(
    options: AnalysisOptions,
    device: DeviceInputs,
    roi: ROIResult,
    selected_reduction: float = DEFAULT_REDUCTION,
    enabled: Iterable[Benefit] = ALL_BENEFITS,
    reduction_range: Tuple[float, float] = DEFAULT_REDUCTION_RANGE,
) -> BenefitResult:
    """Estimate soft-benefit dollars and the enhanced return they imply.

    Only the rework figure depends on ``selected_reduction``; every other
    category is a fixed heuristic of project count or labor cost.
    """

    enabled_flags = frozenset(Benefit(flag) for flag in enabled)
    reduction = clamp_reduction(selected_reduction, reduction_range)
    project_count = roi.project_count
    project_value = roi.traditional_labor_cost * PROJECT_VALUE_LABOR_MULTIPLE

    values = {
        Benefit.REWORK: roi.traditional_rework_cost * reduction / 100.0,
        Benefit.COMMUNICATION: RFIS_AVOIDED_PER_PROJECT * COST_PER_RFI * project_count,
        Benefit.SCHEDULE: project_value * SCHEDULE_RECOVERY_SHARE,
        Benefit.SAFETY: SAFETY_VALUE_PER_PROJECT * project_count,
        Benefit.COMPETITIVE: project_value * COMPETITIVE_WIN_SHARE if options.is_company else 0.0,
    }
    total = sum(value for flag, value in values.items() if flag in enabled_flags)

    labor_delta = roi.traditional_labor_cost - roi.device_labor_cost
    traditional_annual = roi.traditional_labor_cost + roi.traditional_rework_cost
    if options.is_rental:
        rental_spend = device.rental_cost_per_project * project_count
        enhanced_roi = _safe_pct(labor_delta - rental_spend + total, rental_spend + roi.usage_cost)
        device_annual = roi.device_labor_cost + rental_spend + roi.device_rework_cost
        three_year = (traditional_annual - device_annual) * COMPARISON_YEARS
        annual_labor = labor_delta - rental_spend
    else:
        enhanced_roi = _safe_pct(labor_delta + total, device.initial_investment)
        device_recurring = roi.device_labor_cost + roi.device_rework_cost
        three_year = traditional_annual * COMPARISON_YEARS - (
            device_recurring * COMPARISON_YEARS + device.initial_investment
        )
        annual_labor = labor_delta

    logger.debug(
        "benefits => reduction=%.0f%% | enabled=%s | total=%.2f | enhanced_roi=%.2f%%",
        reduction,
        sorted(flag.value for flag in enabled_flags),
        total,
        enhanced_roi,
    )

    return BenefitResult(
        rework_savings=values[Benefit.REWORK],
        communication_savings=values[Benefit.COMMUNICATION],
        schedule_savings=values[Benefit.SCHEDULE],
        safety_savings=values[Benefit.SAFETY],
        competitive_value=values[Benefit.COMPETITIVE],
        enabled_flags=enabled_flags,
        selected_reduction=reduction,
        total_enabled=total,
        enhanced_roi=enhanced_roi,
        three_year_savings=three_year,
        three_year_enhanced_savings=three_year + total * COMPARISON_YEARS,
        annual_labor_savings=annual_labor,
        annual_total_savings=annual_labor + total,
    )
