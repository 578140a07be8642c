"""ROI engine comparing traditional crew layout against the layout printer.

Everything here is a pure function of the analysis options and the inputs
already refreshed by :func:`layoutroi.cost_model.derive_device_inputs`.
Zero denominators yield ``0`` so dashboards stay renderable; break-even that
is never reached is reported as ``None``.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Tuple

import numpy as np

from .cost_model import (
    HOURS_PER_DAY,
    UsageCost,
    aggregate_usage,
    annual_amortization,
    rental_cost,
    usage_cost,
)
from .models import (
    AnalysisOptions,
    CostRow,
    DeviceInputs,
    PerformanceMetric,
    PeriodPoint,
    ROIResult,
    TraditionalInputs,
)
from .rates import unit_label

logger = logging.getLogger(__name__)

MONTHS = 36
MAX_PROJECTS = 24
DISPLAY_PERIODS = 24
FIVE_YEARS = 5


def _ratio(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator


def _pct_change(before: float, after: float) -> float:
    return _ratio(before - after, before) * 100.0


def effective_project_count(options: AnalysisOptions, traditional: TraditionalInputs) -> float:
    return traditional.project_count if options.is_company else 1


def _layout_days(hours: float) -> int:
    # Productivity rates are per team, so worker count does not shorten the calendar.
    return math.ceil(hours / HOURS_PER_DAY)


def _series(
    label: str,
    traditional_steps: np.ndarray,
    device_steps: np.ndarray,
) -> Tuple[PeriodPoint, ...]:
    traditional_cum = np.cumsum(traditional_steps)
    device_cum = np.cumsum(device_steps)
    return tuple(
        PeriodPoint(
            period=f"{label} {idx + 1}",
            traditional_cumulative=float(trad),
            device_cumulative=float(dev),
        )
        for idx, (trad, dev) in enumerate(zip(traditional_cum, device_cum))
    )


def monthly_series(
    options: AnalysisOptions,
    device: DeviceInputs,
    *,
    traditional_labor: float,
    traditional_rework: float,
    device_labor: float,
    device_rework: float,
    usage: float,
    rental_spend: float,
    months: int = MONTHS,
) -> Tuple[PeriodPoint, ...]:
    """Cumulative monthly cost over ``months`` with annual figures spread evenly.

    Purchase capital lands entirely in month 1; rental and usage are spread
    over twelve months per year.
    """

    traditional_steps = np.full(months, (traditional_labor + traditional_rework) / 12.0)
    recurring = (device_labor + device_rework + usage) / 12.0
    if options.is_rental:
        recurring += rental_spend / 12.0
    device_steps = np.full(months, recurring)
    if not options.is_rental and months:
        device_steps[0] += device.initial_investment
    return _series("Month", traditional_steps, device_steps)


def project_series(
    options: AnalysisOptions,
    device: DeviceInputs,
    project_count: float,
    *,
    traditional_labor: float,
    traditional_rework: float,
    device_labor: float,
    device_rework: float,
    usage: float,
    projects: int = MAX_PROJECTS,
) -> Tuple[PeriodPoint, ...]:
    """Cumulative cost per completed project, capital in project 1."""

    per_traditional = _ratio(traditional_labor + traditional_rework, project_count)
    per_device = _ratio(device_labor + device_rework + usage, project_count)
    if options.is_rental:
        per_device += device.rental_cost_per_project
    traditional_steps = np.full(projects, per_traditional)
    device_steps = np.full(projects, per_device)
    if not options.is_rental and projects:
        device_steps[0] += device.initial_investment
    return _series("Project", traditional_steps, device_steps)


def performance_metrics(
    options: AnalysisOptions,
    *,
    traditional_days: int,
    device_days: int,
    traditional_hours: float,
    device_hours: float,
    traditional_man_hours: float,
    device_man_hours: float,
    traditional_unit_cost: float,
    device_unit_cost: float,
) -> Tuple[PerformanceMetric, ...]:
    rows = [
        ("Layout Duration (Days)", traditional_days, device_days),
        ("Layout Hours", traditional_hours, device_hours),
        ("Man-Hours", traditional_man_hours, device_man_hours),
        (f"Cost per {unit_label(options)}", traditional_unit_cost, device_unit_cost),
    ]
    return tuple(
        PerformanceMetric(
            name=name,
            traditional=float(before),
            device=float(after),
            improvement_pct=_pct_change(before, after),
        )
        for name, before, after in rows
    )


def cost_comparison_rows(
    options: AnalysisOptions,
    usage: UsageCost,
    per_project_usage: UsageCost,
    *,
    traditional_labor: float,
    traditional_rework: float,
    device_labor: float,
    device_rework: float,
    equipment_cost: float,
    rental_equipment_cost: float,
) -> Tuple[CostRow, ...]:
    """Ordered cost table with chosen-model and rental-policy columns."""

    rows: List[CostRow] = [
        CostRow("Layout Labor", traditional_labor, device_labor, device_labor),
        CostRow("Equipment Cost", 0.0, equipment_cost, rental_equipment_cost),
        CostRow("Usage Costs", 0.0, usage.capped, usage.capped),
    ]
    free_printing = usage.free_printing
    if free_printing > 0 and (not options.is_company or per_project_usage.cap_applied):
        rows.append(CostRow("Free Printing Value", 0.0, free_printing, free_printing))
    rows.append(CostRow("Rework Costs", traditional_rework, device_rework, device_rework))
    rows.append(
        CostRow(
            "Total Annual Costs" if options.is_company else "Total Costs",
            traditional_labor + traditional_rework,
            device_labor + equipment_cost + usage.capped + device_rework,
            device_labor + rental_equipment_cost + usage.capped + device_rework,
        )
    )
    return tuple(rows)


def _purchase_returns(
    annual_savings: float,
    initial_investment: float,
) -> Tuple[float, Optional[float], float]:
    roi = _ratio(annual_savings, initial_investment) * 100.0
    breakeven: Optional[float] = None
    if annual_savings > 0:
        breakeven = initial_investment / (annual_savings / 12.0)
    five_year = _ratio(annual_savings * FIVE_YEARS, initial_investment) * 100.0
    return roi, breakeven, five_year


def calculate_roi(
    options: AnalysisOptions,
    traditional: TraditionalInputs,
    device: DeviceInputs,
) -> ROIResult:
    """Derive every labor, cost and return metric for one set of inputs."""

    options = options.normalized()
    project_count = effective_project_count(options, traditional)
    size = traditional.project_size

    traditional_hours = _ratio(size, traditional.productivity) * project_count
    device_hours = _ratio(size, device.productivity) * project_count
    traditional_labor = traditional_hours * traditional.hourly_rate * traditional.worker_count
    device_labor = device_hours * traditional.hourly_rate * device.worker_count

    per_project_usage = usage_cost(options.layout_type, size, device.estimated_layout_days)
    usage = aggregate_usage(per_project_usage, project_count)

    rental_spend = device.rental_cost_per_project * project_count
    equipment_cost = rental_spend if options.is_rental else annual_amortization(device.initial_investment)
    device_total = device_labor + equipment_cost + usage.capped

    rental_equipment_cost = rental_cost(device.estimated_layout_days) * project_count
    rental_total = device_labor + rental_equipment_cost + usage.capped

    traditional_man_hours = traditional_hours * traditional.worker_count
    device_man_hours = device_hours * device.worker_count
    units = size * project_count
    traditional_unit_cost = _ratio(traditional_labor, units)
    device_unit_cost = _ratio(device_total, units)
    traditional_days = _layout_days(traditional_hours)
    device_days = _layout_days(device_hours)

    traditional_rework = traditional_labor * traditional.rework_percentage / 100.0
    device_rework = 0.0
    rework_savings = traditional_rework - device_rework

    if options.is_rental:
        annual_savings = traditional_labor - device_labor - rental_spend - usage.capped
        roi = _ratio(annual_savings, rental_spend + usage.capped) * 100.0
        breakeven: Optional[float] = None
        five_year: Optional[float] = None
    else:
        annual_savings = traditional_labor - device_labor + rework_savings - usage.capped
        roi, breakeven, five_year = _purchase_returns(annual_savings, device.initial_investment)

    first_year_net = (traditional_labor + traditional_rework) - (device_total + device_rework)

    costs = dict(
        traditional_labor=traditional_labor,
        traditional_rework=traditional_rework,
        device_labor=device_labor,
        device_rework=device_rework,
    )
    months = monthly_series(
        options,
        device,
        usage=usage.capped,
        rental_spend=rental_spend,
        **costs,
    )
    projects = project_series(options, device, project_count, usage=usage.capped, **costs)
    display = (months if options.is_company else projects)[:DISPLAY_PERIODS]

    logger.debug(
        "roi => hours=%.2f/%.2f | labor=%.2f/%.2f | usage=%.2f | total=%.2f | roi=%.2f%%",
        traditional_hours,
        device_hours,
        traditional_labor,
        device_labor,
        usage.capped,
        device_total,
        roi,
    )

    return ROIResult(
        project_count=project_count,
        traditional_hours=traditional_hours,
        device_hours=device_hours,
        traditional_labor_cost=traditional_labor,
        device_labor_cost=device_labor,
        uncapped_usage_cost=usage.uncapped,
        usage_cost=usage.capped,
        free_printing=usage.free_printing,
        equipment_cost=equipment_cost,
        device_total_cost=device_total,
        rental_equipment_cost=rental_equipment_cost,
        rental_total_cost=rental_total,
        productivity_increase=_pct_change(traditional_hours, device_hours),
        time_savings=traditional_hours - device_hours,
        traditional_man_hours=traditional_man_hours,
        device_man_hours=device_man_hours,
        traditional_unit_cost=traditional_unit_cost,
        device_unit_cost=device_unit_cost,
        traditional_layout_days=traditional_days,
        device_layout_days=device_days,
        traditional_rework_cost=traditional_rework,
        device_rework_cost=device_rework,
        rework_savings=rework_savings,
        rework_percentage=traditional.rework_percentage,
        annual_savings=annual_savings,
        first_year_net_savings=first_year_net,
        roi=roi,
        breakeven_months=breakeven,
        five_year_roi=five_year,
        show_rental_hint=(not options.is_rental) and device_total > traditional_labor,
        analysis_type=options.analysis_type,
        monthly_series=months,
        project_series=projects,
        display_series=display,
        performance=performance_metrics(
            options,
            traditional_days=traditional_days,
            device_days=device_days,
            traditional_hours=traditional_hours,
            device_hours=device_hours,
            traditional_man_hours=traditional_man_hours,
            device_man_hours=device_man_hours,
            traditional_unit_cost=traditional_unit_cost,
            device_unit_cost=device_unit_cost,
        ),
        cost_comparison=cost_comparison_rows(
            options,
            usage,
            per_project_usage,
            equipment_cost=equipment_cost,
            rental_equipment_cost=rental_equipment_cost,
            **costs,
        ),
    )


def headline_metrics(
    traditional: TraditionalInputs,
    device: DeviceInputs,
    result: ROIResult,
) -> Dict[str, float]:
    """Dashboard tiles: speed multiple, crew reduction, hours and days saved."""

    return {
        "speed_multiple": float(round(_ratio(device.productivity, traditional.productivity))),
        "worker_reduction_pct": _pct_change(traditional.worker_count, device.worker_count),
        "man_hours_saved": result.traditional_man_hours - result.device_man_hours,
        "man_hours_reduction_pct": _pct_change(result.traditional_man_hours, result.device_man_hours),
        "days_saved": float(result.traditional_layout_days - result.device_layout_days),
        "days_reduction_pct": _pct_change(result.traditional_layout_days, result.device_layout_days),
    }
