"""Usage, rental and amortized equipment costs for the layout printer."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Tuple

from .models import AnalysisOptions, DeviceInputs, LayoutType, TraditionalInputs
from .rates import ownership_cost, productivity_rates

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 8
AMORTIZATION_YEARS = 3

RENTAL_SHORT_DAYS = 5
RENTAL_LONG_DAYS = 15
RENTAL_DAILY_RATES = {"short": 400.0, "standard": 320.0, "long": 240.0}

USAGE_RATE_POINT = 2.0
USAGE_RATE_LINE = 0.20
USAGE_CAP = 12000.0
USAGE_CAP_PERIOD_DAYS = 30


@dataclass(frozen=True)
class UsageCost:
    """Per-volume printing charge before and after the monthly cap."""

    uncapped: float
    capped: float

    @property
    def free_printing(self) -> float:
        return max(0.0, self.uncapped - self.capped)

    @property
    def cap_applied(self) -> bool:
        return self.uncapped > USAGE_CAP

    def scaled(self, project_count: float) -> "UsageCost":
        """Multiply an already-capped per-project charge across projects."""

        return UsageCost(uncapped=self.uncapped * project_count, capped=self.capped * project_count)


def estimate_layout_days(project_size: float, device_productivity: float) -> int:
    """Whole 8-hour days the printer needs for one project, at least one."""

    if device_productivity <= 0 or project_size <= 0:
        return 1
    hours = project_size / device_productivity
    return max(1, math.ceil(hours / HOURS_PER_DAY))


def rental_daily_rate(days: float) -> float:
    """Day-tiered rental price. The 5 and 15 day boundaries stay in the middle tier."""

    if days < RENTAL_SHORT_DAYS:
        return RENTAL_DAILY_RATES["short"]
    if days > RENTAL_LONG_DAYS:
        return RENTAL_DAILY_RATES["long"]
    return RENTAL_DAILY_RATES["standard"]


def rental_cost(days: float) -> float:
    return rental_daily_rate(days) * days


def uncapped_usage_cost(layout_type: LayoutType, project_size: float) -> float:
    rate = USAGE_RATE_POINT if layout_type is LayoutType.POINT else USAGE_RATE_LINE
    return rate * project_size


def apply_usage_cap(uncapped: float, estimated_days: float) -> float:
    """Cap usage at $12,000 per 30-day period, prorated beyond the first period."""

    if uncapped <= USAGE_CAP:
        return uncapped
    if estimated_days < USAGE_CAP_PERIOD_DAYS:
        return USAGE_CAP
    return (estimated_days / USAGE_CAP_PERIOD_DAYS) * USAGE_CAP


def usage_cost(layout_type: LayoutType, project_size: float, estimated_days: float) -> UsageCost:
    """Usage charge for a single project."""

    raw = uncapped_usage_cost(layout_type, project_size)
    return UsageCost(uncapped=raw, capped=apply_usage_cap(raw, estimated_days))


def aggregate_usage(per_project: UsageCost, project_count: float) -> UsageCost:
    """The cap is evaluated per project before multiplying by the project count."""

    return per_project.scaled(project_count)


def annual_amortization(initial_investment: float) -> float:
    """Straight-line annual share of the purchase price over three years."""

    return initial_investment / AMORTIZATION_YEARS


def derive_device_inputs(
    options: AnalysisOptions,
    traditional: TraditionalInputs,
    device: DeviceInputs,
) -> Tuple[TraditionalInputs, DeviceInputs]:
    """Refresh every value that depends on the options or the project size.

    Returns new traditional and device inputs with productivity rates,
    capital cost, estimated layout days, rental cost and capped per-project
    usage cost recomputed. Rental cost is only carried when the chosen model
    is rental.
    """

    options = options.normalized()
    traditional_rate, device_rate = productivity_rates(options.layout_type, options.measurement_unit)
    days = estimate_layout_days(traditional.project_size, device_rate)
    per_project = usage_cost(options.layout_type, traditional.project_size, days)
    rental = rental_cost(days) if options.is_rental else 0.0

    logger.debug(
        "device inputs => rate=%s | days=%s | rental=%.2f | usage=%.2f (uncapped %.2f)",
        device_rate,
        days,
        rental,
        per_project.capped,
        per_project.uncapped,
    )
    return (
        replace(traditional, productivity=traditional_rate),
        replace(
            device,
            productivity=device_rate,
            initial_investment=ownership_cost(options.ownership_model),
            rental_cost_per_project=rental,
            usage_cost=per_project.capped,
            estimated_layout_days=days,
        ),
    )
