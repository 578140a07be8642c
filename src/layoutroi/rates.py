"""
Static productivity and ownership-cost tables for layout comparisons.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from .models import AnalysisOptions, LayoutType, MeasurementUnit, OwnershipModel

# Units per hour: (traditional crew, layout printer with 1 worker)
LINE_RATES: Dict[MeasurementUnit, Tuple[float, float]] = {
    MeasurementUnit.SQUARE_FEET: (330.0, 3600.0),
    MeasurementUnit.LINEAL_FEET: (30.0, 350.0),
}
POINT_RATES: Tuple[float, float] = (5.0, 200.0)

# Reference only: points per hour with a single-operator robotic total station.
POINT_ROBOTIC_TOTAL_STATION_RATE = 38.0

# Keep tuple structure to preserve order for display
OWNERSHIP_CHOICES: Tuple[Tuple[OwnershipModel, str, float], ...] = (
    (OwnershipModel.FULL_KIT, "Full Layout Printer Kit", 81000.0),
    (OwnershipModel.PRINTER_ONLY, "Layout Printer Only", 50000.0),
    (OwnershipModel.RENTAL, "Rental", 0.0),
)

OWNERSHIP_COSTS = {model: cost for model, _, cost in OWNERSHIP_CHOICES}
OWNERSHIP_LABELS = {model: label for model, label, _ in OWNERSHIP_CHOICES}


def productivity_rates(
    layout_type: LayoutType,
    measurement_unit: Optional[MeasurementUnit] = None,
) -> Tuple[float, float]:
    """Return ``(traditional_rate, device_rate)`` in units per hour.

    The measurement unit is ignored for point layouts; a line layout without a
    unit falls back to square feet.
    """

    if layout_type is LayoutType.POINT:
        return POINT_RATES
    return LINE_RATES[measurement_unit or MeasurementUnit.SQUARE_FEET]


def ownership_cost(model: OwnershipModel) -> float:
    """Base capital cost; rental cost is computed from layout days instead."""

    return OWNERSHIP_COSTS[model]


def ownership_label(model: OwnershipModel) -> str:
    return OWNERSHIP_LABELS[model]


def unit_label(options: AnalysisOptions) -> str:
    if options.layout_type is LayoutType.POINT:
        return "point"
    if options.measurement_unit is MeasurementUnit.LINEAL_FEET:
        return "linear ft"
    return "sq ft"


def rate_label(options: AnalysisOptions) -> str:
    if options.layout_type is LayoutType.POINT:
        return "Points/Hour"
    if options.measurement_unit is MeasurementUnit.LINEAL_FEET:
        return "Lineal Feet/Hour"
    return "Square Feet/Hour"
