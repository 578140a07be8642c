from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple


class AnalysisType(str, Enum):
    PROJECT = "project"
    COMPANY = "company"


class LayoutType(str, Enum):
    LINE = "line"
    POINT = "point"


class MeasurementUnit(str, Enum):
    SQUARE_FEET = "squareFeet"
    LINEAL_FEET = "linealFeet"


class OwnershipModel(str, Enum):
    FULL_KIT = "fullKit"
    PRINTER_ONLY = "printerOnly"
    RENTAL = "rental"


class Benefit(str, Enum):
    REWORK = "rework"
    COMMUNICATION = "communication"
    SCHEDULE = "schedule"
    SAFETY = "safety"
    COMPETITIVE = "competitive"


ALL_BENEFITS: FrozenSet[Benefit] = frozenset(Benefit)


@dataclass(frozen=True)
class AnalysisOptions:
    """How the comparison is framed: scope, layout kind and ownership."""

    analysis_type: AnalysisType = AnalysisType.PROJECT
    layout_type: LayoutType = LayoutType.LINE
    measurement_unit: Optional[MeasurementUnit] = MeasurementUnit.SQUARE_FEET
    ownership_model: OwnershipModel = OwnershipModel.FULL_KIT

    @property
    def is_rental(self) -> bool:
        return self.ownership_model is OwnershipModel.RENTAL

    @property
    def is_company(self) -> bool:
        return self.analysis_type is AnalysisType.COMPANY

    def normalized(self) -> "AnalysisOptions":
        """Return options with the unit dropped for point layouts and defaulted for line layouts."""

        if self.layout_type is LayoutType.POINT:
            return replace(self, measurement_unit=None)
        if self.measurement_unit is None:
            return replace(self, measurement_unit=MeasurementUnit.SQUARE_FEET)
        return self


@dataclass(frozen=True)
class TraditionalInputs:
    """Crew-based manual layout parameters."""

    worker_count: float = 2
    hourly_rate: float = 65.0
    productivity: float = 330.0
    project_size: float = 10000.0
    project_count: float = 12
    rework_percentage: float = 10.0


@dataclass(frozen=True)
class DeviceInputs:
    """Layout printer parameters. Everything except ``worker_count`` is derived."""

    worker_count: float = 1
    productivity: float = 3600.0
    initial_investment: float = 81000.0
    rental_cost_per_project: float = 0.0
    usage_cost: float = 0.0
    estimated_layout_days: int = 1


@dataclass(frozen=True)
class CustomerInfo:
    company_name: str = ""
    contact_name: str = ""
    zip_code: str = ""
    email: str = ""
    phone: str = ""

    def is_complete(self) -> bool:
        """All fields except ``phone`` are required."""

        return all(
            value.strip()
            for value in (self.company_name, self.contact_name, self.zip_code, self.email)
        )


@dataclass(frozen=True)
class PeriodPoint:
    period: str
    traditional_cumulative: float
    device_cumulative: float


@dataclass(frozen=True)
class CostRow:
    """One line of the cost-comparison table.

    ``device`` follows the chosen ownership model, ``rental`` always follows
    the day-tiered rental policy so both can be shown side by side.
    """

    name: str
    traditional: float
    device: float
    rental: float


@dataclass(frozen=True)
class PerformanceMetric:
    name: str
    traditional: float
    device: float
    improvement_pct: float


@dataclass(frozen=True)
class ROIResult:
    project_count: float
    traditional_hours: float
    device_hours: float
    traditional_labor_cost: float
    device_labor_cost: float
    uncapped_usage_cost: float
    usage_cost: float
    free_printing: float
    equipment_cost: float
    device_total_cost: float
    rental_equipment_cost: float
    rental_total_cost: float
    productivity_increase: float
    time_savings: float
    traditional_man_hours: float
    device_man_hours: float
    traditional_unit_cost: float
    device_unit_cost: float
    traditional_layout_days: int
    device_layout_days: int
    traditional_rework_cost: float
    device_rework_cost: float
    rework_savings: float
    rework_percentage: float
    annual_savings: float
    first_year_net_savings: float
    roi: float
    breakeven_months: Optional[float]
    five_year_roi: Optional[float]
    show_rental_hint: bool
    analysis_type: AnalysisType
    monthly_series: Tuple[PeriodPoint, ...]
    project_series: Tuple[PeriodPoint, ...]
    display_series: Tuple[PeriodPoint, ...]
    performance: Tuple[PerformanceMetric, ...]
    cost_comparison: Tuple[CostRow, ...]

    @property
    def breakeven_reached(self) -> bool:
        return self.breakeven_months is not None

    def to_dict(self) -> Dict[str, object]:
        return _jsonable(asdict(self))


@dataclass(frozen=True)
class BenefitResult:
    rework_savings: float
    communication_savings: float
    schedule_savings: float
    safety_savings: float
    competitive_value: float
    enabled_flags: FrozenSet[Benefit]
    selected_reduction: float
    total_enabled: float
    enhanced_roi: float
    three_year_savings: float
    three_year_enhanced_savings: float
    annual_labor_savings: float
    annual_total_savings: float

    def values(self) -> Dict[Benefit, float]:
        return {
            Benefit.REWORK: self.rework_savings,
            Benefit.COMMUNICATION: self.communication_savings,
            Benefit.SCHEDULE: self.schedule_savings,
            Benefit.SAFETY: self.safety_savings,
            Benefit.COMPETITIVE: self.competitive_value,
        }

    def to_dict(self) -> Dict[str, object]:
        return _jsonable(asdict(self))


@dataclass(frozen=True)
class SessionState:
    """The single current calculation. Replaced wholesale, never mutated."""

    customer: CustomerInfo = field(default_factory=CustomerInfo)
    options: AnalysisOptions = field(default_factory=AnalysisOptions)
    traditional: TraditionalInputs = field(default_factory=TraditionalInputs)
    device: DeviceInputs = field(default_factory=DeviceInputs)
    selected_reduction: float = 50.0
    reduction_range: Tuple[float, float] = (25.0, 75.0)
    enabled_benefits: FrozenSet[Benefit] = ALL_BENEFITS
    roi: Optional[ROIResult] = None
    benefits: Optional[BenefitResult] = None


def _jsonable(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(_jsonable(k)): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (frozenset, set)):
        return sorted(_jsonable(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


__all__ = [
    "ALL_BENEFITS",
    "AnalysisOptions",
    "AnalysisType",
    "Benefit",
    "BenefitResult",
    "CostRow",
    "CustomerInfo",
    "DeviceInputs",
    "LayoutType",
    "MeasurementUnit",
    "OwnershipModel",
    "PerformanceMetric",
    "PeriodPoint",
    "ROIResult",
    "SessionState",
]
