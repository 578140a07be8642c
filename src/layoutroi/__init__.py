"""ROI and benefit calculator comparing manual construction layout with a layout printer."""

from .benefits import calculate_benefits
from .cost_model import derive_device_inputs
from .models import (
    AnalysisOptions,
    AnalysisType,
    Benefit,
    BenefitResult,
    CustomerInfo,
    DeviceInputs,
    LayoutType,
    MeasurementUnit,
    OwnershipModel,
    ROIResult,
    SessionState,
    TraditionalInputs,
)
from .roi import calculate_roi
from .session import InputError, new_session, recompute

__all__ = [
    "AnalysisOptions",
    "AnalysisType",
    "Benefit",
    "BenefitResult",
    "CustomerInfo",
    "DeviceInputs",
    "InputError",
    "LayoutType",
    "MeasurementUnit",
    "OwnershipModel",
    "ROIResult",
    "SessionState",
    "TraditionalInputs",
    "calculate_benefits",
    "calculate_roi",
    "derive_device_inputs",
    "new_session",
    "recompute",
]
