"""
Immutable calculation session with typed setters.

Each setter validates its input, returns a new :class:`SessionState` and
re-derives every dependent result. Unknown field names are rejected rather
than written through.
"""

from __future__ import annotations

import logging
import math
from dataclasses import fields, replace
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple, Type, TypeVar

from .benefits import calculate_benefits
from .cost_model import derive_device_inputs
from .models import (
    AnalysisType,
    Benefit,
    CustomerInfo,
    LayoutType,
    MeasurementUnit,
    OwnershipModel,
    SessionState,
)
from .roi import calculate_roi

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class InputError(ValueError):
    """Raised when user-supplied input cannot enter the calculation."""


OPTION_FIELDS: Dict[str, Type[Enum]] = {
    "analysis_type": AnalysisType,
    "layout_type": LayoutType,
    "measurement_unit": MeasurementUnit,
    "ownership_model": OwnershipModel,
}

# (minimum, maximum)
TRADITIONAL_FIELDS: Dict[str, Tuple[float, Optional[float]]] = {
    "worker_count": (1.0, None),
    "hourly_rate": (0.0, None),
    "project_size": (0.0, None),
    "project_count": (1.0, None),
    "rework_percentage": (0.0, 100.0),
}

CUSTOMER_FIELDS = tuple(f.name for f in fields(CustomerInfo))


def parse_number(name: str, value: object) -> float:
    """Parse numeric form text such as ``"$1,250"`` into a finite float."""

    if isinstance(value, bool):
        raise InputError(f"{name} must be numeric, got {value!r}")
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value if value is not None else "").replace("$", "").replace(",", "").strip()
        if not text:
            raise InputError(f"{name} is required")
        try:
            number = float(text)
        except ValueError:
            raise InputError(f"{name} must be numeric, got {value!r}") from None
    if math.isnan(number) or math.isinf(number):
        raise InputError(f"{name} must be a finite number")
    return number


def parse_enum(enum_type: Type[E], value: object) -> E:
    """Accept an enum member, its wire value (``"squareFeet"``) or its name."""

    if isinstance(value, enum_type):
        return value
    text = str(value).strip()
    for member in enum_type:
        if text == member.value or text.upper() == member.name:
            return member
    compressed = text.replace("_", "").replace("-", "").replace(" ", "").lower()
    for member in enum_type:
        if compressed == member.value.lower():
            return member
    choices = ", ".join(member.value for member in enum_type)
    raise InputError(f"unknown {enum_type.__name__} {value!r}; expected one of: {choices}")


def _check_bounds(name: str, number: float) -> float:
    low, high = TRADITIONAL_FIELDS[name]
    if number < low:
        raise InputError(f"{name} must be at least {low:g}, got {number:g}")
    if high is not None and number > high:
        raise InputError(f"{name} must be at most {high:g}, got {number:g}")
    return number


def recompute(state: SessionState) -> SessionState:
    """Re-derive device inputs, the ROI result and the benefit result."""

    options = state.options.normalized()
    traditional, device = derive_device_inputs(options, state.traditional, state.device)
    roi = calculate_roi(options, traditional, device)
    benefits = calculate_benefits(
        options,
        device,
        roi,
        selected_reduction=state.selected_reduction,
        enabled=state.enabled_benefits,
        reduction_range=state.reduction_range,
    )
    logger.debug(
        "recompute => roi=%.2f%% enhanced=%.2f%% breakeven=%s",
        roi.roi,
        benefits.enhanced_roi,
        roi.breakeven_months,
    )
    return replace(
        state,
        options=options,
        traditional=traditional,
        device=device,
        roi=roi,
        benefits=benefits,
    )


def new_session(**overrides: object) -> SessionState:
    """Build a computed session from defaults plus field overrides.

    Overrides use the same names the setters accept, e.g.
    ``new_session(layout_type="point", project_size=7000)``.
    """

    state = SessionState()
    state = apply_updates(state, overrides)
    return recompute(state)


def apply_updates(state: SessionState, updates: Mapping[str, object]) -> SessionState:
    """Route each ``name=value`` to the matching setter without recomputing in between."""

    for name, value in updates.items():
        if name in OPTION_FIELDS:
            state = set_option(state, name, value, compute=False)
        elif name in TRADITIONAL_FIELDS:
            state = set_traditional(state, name, value, compute=False)
        elif name in CUSTOMER_FIELDS:
            state = set_customer(state, name, value, compute=False)
        elif name == "selected_reduction":
            state = set_reduction(state, value, compute=False)
        else:
            raise InputError(f"unknown input field {name!r}")
    return state


def set_option(state: SessionState, name: str, value: object, *, compute: bool = True) -> SessionState:
    if name not in OPTION_FIELDS:
        raise InputError(f"unknown analysis option {name!r}")
    if name == "measurement_unit" and value in (None, ""):
        member = None
    else:
        member = parse_enum(OPTION_FIELDS[name], value)
    state = replace(state, options=replace(state.options, **{name: member}))
    return recompute(state) if compute else state


def set_traditional(state: SessionState, name: str, value: object, *, compute: bool = True) -> SessionState:
    if name == "productivity":
        raise InputError("productivity is derived from the layout type and cannot be set")
    if name not in TRADITIONAL_FIELDS:
        raise InputError(f"unknown traditional input {name!r}")
    number = _check_bounds(name, parse_number(name, value))
    state = replace(state, traditional=replace(state.traditional, **{name: number}))
    return recompute(state) if compute else state


def set_customer(state: SessionState, name: str, value: object, *, compute: bool = True) -> SessionState:
    if name not in CUSTOMER_FIELDS:
        raise InputError(f"unknown customer field {name!r}")
    text = "" if value is None else str(value).strip()
    state = replace(state, customer=replace(state.customer, **{name: text}))
    return recompute(state) if compute else state


def set_reduction(state: SessionState, value: object, *, compute: bool = True) -> SessionState:
    number = parse_number("selected_reduction", value)
    low, high = state.reduction_range
    if not low <= number <= high:
        raise InputError(f"selected_reduction must be between {low:g} and {high:g}, got {number:g}")
    state = replace(state, selected_reduction=number)
    return recompute(state) if compute else state


def set_benefit(state: SessionState, name: object, enabled: bool, *, compute: bool = True) -> SessionState:
    flag = parse_enum(Benefit, name)
    flags = set(state.enabled_benefits)
    if enabled:
        flags.add(flag)
    else:
        flags.discard(flag)
    state = replace(state, enabled_benefits=frozenset(flags))
    return recompute(state) if compute else state


def toggle_benefit(state: SessionState, name: object) -> SessionState:
    flag = parse_enum(Benefit, name)
    return set_benefit(state, flag, flag not in state.enabled_benefits)


__all__ = [
    "InputError",
    "apply_updates",
    "new_session",
    "parse_enum",
    "parse_number",
    "recompute",
    "set_benefit",
    "set_customer",
    "set_option",
    "set_reduction",
    "set_traditional",
    "toggle_benefit",
]
