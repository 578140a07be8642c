from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from layoutroi.models import LayoutType, MeasurementUnit, OwnershipModel
from layoutroi.session import (
    InputError,
    apply_updates,
    new_session,
    parse_enum,
    parse_number,
    recompute,
    set_customer,
    set_option,
    set_reduction,
    set_traditional,
)


@pytest.mark.parametrize(
    "raw, expected",
    [("$1,250", 1250.0), ("  42 ", 42.0), (7, 7.0), ("0.5", 0.5)],
)
def test_parse_number_accepts_form_text(raw, expected):
    assert parse_number("hourly_rate", raw) == expected


@pytest.mark.parametrize("raw", ["abc", "", None, True, "nan", "inf"])
def test_parse_number_rejects_non_numeric(raw):
    with pytest.raises(InputError):
        parse_number("hourly_rate", raw)


def test_parse_enum_accepts_value_name_and_loose_forms():
    assert parse_enum(MeasurementUnit, "squareFeet") is MeasurementUnit.SQUARE_FEET
    assert parse_enum(MeasurementUnit, "SQUARE_FEET") is MeasurementUnit.SQUARE_FEET
    assert parse_enum(MeasurementUnit, "square-feet") is MeasurementUnit.SQUARE_FEET
    assert parse_enum(OwnershipModel, "printer_only") is OwnershipModel.PRINTER_ONLY
    with pytest.raises(InputError, match="expected one of"):
        parse_enum(LayoutType, "grid")


def test_unknown_field_rejected(reference_state):
    with pytest.raises(InputError, match="unknown input field"):
        apply_updates(reference_state, {"crew_size": 3})
    with pytest.raises(InputError):
        set_traditional(reference_state, "crew_size", 3)
    with pytest.raises(InputError):
        set_option(reference_state, "color", "blue")


def test_productivity_cannot_be_set_directly(reference_state):
    with pytest.raises(InputError, match="derived"):
        set_traditional(reference_state, "productivity", 500)


@pytest.mark.parametrize(
    "name, value",
    [
        ("hourly_rate", -1),
        ("rework_percentage", 150),
        ("worker_count", 0),
        ("project_count", 0),
        ("project_size", -10),
        ("hourly_rate", "abc"),
    ],
)
def test_out_of_range_inputs_rejected(reference_state, name, value):
    with pytest.raises(InputError):
        set_traditional(reference_state, name, value)


def test_reduction_outside_slider_range_rejected(reference_state):
    with pytest.raises(InputError, match="between 25 and 75"):
        set_reduction(reference_state, 80)
    assert set_reduction(reference_state, "75").selected_reduction == 75


def test_currency_text_updates_rate(reference_state):
    state = set_traditional(reference_state, "hourly_rate", "$1,250")
    assert state.traditional.hourly_rate == 1250
    assert state.roi.traditional_labor_cost > reference_state.roi.traditional_labor_cost


def test_point_layout_clears_measurement_unit(session_factory):
    state = session_factory(layout_type="point", project_size=500)
    assert state.options.layout_type is LayoutType.POINT
    assert state.options.measurement_unit is None
    assert state.traditional.productivity == 5
    assert state.device.productivity == 200

    back = set_option(state, "layout_type", "line")
    assert back.options.measurement_unit is MeasurementUnit.SQUARE_FEET
    assert back.traditional.productivity == 330


def test_lineal_feet_rates(session_factory):
    state = session_factory(measurement_unit="linealFeet", project_size=700)
    assert state.traditional.productivity == 30
    assert state.device.productivity == 350


def test_ownership_change_updates_investment(reference_state):
    state = set_option(reference_state, "ownership_model", "printerOnly")
    assert state.device.initial_investment == 50000
    assert state.roi.equipment_cost == pytest.approx(50000 / 3)
    assert state.roi.breakeven_months == pytest.approx(50000 / (state.roi.annual_savings / 12))


def test_rental_sets_rental_cost_only_under_rental(reference_state):
    assert reference_state.device.rental_cost_per_project == 0
    state = set_option(reference_state, "ownership_model", "rental")
    assert state.device.initial_investment == 0
    assert state.device.rental_cost_per_project == 400


def test_recompute_is_idempotent(reference_state):
    again = recompute(reference_state)
    assert again == reference_state
    assert recompute(again).roi == reference_state.roi


def test_setters_do_not_mutate_previous_state(reference_state):
    before = reference_state.traditional.hourly_rate
    updated = set_traditional(reference_state, "hourly_rate", 90)
    assert reference_state.traditional.hourly_rate == before
    assert updated is not reference_state
    with pytest.raises(FrozenInstanceError):
        reference_state.traditional.hourly_rate = 100  # type: ignore[misc]


def test_compute_false_defers_results(reference_state):
    state = set_traditional(reference_state, "hourly_rate", 90, compute=False)
    assert state.roi == reference_state.roi
    assert recompute(state).roi != reference_state.roi


def test_customer_fields_are_stripped(reference_state):
    state = set_customer(reference_state, "company_name", "  Acme Builders ")
    assert state.customer.company_name == "Acme Builders"
    assert not state.customer.is_complete()
    with pytest.raises(InputError):
        set_customer(reference_state, "fax", "555")


def test_new_session_defaults_compute_results():
    state = new_session()
    assert state.roi is not None
    assert state.benefits is not None
    assert state.selected_reduction == 50
