from __future__ import annotations

import pytest

from layoutroi.benefits import calculate_benefits, clamp_reduction
from layoutroi.models import ALL_BENEFITS, Benefit
from layoutroi.session import set_benefit, set_reduction, toggle_benefit


def test_default_benefits_for_single_project(reference_state):
    benefits = reference_state.benefits
    roi = reference_state.roi
    assert benefits.selected_reduction == 50
    assert benefits.enabled_flags == ALL_BENEFITS
    assert benefits.rework_savings == pytest.approx(roi.traditional_rework_cost * 0.5)
    assert benefits.communication_savings == 4000
    assert benefits.schedule_savings == pytest.approx(roi.traditional_labor_cost * 5 * 0.05)
    assert benefits.safety_savings == 500
    assert benefits.competitive_value == 0
    total = 196.97 + 4000 + 984.85 + 500
    assert benefits.total_enabled == pytest.approx(total, abs=0.01)
    labor_delta = roi.traditional_labor_cost - roi.device_labor_cost
    assert benefits.enhanced_roi == pytest.approx((labor_delta + benefits.total_enabled) / 81000 * 100)


def test_company_benefits_scale_with_projects(session_factory):
    state = session_factory(analysis_type="company", project_count=12)
    benefits = state.benefits
    project_value = state.roi.traditional_labor_cost * 5
    assert benefits.communication_savings == 2 * 2000 * 12
    assert benefits.safety_savings == 500 * 12
    assert benefits.competitive_value == pytest.approx(project_value * 0.01)


def test_slider_only_moves_rework(reference_state):
    low = set_reduction(reference_state, 25).benefits
    high = set_reduction(reference_state, 75).benefits
    assert high.rework_savings == pytest.approx(low.rework_savings * 3)
    assert high.rework_savings - low.rework_savings == pytest.approx(
        reference_state.roi.traditional_rework_cost * 0.5
    )
    for name in ("communication_savings", "schedule_savings", "safety_savings", "competitive_value"):
        assert getattr(high, name) == getattr(low, name)


def test_disabled_benefits_leave_values_but_not_total(reference_state):
    state = toggle_benefit(reference_state, "communication")
    assert Benefit.COMMUNICATION not in state.benefits.enabled_flags
    assert state.benefits.communication_savings == 4000
    assert state.benefits.total_enabled == pytest.approx(reference_state.benefits.total_enabled - 4000)
    assert state.benefits.enhanced_roi < reference_state.benefits.enhanced_roi

    restored = toggle_benefit(state, Benefit.COMMUNICATION)
    assert restored.benefits == reference_state.benefits


def test_all_disabled_enhanced_matches_labor_only(reference_state):
    state = reference_state
    for flag in Benefit:
        state = set_benefit(state, flag, False)
    roi = state.roi
    assert state.benefits.total_enabled == 0
    assert state.benefits.enhanced_roi == pytest.approx(
        (roi.traditional_labor_cost - roi.device_labor_cost) / 81000 * 100
    )


def test_three_year_savings_purchase(reference_state):
    roi = reference_state.roi
    benefits = reference_state.benefits
    expected = (roi.traditional_labor_cost + roi.traditional_rework_cost) * 3 - (roi.device_labor_cost * 3 + 81000)
    assert benefits.three_year_savings == pytest.approx(expected)
    assert benefits.three_year_enhanced_savings == pytest.approx(expected + benefits.total_enabled * 3)


def test_rental_enhanced_figures(session_factory):
    state = session_factory(ownership_model="rental")
    roi = state.roi
    benefits = state.benefits
    labor_delta = roi.traditional_labor_cost - roi.device_labor_cost
    assert benefits.annual_labor_savings == pytest.approx(labor_delta - 400)
    assert benefits.annual_total_savings == pytest.approx(labor_delta - 400 + benefits.total_enabled)
    assert benefits.enhanced_roi == pytest.approx((labor_delta - 400 + benefits.total_enabled) / 2400 * 100)


def test_engine_clamps_out_of_range_reduction(reference_state):
    assert clamp_reduction(90) == 75
    assert clamp_reduction(10) == 25
    result = calculate_benefits(
        reference_state.options,
        reference_state.device,
        reference_state.roi,
        selected_reduction=120,
    )
    assert result.selected_reduction == 75


def test_zero_investment_enhanced_roi_is_zero(reference_state):
    from dataclasses import replace

    device = replace(reference_state.device, initial_investment=0)
    result = calculate_benefits(reference_state.options, device, reference_state.roi)
    assert result.enhanced_roi == 0
