from __future__ import annotations

import pytest

from layoutroi.reporting import (
    benefits_frame,
    cost_comparison_frame,
    format_breakeven,
    format_currency,
    format_number,
    format_number_with_decimals,
    format_pct,
    make_summary_text,
    performance_frame,
    series_frame,
    series_frame_rows,
)
from layoutroi.session import set_option, set_traditional


@pytest.mark.parametrize(
    "value, expected",
    [(1234.5, "$1,234"), (-1234.6, "-$1,235"), (0, "$0"), (81000, "$81,000")],
)
def test_format_currency(value, expected):
    assert format_currency(value) == expected


def test_number_formats():
    assert format_number(3600) == "3,600"
    assert format_number(2.5) == "2.5"
    assert format_number_with_decimals(1234.5) == "1,234.50"
    assert format_pct(2.66) == "3%"
    assert format_pct(None) == "n/a"
    assert format_breakeven(None) == "not reached"
    assert format_breakeven(451.5) == "451.5 months"


def test_frames_mirror_result(reference_state):
    roi = reference_state.roi
    costs = cost_comparison_frame(roi)
    assert list(costs.columns) == ["CATEGORY", "TRADITIONAL", "DEVICE", "RENTAL"]
    assert list(costs["CATEGORY"]) == [row.name for row in roi.cost_comparison]

    perf = performance_frame(roi)
    assert list(perf["METRIC"])[0] == "Layout Duration (Days)"
    assert perf.loc[0, "IMPROVEMENT_PCT"] == 75.0

    series = series_frame(roi)
    assert len(series) == len(roi.display_series)
    assert series.loc[0, "PERIOD"] == "Project 1"

    benefits = benefits_frame(reference_state.benefits)
    assert list(benefits["BENEFIT"]) == ["rework", "communication", "schedule", "safety", "competitive"]
    assert benefits["ENABLED"].all()


def test_summary_includes_rental_hint(reference_state):
    text = make_summary_text(reference_state)
    assert "Full Layout Printer Kit" in text
    assert "RENTAL" in text
    assert "Rental may be more cost-effective" in text
    assert "$2,581 vs $29,181" in text
    assert "11x faster" in text


def test_summary_without_hint_hides_rental_column(reference_state):
    state = set_traditional(reference_state, "project_size", 200000)
    state = set_traditional(state, "hourly_rate", 120)
    assert not state.roi.show_rental_hint
    text = make_summary_text(state)
    assert "RENTAL" not in text
    assert "Rental may be" not in text


def test_summary_for_rental_reports_unreached_breakeven(reference_state):
    state = set_option(reference_state, "ownership_model", "rental")
    text = make_summary_text(state)
    assert "Rental" in text
    assert "break-even: not reached" in text
    assert "5-year ROI: n/a" in text


def test_series_frame_rows_shape_display_series(session_factory):
    roi = session_factory(analysis_type="company", project_count=12).roi
    rows = series_frame_rows(roi.display_series)
    assert len(rows) == 24
    assert rows[0] == {
        "PERIOD": "Month 1",
        "TRADITIONAL": roi.display_series[0].traditional_cumulative,
        "DEVICE": roi.display_series[0].device_cumulative,
    }
