from __future__ import annotations

from typing import Callable

import pytest

from layoutroi.models import SessionState
from layoutroi.session import new_session


@pytest.fixture
def session_factory() -> Callable[..., SessionState]:
    def _create(**overrides: object) -> SessionState:
        return new_session(**overrides)

    return _create


@pytest.fixture
def reference_state(session_factory) -> SessionState:
    """Single 10,000 sq ft line project, full kit purchase, 2-person crew at $65/h."""

    return session_factory(
        analysis_type="project",
        layout_type="line",
        measurement_unit="squareFeet",
        ownership_model="fullKit",
        project_size=10000,
        worker_count=2,
        hourly_rate=65,
        rework_percentage=10,
    )


@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    """Keep CLI runs from reading the repository policy or contacting the CRM."""

    monkeypatch.setenv("LAYOUTROI_POLICY", str(tmp_path / "missing_policy.json"))
    monkeypatch.setenv("LAYOUTROI_DISABLE_CRM", "1")
    monkeypatch.setenv("LAYOUTROI_OUTPUT_DIR", str(tmp_path / "outputs"))
    return tmp_path
