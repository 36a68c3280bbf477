"""Smoke tests for the integration harness fixture layer."""

from __future__ import annotations

import pytest

from tests.integration.helpers import real_provider_tests_enabled


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("", False), ("0", False), ("no", False), ("1", True), (" TRUE ", True)],
)
def test_real_provider_flag_is_opt_in(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool
) -> None:
    """Real-provider integration mode is enabled only by an explicit flag."""
    monkeypatch.setenv("RECALL_RUN_INTEGRATION_REAL", raw)

    assert real_provider_tests_enabled() is expected
