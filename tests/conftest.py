"""Shared fixtures for habitcore tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from zoneinfo import ZoneInfo

import pytest

from habitcore.utils import dt_utils


@pytest.fixture(autouse=True)
def reset_default_timezone(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test in UTC unless it configures another timezone."""
    monkeypatch.setattr(dt_utils, "DEFAULT_TIME_ZONE", ZoneInfo("UTC"))


@pytest.fixture
def make_habit() -> Callable[..., dict[str, Any]]:
    """Return a factory for minimal habit records.

    Keyword arguments are merged over {"id": "h1"}.
    """

    def _make(**fields: Any) -> dict[str, Any]:
        habit: dict[str, Any] = {"id": "h1"}
        habit.update(fields)
        return habit

    return _make


@pytest.fixture
def holidays() -> set[str]:
    """Return a mutable holiday calendar (day keys)."""
    return {"2026-01-01", "2026-12-25"}
