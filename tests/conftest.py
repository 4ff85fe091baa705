"""
Pytest configuration and shared fixtures for Lyra Insights tests.

This module contains:
- Series builders (day(), make_series()) importable from test modules
- An autouse fixture pinning day truncation to UTC
- Raw mood/weather fixtures shaped like the app's stored records
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any

import pytest

from lyra_insights.config import Config
from lyra_insights.models import Sample


def day(n: int, hour: int = 12, minute: int = 0) -> datetime:
    """
    UTC timestamp on day n of March 2026.

    Example:
        >>> day(2, 9)
        datetime.datetime(2026, 3, 2, 9, 0, tzinfo=datetime.timezone.utc)
    """
    return datetime(2026, 3, n, hour, minute, tzinfo=UTC)


def make_series(values: list[float], first_day: int = 1, hour: int = 12) -> list[Sample]:
    """
    One sample per consecutive day, starting at first_day of March 2026.

    Example:
        >>> [s.timestamp.day for s in make_series([1, 2, 3])]
        [1, 2, 3]
    """
    return [Sample(day(first_day + i, hour), float(v)) for i, v in enumerate(values)]


@pytest.fixture(autouse=True)
def utc_days() -> Iterator[None]:
    """
    Truncate timestamps to UTC days for every test.

    Test results must not depend on the machine's local zone. Tests that
    exercise the environment lookup reset the overrides themselves.
    """
    Config.set_test_overrides(timezone=UTC)
    yield
    Config.reset_test_overrides()


@pytest.fixture
def raw_mood() -> list[dict[str, Any]]:
    """Two mood check-ins: a great day followed by a terrible one."""
    return [
        {"date": "2026-03-01T09:00:00Z", "value": 9},
        {"date": "2026-03-02T09:00:00Z", "value": 2},
    ]


@pytest.fixture
def raw_weather() -> list[dict[str, Any]]:
    """Two weather observations: a warm day followed by a cold one."""
    return [
        {"timestamp": "2026-03-01T12:00:00Z", "temperature": 30},
        {"timestamp": "2026-03-02T12:00:00Z", "temperature": 5},
    ]


@pytest.fixture
def raw_savings() -> list[dict[str, Any]]:
    """Savings ledger spanning February and March 2026."""
    return [
        {"created_at": "2026-02-20T10:00:00Z", "amount": 100},
        {"created_at": "2026-03-01T09:00:00Z", "amount": 5},
        {"created_at": "2026-03-01T18:00:00Z", "amount": 7.5},
        {"created_at": "2026-03-15T12:00:00Z", "amount": 10},
    ]
