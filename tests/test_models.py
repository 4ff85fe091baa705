"""Tests for data models."""

from __future__ import annotations

import math
from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from conftest import day
from lyra_insights.config import Config
from lyra_insights.models import (
    AlignedPair,
    CorrelationLabel,
    CorrelationResult,
    Domain,
    LineSegment,
    RenderPoint,
    Sample,
)


class TestSample:
    """Tests for Sample."""

    def test_to_dict(self) -> None:
        """Verifies ISO timestamp and float value in serialized form."""
        sample = Sample(day(1, 9), 7.0)
        assert sample.to_dict() == {"timestamp": "2026-03-01T09:00:00+00:00", "value": 7.0}

    def test_from_dict_accepts_z_suffix(self) -> None:
        """Verifies JavaScript-style ISO strings deserialize."""
        sample = Sample.from_dict({"timestamp": "2026-03-01T09:00:00Z", "value": "7"})
        assert sample == Sample(day(1, 9), 7.0)

    def test_from_dict_missing_key(self) -> None:
        """Verifies KeyError for incomplete payloads."""
        with pytest.raises(KeyError):
            Sample.from_dict({"value": 1})

    def test_epoch_ms(self) -> None:
        """Verifies epoch milliseconds of a known instant."""
        assert Sample(datetime(1970, 1, 1, 0, 0, 1, tzinfo=UTC), 0.0).epoch_ms == 1000.0

    def test_day_uses_configured_zone(self) -> None:
        """Verifies the calendar day follows the configured zone."""
        sample = Sample(day(2, 2), 1.0)
        assert sample.day == date(2026, 3, 2)
        Config.set_test_overrides(timezone=timezone(timedelta(hours=-5)))
        assert sample.day == date(2026, 3, 1)

    def test_is_immutable(self) -> None:
        """Verifies samples cannot be mutated after creation."""
        sample = Sample(day(1), 1.0)
        with pytest.raises(AttributeError):
            sample.value = 2.0  # type: ignore[misc]


class TestAlignedPair:
    """Tests for AlignedPair."""

    def test_delta_ms_is_absolute(self) -> None:
        """Verifies delta does not depend on which side is later."""
        early = AlignedPair(day(1, 9), 9.0, 30.0, day(1, 12))
        late = AlignedPair(day(1, 12), 9.0, 30.0, day(1, 9))
        assert early.delta_ms == late.delta_ms == 3 * 3_600_000

    def test_to_dict(self) -> None:
        """Verifies both timestamps and the delta are serialized."""
        pair = AlignedPair(day(1, 9), 9.0, 30.0, day(1, 9) + timedelta(minutes=1))
        data = pair.to_dict()
        assert data["primary_value"] == 9.0
        assert data["secondary_value"] == 30.0
        assert data["secondary_timestamp"] == "2026-03-01T09:01:00+00:00"
        assert data["delta_ms"] == 60_000.0


class TestCorrelationLabel:
    """Tests for the sign-test label."""

    @pytest.mark.parametrize(
        ("score", "expected"),
        [
            (0.01, CorrelationLabel.POSITIVE),
            (1.0, CorrelationLabel.POSITIVE),
            (-0.0001, CorrelationLabel.NEGATIVE),
            (0.0, CorrelationLabel.NEUTRAL),
        ],
    )
    def test_from_score(self, score: float, expected: CorrelationLabel) -> None:
        """Verifies any non-zero score has a direction."""
        assert CorrelationLabel.from_score(score) is expected


class TestCorrelationResult:
    """Tests for CorrelationResult."""

    def test_insufficient(self) -> None:
        """Verifies the defined result for too few pairs."""
        result = CorrelationResult.insufficient(1)
        assert result.score == 0.0
        assert result.label is CorrelationLabel.NEUTRAL
        assert result.sample_count == 1

    def test_to_dict_uses_label_value(self) -> None:
        """Verifies the label serializes as a plain string."""
        result = CorrelationResult(0.5, CorrelationLabel.POSITIVE, 3)
        assert result.to_dict() == {"score": 0.5, "label": "positive", "sample_count": 3}


class TestDomain:
    """Tests for Domain."""

    def test_span_and_degenerate(self) -> None:
        """Verifies span and the degenerate flag."""
        assert Domain(0.0, 40.0).span == 40.0
        assert Domain(5.0, 5.0).is_degenerate
        assert not Domain(0.0, 1.0).is_degenerate

    def test_clamp(self) -> None:
        """Verifies out-of-range values are clamped to the bounds."""
        domain = Domain(0.0, 40.0)
        assert domain.clamp(-3.0) == 0.0
        assert domain.clamp(45.0) == 40.0
        assert domain.clamp(12.5) == 12.5

    def test_position(self) -> None:
        """Verifies relative position, clamping and the degenerate case."""
        assert Domain(0.0, 40.0).position(10.0) == 0.25
        assert Domain(0.0, 40.0).position(50.0) == 1.0
        assert Domain(5.0, 5.0).position(5.0) is None
        assert Domain(-1e308, 1e308).position(1e308) == 1.0
        assert Domain(-math.inf, math.inf).position(0.0) is None

    def test_from_values_skips_non_finite(self) -> None:
        """Verifies observed range ignores NaN and infinity."""
        assert Domain.from_values([3.0, float("nan"), 1.0, float("inf")]) == Domain(1.0, 3.0)
        assert Domain.from_values([]) is None

    def test_coerce(self) -> None:
        """Verifies tuples become domains and reversed bounds are reordered."""
        assert Domain.coerce((10, 1)) == Domain(1, 10)
        assert Domain.coerce(None) is None
        domain = Domain(0.0, 1.0)
        assert Domain.coerce(domain) is domain


class TestGeometryModels:
    """Tests for RenderPoint and LineSegment serialization."""

    def test_render_point_to_dict(self) -> None:
        """Verifies the source sample is nested in the payload."""
        point = RenderPoint(x=30.0, y=36.0, height=84.0, source=Sample(day(1), 7.0))
        data = point.to_dict()
        assert data["x"] == 30.0
        assert data["height"] == 84.0
        assert data["source"]["value"] == 7.0

    def test_line_segment_to_dict_anchors_at_start(self) -> None:
        """Verifies segments are drawn from their start point."""
        start = RenderPoint(20.0, 60.0, 60.0, Sample(day(1), 5.0))
        end = RenderPoint(120.0, 60.0, 60.0, Sample(day(2), 5.0))
        segment = LineSegment(start=start, end=end, length=100.0, angle=0.0)
        assert segment.to_dict() == {"x": 20.0, "y": 60.0, "length": 100.0, "angle": 0.0}
