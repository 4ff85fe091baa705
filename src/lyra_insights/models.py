"""
Data models for Lyra Insights.

PURPOSE: Type-safe dataclasses representing the time-series domain.
AI CONTEXT: These models define the shapes passed between normalizer,
aligner, scorer and mapper. All of them are immutable.

MODEL HIERARCHY:
- Sample: One (timestamp, value) observation; a Series is list[Sample]
- AlignedPair: A primary sample joined to its nearest secondary sample
- CorrelationResult: Bounded co-movement score with its label
- Domain: (min, max) bound used for scaling values
- RenderPoint / LineSegment: Chart geometry derived from samples

SERIALIZATION:
All models have to_dict() for JSON responses. Timestamps use ISO 8601.

USAGE:
    sample = Sample(timestamp=datetime(2026, 3, 1, 9, tzinfo=UTC), value=7.0)
    result = CorrelationResult.insufficient(sample_count=1)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from .config import Config

__all__ = [
    "Sample",
    "AlignedPair",
    "CorrelationLabel",
    "CorrelationResult",
    "Domain",
    "ChartMode",
    "RenderPoint",
    "LineSegment",
]


@dataclass(frozen=True)
class Sample:
    """
    Single timestamped observation.

    The timestamp keeps its original sub-day precision for display; the
    normalizer groups samples by the calendar day of this timestamp.
    Timestamps are always timezone-aware once normalized.
    """

    timestamp: datetime
    value: float

    @property
    def day(self) -> date:
        """Calendar day of the timestamp in the configured zone."""
        return self.timestamp.astimezone(Config.get_timezone()).date()

    @property
    def epoch_ms(self) -> float:
        """Milliseconds since the Unix epoch."""
        return self.timestamp.timestamp() * 1000.0

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize sample to dictionary for JSON responses.

        Returns:
            Dict with ISO 8601 'timestamp' and float 'value'.

        Example:
            >>> Sample(datetime(2026, 3, 1, 9, tzinfo=UTC), 7.0).to_dict()
            {'timestamp': '2026-03-01T09:00:00+00:00', 'value': 7.0}
        """
        return {"timestamp": self.timestamp.isoformat(), "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Sample:
        """
        Deserialize sample from dictionary.

        Accepts the shape produced by to_dict(). Parsing of looser raw
        shapes (epoch millis, 'date' keys, mood labels) belongs to the
        normalizer, not here.

        Raises:
            KeyError: If 'timestamp' or 'value' is missing.
            ValueError: If the timestamp is not ISO 8601.
        """
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00")),
            value=float(data["value"]),
        )


@dataclass(frozen=True)
class AlignedPair:
    """
    Primary sample joined with the nearest secondary sample.

    Only produced when the secondary sample lies within the alignment
    tolerance; a pair never carries a defaulted value.
    """

    timestamp: datetime
    primary_value: float
    secondary_value: float
    secondary_timestamp: datetime

    @property
    def delta_ms(self) -> float:
        """Absolute distance between the two joined timestamps in milliseconds."""
        return abs((self.timestamp - self.secondary_timestamp).total_seconds()) * 1000.0

    def to_dict(self) -> dict[str, Any]:
        """Serialize pair to dictionary for JSON responses."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "primary_value": self.primary_value,
            "secondary_value": self.secondary_value,
            "secondary_timestamp": self.secondary_timestamp.isoformat(),
            "delta_ms": self.delta_ms,
        }


class CorrelationLabel(StrEnum):
    """Qualitative direction of a correlation score (plain sign test)."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"

    @classmethod
    def from_score(cls, score: float) -> CorrelationLabel:
        """
        Label a score by its sign.

        Source data is low resolution (mood labels, rounded temperatures),
        so there is no epsilon band: any non-zero score has a direction.

        Example:
            >>> CorrelationLabel.from_score(0.01)
            <CorrelationLabel.POSITIVE: 'positive'>
        """
        if score > 0:
            return cls.POSITIVE
        if score < 0:
            return cls.NEGATIVE
        return cls.NEUTRAL


@dataclass(frozen=True)
class CorrelationResult:
    """
    Bounded co-movement signal between two aligned series.

    LIFECYCLE: Never mutated. Every recomputation produces a new instance.

    INVARIANTS:
    - score is within [-1, 1]
    - label agrees with the sign of score
    - sample_count < 2 implies score == 0 and label == neutral
    """

    score: float
    label: CorrelationLabel
    sample_count: int

    @classmethod
    def insufficient(cls, sample_count: int = 0) -> CorrelationResult:
        """
        Build the defined result for fewer than two aligned pairs.

        Business context: A single day of mood and weather cannot show a
        relationship. The insight card shows "neutral" rather than an error.

        Args:
            sample_count: Number of pairs that were available (0 or 1).

        Returns:
            CorrelationResult with score 0.0 and neutral label.
        """
        return cls(score=0.0, label=CorrelationLabel.NEUTRAL, sample_count=sample_count)

    def to_dict(self) -> dict[str, Any]:
        """Serialize result to dictionary for JSON responses."""
        return {
            "score": self.score,
            "label": self.label.value,
            "sample_count": self.sample_count,
        }


@dataclass(frozen=True)
class Domain:
    """
    Closed value range used to scale a series.

    A degenerate domain (min == max) is valid; callers handle it with
    their own fallback instead of dividing by zero.
    """

    min_value: float
    max_value: float

    @property
    def span(self) -> float:
        """Width of the range (max - min)."""
        return self.max_value - self.min_value

    @property
    def is_degenerate(self) -> bool:
        """True when the range has no width."""
        return self.span == 0

    def clamp(self, value: float) -> float:
        """Clamp value into [min_value, max_value]."""
        return max(self.min_value, min(self.max_value, value))

    def position(self, value: float) -> float | None:
        """
        Relative position of value inside the domain in [0, 1].

        Values outside the domain are clamped first. Operands are halved
        before subtracting so ranges near the float limit do not overflow.

        Returns:
            Position in [0, 1], or None for a degenerate or unbounded domain.

        Example:
            >>> Domain(0.0, 40.0).position(50.0)
            1.0
            >>> Domain(-1e308, 1e308).position(1e308)
            1.0
        """
        if self.is_degenerate:
            return None
        low = self.min_value / 2
        position = (self.clamp(value) / 2 - low) / (self.max_value / 2 - low)
        return position if math.isfinite(position) else None

    @classmethod
    def from_values(cls, values: list[float]) -> Domain | None:
        """
        Observed min/max of the finite values.

        Returns:
            Domain spanning the values, or None when there are none.
        """
        finite = [v for v in values if math.isfinite(v)]
        if not finite:
            return None
        return cls(min(finite), max(finite))

    @classmethod
    def coerce(cls, bounds: Domain | tuple[float, float] | None) -> Domain | None:
        """
        Accept a Domain, a (min, max) tuple, or None.

        A tuple given in reverse order is reordered.
        """
        if bounds is None or isinstance(bounds, Domain):
            return bounds
        low, high = bounds
        return cls(min(low, high), max(low, high))

    def to_dict(self) -> dict[str, float]:
        """Serialize domain to dictionary for JSON responses."""
        return {"min_value": self.min_value, "max_value": self.max_value}


class ChartMode(StrEnum):
    """Rendering variant handled by the coordinate mapper."""

    BAR = "bar"
    LINE = "line"


@dataclass(frozen=True)
class RenderPoint:
    """
    Geometry-space projection of one sample.

    x and y are in screen space (y grows downward); height is the scaled
    value measured up from the chart baseline. Derived on every render
    pass and never persisted.
    """

    x: float
    y: float
    height: float
    source: Sample

    def to_dict(self) -> dict[str, Any]:
        """Serialize point to dictionary for JSON responses."""
        return {
            "x": self.x,
            "y": self.y,
            "height": self.height,
            "source": self.source.to_dict(),
        }


@dataclass(frozen=True)
class LineSegment:
    """
    Connector drawn from one line-chart point to the next.

    The segment is anchored at start, stretched to length and rotated by
    angle radians (atan2 of the screen-space delta).
    """

    start: RenderPoint
    end: RenderPoint
    length: float
    angle: float

    def to_dict(self) -> dict[str, Any]:
        """Serialize segment to dictionary for JSON responses."""
        return {
            "x": self.start.x,
            "y": self.start.y,
            "length": self.length,
            "angle": self.angle,
        }
