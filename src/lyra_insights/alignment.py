"""
Temporal aligner for Lyra Insights.

PURPOSE: Join two Series by nearest timestamp within a tolerance window.
AI CONTEXT: Pure data processing - no I/O, no shared state.

MATCHING RULES:
1. For every primary sample, pick the secondary sample with the smallest
   absolute timestamp distance
2. Equidistant candidates: the earlier secondary timestamp wins
3. Keep the pair only if that distance is within tolerance; otherwise the
   primary sample is excluded (never paired with a default value)
4. Output keeps the primary series' chronological order

COMPLEXITY:
Linear scan per primary sample, O(P*S). A year of daily data (~400 x 400)
is well within budget, so no index structure is kept.

USAGE:
    pairs = align(mood_series, weather_series)
    pairs = align(mood_series, weather_series, tolerance_ms=6 * 3_600_000)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from .config import Config
from .models import AlignedPair, Sample

__all__ = ["align", "nearest_sample"]

logger = logging.getLogger(__name__)


def nearest_sample(target: Sample, candidates: Sequence[Sample]) -> tuple[Sample, float] | None:
    """
    Find the candidate closest in time to target.

    Args:
        target: Sample whose timestamp is the reference point.
        candidates: Samples to search. Order does not matter.

    Returns:
        (candidate, distance_ms) for the closest candidate, or None when
        candidates is empty. On equal distance the earlier candidate
        timestamp is returned.

    Example:
        >>> match, delta = nearest_sample(mood_day2, weather_series)
        >>> delta <= 86_400_000
        True
    """
    best: Sample | None = None
    best_delta = math.inf

    for candidate in candidates:
        delta = abs((candidate.timestamp - target.timestamp).total_seconds()) * 1000.0
        if delta < best_delta or (
            delta == best_delta and best is not None and candidate.timestamp < best.timestamp
        ):
            best = candidate
            best_delta = delta

    if best is None:
        return None
    return best, best_delta


def align(
    primary: Sequence[Sample],
    secondary: Sequence[Sample],
    tolerance_ms: float | None = None,
) -> list[AlignedPair]:
    """
    Pair each primary sample with its nearest secondary sample.

    Walks the primary series in order and keeps a pair only when the
    nearest secondary sample lies within tolerance_ms. Unmatched primary
    samples are dropped so a missing weather day never turns into an
    invented temperature.

    Business context: Mood check-ins and weather observations are recorded
    independently and at different times of day. Pairing them by nearest
    timestamp within a day is what makes "mood vs. weather" comparable.

    Args:
        primary: Series that drives the output (e.g. mood).
        secondary: Series searched for matches (e.g. weather).
        tolerance_ms: Maximum allowed distance in milliseconds. Defaults to
            Config.get_tolerance_ms() (24 hours). A negative or non-finite
            tolerance yields no pairs.

    Returns:
        List of AlignedPair in primary order. Every pair satisfies
        pair.delta_ms <= tolerance_ms. Empty when either series is empty.

    Raises:
        None: Degenerate input resolves to an empty list.

    Example:
        >>> pairs = align(mood, weather)
        >>> [(p.primary_value, p.secondary_value) for p in pairs]
        [(9.0, 30.0), (2.0, 5.0)]
    """
    if tolerance_ms is None:
        tolerance_ms = Config.get_tolerance_ms()
    if not math.isfinite(tolerance_ms) or tolerance_ms < 0:
        logger.warning(f"Invalid alignment tolerance {tolerance_ms!r}, no pairs produced")
        return []
    if not primary or not secondary:
        return []

    pairs: list[AlignedPair] = []
    for sample in primary:
        match = nearest_sample(sample, secondary)
        if match is None:
            continue
        candidate, delta = match
        if delta > tolerance_ms:
            continue
        pairs.append(
            AlignedPair(
                timestamp=sample.timestamp,
                primary_value=sample.value,
                secondary_value=candidate.value,
                secondary_timestamp=candidate.timestamp,
            )
        )

    dropped = len(primary) - len(pairs)
    if dropped:
        logger.debug(f"Alignment dropped {dropped} of {len(primary)} primary samples")
    return pairs
