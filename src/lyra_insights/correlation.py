"""
Correlation scorer for Lyra Insights.

PURPOSE: Derive a bounded co-movement score from aligned pairs.
AI CONTEXT: Pure data processing - no visualization, no I/O.

SCORING MODEL:
1. Scale each side into [0, 1] independently, using its fixed domain when
   one is supplied (values clamped into it) or its own observed min/max
2. Center both position sequences on their means
3. Score = sum(dp * dq) / sqrt(sum(dp^2) * sum(dq^2)), the covariance of
   the positions normalized by their spreads
4. Clamp to [-1, 1] and round to Config.SCORE_PRECISION decimals

DEFINED NON-ERROR STATES:
- Fewer than 2 pairs: score 0, neutral
- A side without spread (all values equal): score 0, neutral

LABELS:
Plain sign test: > 0 positive, < 0 negative, == 0 neutral.

USAGE:
    scorer = CorrelationScorer(primary_domain=Config.MOOD_DOMAIN,
                               secondary_domain=Config.TEMPERATURE_DOMAIN)
    result = scorer.score(pairs)
    result = correlate(pairs)  # observed ranges on both sides
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from .config import Config
from .models import AlignedPair, CorrelationLabel, CorrelationResult, Domain

__all__ = [
    "CorrelationScorer",
    "PairAgreement",
    "correlate",
    "normalized_positions",
    "pair_agreement",
]

DomainLike = Domain | tuple[float, float] | None


def normalized_positions(values: Sequence[float], bounds: DomainLike = None) -> list[float] | None:
    """
    Scale values into [0, 1] against a domain.

    Args:
        values: Raw values of one side of the pairs.
        bounds: Fixed domain, or None to use the observed min/max.

    Returns:
        One position per value, or None when the domain is degenerate
        (no spread to scale against) or unbounded.

    Example:
        >>> normalized_positions([9.0, 2.0])
        [1.0, 0.0]
        >>> normalized_positions([30.0, 50.0], (0.0, 40.0))
        [0.75, 1.0]
    """
    domain = Domain.coerce(bounds) or Domain.from_values(list(values))
    if domain is None:
        return None
    positions = [domain.position(v) for v in values]
    if any(p is None for p in positions):
        return None
    return positions


def _co_movement(xs: list[float], ys: list[float]) -> float:
    mean_x = sum(xs) / len(xs)
    mean_y = sum(ys) / len(ys)
    dx = [x - mean_x for x in xs]
    dy = [y - mean_y for y in ys]

    covariance = sum(a * b for a, b in zip(dx, dy, strict=True))
    spread = math.sqrt(sum(a * a for a in dx) * sum(b * b for b in dy))
    if spread == 0 or not math.isfinite(spread) or not math.isfinite(covariance):
        return 0.0
    return covariance / spread


def correlate(
    pairs: Sequence[AlignedPair],
    primary_domain: DomainLike = None,
    secondary_domain: DomainLike = None,
) -> CorrelationResult:
    """
    Compute a bounded correlation score and label from aligned pairs.

    Each side is placed on a [0, 1] scale (fixed domain or observed range)
    and the score measures how the two position sequences move together.
    Recomputation is pure: the same pairs always produce an equal result.

    Business context: The insight card tells users whether warmer days go
    with better moods. The score only needs to be bounded, directional and
    stable; the label is what users read.

    Args:
        pairs: Aligned pairs, typically from align().
        primary_domain: Fixed bound for primary values (e.g. mood 1-10).
        secondary_domain: Fixed bound for secondary values (e.g. 0-40°C).

    Returns:
        CorrelationResult with score in [-1, 1], sign-test label and the
        number of pairs used. Fewer than 2 pairs, or a side with no spread,
        gives score 0 and a neutral label.

    Raises:
        None: Every input resolves to a defined result.

    Example:
        >>> result = correlate(align(mood, weather))
        >>> result.label
        <CorrelationLabel.POSITIVE: 'positive'>
    """
    usable = [
        p for p in pairs if math.isfinite(p.primary_value) and math.isfinite(p.secondary_value)
    ]
    count = len(usable)
    if count < 2:
        return CorrelationResult.insufficient(count)

    xs = normalized_positions([p.primary_value for p in usable], primary_domain)
    ys = normalized_positions([p.secondary_value for p in usable], secondary_domain)
    if xs is None or ys is None:
        return CorrelationResult(score=0.0, label=CorrelationLabel.NEUTRAL, sample_count=count)

    score = round(max(-1.0, min(1.0, _co_movement(xs, ys))), Config.SCORE_PRECISION)
    # round() can produce -0.0
    score = score + 0.0
    return CorrelationResult(score=score, label=CorrelationLabel.from_score(score), sample_count=count)


@dataclass(frozen=True)
class PairAgreement:
    """Per-day agreement between the two normalized positions."""

    primary_position: float
    secondary_position: float
    deviation: float
    agreement: float
    strength: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize agreement to dictionary for JSON responses."""
        return {
            "primary_position": self.primary_position,
            "secondary_position": self.secondary_position,
            "deviation": self.deviation,
            "agreement": self.agreement,
            "strength": self.strength,
        }


def _strength(deviation: float) -> str:
    if deviation < Config.STRONG_AGREEMENT_BELOW:
        return "strong"
    if deviation < Config.MODERATE_AGREEMENT_BELOW:
        return "moderate"
    return "weak"


def pair_agreement(
    pair: AlignedPair,
    primary_domain: DomainLike,
    secondary_domain: DomainLike,
) -> PairAgreement:
    """
    Compare one day's normalized positions.

    The deviation ratio |p - q| is how far apart the two bars stand on the
    paired chart; agreement is its complement. Both domains must be fixed
    here because a single pair has no observed range. A degenerate domain
    places its side at mid-height (0.5).

    Business context: The paired mood/weather chart colours each day by
    how closely the mood bar and the temperature bar match.

    Args:
        pair: One aligned pair.
        primary_domain: Fixed bound for the primary value.
        secondary_domain: Fixed bound for the secondary value.

    Returns:
        PairAgreement with positions, deviation, agreement and a strength
        band: "strong" (< 0.3), "moderate" (< 0.6) or "weak".

    Example:
        >>> pair_agreement(pair, (1, 10), (0, 40)).strength
        'strong'
    """
    primary = Domain.coerce(primary_domain)
    secondary = Domain.coerce(secondary_domain)
    p = primary.position(pair.primary_value) if primary is not None else None
    q = secondary.position(pair.secondary_value) if secondary is not None else None
    p = 0.5 if p is None else p
    q = 0.5 if q is None else q

    deviation = abs(p - q)
    return PairAgreement(
        primary_position=p,
        secondary_position=q,
        deviation=deviation,
        agreement=1.0 - deviation,
        strength=_strength(deviation),
    )


class CorrelationScorer:
    """
    Scorer bound to fixed domains for a pair of series.

    DESIGN:
    - Stateless: domains are fixed at construction, each call is pure
    - Reusable: presenters build one per series pairing (mood/weather)

    DEFAULT DOMAINS:
    - primary: Config.MOOD_DOMAIN (1-10)
    - secondary: Config.TEMPERATURE_DOMAIN (0-40°C)
    Pass None explicitly to score against observed ranges instead.
    """

    _UNSET: Any = object()

    def __init__(
        self,
        primary_domain: DomainLike = _UNSET,
        secondary_domain: DomainLike = _UNSET,
    ) -> None:
        """
        Initialize scorer with its scaling domains.

        Args:
            primary_domain: Bound for primary values. Default mood 1-10.
            secondary_domain: Bound for secondary values. Default 0-40°C.

        Example:
            >>> scorer = CorrelationScorer()
            >>> scorer.primary_domain
            Domain(min_value=1.0, max_value=10.0)
        """
        if primary_domain is self._UNSET:
            primary_domain = Config.MOOD_DOMAIN
        if secondary_domain is self._UNSET:
            secondary_domain = Config.TEMPERATURE_DOMAIN
        self.primary_domain = Domain.coerce(primary_domain)
        self.secondary_domain = Domain.coerce(secondary_domain)

    def score(self, pairs: Sequence[AlignedPair]) -> CorrelationResult:
        """Score pairs against this scorer's domains (see correlate())."""
        return correlate(pairs, self.primary_domain, self.secondary_domain)

    def agreements(self, pairs: Sequence[AlignedPair]) -> list[PairAgreement]:
        """
        Per-pair agreement for every pair, in order.

        Sides without a fixed domain fall back to the observed range of
        the given pairs.
        """
        primary = self.primary_domain or Domain.from_values([p.primary_value for p in pairs])
        secondary = self.secondary_domain or Domain.from_values(
            [p.secondary_value for p in pairs]
        )
        return [pair_agreement(p, primary, secondary) for p in pairs]
