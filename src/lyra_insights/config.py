"""
Configuration for Lyra Insights.

PURPOSE: Centralized configuration constants and runtime settings.
AI CONTEXT: All tunable values live here - modify this file to change behavior.

CONFIGURATION CATEGORIES:
- Alignment: Tolerance window for pairing two series
- Scoring Domains: Fixed value bounds for mood and temperature
- Mood Scale: Label to numeric mapping honored by the mood provider
- Chart Geometry: Heights, slot widths and the compact bar window
- Animation: Counter tick interval and default duration
- HTTP: Default bind address for the API server

ENVIRONMENT VARIABLES:
- LYRA_TIMEZONE: IANA zone used to truncate timestamps to days (default: system local)
- LYRA_TOLERANCE_MS: Default alignment tolerance in milliseconds (default: 86400000)

USAGE:
    from lyra_insights.config import Config
    tolerance = Config.get_tolerance_ms()
    bar_limit = Config.COMPACT_BAR_LIMIT
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import tzinfo
from typing import ClassVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    """
    Immutable configuration container for Lyra Insights.

    DESIGN: Frozen dataclass ensures configuration immutability at runtime.
    All values are class-level constants - no instance creation needed.

    DOMAIN ASSUMPTIONS:
    - Mood is recorded on a 1-10 scale; labels map to fixed points on it
    - Temperature is charted in Celsius and clamped to 0-40
    - One year of daily samples (~400) bounds every series
    """

    # =========================================================================
    # ALIGNMENT
    # =========================================================================
    DEFAULT_TOLERANCE_MS: ClassVar[int] = 86_400_000
    """Maximum distance between paired samples: 24 hours."""

    # =========================================================================
    # SCORING DOMAINS
    # =========================================================================
    MOOD_DOMAIN: ClassVar[tuple[float, float]] = (1.0, 10.0)
    TEMPERATURE_DOMAIN: ClassVar[tuple[float, float]] = (0.0, 40.0)

    STRONG_AGREEMENT_BELOW: ClassVar[float] = 0.3
    MODERATE_AGREEMENT_BELOW: ClassVar[float] = 0.6
    """Deviation-ratio bands for the paired chart (|p - q| on normalized positions)."""

    IMPACT_DISPLAY_THRESHOLD: ClassVar[float] = 0.2
    """Score magnitude at which the insight card says "Positive/Negative Impact"."""

    SCORE_PRECISION: ClassVar[int] = 4

    # =========================================================================
    # MOOD SCALE
    # =========================================================================
    MOOD_SCALE: ClassVar[dict[str, float]] = {
        "terrible": 2.0,
        "bad": 4.0,
        "neutral": 5.0,
        "good": 7.0,
        "great": 9.0,
    }

    # =========================================================================
    # CHART GEOMETRY
    # =========================================================================
    COMPACT_BAR_LIMIT: ClassVar[int] = 7
    BAR_CHART_HEIGHT: ClassVar[float] = 120.0
    PAIRED_CHART_HEIGHT: ClassVar[float] = 80.0
    BAR_SLOT_WIDTH: ClassVar[float] = 60.0
    LINE_PADDING: ClassVar[float] = 20.0
    SCREEN_MARGIN: ClassVar[float] = 40.0
    DEFAULT_SCREEN_WIDTH: ClassVar[float] = 390.0

    # =========================================================================
    # ANIMATION
    # =========================================================================
    TICK_INTERVAL_MS: ClassVar[int] = 16
    ANIMATION_DURATION_MS: ClassVar[int] = 2000

    SAVINGS_MONTHLY_TARGET: ClassVar[float] = 100.0
    SAVINGS_PROGRESS_FLOOR: ClassVar[float] = 5.0
    """Progress bars never render narrower than 5% so an empty month is still visible."""

    # =========================================================================
    # HTTP
    # =========================================================================
    DEFAULT_HOST: ClassVar[str] = "127.0.0.1"
    DEFAULT_PORT: ClassVar[int] = 8000

    # =========================================================================
    # ENVIRONMENT-BASED SETTINGS (runtime configurable)
    # =========================================================================
    _timezone_override: ClassVar[tzinfo | None] = None
    _tolerance_override: ClassVar[int | None] = None

    @classmethod
    def get_timezone(cls) -> tzinfo | None:
        """
        Get the time zone used to truncate timestamps to calendar days.

        Uses a priority system: test overrides first, then the LYRA_TIMEZONE
        environment variable, then None meaning the system local zone (which
        `datetime.astimezone(None)` resolves with correct DST offsets). An
        unknown zone name is logged and ignored.

        Business context: A mood logged at 23:30 belongs to the user's
        evening, not to the next UTC day. Grouping must follow the zone the
        user lives in.

        Returns:
            tzinfo instance for day truncation, or None for system local.

        Example:
            >>> # With env var: LYRA_TIMEZONE=Europe/Paris
            >>> Config.get_timezone()
            zoneinfo.ZoneInfo(key='Europe/Paris')
        """
        if cls._timezone_override is not None:
            return cls._timezone_override
        name = os.environ.get("LYRA_TIMEZONE", "")
        if name:
            try:
                return ZoneInfo(name)
            except (ZoneInfoNotFoundError, ValueError):
                logger.warning(f"Unknown LYRA_TIMEZONE '{name}', using system local zone")
        return None

    @classmethod
    def get_tolerance_ms(cls) -> int:
        """
        Get the default alignment tolerance in milliseconds.

        Test overrides first, then LYRA_TOLERANCE_MS, then
        DEFAULT_TOLERANCE_MS. Non-numeric environment values are ignored.

        Returns:
            Tolerance in milliseconds.

        Example:
            >>> Config.get_tolerance_ms()
            86400000
        """
        if cls._tolerance_override is not None:
            return cls._tolerance_override
        raw = os.environ.get("LYRA_TOLERANCE_MS", "")
        if raw:
            try:
                return int(raw)
            except ValueError:
                logger.warning(f"Ignoring non-numeric LYRA_TOLERANCE_MS '{raw}'")
        return cls.DEFAULT_TOLERANCE_MS

    @classmethod
    def set_test_overrides(
        cls,
        timezone: tzinfo | None = None,
        tolerance_ms: int | None = None,
    ) -> None:
        """
        Set test overrides for environment-based settings.

        Must be paired with reset_test_overrides() in teardown.

        Args:
            timezone: Override for the day-truncation zone. None to clear.
            tolerance_ms: Override for the default tolerance. None to clear.

        Example:
            >>> Config.set_test_overrides(timezone=UTC)
            >>> Config.reset_test_overrides()
        """
        cls._timezone_override = timezone
        cls._tolerance_override = tolerance_ms

    @classmethod
    def reset_test_overrides(cls) -> None:
        """Reset all test overrides to use environment variables."""
        cls._timezone_override = None
        cls._tolerance_override = None

    @classmethod
    def mood_value(cls, label: str) -> float | None:
        """
        Map a mood label to its numeric value on the 1-10 scale.

        Lookup is case-insensitive and ignores surrounding whitespace.

        Args:
            label: Mood label such as "great" or "Bad".

        Returns:
            The mapped value, or None for unknown labels.

        Example:
            >>> Config.mood_value("Great")
            9.0
            >>> Config.mood_value("ecstatic") is None
            True
        """
        return cls.MOOD_SCALE.get(label.strip().lower())
