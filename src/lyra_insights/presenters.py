"""
Presenters for Lyra Insights charts and insight cards.

PURPOSE: Testable presentation logic between the engine and any UI.
AI CONTEXT: Pure data transformation - no I/O. PNG rendering is the only
side effect and matplotlib is imported lazily so it stays optional.

DESIGN PRINCIPLES:
1. Presenters receive already-fetched raw samples, return view models
2. No dependency on a specific UI framework
3. "No data" is a view model state, never an exception
4. Each view model knows how to serialize itself for the HTTP layer

USAGE:
    presenter = InsightsPresenter()
    analysis = presenter.build_mood_weather(raw_mood, raw_weather)
    analysis.correlation.impact_text     # "Positive Impact"

    charts = ChartPresenter()
    png = charts.render_mood_weather_chart(analysis)
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .alignment import align
from .config import Config
from .correlation import CorrelationScorer, PairAgreement
from .geometry import chart_width, line_segments, map_pairs, map_to_geometry, resolve_mode
from .models import (
    AlignedPair,
    ChartMode,
    CorrelationResult,
    Domain,
    LineSegment,
    RenderPoint,
)
from .normalizer import daily_totals, local_day, normalize

__all__ = [
    "ChartViewModel",
    "CorrelationViewModel",
    "PairedDayViewModel",
    "MoodWeatherViewModel",
    "SavingsViewModel",
    "InsightsPresenter",
    "ChartPresenter",
]

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "No data available"

MOOD_COLORS: list[tuple[float, str]] = [
    (8.0, "#4CAF50"),
    (6.0, "#8BC34A"),
    (4.0, "#FF9800"),
    (2.0, "#FF5722"),
]
MOOD_FLOOR_COLOR = "#F44336"

MOOD_EMOJIS: list[tuple[float, str]] = [
    (8.0, "😊"),
    (6.0, "🙂"),
    (4.0, "😐"),
    (2.0, "😞"),
]
MOOD_FLOOR_EMOJI = "😢"

STRENGTH_COLORS: dict[str, str] = {
    "strong": "#4CAF50",
    "moderate": "#FF9800",
    "weak": "#F44336",
}

IMPACT_COLORS: dict[str, str] = {
    "positive": "#4CAF50",
    "negative": "#FF5722",
    "neutral": "#FF9800",
}


def _short_date(moment: datetime) -> str:
    """
    Format a timestamp as a short axis label in the configured zone.

    Args:
        moment: Timestamp to format.

    Returns:
        String like "Mar 1".
    """
    local = local_day(moment, Config.get_timezone())
    return f"{local:%b} {local.day}"


def _banded(value: float, bands: list[tuple[float, str]], floor: str) -> str:
    for threshold, result in bands:
        if value >= threshold:
            return result
    return floor


@dataclass
class ChartViewModel:
    """View model for a single-series bar or line chart."""

    title: str
    mode: ChartMode
    height: float
    width: float
    domain: Domain
    points: list[RenderPoint] = field(default_factory=list)
    segments: list[LineSegment] = field(default_factory=list)
    subtitle: str = ""

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to draw."""
        return not self.points

    @property
    def empty_message(self) -> str:
        """Placeholder text shown instead of an empty chart."""
        return EMPTY_MESSAGE if self.is_empty else ""

    @property
    def labels(self) -> list[str]:
        """
        Axis labels under each point, in point order.

        Returns:
            One short date per point, e.g. ["Mar 1", "Mar 2"].
        """
        return [_short_date(p.source.timestamp) for p in self.points]

    def to_dict(self) -> dict[str, Any]:
        """Serialize chart to dictionary for JSON responses."""
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "mode": self.mode.value,
            "height": self.height,
            "width": self.width,
            "domain": self.domain.to_dict(),
            "points": [p.to_dict() for p in self.points],
            "segments": [s.to_dict() for s in self.segments],
            "labels": self.labels,
            "empty_message": self.empty_message,
        }


@dataclass
class CorrelationViewModel:
    """View model for the mood/weather insight badge."""

    result: CorrelationResult

    @property
    def score_display(self) -> str:
        """
        Format the score with an explicit sign.

        Business context: The badge reads "+0.82" or "-0.40" so the
        direction is visible without colour.

        Returns:
            Signed score with two decimals; "0.00" for zero.

        Example:
            >>> CorrelationViewModel(CorrelationResult(0.8234, CorrelationLabel.POSITIVE, 5)).score_display
            '+0.82'
        """
        if self.result.score > 0:
            return f"+{self.result.score:.2f}"
        return f"{self.result.score:.2f}"

    @property
    def impact(self) -> str:
        """
        Display band of the score for the insight card.

        The label is a plain sign test; the card only claims an impact
        once the score clears Config.IMPACT_DISPLAY_THRESHOLD.

        Returns:
            "positive", "negative" or "neutral".
        """
        threshold = Config.IMPACT_DISPLAY_THRESHOLD
        if self.result.score > threshold:
            return "positive"
        if self.result.score < -threshold:
            return "negative"
        return "neutral"

    @property
    def impact_text(self) -> str:
        """Card headline, e.g. "Positive Impact"."""
        return f"{self.impact.capitalize()} Impact"

    @property
    def impact_color(self) -> str:
        """Hex colour for the impact headline."""
        return IMPACT_COLORS[self.impact]

    @property
    def has_enough_data(self) -> bool:
        """False when fewer than two days could be paired."""
        return self.result.sample_count >= 2

    def to_dict(self) -> dict[str, Any]:
        """Serialize correlation view to dictionary for JSON responses."""
        return {
            **self.result.to_dict(),
            "score_display": self.score_display,
            "impact": self.impact,
            "impact_text": self.impact_text,
            "impact_color": self.impact_color,
            "has_enough_data": self.has_enough_data,
        }


@dataclass
class PairedDayViewModel:
    """View model for one day of the paired mood/weather chart."""

    pair: AlignedPair
    mood_bar: RenderPoint
    temperature_bar: RenderPoint
    agreement: PairAgreement

    @property
    def date_display(self) -> str:
        """Short date label such as "Mar 1"."""
        return _short_date(self.pair.timestamp)

    @property
    def mood_emoji(self) -> str:
        """
        Emoji for the day's mood on the 1-10 scale.

        Example:
            >>> day.mood_emoji  # mood 9.0
            '😊'
        """
        return _banded(self.pair.primary_value, MOOD_EMOJIS, MOOD_FLOOR_EMOJI)

    @property
    def mood_color(self) -> str:
        """Hex colour for the mood bar."""
        return _banded(self.pair.primary_value, MOOD_COLORS, MOOD_FLOOR_COLOR)

    @property
    def agreement_color(self) -> str:
        """Hex colour for the agreement indicator."""
        return STRENGTH_COLORS[self.agreement.strength]

    def to_dict(self) -> dict[str, Any]:
        """Serialize day to dictionary for JSON responses."""
        return {
            "date": self.date_display,
            "pair": self.pair.to_dict(),
            "mood_height": self.mood_bar.height,
            "temperature_height": self.temperature_bar.height,
            "x": self.mood_bar.x,
            "mood_emoji": self.mood_emoji,
            "mood_color": self.mood_color,
            "agreement": self.agreement.to_dict(),
            "agreement_color": self.agreement_color,
        }


@dataclass
class MoodWeatherViewModel:
    """View model for the complete mood & weather analysis."""

    correlation: CorrelationViewModel
    days: list[PairedDayViewModel] = field(default_factory=list)
    mood_chart: ChartViewModel | None = None
    weather_chart: ChartViewModel | None = None
    unpaired_count: int = 0
    width: float = 0.0

    @property
    def is_empty(self) -> bool:
        """True when no day could be paired."""
        return not self.days

    @property
    def empty_message(self) -> str:
        """Placeholder text for the paired chart."""
        return EMPTY_MESSAGE if self.is_empty else ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize analysis to dictionary for JSON responses."""
        return {
            "correlation": self.correlation.to_dict(),
            "days": [d.to_dict() for d in self.days],
            "mood_chart": self.mood_chart.to_dict() if self.mood_chart else None,
            "weather_chart": self.weather_chart.to_dict() if self.weather_chart else None,
            "unpaired_count": self.unpaired_count,
            "width": self.width,
            "empty_message": self.empty_message,
        }


@dataclass
class SavingsViewModel:
    """View model for the savings counter card."""

    total_saved: float
    monthly_saved: float
    monthly_target: float
    chart: ChartViewModel
    event_count: int = 0

    @property
    def monthly_progress(self) -> float:
        """
        Percentage of the monthly target reached.

        Returns:
            Unbounded percentage; 0 when the target is not positive.

        Example:
            >>> vm.monthly_progress  # 42 saved of 100
            42.0
        """
        if self.monthly_target <= 0:
            return 0.0
        return (self.monthly_saved / self.monthly_target) * 100

    @property
    def progress_width(self) -> float:
        """
        Progress bar width in percent, clamped to [5, 100].

        Business context: A sliver of bar is always shown so an empty
        month still looks like a goal, not a broken widget.
        """
        return min(max(self.monthly_progress, Config.SAVINGS_PROGRESS_FLOOR), 100.0)

    @property
    def total_display(self) -> str:
        """
        Format the total as currency.

        Example:
            >>> vm.total_display  # 1234.5
            '$1,234.50'
        """
        return f"${self.total_saved:,.2f}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize savings card to dictionary for JSON responses."""
        return {
            "total_saved": self.total_saved,
            "total_display": self.total_display,
            "monthly_saved": self.monthly_saved,
            "monthly_target": self.monthly_target,
            "monthly_progress": self.monthly_progress,
            "progress_width": self.progress_width,
            "event_count": self.event_count,
            "chart": self.chart.to_dict(),
        }


class InsightsPresenter:
    """
    Presenter turning raw samples into view models.

    Holds only configuration (the scorer and its domains); every build_*
    call is independent and safe to run for different users concurrently.
    """

    def __init__(self, scorer: CorrelationScorer | None = None) -> None:
        """
        Initialize presenter.

        Args:
            scorer: Scorer used for mood/weather. Default scores mood on
                1-10 and temperature on 0-40°C.
        """
        self.scorer = scorer or CorrelationScorer()

    def build_series_chart(
        self,
        raw_samples: Iterable[Any] | None,
        title: str,
        mode: ChartMode | str = ChartMode.BAR,
        height: float | None = None,
        domain: Domain | tuple[float, float] | None = None,
        screen_width: float | None = None,
    ) -> ChartViewModel:
        """
        Build a bar or line chart from raw samples.

        Samples are normalized first, then mapped with map_to_geometry().
        Line charts also carry their connecting segments.

        Business context: The same card renders sleep, energy or spending
        history; only the title and domain differ.

        Args:
            raw_samples: Raw samples in any shape normalize() accepts.
            title: Card title.
            mode: "bar" or "line".
            height: Chart height. Default Config.BAR_CHART_HEIGHT.
            domain: Optional explicit (min, max).
            screen_width: Device width used to size the chart.

        Returns:
            ChartViewModel; empty (with "No data available") when no
            valid sample remains.
        """
        series = normalize(raw_samples)
        return self._chart_from_series(series, title, mode, height, domain, screen_width)

    def _chart_from_series(
        self,
        series: list[Any],
        title: str,
        mode: ChartMode | str = ChartMode.BAR,
        height: float | None = None,
        domain: Domain | tuple[float, float] | None = None,
        screen_width: float | None = None,
        subtitle: str = "",
    ) -> ChartViewModel:
        chart_mode = resolve_mode(mode)
        chart_height = height if height is not None else Config.BAR_CHART_HEIGHT
        kept = min(len(series), Config.COMPACT_BAR_LIMIT)
        width = chart_width(kept, screen_width)

        points = map_to_geometry(series, chart_height, domain, chart_mode, width)
        segments = line_segments(points) if chart_mode is ChartMode.LINE else []
        bounds = Domain.coerce(domain) or Domain.from_values(
            [p.source.value for p in points]
        ) or Domain(0.0, 0.0)
        return ChartViewModel(
            title=title,
            subtitle=subtitle,
            mode=chart_mode,
            height=chart_height,
            width=width,
            domain=bounds,
            points=points,
            segments=segments,
        )

    def build_mood_weather(
        self,
        raw_mood: Iterable[Any] | None,
        raw_weather: Iterable[Any] | None,
        tolerance_ms: float | None = None,
        screen_width: float | None = None,
    ) -> MoodWeatherViewModel:
        """
        Build the full mood & weather analysis.

        Normalizes both inputs, aligns weather onto mood, scores the pairs
        and lays out the paired chart. Mood days without weather within
        the tolerance are counted as unpaired, not filled in.

        Business context: This powers the "Mood & Weather Analysis" card:
        an impact headline, the signed score, and a per-day chart whose
        colours show how closely mood tracked temperature.

        Args:
            raw_mood: Mood check-ins (numeric or labelled).
            raw_weather: Weather observations with a temperature value.
            tolerance_ms: Alignment tolerance. Default 24 hours.
            screen_width: Device width used to size the charts.

        Returns:
            MoodWeatherViewModel. With no pairs the correlation is neutral
            and the chart shows "No data available".

        Example:
            >>> vm = presenter.build_mood_weather(mood, weather)
            >>> vm.correlation.result.label
            <CorrelationLabel.POSITIVE: 'positive'>
        """
        mood = normalize(raw_mood)
        weather = normalize(raw_weather)
        pairs = align(mood, weather, tolerance_ms)
        result = self.scorer.score(pairs)

        mood_bars, temperature_bars = map_pairs(
            pairs,
            Config.PAIRED_CHART_HEIGHT,
            self.scorer.primary_domain,
            self.scorer.secondary_domain,
        )
        agreements = self.scorer.agreements(pairs)
        days = [
            PairedDayViewModel(pair=pair, mood_bar=m, temperature_bar=t, agreement=a)
            for pair, m, t, a in zip(pairs, mood_bars, temperature_bars, agreements, strict=True)
        ]

        logger.debug(
            f"Mood/weather: {len(mood)} mood days, {len(weather)} weather days, "
            f"{len(pairs)} paired, score {result.score}"
        )
        return MoodWeatherViewModel(
            correlation=CorrelationViewModel(result),
            days=days,
            mood_chart=self._chart_from_series(
                mood, "Mood", domain=self.scorer.primary_domain, screen_width=screen_width
            ),
            weather_chart=self._chart_from_series(
                weather,
                "Temperature",
                domain=self.scorer.secondary_domain,
                screen_width=screen_width,
            ),
            unpaired_count=len(mood) - len(pairs),
            width=chart_width(len(pairs), screen_width),
        )

    def build_savings(
        self,
        raw_events: Iterable[Any] | None,
        monthly_target: float | None = None,
        now: datetime | None = None,
        screen_width: float | None = None,
    ) -> SavingsViewModel:
        """
        Build the savings counter card.

        Events are summed per day; the total feeds the count-up counter
        and the month-to-date sum feeds the progress bar.

        Args:
            raw_events: Savings ledger entries ({created_at, amount}).
            monthly_target: Goal for the month. Default Config.SAVINGS_MONTHLY_TARGET.
            now: Reference time for "this month". Default: current time.
            screen_width: Device width used to size the chart.

        Returns:
            SavingsViewModel with totals, progress and a bar chart of the
            last days with savings.
        """
        days = daily_totals(raw_events)
        zone = Config.get_timezone()
        reference = local_day(now or datetime.now().astimezone(), zone)

        monthly = sum(
            s.value
            for s in days
            if (d := local_day(s.timestamp, zone)).year == reference.year
            and d.month == reference.month
        )
        target = Config.SAVINGS_MONTHLY_TARGET if monthly_target is None else monthly_target
        return SavingsViewModel(
            total_saved=sum(s.value for s in days),
            monthly_saved=monthly,
            monthly_target=target,
            chart=self._chart_from_series(
                days, "Daily Savings", domain=None, screen_width=screen_width
            ),
            event_count=len(days),
        )

    def generate_summary_report(
        self,
        raw_mood: Iterable[Any] | None,
        raw_weather: Iterable[Any] | None,
        raw_savings: Iterable[Any] | None = None,
    ) -> str:
        """
        Generate a plain-text analysis report.

        Business context: Support staff and developers read the same
        numbers the app shows without running the app.

        Returns:
            Multi-line report with the mood/weather correlation, the
            per-day pairing and the savings summary.

        Example:
            >>> print(presenter.generate_summary_report(mood, weather))
            ==================================================
            LYRA INSIGHTS - ANALYSIS REPORT
            ...
        """
        analysis = self.build_mood_weather(raw_mood, raw_weather)
        corr = analysis.correlation

        lines = [
            "=" * 50,
            "LYRA INSIGHTS - ANALYSIS REPORT",
            "=" * 50,
            "",
            "🌤  MOOD & WEATHER",
            f"  • Paired days: {corr.result.sample_count}",
            f"  • Unpaired mood days: {analysis.unpaired_count}",
            f"  • Correlation: {corr.score_display} ({corr.result.label.value})",
            f"  • Impact: {corr.impact_text}",
        ]
        if not corr.has_enough_data:
            lines.append("  • Not enough paired days for a trend yet")

        if analysis.days:
            lines.extend(["", "📅 DAILY PAIRING"])
            for day in analysis.days:
                lines.append(
                    f"  {day.date_display:>6}  mood {day.pair.primary_value:4.1f} {day.mood_emoji}"
                    f"  temp {day.pair.secondary_value:5.1f}°C"
                    f"  agreement {day.agreement.agreement:.2f} ({day.agreement.strength})"
                )

        if raw_savings is not None:
            savings = self.build_savings(raw_savings)
            lines.extend(
                [
                    "",
                    "💰 SAVINGS",
                    f"  • Total saved: {savings.total_display}",
                    f"  • This month: ${savings.monthly_saved:,.2f} "
                    f"of ${savings.monthly_target:,.2f} ({savings.monthly_progress:.0f}%)",
                    f"  • Days with savings: {savings.event_count}",
                ]
            )

        lines.extend(["", "=" * 50])
        return "\n".join(lines)


class ChartPresenter:
    """
    Presenter rendering view models to PNG images.

    Uses matplotlib for server-side chart rendering.
    """

    def _figure_bytes(self, fig: Any) -> bytes:
        import matplotlib.pyplot as plt

        buf = io.BytesIO()
        plt.tight_layout()
        plt.savefig(buf, format="png", dpi=100, bbox_inches="tight")
        plt.close(fig)
        buf.seek(0)
        return buf.read()

    def _render_empty(self, title: str) -> Any:
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots(figsize=(6, 3))
        ax.text(0.5, 0.5, EMPTY_MESSAGE, ha="center", va="center", fontsize=14)
        ax.set_xlim(0, 1)
        ax.set_ylim(0, 1)
        ax.set_title(title)
        ax.axis("off")
        return fig

    def render_series_chart(self, chart: ChartViewModel) -> bytes:
        """
        Render a ChartViewModel as a bar or line chart PNG.

        Draws the mapped geometry as-is: bars use each point's height,
        lines join the points in screen space (y axis inverted so larger
        values sit higher).

        Returns:
            PNG image as bytes.

        Raises:
            ImportError: If matplotlib is not installed. Callers should
                catch this and serve a placeholder.

        Example:
            >>> png = ChartPresenter().render_series_chart(chart)
            >>> png[:4]
            b'\\x89PNG'
        """
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        if chart.is_empty:
            return self._figure_bytes(self._render_empty(chart.title))

        fig, ax = plt.subplots(figsize=(6, 3))
        xs = [p.x for p in chart.points]
        if chart.mode is ChartMode.BAR:
            ax.bar(xs, [p.height for p in chart.points], width=Config.BAR_SLOT_WIDTH * 0.6, color="#667eea")
            ax.set_ylim(0, chart.height)
        else:
            ax.plot(xs, [p.y for p in chart.points], marker="o", color="#764ba2")
            ax.set_ylim(chart.height, 0)
        ax.set_xticks(xs)
        ax.set_xticklabels(chart.labels, rotation=45, ha="right")
        ax.set_yticks([])
        ax.set_title(chart.title)
        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)
        return self._figure_bytes(fig)

    def render_mood_weather_chart(self, analysis: MoodWeatherViewModel) -> bytes:
        """
        Render the paired mood/temperature chart as a PNG.

        Mood and temperature bars stand side by side per day; the mood bar
        is coloured by mood level and an agreement marker above each pair
        is coloured by strength.

        Returns:
            PNG image as bytes. Shows "No data available" without pairs.

        Raises:
            ImportError: If matplotlib is not installed.
        """
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        title = f"Mood & Weather ({analysis.correlation.impact_text})"
        if analysis.is_empty:
            return self._figure_bytes(self._render_empty(title))

        fig, ax = plt.subplots(figsize=(8, 3))
        offset = Config.BAR_SLOT_WIDTH * 0.2
        bar_width = Config.BAR_SLOT_WIDTH * 0.35
        xs = [d.mood_bar.x for d in analysis.days]

        ax.bar(
            [x - offset for x in xs],
            [d.mood_bar.height for d in analysis.days],
            width=bar_width,
            color=[d.mood_color for d in analysis.days],
            label="Mood",
        )
        ax.bar(
            [x + offset for x in xs],
            [d.temperature_bar.height for d in analysis.days],
            width=bar_width,
            color="#FF9800",
            label="Temperature",
        )
        ax.scatter(
            xs,
            [Config.PAIRED_CHART_HEIGHT * 1.08] * len(xs),
            color=[d.agreement_color for d in analysis.days],
            marker="s",
        )
        ax.set_xticks(xs)
        ax.set_xticklabels([d.date_display for d in analysis.days], rotation=45, ha="right")
        ax.set_ylim(0, Config.PAIRED_CHART_HEIGHT * 1.15)
        ax.set_yticks([])
        ax.set_title(title)
        ax.legend(loc="upper left", fontsize=8)
        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)
        return self._figure_bytes(fig)
