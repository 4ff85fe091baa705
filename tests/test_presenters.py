"""Tests for presenters module."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import pytest

from lyra_insights.models import ChartMode, CorrelationLabel, CorrelationResult
from lyra_insights.presenters import (
    ChartPresenter,
    ChartViewModel,
    CorrelationViewModel,
    InsightsPresenter,
    SavingsViewModel,
)

PNG_SIGNATURE = b"\x89PNG"


def _has_matplotlib() -> bool:
    """Check if matplotlib is available for chart tests.

    Returns:
        True if matplotlib can be imported, False otherwise.
    """
    try:
        import matplotlib  # noqa: F401

        return True
    except ImportError:
        return False


def ten_days() -> list[dict[str, Any]]:
    """Ten daily samples valued 1..10 on March 1..10."""
    return [{"date": f"2026-03-{d:02d}T12:00:00Z", "value": d} for d in range(1, 11)]


@pytest.fixture
def presenter() -> InsightsPresenter:
    """Presenter with the default mood/temperature scorer."""
    return InsightsPresenter()


class TestCorrelationViewModel:
    """Tests for the insight badge view model."""

    @pytest.mark.parametrize(
        ("score", "display"),
        [(0.8234, "+0.82"), (-0.4, "-0.40"), (0.0, "0.00")],
    )
    def test_score_display(self, score: float, display: str) -> None:
        """Verifies the score always shows its sign."""
        label = CorrelationLabel.from_score(score)
        assert CorrelationViewModel(CorrelationResult(score, label, 4)).score_display == display

    def test_impact_threshold(self) -> None:
        """Verifies small positive scores are labelled but not headlined.

        Business context:
        The label is a plain sign test. The card headline only claims an
        impact once the score is large enough to mean something to users.
        """
        vm = CorrelationViewModel(CorrelationResult(0.15, CorrelationLabel.POSITIVE, 5))
        assert vm.result.label is CorrelationLabel.POSITIVE
        assert vm.impact == "neutral"
        assert vm.impact_text == "Neutral Impact"

    def test_negative_impact(self) -> None:
        """Verifies negative headline and colour."""
        vm = CorrelationViewModel(CorrelationResult(-0.4, CorrelationLabel.NEGATIVE, 5))
        assert vm.impact_text == "Negative Impact"
        assert vm.impact_color == "#FF5722"

    def test_has_enough_data(self) -> None:
        """Verifies fewer than two pairs is flagged."""
        assert not CorrelationViewModel(CorrelationResult.insufficient(1)).has_enough_data
        assert CorrelationViewModel(
            CorrelationResult(0.5, CorrelationLabel.POSITIVE, 2)
        ).has_enough_data


class TestSavingsViewModel:
    """Tests for the savings card view model."""

    def _vm(self, monthly: float, target: float = 100.0, total: float = 0.0) -> SavingsViewModel:
        chart = ChartViewModel(
            title="Daily Savings",
            mode=ChartMode.BAR,
            height=120.0,
            width=350.0,
            domain=InsightsPresenter().build_series_chart([], "x").domain,
        )
        return SavingsViewModel(
            total_saved=total, monthly_saved=monthly, monthly_target=target, chart=chart
        )

    @pytest.mark.parametrize(
        ("monthly", "width"),
        [(0.0, 5.0), (2.0, 5.0), (42.0, 42.0), (250.0, 100.0)],
    )
    def test_progress_width_clamped(self, monthly: float, width: float) -> None:
        """Verifies the bar width stays within [5, 100] percent."""
        assert self._vm(monthly).progress_width == width

    def test_zero_target(self) -> None:
        """Verifies a zero target does not divide by zero."""
        assert self._vm(10.0, target=0.0).monthly_progress == 0.0

    def test_total_display(self) -> None:
        """Verifies currency formatting with thousands separator."""
        assert self._vm(0.0, total=1234.5).total_display == "$1,234.50"


class TestBuildSeriesChart:
    """Tests for InsightsPresenter.build_series_chart()."""

    def test_empty(self, presenter: InsightsPresenter) -> None:
        """Verifies no data resolves to the placeholder state."""
        chart = presenter.build_series_chart([], "Sleep")
        assert chart.is_empty
        assert chart.empty_message == "No data available"
        assert chart.to_dict()["points"] == []

    def test_bar_keeps_last_week(self, presenter: InsightsPresenter) -> None:
        """Verifies the compact bar view and its date labels."""
        chart = presenter.build_series_chart(ten_days(), "Energy")
        assert len(chart.points) == 7
        assert chart.labels == [f"Mar {d}" for d in range(4, 11)]
        assert chart.segments == []
        assert chart.empty_message == ""

    def test_line_has_segments(self, presenter: InsightsPresenter) -> None:
        """Verifies line mode carries connecting segments."""
        chart = presenter.build_series_chart(ten_days(), "Energy", mode="line")
        assert chart.mode is ChartMode.LINE
        assert len(chart.segments) == len(chart.points) - 1

    def test_explicit_domain_reported(self, presenter: InsightsPresenter) -> None:
        """Verifies the domain used for scaling is exposed."""
        chart = presenter.build_series_chart(ten_days(), "Mood", domain=(1, 10))
        assert chart.to_dict()["domain"] == {"min_value": 1, "max_value": 10}

    def test_unknown_mode_draws_bars(self, presenter: InsightsPresenter) -> None:
        """Verifies an unknown chart variant renders as bars without segments."""
        chart = presenter.build_series_chart(ten_days(), "Mood", mode="pie")
        assert chart.mode is ChartMode.BAR
        assert chart.segments == []
        assert len(chart.points) == 7


class TestBuildMoodWeather:
    """Tests for InsightsPresenter.build_mood_weather()."""

    def test_positive_example(
        self,
        presenter: InsightsPresenter,
        raw_mood: list[dict[str, Any]],
        raw_weather: list[dict[str, Any]],
    ) -> None:
        """Verifies the warm-good/cold-bad example end to end.

        Arrangement:
        Mood 9 then 2, temperature 30°C then 5°C, three hours apart.

        Assertion Strategy:
        Positive label with a full-strength badge, two paired days with
        mood emoji and agreement strength computed on the fixed scales.
        """
        analysis = presenter.build_mood_weather(raw_mood, raw_weather)
        corr = analysis.correlation
        assert corr.result.label is CorrelationLabel.POSITIVE
        assert corr.score_display == "+1.00"
        assert corr.impact_text == "Positive Impact"

        assert [d.date_display for d in analysis.days] == ["Mar 1", "Mar 2"]
        assert [d.mood_emoji for d in analysis.days] == ["😊", "😞"]
        assert [d.agreement.strength for d in analysis.days] == ["strong", "strong"]
        assert analysis.days[0].mood_color == "#4CAF50"
        assert analysis.unpaired_count == 0

    def test_unpaired_days_counted(
        self,
        presenter: InsightsPresenter,
        raw_mood: list[dict[str, Any]],
        raw_weather: list[dict[str, Any]],
    ) -> None:
        """Verifies mood days without weather are counted, not filled."""
        raw_mood.append({"date": "2026-03-05T09:00:00Z", "mood": "good"})
        analysis = presenter.build_mood_weather(raw_mood, raw_weather)
        assert len(analysis.days) == 2
        assert analysis.unpaired_count == 1
        assert analysis.mood_chart is not None
        assert len(analysis.mood_chart.points) == 3

    def test_empty(self, presenter: InsightsPresenter) -> None:
        """Verifies no data yields a neutral, placeholder analysis."""
        analysis = presenter.build_mood_weather([], None)
        assert analysis.is_empty
        assert analysis.empty_message == "No data available"
        assert analysis.correlation.result.label is CorrelationLabel.NEUTRAL
        assert analysis.correlation.impact_text == "Neutral Impact"

    def test_to_dict_is_json_serializable(
        self,
        presenter: InsightsPresenter,
        raw_mood: list[dict[str, Any]],
        raw_weather: list[dict[str, Any]],
    ) -> None:
        """Verifies the view model can be returned from the HTTP layer."""
        data = presenter.build_mood_weather(raw_mood, raw_weather).to_dict()
        decoded = json.loads(json.dumps(data))
        assert decoded["correlation"]["label"] == "positive"
        assert len(decoded["days"]) == 2

    def test_tolerance_passthrough(
        self,
        presenter: InsightsPresenter,
        raw_mood: list[dict[str, Any]],
        raw_weather: list[dict[str, Any]],
    ) -> None:
        """Verifies a tight tolerance excludes the three-hour gap."""
        analysis = presenter.build_mood_weather(raw_mood, raw_weather, tolerance_ms=3_600_000)
        assert analysis.is_empty
        assert analysis.unpaired_count == 2


class TestBuildSavings:
    """Tests for InsightsPresenter.build_savings()."""

    def test_totals_and_month(
        self, presenter: InsightsPresenter, raw_savings: list[dict[str, Any]]
    ) -> None:
        """Verifies total, month-to-date and progress."""
        savings = presenter.build_savings(raw_savings, now=datetime(2026, 3, 20, tzinfo=UTC))
        assert savings.total_saved == 122.5
        assert savings.monthly_saved == 22.5
        assert savings.monthly_progress == 22.5
        assert savings.total_display == "$122.50"
        assert savings.event_count == 3
        assert len(savings.chart.points) == 3

    def test_new_month_shows_floor(
        self, presenter: InsightsPresenter, raw_savings: list[dict[str, Any]]
    ) -> None:
        """Verifies an empty month still shows a sliver of progress."""
        savings = presenter.build_savings(raw_savings, now=datetime(2026, 4, 2, tzinfo=UTC))
        assert savings.monthly_saved == 0
        assert savings.progress_width == 5.0

    def test_custom_target(
        self, presenter: InsightsPresenter, raw_savings: list[dict[str, Any]]
    ) -> None:
        """Verifies progress caps at 100% when the target is exceeded."""
        savings = presenter.build_savings(
            raw_savings, monthly_target=10.0, now=datetime(2026, 3, 20, tzinfo=UTC)
        )
        assert savings.monthly_progress == 225.0
        assert savings.progress_width == 100.0

    def test_empty(self, presenter: InsightsPresenter) -> None:
        """Verifies an empty ledger gives a zero card."""
        savings = presenter.build_savings(None)
        assert savings.total_saved == 0
        assert savings.chart.is_empty
        assert savings.to_dict()["total_display"] == "$0.00"


class TestSummaryReport:
    """Tests for the plain-text report."""

    def test_report_sections(
        self,
        presenter: InsightsPresenter,
        raw_mood: list[dict[str, Any]],
        raw_weather: list[dict[str, Any]],
        raw_savings: list[dict[str, Any]],
    ) -> None:
        """Verifies header, correlation, daily pairing and savings."""
        report = presenter.generate_summary_report(raw_mood, raw_weather, raw_savings)
        assert "LYRA INSIGHTS - ANALYSIS REPORT" in report
        assert "Correlation: +1.00 (positive)" in report
        assert "Impact: Positive Impact" in report
        assert "Mar 1" in report
        assert "Total saved: $122.50" in report

    def test_report_without_savings(
        self,
        presenter: InsightsPresenter,
        raw_mood: list[dict[str, Any]],
    ) -> None:
        """Verifies savings section is omitted and sparse data is flagged."""
        report = presenter.generate_summary_report(raw_mood[:1], [])
        assert "SAVINGS" not in report
        assert "Not enough paired days" in report


@pytest.mark.skipif(not _has_matplotlib(), reason="matplotlib not installed")
class TestChartPresenter:
    """Tests for PNG rendering."""

    def test_bar_chart(self, presenter: InsightsPresenter) -> None:
        """Verifies a bar chart renders to PNG."""
        chart = presenter.build_series_chart(ten_days(), "Energy")
        assert ChartPresenter().render_series_chart(chart).startswith(PNG_SIGNATURE)

    def test_line_chart(self, presenter: InsightsPresenter) -> None:
        """Verifies a line chart renders to PNG."""
        chart = presenter.build_series_chart(ten_days(), "Energy", mode=ChartMode.LINE)
        assert ChartPresenter().render_series_chart(chart).startswith(PNG_SIGNATURE)

    def test_empty_chart(self, presenter: InsightsPresenter) -> None:
        """Verifies the placeholder figure renders."""
        chart = presenter.build_series_chart([], "Energy")
        assert ChartPresenter().render_series_chart(chart).startswith(PNG_SIGNATURE)

    def test_mood_weather_chart(
        self,
        presenter: InsightsPresenter,
        raw_mood: list[dict[str, Any]],
        raw_weather: list[dict[str, Any]],
    ) -> None:
        """Verifies the paired chart renders to PNG, with and without data."""
        charts = ChartPresenter()
        analysis = presenter.build_mood_weather(raw_mood, raw_weather)
        assert charts.render_mood_weather_chart(analysis).startswith(PNG_SIGNATURE)
        empty = presenter.build_mood_weather([], [])
        assert charts.render_mood_weather_chart(empty).startswith(PNG_SIGNATURE)
