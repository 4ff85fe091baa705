"""
FastAPI routes for Lyra Insights.

PURPOSE: Thin route handlers that delegate to the engine and presenters.
AI CONTEXT: Routes should be simple - business logic in presenters.

ROUTE STRUCTURE:
- /api/health, /api/mood-scale : static information
- /api/normalize, /api/align, /api/correlate, /api/geometry : engine calls
- /api/mood-weather, /api/savings : insight card view models
- /charts/*.png : PNG chart images

Raw samples are passed through untouched; the normalizer decides what is
valid. Only the envelope (field names, numeric options) is validated here.
"""

from __future__ import annotations

from datetime import UTC, datetime
from html import escape
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import BaseModel, Field

from ..__version__ import __version__
from ..alignment import align
from ..config import Config
from ..correlation import CorrelationScorer
from ..geometry import chart_width, line_segments, map_to_geometry
from ..models import AlignedPair, ChartMode
from ..normalizer import normalize
from ..presenters import ChartPresenter, InsightsPresenter

__all__ = [
    "router",
    "get_insights_presenter",
    "get_chart_presenter",
]

router = APIRouter()

_EPOCH = datetime.fromtimestamp(0, UTC)

# =============================================================================
# Request Bodies
# =============================================================================


class SeriesRequest(BaseModel):
    """Raw samples to normalize."""

    samples: list[Any] = Field(default_factory=list)


class AlignRequest(BaseModel):
    """Two raw series and an optional tolerance."""

    primary: list[Any] = Field(default_factory=list)
    secondary: list[Any] = Field(default_factory=list)
    tolerance_ms: float | None = Field(default=None, ge=0)


class PairIn(BaseModel):
    """Already-aligned pair; timestamps are informational for scoring."""

    primary_value: float
    secondary_value: float
    timestamp: datetime | None = None
    secondary_timestamp: datetime | None = None

    def to_pair(self) -> AlignedPair:
        timestamp = self.timestamp or _EPOCH
        return AlignedPair(
            timestamp=timestamp,
            primary_value=self.primary_value,
            secondary_value=self.secondary_value,
            secondary_timestamp=self.secondary_timestamp or timestamp,
        )


class CorrelateRequest(BaseModel):
    """Either explicit pairs, or two raw series to align first."""

    pairs: list[PairIn] | None = None
    primary: list[Any] = Field(default_factory=list)
    secondary: list[Any] = Field(default_factory=list)
    tolerance_ms: float | None = Field(default=None, ge=0)
    primary_domain: tuple[float, float] | None = None
    secondary_domain: tuple[float, float] | None = None


class GeometryRequest(BaseModel):
    """Raw series plus chart options."""

    samples: list[Any] = Field(default_factory=list)
    height: float = Field(default=Config.BAR_CHART_HEIGHT, gt=0)
    domain: tuple[float, float] | None = None
    mode: ChartMode = ChartMode.BAR
    width: float | None = Field(default=None, gt=0)
    title: str = "Series"


class MoodWeatherRequest(BaseModel):
    """Raw mood check-ins and weather observations."""

    mood: list[Any] = Field(default_factory=list)
    weather: list[Any] = Field(default_factory=list)
    tolerance_ms: float | None = Field(default=None, ge=0)
    screen_width: float | None = Field(default=None, gt=0)


class SavingsRequest(BaseModel):
    """Raw savings ledger entries."""

    events: list[Any] = Field(default_factory=list)
    monthly_target: float | None = Field(default=None, ge=0)
    screen_width: float | None = Field(default=None, gt=0)


# =============================================================================
# Dependency Factory Functions
# =============================================================================


def get_insights_presenter() -> InsightsPresenter:
    """
    Create the presenter used by the insight card routes.

    Returns:
        InsightsPresenter with the default mood/temperature scorer.
    """
    return InsightsPresenter()


def get_chart_presenter() -> ChartPresenter:
    """
    Create the presenter used by the PNG chart routes.

    Returns:
        ChartPresenter. Rendering raises ImportError when matplotlib is
        missing; chart routes catch it and serve a placeholder.
    """
    return ChartPresenter()


# ============================================================================
# API Routes (JSON)
# ============================================================================


@router.get("/api/health")
async def api_health() -> dict[str, str]:
    """Liveness probe with the running version."""
    return {"status": "ok", "version": __version__}


@router.get("/api/mood-scale")
async def api_mood_scale() -> dict[str, float]:
    """
    Label to value mapping applied to mood check-ins.

    Example:
        >>> # GET /api/mood-scale
        >>> {"terrible": 2.0, "bad": 4.0, "neutral": 5.0, "good": 7.0, "great": 9.0}
    """
    return dict(Config.MOOD_SCALE)


@router.post("/api/normalize")
async def api_normalize(body: SeriesRequest) -> dict[str, object]:
    """
    Normalize raw samples into a day-deduplicated series.

    Returns:
        Dict with 'series' (ascending samples) and 'dropped' (raw samples
        that were invalid or superseded by a later sample the same day).
    """
    series = normalize(body.samples)
    return {
        "series": [s.to_dict() for s in series],
        "dropped": len(body.samples) - len(series),
    }


@router.post("/api/align")
async def api_align(body: AlignRequest) -> dict[str, object]:
    """
    Normalize both series and pair them by nearest timestamp.

    Returns:
        Dict with 'pairs' and 'unpaired' (primary days with no secondary
        sample inside the tolerance).
    """
    primary = normalize(body.primary)
    pairs = align(primary, normalize(body.secondary), body.tolerance_ms)
    return {
        "pairs": [p.to_dict() for p in pairs],
        "unpaired": len(primary) - len(pairs),
    }


@router.post("/api/correlate")
async def api_correlate(body: CorrelateRequest) -> dict[str, object]:
    """
    Score co-movement of two series.

    Accepts explicit pairs, or two raw series which are normalized and
    aligned first. Without domains each side is scaled to its observed
    range.

    Example:
        >>> # POST /api/correlate {"pairs": [{"primary_value": 9, "secondary_value": 30},
        >>> #                                {"primary_value": 2, "secondary_value": 10}]}
        >>> {"score": 1.0, "label": "positive", "sample_count": 2}
    """
    if body.pairs is not None:
        pairs = [p.to_pair() for p in body.pairs]
    else:
        pairs = align(normalize(body.primary), normalize(body.secondary), body.tolerance_ms)
    scorer = CorrelationScorer(body.primary_domain, body.secondary_domain)
    return scorer.score(pairs).to_dict()


@router.post("/api/geometry")
async def api_geometry(body: GeometryRequest) -> dict[str, object]:
    """
    Map a raw series to chart geometry.

    Returns:
        Dict with 'points', 'segments' (line mode only) and 'width'.
    """
    series = normalize(body.samples)
    width = body.width or chart_width(min(len(series), Config.COMPACT_BAR_LIMIT))
    points = map_to_geometry(series, body.height, body.domain, body.mode, width)
    segments = line_segments(points) if body.mode is ChartMode.LINE else []
    return {
        "mode": body.mode.value,
        "width": width,
        "points": [p.to_dict() for p in points],
        "segments": [s.to_dict() for s in segments],
    }


@router.post("/api/mood-weather")
async def api_mood_weather(
    body: MoodWeatherRequest,
    presenter: Annotated[InsightsPresenter, Depends(get_insights_presenter)],
) -> dict[str, object]:
    """
    Full mood & weather analysis for the insight card.

    Returns:
        MoodWeatherViewModel.to_dict(): correlation badge, per-day pairing
        with colours, and the single-series charts.
    """
    analysis = presenter.build_mood_weather(
        body.mood, body.weather, body.tolerance_ms, body.screen_width
    )
    return analysis.to_dict()


@router.post("/api/savings")
async def api_savings(
    body: SavingsRequest,
    presenter: Annotated[InsightsPresenter, Depends(get_insights_presenter)],
) -> dict[str, object]:
    """Savings counter card: totals, monthly progress and daily chart."""
    savings = presenter.build_savings(
        body.events, body.monthly_target, screen_width=body.screen_width
    )
    return savings.to_dict()


# ============================================================================
# Chart Routes (PNG)
# ============================================================================


@router.post("/charts/series.png")
async def series_chart(
    body: GeometryRequest,
    presenter: Annotated[InsightsPresenter, Depends(get_insights_presenter)],
    charts: Annotated[ChartPresenter, Depends(get_chart_presenter)],
) -> Response:
    """
    Render a bar or line chart as PNG.

    Returns:
        PNG image, or an SVG placeholder when matplotlib is not installed.
    """
    chart = presenter.build_series_chart(
        body.samples, body.title, body.mode, body.height, body.domain, body.width
    )
    try:
        return Response(content=charts.render_series_chart(chart), media_type="image/png")
    except ImportError:
        return Response(content=_placeholder_chart_svg(body.title), media_type="image/svg+xml")


@router.post("/charts/mood-weather.png")
async def mood_weather_chart(
    body: MoodWeatherRequest,
    presenter: Annotated[InsightsPresenter, Depends(get_insights_presenter)],
    charts: Annotated[ChartPresenter, Depends(get_chart_presenter)],
) -> Response:
    """
    Render the paired mood/temperature chart as PNG.

    Returns:
        PNG image, or an SVG placeholder when matplotlib is not installed.
    """
    analysis = presenter.build_mood_weather(
        body.mood, body.weather, body.tolerance_ms, body.screen_width
    )
    try:
        return Response(
            content=charts.render_mood_weather_chart(analysis), media_type="image/png"
        )
    except ImportError:
        return Response(
            content=_placeholder_chart_svg("Mood and Weather"), media_type="image/svg+xml"
        )


def _placeholder_chart_svg(title: str) -> bytes:
    """
    Generate a placeholder SVG when matplotlib is unavailable.

    Args:
        title: Chart title shown in the placeholder.

    Returns:
        UTF-8 encoded SVG with the text "{title} Chart (install matplotlib)".

    Example:
        >>> b'Mood Chart' in _placeholder_chart_svg('Mood')
        True
    """
    svg = f"""<svg xmlns="http://www.w3.org/2000/svg" width="400" height="200">
        <rect width="100%" height="100%" fill="#f1f5f9"/>
        <text x="50%" y="50%" text-anchor="middle" fill="#64748b" font-size="16">
            {escape(title)} Chart (install matplotlib)
        </text>
    </svg>"""
    return svg.encode("utf-8")
