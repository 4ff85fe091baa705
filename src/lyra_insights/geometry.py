"""
Coordinate mapper for Lyra Insights.

PURPOSE: Project series values into chart geometry (heights, points, segments).
AI CONTEXT: Pure calculation - no rendering. Presenters and the web layer
turn these numbers into pixels.

SCALING PRIMITIVE:
    height = ((value - min) / (max - min)) * H
    max == min  ->  H / 2 for every point (degenerate domain, no division)

VARIANTS (ChartMode):
- BAR: compact view of the 7 most recent samples, one slot per sample
- LINE: points evenly spaced by index across the width (not by time),
  plus one connecting segment per consecutive pair

SCREEN SPACE:
x grows to the right, y grows downward. A point's y is H - height, so the
largest value sits at the top of the chart.

USAGE:
    points = map_to_geometry(series, height=120)
    points = map_to_geometry(series, 120, domain=(1, 10), mode=ChartMode.LINE, width=350)
    segments = line_segments(points)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence

from .config import Config
from .models import AlignedPair, ChartMode, Domain, LineSegment, RenderPoint, Sample

__all__ = [
    "scale_value",
    "resolve_domain",
    "compact_window",
    "chart_width",
    "map_bar",
    "map_line",
    "map_to_geometry",
    "resolve_mode",
    "map_pairs",
    "line_segments",
]

logger = logging.getLogger(__name__)

DomainLike = Domain | tuple[float, float] | None


def scale_value(value: float, domain: Domain, height: float) -> float:
    """
    Scale one value into [0, height] against domain.

    Values outside the domain are clamped. A degenerate domain maps
    every value to mid-height.

    Args:
        value: Raw value.
        domain: Bound to scale against.
        height: Available height H.

    Returns:
        Height in [0, height].

    Example:
        >>> scale_value(7.0, Domain(0.0, 10.0), 120.0)
        84.0
        >>> scale_value(3.0, Domain(3.0, 3.0), 120.0)
        60.0
    """
    position = domain.position(value)
    if position is None:
        return height / 2.0
    scaled = position * height
    return scaled if math.isfinite(scaled) else height / 2.0


def resolve_domain(samples: Sequence[Sample], domain: DomainLike = None) -> Domain:
    """
    Pick the scaling domain: explicit bounds, else the samples' own range.

    An empty series resolves to the degenerate Domain(0, 0).
    """
    explicit = Domain.coerce(domain)
    if explicit is not None:
        return explicit
    return Domain.from_values([s.value for s in samples]) or Domain(0.0, 0.0)


def compact_window(series: Sequence[Sample], limit: int | None = None) -> list[Sample]:
    """
    Keep only the most recent samples for the compact bar view.

    Samples are ordered by timestamp descending, cut to limit, then
    re-ordered ascending for left-to-right layout. Older samples are
    dropped, not aggregated.

    Args:
        series: Samples in any order.
        limit: Window size. Default Config.COMPACT_BAR_LIMIT (7).

    Returns:
        At most limit samples, ascending by timestamp.

    Example:
        >>> len(compact_window(ten_days))
        7
    """
    if limit is None:
        limit = Config.COMPACT_BAR_LIMIT
    newest_first = sorted(series, key=lambda s: s.timestamp, reverse=True)[: max(0, limit)]
    return list(reversed(newest_first))


def chart_width(count: int, screen_width: float | None = None) -> float:
    """
    Width of a horizontally scrolling chart holding count slots.

    Each slot needs Config.BAR_SLOT_WIDTH; the chart never gets narrower
    than the screen minus its margins.

    Example:
        >>> chart_width(3, 390)
        350.0
        >>> chart_width(10, 390)
        600.0
    """
    if screen_width is None:
        screen_width = Config.DEFAULT_SCREEN_WIDTH
    return max(count * Config.BAR_SLOT_WIDTH, screen_width - Config.SCREEN_MARGIN)


def map_bar(
    series: Sequence[Sample],
    height: float,
    domain: DomainLike = None,
    width: float | None = None,  # noqa: ARG001
) -> list[RenderPoint]:
    """
    Map a series to bar geometry for the compact bar chart.

    Only the Config.COMPACT_BAR_LIMIT most recent samples are kept. The
    domain is resolved from the kept samples when not given. Each bar
    sits in its own slot; x is the slot centre and y the top of the bar.

    Business context: The home screen cards show the last week at a
    glance; anything older is available in the full history view.

    Args:
        series: Series to map.
        height: Chart height H.
        domain: Optional explicit (min, max).
        width: Unused; bar slots have a fixed width.

    Returns:
        One RenderPoint per kept sample, ascending by timestamp.
    """
    window = compact_window(series)
    bounds = resolve_domain(window, domain)
    slot = Config.BAR_SLOT_WIDTH
    points = []
    for index, sample in enumerate(window):
        bar = scale_value(sample.value, bounds, height)
        points.append(RenderPoint(x=index * slot + slot / 2.0, y=height - bar, height=bar, source=sample))
    return points


def map_line(
    series: Sequence[Sample],
    height: float,
    domain: DomainLike = None,
    width: float | None = None,
) -> list[RenderPoint]:
    """
    Map a series to line-chart points.

    x is spread evenly by index: index / max(1, N - 1) of the usable width
    (width minus padding on both sides), offset by the left padding. This
    deliberately ignores gaps in time. Like the bar chart, the line chart
    shows the compact window of recent samples.

    Args:
        series: Series to map.
        height: Chart height H.
        domain: Optional explicit (min, max).
        width: Chart width. Default chart_width() for the sample count.

    Returns:
        One RenderPoint per kept sample, ascending by timestamp.

    Example:
        >>> [p.x for p in map_line(three_days, 120, width=240)]
        [20.0, 120.0, 220.0]
    """
    window = compact_window(series)
    bounds = resolve_domain(window, domain)
    if width is None:
        width = chart_width(len(window))
    padding = Config.LINE_PADDING
    usable = width - 2 * padding
    last = max(1, len(window) - 1)

    points = []
    for index, sample in enumerate(window):
        level = scale_value(sample.value, bounds, height)
        x = (index / last) * usable + padding
        points.append(RenderPoint(x=x, y=height - level, height=level, source=sample))
    return points


_MAPPERS: dict[ChartMode, Callable[..., list[RenderPoint]]] = {
    ChartMode.BAR: map_bar,
    ChartMode.LINE: map_line,
}


def resolve_mode(mode: ChartMode | str) -> ChartMode:
    """Resolve a chart variant by value; unknown variants fall back to bars."""
    try:
        return ChartMode(mode)
    except ValueError:
        logger.warning(f"Unknown chart mode '{mode}', drawing bars")
        return ChartMode.BAR


def map_to_geometry(
    series: Sequence[Sample],
    height: float,
    domain: DomainLike = None,
    mode: ChartMode | str = ChartMode.BAR,
    width: float | None = None,
) -> list[RenderPoint]:
    """
    Map a series to render points for the requested chart variant.

    Dispatches on mode to map_bar() or map_line(); both share
    scale_value() so heights agree between variants.

    Args:
        series: Series to map.
        height: Chart height H.
        domain: Optional explicit (min, max); else the data's own range.
        mode: ChartMode or its string value ("bar", "line").
            Unknown values are logged and drawn as bars.
        width: Chart width for line mode.

    Returns:
        Render points, ascending by timestamp. Empty series gives [].

    Example:
        >>> points = map_to_geometry(series, 120, domain=(5, 5))
        >>> {p.height for p in points}
        {60.0}
    """
    mapper = _MAPPERS[resolve_mode(mode)]
    if not series:
        return []
    return mapper(series, height, domain, width)


def map_pairs(
    pairs: Sequence[AlignedPair],
    height: float,
    primary_domain: DomainLike = None,
    secondary_domain: DomainLike = None,
) -> tuple[list[RenderPoint], list[RenderPoint]]:
    """
    Map aligned pairs to side-by-side bar geometry for the paired chart.

    Both sides share slot positions (one slot per pair, in pair order)
    and are scaled independently against their own domains. All pairs are
    mapped; the paired chart scrolls horizontally instead of truncating.

    Args:
        pairs: Aligned pairs.
        height: Chart height H (Config.PAIRED_CHART_HEIGHT in the app).
        primary_domain: Bound for primary values (e.g. mood 1-10).
        secondary_domain: Bound for secondary values (e.g. 0-40°C).

    Returns:
        (primary_points, secondary_points), equal length.
    """
    primary = [Sample(p.timestamp, p.primary_value) for p in pairs]
    secondary = [Sample(p.secondary_timestamp, p.secondary_value) for p in pairs]
    primary_bounds = resolve_domain(primary, primary_domain)
    secondary_bounds = resolve_domain(secondary, secondary_domain)
    slot = Config.BAR_SLOT_WIDTH

    def _column(samples: list[Sample], bounds: Domain) -> list[RenderPoint]:
        column = []
        for index, sample in enumerate(samples):
            bar = scale_value(sample.value, bounds, height)
            column.append(
                RenderPoint(x=index * slot + slot / 2.0, y=height - bar, height=bar, source=sample)
            )
        return column

    return _column(primary, primary_bounds), _column(secondary, secondary_bounds)


def line_segments(points: Sequence[RenderPoint]) -> list[LineSegment]:
    """
    Connecting segments between consecutive line-chart points.

    Each segment starts at point i, has the Euclidean length to point
    i + 1 and the angle atan2(dy, dx) in radians. The last point has no
    outgoing segment, so N points give N - 1 segments.

    Example:
        >>> segs = line_segments([p0, p1])
        >>> round(segs[0].length, 1), round(segs[0].angle, 3)
        (100.0, 0.0)
    """
    segments = []
    for start, end in zip(points, points[1:], strict=False):
        dx = end.x - start.x
        dy = end.y - start.y
        segments.append(
            LineSegment(start=start, end=end, length=math.hypot(dx, dy), angle=math.atan2(dy, dx))
        )
    return segments
