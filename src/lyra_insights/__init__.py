"""
Lyra Insights.

PURPOSE: Align, correlate and chart mood, weather and savings time series.
AI CONTEXT: Pure engine plus thin presenter, HTTP and CLI layers.

PACKAGE STRUCTURE:
- normalizer.py: Raw samples -> canonical day-deduplicated Series
- alignment.py: Nearest-timestamp join of two Series within a tolerance
- correlation.py: Bounded co-movement score and label
- geometry.py: Bar/line chart coordinates and line segments
- animation.py: Cancelable count-up animation for counter displays
- presenters.py: View models and PNG charts
- web/: FastAPI routes over the presenters
- config.py: Configuration constants
- models.py: Data models (Sample, AlignedPair, CorrelationResult, ...)

QUICK START:
    from lyra_insights import align, correlate, normalize

    mood = normalize(raw_mood)
    weather = normalize(raw_weather)
    result = correlate(align(mood, weather))

    # HTTP API
    lyra-insights serve --port 8000
"""

from lyra_insights.__version__ import (
    __author__,
    __copyright__,
    __description__,
    __license__,
    __title__,
    __url__,
    __version__,
    __version_date__,
)
from lyra_insights.alignment import align
from lyra_insights.animation import animate_to
from lyra_insights.correlation import correlate
from lyra_insights.geometry import map_to_geometry
from lyra_insights.normalizer import normalize

__all__ = [
    "__version__",
    "__version_date__",
    "__title__",
    "__description__",
    "__url__",
    "__author__",
    "__license__",
    "__copyright__",
    "normalize",
    "align",
    "correlate",
    "map_to_geometry",
    "animate_to",
]
