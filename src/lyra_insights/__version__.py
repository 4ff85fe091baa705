"""Version information for lyra-insights."""

__version__ = "0.4.0"
__version_date__ = "2026-10-17"

__title__ = "lyra_insights"
__description__ = "Time-series alignment, correlation and chart geometry for mood, weather and savings data"
__url__ = "https://github.com/lyra-app/lyra-insights"

__author__ = "Lyra Team"

__license__ = "MIT"
__copyright__ = "Copyright 2026 Lyra Team"

__all__ = [
    "__version__",
    "__version_date__",
    "__title__",
    "__description__",
    "__url__",
    "__author__",
    "__license__",
    "__copyright__",
]
