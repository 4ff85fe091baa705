"""
HTTP API for Lyra Insights.

PURPOSE: FastAPI routes exposing the engine and presenters as JSON and PNG.
AI CONTEXT: Thin layer - every route delegates to the presenters or the
pure engine functions.

FEATURES:
- JSON endpoints for normalize/align/correlate/geometry
- Mood & weather and savings view models for the app's insight cards
- Server-side chart rendering (matplotlib) with SVG placeholder fallback

USAGE:
    # Via CLI
    lyra-insights serve

    # Programmatically
    from lyra_insights.web import create_app
    app = create_app()
"""

from .app import create_app, run_server

__all__ = ["create_app", "run_server"]
